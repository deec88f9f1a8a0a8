from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.dependencies import get_current_user
from leaders.auth.models import User
from leaders.db.session import get_db
from leaders.matching.schemas import MatchOut, SwipeCreate, SwipeResponse
from leaders.matching.services import (
    AlreadySwipedError,
    InvalidSwipeError,
    MatchingService,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

swipes_router = APIRouter(prefix="/api/swipes", tags=["matching"])
matches_router = APIRouter(prefix="/api/matches", tags=["matching"])


# ===============================
# SWIPE
# ===============================
@swipes_router.post("", response_model=SwipeResponse)
async def create_swipe(
    swipe: SwipeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = MatchingService(db)
    try:
        match = await service.record_swipe(current_user.id, swipe.swiped_id, swipe.action)
    except (InvalidSwipeError, AlreadySwipedError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception:
        logger.exception("Error recording swipe:")
        raise HTTPException(status_code=500, detail="Erreur interne du serveur")

    return {
        "message": "It's a match! 💘" if match else "Swipe enregistré",
        "action": swipe.action,
        "match": match is not None,
        "match_id": match.id if match else None,
    }


# ===============================
# MATCHES
# ===============================
@matches_router.get("", response_model=List[MatchOut])
async def list_matches(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await MatchingService(db).get_matches(current_user.id)
