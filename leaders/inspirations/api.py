from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.dependencies import get_current_user
from leaders.auth.models import User
from leaders.auth.permissions import ensure_owner_or_admin
from leaders.db.session import get_db
from leaders.inspirations.schemas import InspirationCreate, InspirationOut, LikeToggleResponse
from leaders.inspirations.services import (
    InspirationNotFoundError, InspirationService, InvalidInspirationError
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/inspirations", tags=["inspirations"])


@router.get("", response_model=List[InspirationOut])
async def list_inspirations(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await InspirationService(db).list_inspirations(current_user.id)


@router.post("", response_model=InspirationOut, status_code=status.HTTP_201_CREATED)
async def create_inspiration(
    payload: InspirationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return await InspirationService(db).create_inspiration(current_user, payload.content, payload.category)
    except InvalidInspirationError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ❤️ Like / unlike
@router.post("/{inspiration_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    inspiration_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return await InspirationService(db).toggle_like(inspiration_id, current_user.id)
    except InspirationNotFoundError:
        raise HTTPException(status_code=404, detail="Inspiration non trouvée")


@router.delete("/{inspiration_id}")
async def delete_inspiration(
    inspiration_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = InspirationService(db)
    try:
        inspiration = await service.get_inspiration(inspiration_id)
    except InspirationNotFoundError:
        raise HTTPException(status_code=404, detail="Inspiration non trouvée")

    ensure_owner_or_admin(current_user, inspiration.user_id)
    await service.delete_inspiration(inspiration)
    return {"message": "Inspiration supprimée avec succès"}
