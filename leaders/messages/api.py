import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.dependencies import get_current_user
from leaders.auth.models import User
from leaders.db.session import get_db
from leaders.messages.schemas import (
    ConversationListResponse,
    MessageCreate,
    MessageListResponse,
    MessageOut,
)
from leaders.messages.services import InvalidMessageError, MessageService, NotMatchedError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations(
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(20, ge=1, le=200, description="Items per page"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await MessageService(db).get_conversations(current_user.id, page, per_page)


@router.get("/{user_id}", response_model=MessageListResponse)
async def get_conversation(
    user_id: int,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(50, ge=1, le=200, description="Items per page"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return await MessageService(db).get_conversation(current_user.id, user_id, page, per_page)
    except NotMatchedError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    message: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return await MessageService(db).send_message(current_user, message.receiver_id, message.content)
    except InvalidMessageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotMatchedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except Exception:
        logger.exception("Error sending message:")
        raise HTTPException(status_code=500, detail="Erreur interne du serveur")
