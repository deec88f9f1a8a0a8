import logging
from typing import List

from sqlalchemy import and_, func, or_, select, union_all
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.models import User
from leaders.matching.services import MatchingService
from leaders.messages.models import Message
from leaders.utils.pagination import page_envelope

logger = logging.getLogger(__name__)


class InvalidMessageError(Exception):
    pass


class NotMatchedError(Exception):
    pass


def serialize_message(message: Message, sender: User) -> dict:
    return {
        "id": message.id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "content": message.content,
        "created_at": message.created_at,
        "photo": sender.photo if sender else None,
        "first_name": sender.first_name if sender else None,
        "last_name": sender.last_name if sender else None,
    }


def _between(user_id: int, other_id: int):
    return or_(
        and_(Message.sender_id == user_id, Message.receiver_id == other_id),
        and_(Message.sender_id == other_id, Message.receiver_id == user_id),
    )


class MessageService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.matching = MatchingService(db)

    async def _ensure_matched(self, user_id: int, other_id: int) -> None:
        if not await self.matching.are_matched(user_id, other_id):
            logger.warning(f"⛔ Messagerie refusée : {user_id} et {other_id} ne sont pas matchés")
            raise NotMatchedError("Les utilisateurs ne sont pas matchés")

    async def send_message(self, sender: User, receiver_id: int, content: str) -> dict:
        content = (content or "").strip()
        if not receiver_id or not content:
            raise InvalidMessageError("Destinataire et contenu requis")

        await self._ensure_matched(sender.id, receiver_id)

        message = Message(sender_id=sender.id, receiver_id=receiver_id, content=content)
        self.db.add(message)
        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Erreur envoi message {sender.id} -> {receiver_id}: {e}")
            raise
        await self.db.refresh(message)

        logger.info(f"Message envoyé : id={message.id}, {sender.id} -> {receiver_id}")
        return serialize_message(message, sender)

    async def get_conversation(self, user_id: int, other_id: int, page: int = 1, per_page: int = 50) -> dict:
        """Messages échangés entre deux membres matchés, par ordre chronologique"""
        await self._ensure_matched(user_id, other_id)

        total_result = await self.db.execute(
            select(func.count(Message.id)).where(_between(user_id, other_id))
        )
        total = total_result.scalar_one()

        result = await self.db.execute(
            select(Message)
            .where(_between(user_id, other_id))
            .order_by(Message.created_at.asc(), Message.id.asc())
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        messages = result.scalars().all()

        return page_envelope("messages", [serialize_message(m, m.sender) for m in messages], total, page, per_page)

    async def get_conversations(self, user_id: int, page: int = 1, per_page: int = 20) -> dict:
        """Une entrée par correspondant avec le dernier message, conversation la plus récente d'abord"""
        # Correspondant de chaque message, côté envoi et côté réception
        peers = union_all(
            select(Message.receiver_id.label("other_id"), Message.id.label("message_id"))
            .where(Message.sender_id == user_id),
            select(Message.sender_id.label("other_id"), Message.id.label("message_id"))
            .where(Message.receiver_id == user_id),
        ).subquery()
        latest = (
            select(peers.c.other_id, func.max(peers.c.message_id).label("last_id"))
            .group_by(peers.c.other_id)
            .subquery()
        )

        total_result = await self.db.execute(select(func.count()).select_from(latest))
        total = total_result.scalar_one()

        result = await self.db.execute(
            select(Message, latest.c.other_id)
            .join(latest, Message.id == latest.c.last_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        rows = result.all()

        other_ids: List[int] = [other_id for _, other_id in rows]
        users_by_id = {}
        if other_ids:
            users_result = await self.db.execute(select(User).where(User.id.in_(other_ids)))
            users_by_id = {u.id: u for u in users_result.scalars().all()}

        conversations = []
        for last, other_id in rows:
            other = users_by_id.get(other_id)
            conversations.append({
                "other_user_id": other_id,
                "photo": other.photo if other else None,
                "first_name": other.first_name if other else None,
                "last_name": other.last_name if other else None,
                "last_message": last.content,
                "last_message_date": last.created_at,
            })

        return page_envelope("conversations", conversations, total, page, per_page)

