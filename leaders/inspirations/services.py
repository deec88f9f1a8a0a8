import logging
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.models import User
from leaders.inspirations.models import Inspiration, InspirationCategory, InspirationLike

logger = logging.getLogger(__name__)

CATEGORIES = [c.value for c in InspirationCategory]


class InvalidInspirationError(Exception):
    pass


class InspirationNotFoundError(Exception):
    pass


def serialize_inspiration(
    inspiration: Inspiration, current_user_id: int, likes: Optional[list] = None, author: Optional[User] = None
) -> dict:
    likes = inspiration.likes if likes is None else likes
    author = author or inspiration.author
    return {
        "id": inspiration.id,
        "user_id": inspiration.user_id,
        "content": inspiration.content,
        "category": inspiration.category,
        "created_at": inspiration.created_at,
        "photo": author.photo if author else None,
        "first_name": author.first_name if author else None,
        "last_name": author.last_name if author else None,
        "likes_count": len(likes),
        "user_liked": any(like.user_id == current_user_id for like in likes),
    }


class InspirationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_inspirations(self, current_user_id: int) -> List[dict]:
        result = await self.db.execute(
            select(Inspiration).order_by(Inspiration.created_at.desc(), Inspiration.id.desc())
        )
        return [serialize_inspiration(i, current_user_id) for i in result.unique().scalars().all()]

    async def get_inspiration(self, inspiration_id: int) -> Inspiration:
        inspiration = await self.db.get(Inspiration, inspiration_id)
        if not inspiration:
            raise InspirationNotFoundError(f"Inspiration {inspiration_id} introuvable")
        return inspiration

    async def create_inspiration(self, author: User, content: Optional[str], category: Optional[str]) -> dict:
        content = (content or "").strip()
        if not content:
            raise InvalidInspirationError("Le contenu est requis")
        if category not in CATEGORIES:
            raise InvalidInspirationError(f"Catégorie invalide (attendu : {', '.join(CATEGORIES)})")

        inspiration = Inspiration(user_id=author.id, content=content, category=category)
        self.db.add(inspiration)
        await self.db.commit()
        await self.db.refresh(inspiration)

        logger.info(f"✨ Inspiration créée : id={inspiration.id} ({category}) par {author.id}")
        return serialize_inspiration(inspiration, author.id, likes=[], author=author)

    async def _likes_count(self, inspiration_id: int) -> int:
        result = await self.db.execute(
            select(func.count(InspirationLike.id)).where(InspirationLike.inspiration_id == inspiration_id)
        )
        return result.scalar_one()

    async def toggle_like(self, inspiration_id: int, user_id: int) -> dict:
        """Ajoute le like de l'utilisateur, ou le retire s'il existe déjà"""
        await self.get_inspiration(inspiration_id)

        existing = await self.db.execute(
            select(InspirationLike.id).where(
                InspirationLike.inspiration_id == inspiration_id,
                InspirationLike.user_id == user_id,
            )
        )
        like_id = existing.scalar_one_or_none()

        if like_id is not None:
            await self.db.execute(delete(InspirationLike).where(InspirationLike.id == like_id))
            await self.db.commit()
            liked = False
        else:
            self.db.add(InspirationLike(inspiration_id=inspiration_id, user_id=user_id))
            try:
                await self.db.commit()
            except IntegrityError:
                # Double clic concurrent : le like existe déjà
                await self.db.rollback()
            liked = True

        likes_count = await self._likes_count(inspiration_id)
        logger.info(f"❤️ Like inspiration {inspiration_id} par {user_id} : liked={liked} ({likes_count})")
        return {"liked": liked, "likes_count": likes_count}

    async def delete_inspiration(self, inspiration: Inspiration) -> None:
        await self.db.delete(inspiration)
        await self.db.commit()
        logger.info(f"Inspiration supprimée : id={inspiration.id}")
