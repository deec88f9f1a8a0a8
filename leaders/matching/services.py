import logging
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.models import User
from leaders.matching.models import Match, Swipe, SwipeAction

logger = logging.getLogger(__name__)


class InvalidSwipeError(Exception):
    pass


class AlreadySwipedError(Exception):
    pass


class UserNotFoundError(Exception):
    pass


def ordered_pair(user_id: int, other_id: int):
    return min(user_id, other_id), max(user_id, other_id)


class MatchingService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_swipe(self, swiper_id: int, swiped_id: Optional[int], action: Optional[str]) -> Optional[Match]:
        """
        Enregistre un swipe et crée le match si le like est réciproque.

        Retourne le match existant entre les deux membres après ce swipe, sinon None.
        """
        if swiped_id is None or action not in {a.value for a in SwipeAction}:
            raise InvalidSwipeError("Données de swipe invalides")
        if swiper_id == swiped_id:
            raise InvalidSwipeError("Impossible de swiper sur soi-même")

        if not await self.db.get(User, swiped_id):
            raise UserNotFoundError(f"Utilisateur {swiped_id} introuvable")

        if await self._get_swipe(swiper_id, swiped_id):
            raise AlreadySwipedError("Déjà swipé sur cet utilisateur")

        self.db.add(Swipe(swiper_id=swiper_id, swiped_id=swiped_id, action=action))
        try:
            await self.db.commit()
        except IntegrityError:
            # Doublon concurrent rejeté par la contrainte unique
            await self.db.rollback()
            raise AlreadySwipedError("Déjà swipé sur cet utilisateur")

        logger.info(f"Swipe enregistré : {swiper_id} -> {swiped_id} ({action})")

        if action != SwipeAction.LIKE.value:
            return None

        mutual = await self._get_swipe(swiped_id, swiper_id, SwipeAction.LIKE)
        if not mutual:
            return None

        return await self._create_match(swiper_id, swiped_id)

    async def _get_swipe(self, swiper_id: int, swiped_id: int, action: Optional[SwipeAction] = None) -> Optional[Swipe]:
        query = select(Swipe).where(Swipe.swiper_id == swiper_id, Swipe.swiped_id == swiped_id)
        if action is not None:
            query = query.where(Swipe.action == action.value)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def _create_match(self, user_id: int, other_id: int) -> Match:
        existing = await self.get_match(user_id, other_id)
        if existing:
            return existing

        user_a_id, user_b_id = ordered_pair(user_id, other_id)
        match = Match(user_a_id=user_a_id, user_b_id=user_b_id)
        self.db.add(match)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            return await self.get_match(user_id, other_id)

        await self.db.refresh(match)
        logger.info(f"💘 Match créé : id={match.id} entre {user_a_id} et {user_b_id}")
        return match

    async def get_match(self, user_id: int, other_id: int) -> Optional[Match]:
        user_a_id, user_b_id = ordered_pair(user_id, other_id)
        result = await self.db.execute(
            select(Match).where(Match.user_a_id == user_a_id, Match.user_b_id == user_b_id)
        )
        return result.scalars().first()

    async def are_matched(self, user_id: int, other_id: int) -> bool:
        if user_id == other_id:
            return False
        return await self.get_match(user_id, other_id) is not None

    async def get_matches(self, user_id: int) -> List[dict]:
        """Matches de l'utilisateur, du plus récent au plus ancien, avec le profil de l'autre membre"""
        result = await self.db.execute(
            select(Match)
            .where(or_(Match.user_a_id == user_id, Match.user_b_id == user_id))
            .order_by(Match.created_at.desc(), Match.id.desc())
        )
        matches = result.scalars().all()
        if not matches:
            return []

        other_ids = {m.other_user_id(user_id) for m in matches}
        users_result = await self.db.execute(select(User).where(User.id.in_(other_ids)))
        users_by_id = {u.id: u for u in users_result.scalars().all()}

        serialized = []
        for match in matches:
            other = users_by_id.get(match.other_user_id(user_id))
            if other is None:
                continue
            serialized.append({
                "id": match.id,
                "created_at": match.created_at,
                "matched_user_id": other.id,
                "photo": other.photo,
                "first_name": other.first_name,
                "last_name": other.last_name,
                "country": other.country,
                "city": other.city,
            })
        return serialized
