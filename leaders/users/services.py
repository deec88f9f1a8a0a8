from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.models import Role, User
from leaders.events.models import Event, EventRegistration
from leaders.inspirations.models import Inspiration, InspirationLike
from leaders.matching.models import Match, Swipe
from leaders.messages.models import Message
from leaders.posts.models import Post
from leaders.utils.uploads import delete_uploaded_file

logger = logging.getLogger(__name__)

LIST_FIELDS = ("languages", "interests", "intentions")


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)


async def list_users(db: AsyncSession) -> List[User]:
    """Tous les utilisateurs, du plus ancien au plus récent"""
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def update_profile(db: AsyncSession, user: User, update_data: Dict[str, Any]) -> User:
    """Met à jour les champs de profil fournis"""
    try:
        for field, value in update_data.items():
            if field in LIST_FIELDS:
                value = [v.strip() for v in (value or []) if v and v.strip()]
            setattr(user, field, value)
        await db.commit()
        await db.refresh(user)
        logger.info(f"Profil mis à jour : id={user.id}, champs={sorted(update_data)}")
        return user
    except Exception as e:
        await db.rollback()
        logger.error(f"Erreur mise à jour profil {user.id}: {e}")
        raise


async def set_photo(db: AsyncSession, user: User, url: str) -> Optional[str]:
    """Remplace la photo de profil et retourne l'ancienne URL"""
    old_url = user.photo
    user.photo = url
    await db.commit()
    await db.refresh(user)
    return old_url


async def update_role(db: AsyncSession, user: User, role: Role) -> User:
    user.role = role.value
    await db.commit()
    await db.refresh(user)
    logger.info(f"Rôle de l'utilisateur {user.id} changé en {user.role}")
    return user


async def delete_user(db: AsyncSession, user: User) -> None:
    """Supprime un utilisateur et tout ce qui lui appartient"""
    user_id = user.id
    photo = user.photo
    try:
        result = await db.execute(select(Post.image_url).where(Post.user_id == user_id))
        post_images = [url for url in result.scalars().all() if url]

        own_inspirations = select(Inspiration.id).where(Inspiration.user_id == user_id)
        await db.execute(delete(InspirationLike).where(
            or_(InspirationLike.user_id == user_id, InspirationLike.inspiration_id.in_(own_inspirations))
        ))
        await db.execute(delete(Inspiration).where(Inspiration.user_id == user_id))
        await db.execute(delete(Post).where(Post.user_id == user_id))
        await db.execute(delete(Message).where(
            or_(Message.sender_id == user_id, Message.receiver_id == user_id)
        ))
        await db.execute(delete(Match).where(
            or_(Match.user_a_id == user_id, Match.user_b_id == user_id)
        ))
        await db.execute(delete(Swipe).where(
            or_(Swipe.swiper_id == user_id, Swipe.swiped_id == user_id)
        ))
        await db.execute(delete(EventRegistration).where(EventRegistration.user_id == user_id))
        # Les événements restent, sans intervenant
        await db.execute(update(Event).where(Event.instructor_id == user_id).values(instructor_id=None))

        await db.delete(user)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Erreur suppression utilisateur {user_id}: {e}")
        raise

    delete_uploaded_file(photo)
    for url in post_images:
        delete_uploaded_file(url)
    logger.info(f"Utilisateur supprimé : id={user_id}")


async def get_matching_candidates(db: AsyncSession, current_user: User) -> List[User]:
    """Membres pas encore swipés par l'utilisateur courant (hors Admin et soi-même)"""
    already_swiped = select(Swipe.swiped_id).where(Swipe.swiper_id == current_user.id)
    result = await db.execute(
        select(User)
        .where(
            User.id != current_user.id,
            User.role != Role.ADMIN.value,
            User.id.not_in(already_swiped),
        )
        .order_by(User.id)
    )
    return list(result.scalars().all())


def _contains_all(values: Optional[List[str]], required: List[str]) -> bool:
    present = set(values or [])
    return all(item in present for item in required)


async def search_users(
    db: AsyncSession,
    current_user: User,
    country: Optional[str] = None,
    language: Optional[str] = None,
    intentions: Optional[List[str]] = None,
    interests: Optional[List[str]] = None,
) -> List[User]:
    """Recherche filtrée des membres (hors Admin et soi-même)"""
    query = select(User).where(User.id != current_user.id, User.role != Role.ADMIN.value)
    if country:
        query = query.where(User.country == country)

    result = await db.execute(query.order_by(User.id))
    users = result.scalars().all()

    # Les listes sont stockées en JSON : filtrage côté application
    if language:
        users = [u for u in users if language in (u.languages or [])]
    if intentions:
        users = [u for u in users if _contains_all(u.intentions, intentions)]
    if interests:
        users = [u for u in users if _contains_all(u.interests, interests)]
    return list(users)
