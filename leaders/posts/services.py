import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.models import User
from leaders.posts.models import Post
from leaders.utils.pagination import page_envelope

logger = logging.getLogger(__name__)


class PostNotFoundError(Exception):
    pass


def serialize_post(post: Post, author: Optional[User] = None) -> dict:
    author = author or post.author
    return {
        "id": post.id,
        "user_id": post.user_id,
        "content": post.content,
        "image_url": post.image_url,
        "created_at": post.created_at,
        "photo": author.photo if author else None,
        "first_name": author.first_name if author else None,
        "last_name": author.last_name if author else None,
    }


async def list_posts(db: AsyncSession, page: int = 1, per_page: int = 20) -> dict:
    """Mur communautaire, publications les plus récentes d'abord"""
    total = (await db.execute(select(func.count(Post.id)))).scalar_one()
    result = await db.execute(
        select(Post)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    posts = [serialize_post(p) for p in result.scalars().all()]
    return page_envelope("posts", posts, total, page, per_page)


async def create_post(db: AsyncSession, author: User, content: Optional[str], image_url: Optional[str]) -> dict:
    post = Post(user_id=author.id, content=content, image_url=image_url)
    db.add(post)
    try:
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Erreur création publication pour {author.id}: {e}")
        raise
    await db.refresh(post)
    logger.info(f"Publication créée : id={post.id} par {author.id}")
    return serialize_post(post, author)


async def get_post(db: AsyncSession, post_id: int) -> Post:
    post = await db.get(Post, post_id)
    if not post:
        raise PostNotFoundError(f"Publication {post_id} introuvable")
    return post


async def delete_post(db: AsyncSession, post: Post) -> None:
    await db.delete(post)
    await db.commit()
    logger.info(f"Publication supprimée : id={post.id}")
