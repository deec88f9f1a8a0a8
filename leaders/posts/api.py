from typing import Optional
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.dependencies import get_current_user
from leaders.auth.models import User
from leaders.auth.permissions import ensure_owner_or_admin
from leaders.config import settings
from leaders.db.session import get_db
from leaders.posts import services
from leaders.posts.schemas import PostListResponse, PostOut
from leaders.utils.uploads import POST_IMAGE_SUBDIR, delete_uploaded_file, save_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["posts"])


# 📰 GET /api/posts - Mur communautaire
@router.get("", response_model=PostListResponse)
async def list_posts(
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(20, ge=1, le=100, description="Items per page"),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await services.list_posts(db, page, per_page)


# ✍️ POST /api/posts - Publier (texte et/ou image)
@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(
    content: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    content = content.strip() if content else None
    has_image = image is not None and bool(image.filename)
    if not content and not has_image:
        raise HTTPException(status_code=400, detail="Contenu ou image requis")

    image_url = None
    if has_image:
        image_url = await save_image(image, POST_IMAGE_SUBDIR, "post", current_user.id, settings.MAX_POST_IMAGE_SIZE)

    try:
        return await services.create_post(db, current_user, content, image_url)
    except Exception:
        delete_uploaded_file(image_url)
        raise HTTPException(status_code=500, detail="Erreur interne du serveur")


# 🗑️ DELETE /api/posts/{post_id} - Supprimer (auteur ou Admin)
@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        post = await services.get_post(db, post_id)
    except services.PostNotFoundError:
        raise HTTPException(status_code=404, detail="Publication non trouvée")

    ensure_owner_or_admin(current_user, post.user_id)

    image_url = post.image_url
    await services.delete_post(db, post)
    delete_uploaded_file(image_url)
    return {"message": "Publication supprimée avec succès"}
