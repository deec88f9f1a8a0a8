from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from leaders.auth.dependencies import get_current_user
from leaders.auth.models import Role, User
from leaders.auth.permissions import ensure_owner_or_admin, require_role
from leaders.auth.schemas import UserOut
from leaders.config import settings
from leaders.db.session import get_db
from leaders.users import services
from leaders.users.schemas import PhotoResponse, RoleUpdate, UserProfileUpdate
from leaders.utils.uploads import PROFILE_IMAGE_SUBDIR, delete_uploaded_file, save_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await services.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Utilisateur non trouvé")
    return user


# 📋 GET /api/users - Lister les membres (Admin)
@router.get("", response_model=List[UserOut])
async def list_users(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_role(Role.ADMIN)),
):
    return await services.list_users(db)


# 💘 GET /api/users/matching/candidates - Profils à swiper
@router.get("/matching/candidates", response_model=List[UserOut])
async def matching_candidates(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await services.get_matching_candidates(db, current_user)


# 🔎 GET /api/users/search/filtered - Annuaire filtré
@router.get("/search/filtered", response_model=List[UserOut])
async def search_filtered(
    country: Optional[str] = Query(None, description="Pays exact"),
    language: Optional[str] = Query(None, description="Langue parlée"),
    intentions: Optional[List[str]] = Query(None, description="Intentions (toutes requises)"),
    interests: Optional[List[str]] = Query(None, description="Centres d'intérêt (tous requis)"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return await services.search_users(
        db,
        current_user,
        country=country,
        language=language,
        intentions=intentions,
        interests=interests,
    )


# 🔍 GET /api/users/{user_id} - Récupérer un profil
@router.get("/{user_id}", response_model=UserOut)
async def get_profile(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await _get_user_or_404(db, user_id)


# ✏️ PUT /api/users/{user_id} - Mettre à jour un profil
@router.put("/{user_id}", response_model=UserOut)
async def update_profile(
    user_id: int,
    updates: UserProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_owner_or_admin(current_user, user_id)
    user = await _get_user_or_404(db, user_id)

    update_data = updates.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="Aucun champ à mettre à jour")

    try:
        return await services.update_profile(db, user, update_data)
    except Exception:
        raise HTTPException(status_code=500, detail="Erreur interne du serveur")


# 📸 POST /api/users/{user_id}/photo - Changer la photo de profil
@router.post("/{user_id}/photo", response_model=PhotoResponse)
async def change_photo(
    user_id: int,
    photo: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_owner_or_admin(current_user, user_id)
    user = await _get_user_or_404(db, user_id)

    url = await save_image(photo, PROFILE_IMAGE_SUBDIR, "avatar", user.id, settings.MAX_PHOTO_SIZE)
    try:
        old_url = await services.set_photo(db, user, url)
    except Exception as e:
        logger.error(f"Erreur changement photo: {e}")
        delete_uploaded_file(url)
        raise HTTPException(status_code=500, detail="Erreur interne du serveur")

    delete_uploaded_file(old_url)
    return {"message": "Photo mise à jour avec succès ✅", "photo": url}


# 🛡️ PUT /api/users/{user_id}/role - Changer le rôle (Admin)
@router.put("/{user_id}/role")
async def update_role(
    user_id: int,
    payload: RoleUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_role(Role.ADMIN)),
):
    try:
        role = Role(payload.role)
    except ValueError:
        raise HTTPException(status_code=400, detail="Rôle invalide")

    user = await _get_user_or_404(db, user_id)
    await services.update_role(db, user, role)
    return {"message": "Rôle mis à jour avec succès", "role": user.role}


# 🗑️ DELETE /api/users/{user_id} - Supprimer un membre (Admin)
@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_role(Role.ADMIN)),
):
    user = await _get_user_or_404(db, user_id)
    try:
        await services.delete_user(db, user)
    except Exception:
        raise HTTPException(status_code=500, detail="Erreur interne du serveur")
    return {"message": "Utilisateur supprimé avec succès"}
