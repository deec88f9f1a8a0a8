# leaders/utils/uploads.py - Utilitaires pour la gestion des images uploadées
import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
from fastapi import HTTPException, UploadFile

from leaders.config import settings

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
UPLOAD_MOUNT_PATH = "/static/upload"
STATIC_URL_PREFIX = f"{UPLOAD_MOUNT_PATH}/"

PROFILE_IMAGE_SUBDIR = "profileImage"
POST_IMAGE_SUBDIR = "postImage"


def upload_root() -> Path:
    return Path(settings.UPLOAD_DIR)


def setup_directories() -> None:
    """Crée les dossiers nécessaires"""
    for subdir in (PROFILE_IMAGE_SUBDIR, POST_IMAGE_SUBDIR):
        (upload_root() / subdir).mkdir(parents=True, exist_ok=True)


def validate_image_file(file: UploadFile) -> str:
    """Valide le fichier image uploadé et retourne son extension"""
    if not file.filename:
        raise HTTPException(status_code=400, detail="Nom de fichier manquant")

    ext = file.filename.rsplit('.', 1)[-1].lower() if '.' in file.filename else ''
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Extension non autorisée. Extensions autorisées: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    if not file.content_type or not file.content_type.startswith('image/'):
        raise HTTPException(status_code=400, detail="Le fichier doit être une image")

    return ext


def is_local_upload(url: Optional[str]) -> bool:
    """Vérifie si l'URL correspond à un fichier uploadé localement"""
    return bool(url) and url.startswith(STATIC_URL_PREFIX)


def get_file_path_from_url(url: str) -> Optional[Path]:
    """Extrait le chemin du fichier à partir de l'URL"""
    if not is_local_upload(url):
        return None
    relative = url[len(STATIC_URL_PREFIX):]
    if not relative or ".." in Path(relative).parts:
        return None
    return upload_root() / relative


def create_safe_filename(prefix: str, owner_id: int, extension: str) -> str:
    """Crée un nom de fichier sécurisé"""
    return f"{prefix}_{owner_id}_{uuid.uuid4().hex[:8]}.{extension}"


async def save_image(file: UploadFile, subdir: str, prefix: str, owner_id: int, max_size: int) -> str:
    """Valide puis sauvegarde l'image, retourne son URL publique"""
    ext = validate_image_file(file)
    content = await file.read()

    if len(content) > max_size:
        raise HTTPException(status_code=413, detail="Fichier trop volumineux")

    target_dir = upload_root() / subdir
    target_dir.mkdir(parents=True, exist_ok=True)

    filename = create_safe_filename(prefix, owner_id, ext)
    filepath = target_dir / filename

    async with aiofiles.open(filepath, "wb") as f:
        await f.write(content)

    logger.info(f"Image sauvegardée: {filepath}")
    return f"{STATIC_URL_PREFIX}{subdir}/{filename}"


def delete_uploaded_file(url: Optional[str]) -> None:
    """Supprime le fichier local associé à l'URL s'il existe"""
    filepath = get_file_path_from_url(url) if url else None
    if filepath is None:
        return
    try:
        filepath.unlink(missing_ok=True)
        logger.info(f"Ancienne image supprimée: {filepath}")
    except OSError as e:
        logger.warning(f"Erreur lors de la suppression de l'image {filepath}: {e}")
