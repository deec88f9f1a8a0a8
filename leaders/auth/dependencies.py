from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from leaders.db.session import get_db
from leaders.auth.models import User
from leaders.auth.jwt_handler import decode_access_token

logger = logging.getLogger(__name__)

# Utilisé pour extraire le token depuis le header Authorization
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# 🔒 Récupération obligatoire de l'utilisateur courant
async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    🔐 Récupère l'utilisateur courant à partir du token JWT.
    """
    if not token:
        logger.warning("⛔ Accès refusé : token manquant")
        raise _unauthorized("Token d'authentification manquant")

    payload = decode_access_token(token)
    if payload is None:
        raise _unauthorized("Token invalide ou expiré")

    try:
        user_id_int = int(payload.get("user_id"))
    except (ValueError, TypeError) as e:
        logger.warning(f"⚠️ Champ 'user_id' mal formé dans token : {payload.get('user_id')} ({e})")
        raise _unauthorized("Token invalide : 'user_id' mal formé")

    user = await db.get(User, user_id_int)
    if not user:
        logger.warning(f"❌ Utilisateur introuvable : id={user_id_int}")
        raise _unauthorized("Utilisateur non trouvé")

    logger.debug(f"✅ Utilisateur authentifié : id={user.id}, email={user.email}")
    return user
