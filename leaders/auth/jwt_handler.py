from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from typing import Optional
from leaders.config import settings
import logging
import uuid

logger = logging.getLogger(__name__)

# jti des tokens invalidés par /logout -> exp (mémoire du processus)
revoked_tokens = {}


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Crée un token JWT signé avec les informations fournies.

    :param data: Dictionnaire avec les données à encoder (ex: {"user_id": 5, "role": "Participant"})
    :param expires_delta: Durée de validité du token (timedelta)
    :return: Token JWT encodé
    """
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})

    if "user_id" in to_encode:
        to_encode["sub"] = str(to_encode["user_id"])

    token = jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.ALGORITHM)
    logger.info(f"✅ Token généré pour user_id={data.get('user_id')}, expire à {expire}")
    return token


def _purge_revoked(now: Optional[float] = None) -> None:
    """Oublie les révocations dont le token a de toute façon expiré"""
    now = now if now is not None else datetime.now(timezone.utc).timestamp()
    for jti in [jti for jti, exp in revoked_tokens.items() if exp <= now]:
        del revoked_tokens[jti]


def decode_access_token(token: str) -> Optional[dict]:
    """
    🔐 Décode et vérifie un token JWT.

    Retourne le payload si le token est valide, sinon None.
    Un token révoqué ou sans champ 'sub' est considéré invalide.
    """
    _purge_revoked()

    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"❌ Échec de décodage du token : {e}")
        return None

    if payload.get("jti") in revoked_tokens:
        logger.warning("⚠️ Token révoqué présenté")
        return None

    if not payload.get("sub"):
        logger.warning("⚠️ Token valide mais champ 'sub' manquant dans le payload.")
        return None

    return payload


def revoke_token(token: str) -> None:
    claims = jwt.get_unverified_claims(token)
    _purge_revoked()
    if claims.get("jti") and claims.get("exp"):
        revoked_tokens[claims["jti"]] = claims["exp"]
