from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
import logging

from leaders.auth import models, schemas, password, jwt_handler
from leaders.auth.dependencies import get_current_user, oauth2_scheme
from leaders.config import settings
from leaders.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


async def get_user_by_email(db: AsyncSession, email: str):
    """Récupère un utilisateur par email (insensible à la casse)"""
    result = await db.execute(
        select(models.User).where(models.User.email == email.strip().lower())
    )
    return result.scalars().first()


def _issue_token(user: models.User) -> dict:
    token = jwt_handler.create_access_token({
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
    })
    return {
        "token": token,
        "token_type": "bearer",
        "user": schemas.UserOut.model_validate(user),
    }


@router.post("/register", response_model=schemas.TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(user: schemas.UserRegister, db: AsyncSession = Depends(get_db)):
    email = user.email.strip().lower()
    if await get_user_by_email(db, email):
        raise HTTPException(status_code=400, detail="Email déjà enregistré")

    admin_emails = {e.strip().lower() for e in settings.ADMIN_EMAILS}
    role = models.Role.ADMIN if email in admin_emails else models.Role.PARTICIPANT

    new_user = models.User(
        email=email,
        hashed_password=password.hash_password(user.password),
        first_name=user.first_name,
        last_name=user.last_name,
        role=role.value,
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail="Email déjà enregistré")
    await db.refresh(new_user)

    logger.info(f"Utilisateur enregistré : id={new_user.id}, role={new_user.role}")
    return _issue_token(new_user)


@router.post("/login", response_model=schemas.TokenResponse)
async def login(user: schemas.UserLogin, db: AsyncSession = Depends(get_db)):
    db_user = await get_user_by_email(db, user.email)
    if not db_user or not password.verify_password(user.password, db_user.hashed_password):
        logger.warning(f"⛔ Échec de connexion pour {user.email}")
        raise HTTPException(status_code=401, detail="Identifiant ou mot de passe incorrect")

    return _issue_token(db_user)


@router.post("/logout", response_model=schemas.LogoutResponse)
async def logout(
    token: str = Depends(oauth2_scheme),
    current_user: models.User = Depends(get_current_user),
):
    jwt_handler.revoke_token(token)
    logger.info(f"Déconnexion de user_id={current_user.id}")
    return {"msg": "Déconnecté avec succès"}


@router.get("/me", response_model=schemas.UserOut)
async def get_me(current_user: models.User = Depends(get_current_user)):
    return current_user
