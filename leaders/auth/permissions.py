from fastapi import Depends, HTTPException, status

from leaders.auth.dependencies import get_current_user
from leaders.auth.models import Role, User


def require_role(*roles: Role):
    allowed = {r.value if isinstance(r, Role) else r for r in roles}

    def wrapper(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Accès interdit (rôle requis)"
            )
        return user
    return wrapper


def ensure_owner_or_admin(user: User, owner_id: int) -> None:
    """Lève 403 si l'utilisateur n'est ni propriétaire de la ressource ni Admin"""
    if user.id != owner_id and not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Accès interdit")
