"""Единая проверка прав: владелец ресурса или админ."""
from typing import Literal, Optional

from fastapi import Depends, HTTPException
from starlette import status

from core.security import get_current_user
from models.user import User

Role = Literal["owner", "admin"]


def is_allowed(actor: Optional[User], owner_id: Optional[int], required_role: Role = "owner") -> bool:
    """
    required_role="admin": только админ.
    required_role="owner": владелец ресурса или админ.
    """
    if actor is None:
        return False
    if actor.is_admin:
        return True
    if required_role == "admin":
        return False
    return owner_id is not None and actor.id == owner_id


def ensure_allowed(
    actor: Optional[User],
    owner_id: Optional[int],
    required_role: Role = "owner",
    detail: str = "Forbidden",
) -> None:
    if not is_allowed(actor, owner_id, required_role):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    ensure_allowed(current_user, None, "admin", detail="Admin only")
    return current_user
