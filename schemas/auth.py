from pydantic import BaseModel, EmailStr, Field
from typing import Literal

from schemas.user import UserRead


class RegisterRequest(BaseModel):
    """Тело запроса на регистрацию."""
    email: EmailStr = Field(..., description="Email, уникален в системе")
    password: str = Field(..., min_length=6, description="Пароль, минимум 6 символов")
    username: str = Field(..., min_length=3, max_length=64, description="Отображаемое имя")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """
    Ответ при успешной регистрации или логине.
    """
    token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in_ms: int
    user: UserRead
