# routers/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from core.database import get_db
from core.id_generator import INSERT_ATTEMPTS
from core.security import create_access_token, get_current_user, get_password_hash, verify_password
from models.user import User
from schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from schemas.user import UserRead

router = APIRouter(tags=["Auth"])
logger = logging.getLogger("uvicorn.error")


async def _email_taken(db: AsyncSession, email: str) -> bool:
    result = await db.execute(select(User.id).where(User.email == email))
    return result.scalar_one_or_none() is not None


def _auth_response(user: User) -> AuthResponse:
    access_token, expires = create_access_token(user.id, user.email)
    return AuthResponse(
        token=access_token,
        token_type="bearer",
        expires_in_ms=int(expires.timestamp() * 1000),
        user=UserRead.model_validate(user),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Регистрация по email и паролю → выдаёт JWT",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    email = payload.email.lower()

    # 1) Email должен быть свободен
    if await _email_taken(db, email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="email already exists")

    username = payload.username.strip()
    password_hash = get_password_hash(payload.password)

    # 2) Создаём пользователя; при занятом случайном id повторяем с новым
    for _ in range(INSERT_ATTEMPTS):
        user = User(email=email, username=username, password_hash=password_hash, is_admin=False)
        db.add(user)
        try:
            await db.commit()
            break
        except IntegrityError:
            await db.rollback()
            # тот же email успел зарегистрироваться параллельно
            if await _email_taken(db, email):
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="email already exists")
    else:
        logger.error("Не удалось подобрать свободный id для пользователя %s", email)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to create user",
        )
    await db.refresh(user)

    logger.info("User %s registered with id=%s", user.email, user.id)
    return _auth_response(user)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Вход по email и паролю → выдаёт JWT",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).where(User.email == payload.email.lower()))
    user = result.scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _auth_response(user)


@router.get(
    "/auth/me",
    response_model=UserRead,
    summary="Получить текущего пользователя",
)
async def read_me(current_user: User = Depends(get_current_user)):
    return current_user
