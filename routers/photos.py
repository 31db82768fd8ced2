import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Form, Path, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.database import get_db
from core.permissions import ensure_allowed
from core.security import get_current_user, get_current_user_optional
from models.user import User
from schemas.photo import PhotoRead, PhotoUpdate
from services import photos as photo_service
from utils.image_tools import validate_upload
from utils.photo_helpers import normalize_pagination, to_photo_read, to_photo_reads
from utils.storage import storage

router = APIRouter(tags=["photos"])
logger = logging.getLogger("uvicorn.error")

MY_PHOTOS_LIMIT = 50
TRUTHY = {"true", "1", "yes", "y", "on"}


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY


@router.get(
    "/photos",
    response_model=List[PhotoRead],
    summary="Публичная лента одобренных фото",
)
async def list_public_photos(
    limit: Optional[int] = Query(None, description="Сколько фото вернуть (1..100, по умолчанию 20)"),
    offset: Optional[int] = Query(None, description="Смещение"),
    db: AsyncSession = Depends(get_db),
) -> List[PhotoRead]:
    limit, offset = normalize_pagination(limit, offset)
    rows = await photo_service.list_public(db, limit, offset)
    return to_photo_reads(rows)


async def _list_my_photos(
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[PhotoRead]:
    user_id = current_user.id
    limit, offset = normalize_pagination(limit, offset, default_limit=MY_PHOTOS_LIMIT)
    rows = await photo_service.list_by_user(db, user_id, limit, offset)
    return to_photo_reads(rows)


# Алиасы /photos/me и /photos/mine регистрируются раньше /photos/{photo_id}
for _path in ("/me/photos", "/photos/me", "/photos/mine"):
    router.add_api_route(
        _path,
        _list_my_photos,
        methods=["GET"],
        response_model=List[PhotoRead],
        summary="Все мои фото, включая приватные",
    )


@router.post(
    "/photos/upload",
    response_model=PhotoRead,
    status_code=status.HTTP_201_CREATED,
    summary="Загрузить фото (multipart, поле photo)",
)
async def upload_photo(
    photo: UploadFile = File(..., description="Файл изображения до 10MB: jpeg, png, gif, webp"),
    description: str = Form("", description="Описание"),
    is_public: Optional[str] = Form(None, description="'true': отправить в публичную ленту"),
    ispublic: Optional[str] = Form(None, description="Старое имя поля is_public"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    user_id = current_user.id

    # 1) Читаем не больше лимита + 1 байт, чтобы отловить слишком большие файлы
    data = await photo.read(settings.MAX_UPLOAD_SIZE + 1)

    # 2) Проверяем размер, тип и содержимое до записи на диск
    try:
        mime_type = validate_upload(data, photo.content_type)
    except ValueError as ve:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(ve))

    # 3) Сохраняем файл (не блокируя loop)
    try:
        stored = await run_in_threadpool(storage.save, data, photo.filename)
    except OSError as e:
        logger.exception("Не удалось сохранить файл: %s", e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="failed to save file")

    # 4) Запись в БД; при сбое убираем файл
    try:
        new_photo, moderation_status = await photo_service.create_photo(
            db,
            owner_id=user_id,
            stored=stored,
            mime_type=mime_type,
            description=description,
            is_public=_is_truthy(is_public) or _is_truthy(ispublic),
        )
    except SQLAlchemyError:
        await db.rollback()
        storage.remove(stored["path"])
        logger.exception("Не удалось сохранить фото пользователя %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="failed to save photo to database",
        )

    logger.info("User %s uploaded photo %s (public=%s)", user_id, new_photo.id, new_photo.is_public)
    return to_photo_read(new_photo, moderation_status)


@router.get(
    "/photos/{photo_id}",
    response_model=PhotoRead,
    summary="Получить фото по ID",
)
async def get_photo(
    photo_id: int = Path(..., gt=0, description="ID фотографии"),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
) -> Any:
    photo, moderation_status = await photo_service.get_visible_photo_or_404(db, photo_id, current_user)
    variants = await photo_service.list_variants(db, photo.id)
    return to_photo_read(photo, moderation_status, variants)


@router.put(
    "/photos/{photo_id}",
    response_model=PhotoRead,
    summary="Обновить описание и публичность фото",
)
async def update_photo(
    payload: PhotoUpdate,
    photo_id: int = Path(..., gt=0, description="ID фотографии"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    photo, _ = await photo_service.get_photo_or_404(db, photo_id)
    ensure_allowed(current_user, photo.user_id, detail="you can only update your own photos")

    photo, moderation_status = await photo_service.update_photo(
        db, photo, payload.description, payload.is_public
    )
    return to_photo_read(photo, moderation_status)


@router.delete(
    "/photos/{photo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить фото по ID вместе с файлом",
)
async def delete_photo(
    photo_id: int = Path(..., gt=0, description="ID фотографии"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id = current_user.id

    photo, _ = await photo_service.get_photo_or_404(db, photo_id)
    ensure_allowed(current_user, photo.user_id, detail="you can only delete your own photos")

    await photo_service.delete_photo(db, photo)
    logger.info("Photo %s deleted by user %s", photo_id, user_id)
    return
