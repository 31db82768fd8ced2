"""
Фото и модерация.

Машина состояний публичного фото: нет статуса → pending (при загрузке с
is_public=true) → approved | rejected. Переходы только из pending.
В публичной ленте фото видно, если is_public и последний статус
отсутствует или approved.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from fastapi import HTTPException
from sqlalchemy import select, delete, update, or_
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from core.permissions import is_allowed
from models.comment import Comment, CommentReport
from models.like import CommentLike, PhotoLike
from models.photo import ModerationStatus, Photo, PhotoStatus, PhotoVariant
from models.user import User
from utils.storage import storage

logger = logging.getLogger("uvicorn.error")

PENDING = ModerationStatus.PENDING.value
APPROVED = ModerationStatus.APPROVED.value
REJECTED = ModerationStatus.REJECTED.value


def latest_status_expr():
    """Коррелированный подзапрос: статус из самой свежей строки photo_statuses."""
    return (
        select(PhotoStatus.status)
        .where(PhotoStatus.photo_id == Photo.id)
        .order_by(PhotoStatus.created_at.desc())
        .limit(1)
        .correlate(Photo)
        .scalar_subquery()
    )


def is_publicly_visible(photo: Photo, moderation_status: Optional[str]) -> bool:
    return bool(photo.is_public) and (moderation_status is None or moderation_status == APPROVED)


def can_view(photo: Photo, moderation_status: Optional[str], user: Optional[User]) -> bool:
    if is_publicly_visible(photo, moderation_status):
        return True
    return is_allowed(user, photo.user_id)


async def latest_status(db: AsyncSession, photo_id: int) -> Optional[PhotoStatus]:
    res = await db.execute(
        select(PhotoStatus)
        .where(PhotoStatus.photo_id == photo_id)
        .order_by(PhotoStatus.created_at.desc())
        .limit(1)
    )
    return res.scalar_one_or_none()


async def get_photo_with_status(db: AsyncSession, photo_id: int) -> Tuple[Optional[Photo], Optional[str]]:
    res = await db.execute(
        select(Photo, latest_status_expr().label("moderation_status"))
        .where(Photo.id == photo_id)
        .execution_options(populate_existing=True)
    )
    row = res.first()
    if row is None:
        return None, None
    return row[0], row[1]


async def get_photo_or_404(db: AsyncSession, photo_id: int) -> Tuple[Photo, Optional[str]]:
    photo, moderation_status = await get_photo_with_status(db, photo_id)
    if photo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="photo not found")
    return photo, moderation_status


async def get_visible_photo_or_404(
    db: AsyncSession, photo_id: int, user: Optional[User]
) -> Tuple[Photo, Optional[str]]:
    """Чужие непубличные и неодобренные фото отдаём как несуществующие."""
    photo, moderation_status = await get_photo_or_404(db, photo_id)
    if not can_view(photo, moderation_status, user):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="photo not found")
    return photo, moderation_status


async def list_variants(db: AsyncSession, photo_id: int) -> Sequence[PhotoVariant]:
    res = await db.execute(
        select(PhotoVariant).where(PhotoVariant.photo_id == photo_id).order_by(PhotoVariant.width.asc())
    )
    return res.scalars().all()


async def create_photo(
    db: AsyncSession,
    owner_id: int,
    stored: dict,
    mime_type: str,
    description: str,
    is_public: bool,
) -> Tuple[Photo, Optional[str]]:
    photo = Photo(
        user_id=owner_id,
        url=stored["url"],
        file_path=stored["path"],
        file_size=stored["size"],
        mime_type=mime_type,
        description=description or "",
        is_public=is_public,
        likes_count=0,
    )
    db.add(photo)
    # id нужен для строки статуса, поэтому сначала flush
    await db.flush()

    moderation_status = None
    if is_public:
        db.add(PhotoStatus(photo_id=photo.id, status=PENDING))
        moderation_status = PENDING

    await db.commit()
    await db.refresh(photo)
    return photo, moderation_status


def _rows_to_pairs(result) -> List[Tuple[Photo, Optional[str]]]:
    return [(row[0], row[1]) for row in result.all()]


async def list_public(db: AsyncSession, limit: int, offset: int) -> List[Tuple[Photo, Optional[str]]]:
    latest = latest_status_expr()
    res = await db.execute(
        select(Photo, latest.label("moderation_status"))
        .where(
            Photo.is_public.is_(True),
            or_(latest.is_(None), latest == APPROVED),
        )
        .order_by(Photo.created_at.desc(), Photo.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return _rows_to_pairs(res)


async def list_by_user(
    db: AsyncSession, user_id: int, limit: int, offset: int
) -> List[Tuple[Photo, Optional[str]]]:
    res = await db.execute(
        select(Photo, latest_status_expr().label("moderation_status"))
        .where(Photo.user_id == user_id)
        .order_by(Photo.created_at.desc(), Photo.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return _rows_to_pairs(res)


async def list_pending(db: AsyncSession, limit: int, offset: int) -> List[Tuple[Photo, Optional[str]]]:
    latest = latest_status_expr()
    res = await db.execute(
        select(Photo, latest.label("moderation_status"))
        .where(Photo.is_public.is_(True), latest == PENDING)
        .order_by(Photo.created_at.asc(), Photo.id.asc())
        .limit(limit)
        .offset(offset)
    )
    return _rows_to_pairs(res)


async def update_photo(
    db: AsyncSession, photo: Photo, description: str, is_public: bool
) -> Tuple[Photo, Optional[str]]:
    photo.description = description or ""
    photo.is_public = is_public

    current = await latest_status(db, photo.id)
    # Фото, ставшее публичным без истории модерации, уходит на проверку
    if is_public and current is None:
        db.add(PhotoStatus(photo_id=photo.id, status=PENDING))

    db.add(photo)
    await db.commit()
    await db.refresh(photo)
    return await get_photo_or_404(db, photo.id)


async def delete_photo(db: AsyncSession, photo: Photo) -> None:
    variants = await list_variants(db, photo.id)

    # 1) Файлы удаляем заранее и без гарантий
    storage.remove(photo.file_path)
    for variant in variants:
        storage.remove(variant.file_path)

    # 2) Зависимые строки, затем само фото
    comment_ids = select(Comment.id).where(Comment.photo_id == photo.id)
    await db.execute(
        update(CommentReport)
        .where(CommentReport.comment_id.in_(comment_ids))
        .values(comment_id=None)
        .execution_options(synchronize_session=False)
    )
    await db.execute(
        delete(CommentLike)
        .where(CommentLike.comment_id.in_(comment_ids))
        .execution_options(synchronize_session=False)
    )
    await db.execute(delete(Comment).where(Comment.photo_id == photo.id))
    await db.execute(delete(PhotoLike).where(PhotoLike.photo_id == photo.id))
    await db.execute(delete(PhotoStatus).where(PhotoStatus.photo_id == photo.id))
    await db.execute(delete(PhotoVariant).where(PhotoVariant.photo_id == photo.id))
    await db.execute(delete(Photo).where(Photo.id == photo.id))
    await db.commit()


async def _pending_status_or_409(db: AsyncSession, photo: Photo) -> PhotoStatus:
    current = await latest_status(db, photo.id)
    if current is None or current.status != PENDING:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="photo is not pending moderation",
        )
    return current


async def approve(db: AsyncSession, photo: Photo) -> Tuple[Photo, Optional[str]]:
    current = await _pending_status_or_409(db, photo)
    current.status = APPROVED
    await db.commit()
    logger.info("Photo %s approved", photo.id)
    return await get_photo_or_404(db, photo.id)


async def reject(db: AsyncSession, photo: Photo, reason: str) -> Tuple[Photo, Optional[str]]:
    current = await _pending_status_or_409(db, photo)
    current.status = REJECTED
    current.reason = reason
    await db.commit()
    logger.info("Photo %s rejected: %s", photo.id, reason)
    return await get_photo_or_404(db, photo.id)
