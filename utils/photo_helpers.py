"""Утилиты для преобразования моделей фото в схемы Pydantic."""
from collections.abc import Iterable
from typing import List, Optional, Sequence, Tuple

from models.photo import ModerationStatus, Photo, PhotoVariant
from schemas.photo import PhotoRead, PhotoVariantRead

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


def normalize_pagination(
    limit: Optional[int], offset: Optional[int], default_limit: int = DEFAULT_LIMIT
) -> Tuple[int, int]:
    """Значения вне допустимого диапазона молча заменяются на значения по умолчанию."""
    if limit is None or limit <= 0 or limit > MAX_LIMIT:
        limit = default_limit
    if offset is None or offset < 0:
        offset = 0
    return limit, offset


def variant_url(file_path: str) -> str:
    return "/" + file_path.lstrip("/")


def to_photo_read(
    photo: Photo,
    moderation_status: Optional[str],
    variants: Optional[Sequence[PhotoVariant]] = None,
) -> PhotoRead:
    """Сконвертировать модель фото в PhotoRead с производными полями модерации."""
    return PhotoRead(
        id=photo.id,
        user_id=photo.user_id,
        url=photo.url,
        file_path=photo.file_path,
        file_size=photo.file_size,
        mime_type=photo.mime_type,
        description=photo.description or "",
        is_public=photo.is_public,
        is_pending=bool(photo.is_public) and moderation_status == ModerationStatus.PENDING.value,
        moderation_status=moderation_status,
        likes_count=photo.likes_count or 0,
        created_at=photo.created_at,
        updated_at=photo.updated_at,
        variants=None if variants is None else [
            PhotoVariantRead(
                id=v.id,
                size_name=v.size_name,
                format=v.format,
                url=variant_url(v.file_path),
                file_size=v.file_size,
                width=v.width,
                height=v.height,
                quality=v.quality,
                created_at=v.created_at,
            )
            for v in variants
        ],
    )


def to_photo_reads(rows: Iterable[Tuple[Photo, Optional[str]]]) -> List[PhotoRead]:
    """Сконвертировать пары (фото, статус) в список PhotoRead."""
    return [to_photo_read(photo, moderation_status) for photo, moderation_status in rows]
