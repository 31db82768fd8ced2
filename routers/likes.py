from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import get_current_user
from models.user import User
from schemas.comment import CommentRead
from schemas.like import LikeStatus
from schemas.photo import PhotoRead
from services import comments as comment_service
from services import likes as like_service
from services import photos as photo_service
from utils.photo_helpers import to_photo_read

router = APIRouter(tags=["Likes"])


@router.post(
    "/photos/{photo_id}/like",
    response_model=PhotoRead,
    status_code=status.HTTP_200_OK,
    summary="Поставить лайк фото (повторный лайк ничего не меняет)",
)
async def like_photo(
    photo_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PhotoRead:
    user_id = current_user.id

    await photo_service.get_visible_photo_or_404(db, photo_id, current_user)
    await like_service.like_photo(db, photo_id, user_id)

    photo, moderation_status = await photo_service.get_photo_or_404(db, photo_id)
    return to_photo_read(photo, moderation_status)


@router.delete(
    "/photos/{photo_id}/like",
    response_model=PhotoRead,
    summary="Убрать лайк с фото",
)
async def unlike_photo(
    photo_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PhotoRead:
    user_id = current_user.id

    await photo_service.get_photo_or_404(db, photo_id)
    await like_service.unlike_photo(db, photo_id, user_id)

    photo, moderation_status = await photo_service.get_photo_or_404(db, photo_id)
    return to_photo_read(photo, moderation_status)


@router.get(
    "/photos/{photo_id}/like",
    response_model=LikeStatus,
    summary="Лайкнул ли текущий пользователь фото",
)
async def photo_like_status(
    photo_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> LikeStatus:
    user_id = current_user.id

    await photo_service.get_visible_photo_or_404(db, photo_id, current_user)
    liked = await like_service.is_photo_liked(db, photo_id, user_id)
    return LikeStatus(liked=liked)


@router.post(
    "/comments/{comment_id}/like",
    response_model=CommentRead,
    summary="Поставить лайк комментарию",
)
async def like_comment(
    comment_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CommentRead:
    user_id = current_user.id

    comment = await comment_service.get_comment_or_404(db, comment_id)
    await photo_service.get_visible_photo_or_404(db, comment.photo_id, current_user)
    await like_service.like_comment(db, comment_id, user_id)

    comment = await comment_service.get_comment_or_404(db, comment_id)
    return await comment_service.read_comment(db, comment, user_id)


@router.delete(
    "/comments/{comment_id}/like",
    response_model=CommentRead,
    summary="Убрать лайк с комментария",
)
async def unlike_comment(
    comment_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CommentRead:
    user_id = current_user.id

    comment = await comment_service.get_comment_or_404(db, comment_id)
    await photo_service.get_visible_photo_or_404(db, comment.photo_id, current_user)
    await like_service.unlike_comment(db, comment_id, user_id)

    comment = await comment_service.get_comment_or_404(db, comment_id)
    return await comment_service.read_comment(db, comment, user_id)
