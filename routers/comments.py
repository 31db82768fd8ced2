import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import ensure_allowed
from core.security import get_current_user, get_current_user_optional
from models.user import User
from schemas.comment import CommentCreate, CommentRead, ReportCreate, ReportRead
from services import comments as comment_service
from services import photos as photo_service

router = APIRouter(tags=["comments"])
logger = logging.getLogger("uvicorn.error")


@router.get(
    "/photos/{photo_id}/comments",
    response_model=List[CommentRead],
    summary="Комментарии к фото, новые сверху",
)
async def list_comments(
    photo_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
) -> List[CommentRead]:
    await photo_service.get_visible_photo_or_404(db, photo_id, current_user)
    viewer_id = current_user.id if current_user else None
    return await comment_service.list_for_photo(db, photo_id, viewer_id)


@router.post(
    "/photos/{photo_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Оставить комментарий к фото",
)
async def create_comment(
    payload: CommentCreate,
    photo_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CommentRead:
    user_id = current_user.id
    username = current_user.username

    text = payload.text.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="comment text is required")

    await photo_service.get_visible_photo_or_404(db, photo_id, current_user)
    comment = await comment_service.create_comment(db, photo_id, user_id, text)
    return comment_service.to_comment_read(comment, username)


@router.get(
    "/comments/{comment_id}",
    response_model=CommentRead,
    summary="Получить комментарий по ID",
)
async def get_comment(
    comment_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
) -> CommentRead:
    comment = await comment_service.get_comment_or_404(db, comment_id)
    await photo_service.get_visible_photo_or_404(db, comment.photo_id, current_user)
    viewer_id = current_user.id if current_user else None
    return await comment_service.read_comment(db, comment, viewer_id)


@router.post(
    "/comments/{comment_id}/report",
    response_model=ReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Пожаловаться на комментарий",
)
async def report_comment(
    payload: ReportCreate,
    comment_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReportRead:
    user_id = current_user.id

    reason = payload.reason.strip()
    if not reason:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="reason is required")

    comment = await comment_service.get_comment_or_404(db, comment_id)
    await photo_service.get_visible_photo_or_404(db, comment.photo_id, current_user)
    report = await comment_service.report_comment(db, comment_id, user_id, reason)
    logger.info("Comment %s reported by user %s", comment_id, user_id)
    return await comment_service.read_report(db, report)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Удалить комментарий (автор или админ)",
)
async def delete_comment(
    comment_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = await comment_service.get_comment_or_404(db, comment_id)
    ensure_allowed(current_user, comment.user_id, detail="you can only delete your own comments")

    await comment_service.delete_comment(db, comment_id)
    return
