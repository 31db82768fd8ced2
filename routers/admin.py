import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.permissions import require_admin
from models.user import User
from schemas.comment import ReportRead, ReportResolve
from schemas.photo import PhotoRead, PhotoRejectRequest
from services import comments as comment_service
from services import photos as photo_service
from utils.photo_helpers import normalize_pagination, to_photo_read, to_photo_reads

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger("uvicorn.error")

PENDING_LIMIT = 50


@router.get(
    "/photos/pending",
    response_model=List[PhotoRead],
    summary="Публичные фото, ожидающие модерации",
)
async def pending_photos(
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> List[PhotoRead]:
    limit, offset = normalize_pagination(limit, offset, default_limit=PENDING_LIMIT)
    rows = await photo_service.list_pending(db, limit, offset)
    return to_photo_reads(rows)


@router.post(
    "/photos/{photo_id}/approve",
    response_model=PhotoRead,
    summary="Одобрить фото (только из pending)",
)
async def approve_photo(
    photo_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> PhotoRead:
    admin_id = admin.id
    photo, _ = await photo_service.get_photo_or_404(db, photo_id)
    photo, moderation_status = await photo_service.approve(db, photo)
    logger.info("Admin %s approved photo %s", admin_id, photo_id)
    return to_photo_read(photo, moderation_status)


@router.post(
    "/photos/{photo_id}/reject",
    response_model=PhotoRead,
    summary="Отклонить фото с причиной (только из pending)",
)
async def reject_photo(
    photo_id: int = Path(..., gt=0),
    payload: Optional[PhotoRejectRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> PhotoRead:
    admin_id = admin.id
    reason = payload.reason if payload else ""

    photo, _ = await photo_service.get_photo_or_404(db, photo_id)
    photo, moderation_status = await photo_service.reject(db, photo, reason)
    logger.info("Admin %s rejected photo %s", admin_id, photo_id)
    return to_photo_read(photo, moderation_status)


@router.get(
    "/comment-reports",
    response_model=List[ReportRead],
    summary="Жалобы на комментарии по статусу",
)
async def comment_reports(
    report_status: Literal["pending", "resolved"] = Query("pending", alias="status"),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> List[ReportRead]:
    return await comment_service.list_reports(db, report_status)


@router.post(
    "/comment-reports/{report_id}/resolve",
    response_model=ReportRead,
    summary="Закрыть жалобу: delete удаляет комментарий, dismiss закрывает без действий",
)
async def resolve_comment_report(
    payload: ReportResolve,
    report_id: int = Path(..., gt=0),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ReportRead:
    admin_id = admin.id

    report = await comment_service.get_report_or_404(db, report_id)
    report = await comment_service.resolve_report(db, report, payload.action, payload.admin_note)
    logger.info("Admin %s resolved report %s with action=%s", admin_id, report_id, payload.action)
    return await comment_service.read_report(db, report)
