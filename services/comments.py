"""Комментарии и жалобы на них."""
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import select, delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from models.comment import Comment, CommentReport, ReportStatus
from models.like import CommentLike
from models.user import User
from schemas.comment import CommentRead, ReportRead, ReportedComment

logger = logging.getLogger("uvicorn.error")

RESOLVE_ACTIONS = ("delete", "dismiss")


async def _liked_ids(db: AsyncSession, comment_ids: List[int], viewer_id: Optional[int]) -> set:
    if not viewer_id or not comment_ids:
        return set()
    res = await db.execute(
        select(CommentLike.comment_id).where(
            CommentLike.comment_id.in_(comment_ids),
            CommentLike.user_id == viewer_id,
        )
    )
    return {row[0] for row in res.all()}


def to_comment_read(comment: Comment, username: Optional[str], user_liked: bool = False) -> CommentRead:
    return CommentRead(
        id=comment.id,
        photo_id=comment.photo_id,
        user_id=comment.user_id,
        username=username or "",
        text=comment.text,
        likes_count=comment.likes_count or 0,
        user_liked=user_liked,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
    )


async def get_comment(db: AsyncSession, comment_id: int) -> Optional[Comment]:
    res = await db.execute(
        select(Comment)
        .where(Comment.id == comment_id)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one_or_none()


async def get_comment_or_404(db: AsyncSession, comment_id: int) -> Comment:
    comment = await get_comment(db, comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="comment not found")
    return comment


async def read_comment(db: AsyncSession, comment: Comment, viewer_id: Optional[int] = None) -> CommentRead:
    username = (
        await db.execute(select(User.username).where(User.id == comment.user_id))
    ).scalar_one_or_none()
    liked = await _liked_ids(db, [comment.id], viewer_id)
    return to_comment_read(comment, username, comment.id in liked)


async def create_comment(db: AsyncSession, photo_id: int, user_id: int, text: str) -> Comment:
    comment = Comment(photo_id=photo_id, user_id=user_id, text=text, likes_count=0)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return comment


async def list_for_photo(db: AsyncSession, photo_id: int, viewer_id: Optional[int]) -> List[CommentRead]:
    res = await db.execute(
        select(Comment, User.username)
        .join(User, User.id == Comment.user_id)
        .where(Comment.photo_id == photo_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    rows = res.all()
    liked = await _liked_ids(db, [c.id for c, _ in rows], viewer_id)
    return [to_comment_read(c, username, c.id in liked) for c, username in rows]


async def delete_comment(db: AsyncSession, comment_id: int, commit: bool = True) -> None:
    # Жалобы сохраняем, но отвязываем от удалённого комментария
    await db.execute(
        update(CommentReport)
        .where(CommentReport.comment_id == comment_id)
        .values(comment_id=None)
        .execution_options(synchronize_session=False)
    )
    await db.execute(delete(CommentLike).where(CommentLike.comment_id == comment_id))
    await db.execute(delete(Comment).where(Comment.id == comment_id))
    if commit:
        await db.commit()


async def report_comment(db: AsyncSession, comment_id: int, reporter_id: int, reason: str) -> CommentReport:
    report = CommentReport(
        comment_id=comment_id,
        reported_by=reporter_id,
        reason=reason,
        status=ReportStatus.PENDING.value,
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)
    return report


async def _to_report_reads(db: AsyncSession, reports: List[CommentReport]) -> List[ReportRead]:
    comment_ids = [r.comment_id for r in reports if r.comment_id is not None]
    comments = {}
    if comment_ids:
        res = await db.execute(
            select(Comment, User.username)
            .join(User, User.id == Comment.user_id)
            .where(Comment.id.in_(comment_ids))
        )
        comments = {c.id: (c, username) for c, username in res.all()}

    output: List[ReportRead] = []
    for r in reports:
        reported = None
        if r.comment_id in comments:
            c, username = comments[r.comment_id]
            reported = ReportedComment(id=c.id, user_id=c.user_id, username=username or "", text=c.text)
        output.append(
            ReportRead(
                id=r.id,
                comment_id=r.comment_id,
                reported_by=r.reported_by,
                reason=r.reason,
                status=r.status,
                admin_note=r.admin_note or "",
                comment=reported,
                created_at=r.created_at,
            )
        )
    return output


async def read_report(db: AsyncSession, report: CommentReport) -> ReportRead:
    return (await _to_report_reads(db, [report]))[0]


async def list_reports(db: AsyncSession, report_status: str) -> List[ReportRead]:
    res = await db.execute(
        select(CommentReport)
        .where(CommentReport.status == report_status)
        .order_by(CommentReport.created_at.desc(), CommentReport.id.desc())
    )
    return await _to_report_reads(db, list(res.scalars().all()))


async def get_report_or_404(db: AsyncSession, report_id: int) -> CommentReport:
    report = await db.get(CommentReport, report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="report not found")
    return report


async def resolve_report(db: AsyncSession, report: CommentReport, action: str, admin_note: str) -> CommentReport:
    """
    action="delete": удалить комментарий и закрыть жалобу,
    action="dismiss": просто закрыть жалобу с заметкой.
    """
    if action not in RESOLVE_ACTIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="invalid action. allowed: delete, dismiss",
        )

    comment_id = report.comment_id
    if action == "delete" and comment_id is not None:
        await delete_comment(db, comment_id, commit=False)

    await db.execute(
        update(CommentReport)
        .where(CommentReport.id == report.id)
        .values(status=ReportStatus.RESOLVED.value, admin_note=admin_note)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    logger.info("Comment report %s resolved with action=%s", report.id, action)

    res = await db.execute(
        select(CommentReport)
        .where(CommentReport.id == report.id)
        .execution_options(populate_existing=True)
    )
    return res.scalar_one()
