"""
Лайки фото и комментариев.

Вставка лайка идемпотентна: повторный лайк игнорируется (существующая строка
или нарушение уникального ключа). likes_count каждый раз пересчитывается
через COUNT(*) в той же транзакции, что и вставка/удаление. Перед этим
строка фото или комментария блокируется (SELECT ... FOR UPDATE), чтобы
параллельные лайки в READ COMMITTED не теряли друг друга при пересчёте.
"""
import logging

from sqlalchemy import select, delete, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.id_generator import INSERT_ATTEMPTS
from models.comment import Comment
from models.like import CommentLike, PhotoLike
from models.photo import Photo

logger = logging.getLogger("uvicorn.error")


def lock_photo(photo_id: int):
    return select(Photo.id).where(Photo.id == photo_id).with_for_update()


def lock_comment(comment_id: int):
    return select(Comment.id).where(Comment.id == comment_id).with_for_update()


async def _recount_photo_likes(db: AsyncSession, photo_id: int) -> None:
    await db.execute(
        update(Photo)
        .where(Photo.id == photo_id)
        .values(
            likes_count=select(func.count(PhotoLike.id))
            .where(PhotoLike.photo_id == photo_id)
            .scalar_subquery()
        )
        .execution_options(synchronize_session=False)
    )


async def _recount_comment_likes(db: AsyncSession, comment_id: int) -> None:
    await db.execute(
        update(Comment)
        .where(Comment.id == comment_id)
        .values(
            likes_count=select(func.count(CommentLike.id))
            .where(CommentLike.comment_id == comment_id)
            .scalar_subquery()
        )
        .execution_options(synchronize_session=False)
    )


async def is_photo_liked(db: AsyncSession, photo_id: int, user_id: int) -> bool:
    res = await db.execute(
        select(func.count(PhotoLike.id)).where(
            PhotoLike.photo_id == photo_id,
            PhotoLike.user_id == user_id,
        )
    )
    return res.scalar_one() > 0


async def is_comment_liked(db: AsyncSession, comment_id: int, user_id: int) -> bool:
    res = await db.execute(
        select(func.count(CommentLike.id)).where(
            CommentLike.comment_id == comment_id,
            CommentLike.user_id == user_id,
        )
    )
    return res.scalar_one() > 0


async def _insert_like(db: AsyncSession, lock_stmt, already_liked, make_like) -> None:
    """
    Вставляет лайк под блокировкой строки фото/комментария.

    IntegrityError бывает в двух случаях: лайк уже поставлен параллельным
    запросом или случайный id оказался занят. После отката проверяем заново:
    в первом случае выходим, во втором повторяем вставку с новым id.
    """
    last_error = None
    for _ in range(INSERT_ATTEMPTS):
        await db.execute(lock_stmt)
        if await already_liked():
            return
        db.add(make_like())
        try:
            await db.flush()
            return
        except IntegrityError as exc:
            await db.rollback()
            last_error = exc
    logger.error("Like insert failed after %s attempts", INSERT_ATTEMPTS)
    raise last_error


async def like_photo(db: AsyncSession, photo_id: int, user_id: int) -> None:
    await _insert_like(
        db,
        lock_photo(photo_id),
        lambda: is_photo_liked(db, photo_id, user_id),
        lambda: PhotoLike(photo_id=photo_id, user_id=user_id),
    )
    await _recount_photo_likes(db, photo_id)
    await db.commit()


async def unlike_photo(db: AsyncSession, photo_id: int, user_id: int) -> None:
    await db.execute(lock_photo(photo_id))
    await db.execute(
        delete(PhotoLike).where(
            PhotoLike.photo_id == photo_id,
            PhotoLike.user_id == user_id,
        )
    )
    await _recount_photo_likes(db, photo_id)
    await db.commit()


async def like_comment(db: AsyncSession, comment_id: int, user_id: int) -> None:
    await _insert_like(
        db,
        lock_comment(comment_id),
        lambda: is_comment_liked(db, comment_id, user_id),
        lambda: CommentLike(comment_id=comment_id, user_id=user_id),
    )
    await _recount_comment_likes(db, comment_id)
    await db.commit()


async def unlike_comment(db: AsyncSession, comment_id: int, user_id: int) -> None:
    await db.execute(lock_comment(comment_id))
    await db.execute(
        delete(CommentLike).where(
            CommentLike.comment_id == comment_id,
            CommentLike.user_id == user_id,
        )
    )
    await _recount_comment_likes(db, comment_id)
    await db.commit()
