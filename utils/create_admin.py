"""
Создание администратора или выдача прав существующему пользователю.

    python -m utils.create_admin admin@example.com secret123 [username]
"""
import argparse
import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import AsyncSessionLocal, engine
from core.security import get_password_hash
from models.base import Base
from models.user import User
import models.comment  # noqa: F401
import models.like  # noqa: F401
import models.photo  # noqa: F401

log = logging.getLogger(__name__)


async def ensure_admin(db: AsyncSession, email: str, password: str, username: str) -> User:
    """Возвращает админа с этим email, создавая его при необходимости."""
    res = await db.execute(select(User).where(User.email == email))
    user = res.scalar_one_or_none()

    if user:
        if not user.is_admin:
            user.is_admin = True
            await db.commit()
            log.info("Existing user %s promoted to admin", email)
        else:
            log.info("User %s is already an admin", email)
        return user

    user = User(
        email=email,
        username=username,
        password_hash=get_password_hash(password),
        is_admin=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    log.info("Admin %s created with id=%s", email, user.id)
    return user


async def main(email: str, password: str, username: str) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as db:
        await ensure_admin(db, email, password, username)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description="Create or promote a PhotoHub admin")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("username", nargs="?", default="admin")
    args = parser.parse_args()
    asyncio.run(main(args.email, args.password, args.username))
