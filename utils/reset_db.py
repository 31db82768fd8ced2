"""Пересоздание схемы PhotoHub: python -m utils.reset_db"""
import asyncio
import logging

from core.database import engine
from models.base import Base
# регистрируем все таблицы в metadata
import models.comment  # noqa: F401
import models.like  # noqa: F401
import models.photo  # noqa: F401
import models.user  # noqa: F401

log = logging.getLogger(__name__)


async def async_reset_database():
    log.info("Dropping all tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all, checkfirst=True)

    log.info("Recreating all tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    await engine.dispose()
    log.info("Database schema has been reset.")


def reset_database():
    asyncio.run(async_reset_database())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    reset_database()
