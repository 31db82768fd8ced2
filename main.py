import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.database import engine
from models.base import Base
from utils.storage import storage

from routers.auth import router as auth_router
from routers.photos import router as photos_router
from routers.likes import router as likes_router
from routers.comments import router as comments_router
from routers.admin import router as admin_router
from routers.health import router as health_router

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    description="REST-бэкенд фотохостинга: загрузка, модерация, лайки и комментарии",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

logger = logging.getLogger("uvicorn.error")


@app.middleware("http")
async def log_request_time(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} completed in {process_time:.2f} ms"
    )
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Ошибки валидации входных данных отдаём как 400, а не 422
    errors = exc.errors()
    message = errors[0].get("msg", "invalid request") if errors else "invalid request"
    field = ".".join(str(part) for part in errors[0].get("loc", ())[1:]) if errors else ""
    detail = f"{field}: {message}" if field else message
    return JSONResponse(status_code=400, content={"detail": detail})


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Ошибка БД на %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "database error"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Необработанная ошибка на %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(auth_router, prefix="/api")
app.include_router(photos_router, prefix="/api")
app.include_router(likes_router, prefix="/api")
app.include_router(comments_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(health_router)

app.mount("/uploads", StaticFiles(directory=storage.base_dir), name="uploads")


@app.on_event("startup")
async def on_startup():
    # Создаём все таблицы
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("PhotoHub started in %s mode", settings.SERVER_ENV)


@app.get("/")
async def root():
    return {"message": "PhotoHub Backend", "docs": "/docs"}


@app.on_event("shutdown")
async def shutdown():
    # Закрываем все соединения пула
    await engine.dispose()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.SERVER_PORT, reload=settings.DEBUG)
