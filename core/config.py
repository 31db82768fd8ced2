from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "PhotoHub Backend"
    SERVER_PORT: int = 3000
    SERVER_ENV: str = "development"
    DEBUG: bool = False

    # База данных
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "photohub"
    DATABASE_URL: Optional[str] = None

    # JWT
    JWT_SECRET: str = "your-secret-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440

    # Загрузки
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024

    CORS_ORIGINS: List[str] = ["*"]

    # Параметры пайплайна изображений: объявлены, но обработка не реализована
    IMAGE_THUMB_SIZE: int = 300
    IMAGE_SMALL_SIZE: int = 480
    IMAGE_MEDIUM_SIZE: int = 768
    IMAGE_LARGE_SIZE: int = 1200
    IMAGE_PIPELINE_ON: bool = False
    IMAGE_WEBP_ENABLED: bool = True
    IMAGE_QUALITY: int = 80
    IMAGE_ASYNC_PROCESSING: bool = False
    IMAGE_LIBRARY: str = "bimg"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def image_pipeline(self) -> dict:
        return {
            "enabled": self.IMAGE_PIPELINE_ON,
            "webp_enabled": self.IMAGE_WEBP_ENABLED,
            "quality": self.IMAGE_QUALITY,
            "async_processing": self.IMAGE_ASYNC_PROCESSING,
            "library": self.IMAGE_LIBRARY,
            "sizes": {
                "thumb": self.IMAGE_THUMB_SIZE,
                "small": self.IMAGE_SMALL_SIZE,
                "medium": self.IMAGE_MEDIUM_SIZE,
                "large": self.IMAGE_LARGE_SIZE,
            },
        }


# Создаём глобальный объект, который будем импортировать везде
settings = Settings()
