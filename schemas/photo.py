from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PhotoVariantRead(BaseModel):
    id: int
    size_name: str
    format: str
    url: str
    file_size: int
    width: int
    height: int
    quality: int
    created_at: datetime

    class Config:
        from_attributes = True


class PhotoRead(BaseModel):
    id: int = Field(..., description="PK в базе данных")
    user_id: int = Field(..., description="ID владельца")
    url: str = Field(..., description="URL изображения")
    file_path: str
    file_size: Optional[int] = None
    mime_type: str
    description: str = ""
    is_public: bool = Field(..., description="Фото видно всем после модерации")
    is_pending: bool = Field(False, description="Фото ждёт решения модератора")
    moderation_status: Optional[str] = Field(None, description="Последний статус модерации")
    likes_count: int = 0
    created_at: datetime = Field(..., description="Дата и время загрузки фотографии")
    updated_at: datetime
    variants: Optional[List[PhotoVariantRead]] = None

    class Config:
        from_attributes = True


class PhotoUpdate(BaseModel):
    description: str = Field("", description="Новое описание")
    is_public: bool = Field(False, description="Публичность фото")


class PhotoRejectRequest(BaseModel):
    reason: str = Field("", description="Причина отклонения")
