from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000, description="Текст комментария")


class CommentRead(BaseModel):
    id: int
    photo_id: int
    user_id: int
    username: str = ""
    text: str
    likes_count: int = 0
    user_liked: bool = Field(False, description="Лайкнул ли комментарий текущий пользователь")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReportCreate(BaseModel):
    reason: str = Field(..., min_length=1, description="Причина жалобы")


class ReportResolve(BaseModel):
    action: str = Field(..., min_length=1, description="'delete': удалить комментарий; 'dismiss': отклонить жалобу")
    admin_note: str = Field("", description="Заметка администратора")


class ReportedComment(BaseModel):
    id: int
    user_id: int
    username: str = ""
    text: str


class ReportRead(BaseModel):
    id: int
    comment_id: Optional[int] = None
    reported_by: int
    reason: str
    status: str
    admin_note: str = ""
    comment: Optional[ReportedComment] = None
    created_at: datetime

    class Config:
        from_attributes = True
