from datetime import datetime

from pydantic import BaseModel, Field


class UserRead(BaseModel):
    id: int = Field(..., description="PK в базе данных")
    email: str = Field(..., description="Email пользователя")
    username: str = Field(..., description="Имя пользователя")
    is_admin: bool = Field(False, description="Признак администратора")
    created_at: datetime = Field(..., description="Дата и время создания аккаунта")
    updated_at: datetime

    class Config:
        from_attributes = True
