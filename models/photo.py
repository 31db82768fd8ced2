# models/photo.py
import enum

from sqlalchemy import Column, BigInteger, Integer, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.sql import func

from .base import Base, TimestampMixin


class ModerationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Photo(TimestampMixin, Base):
    __tablename__ = "photos"

    id = Column(BigInteger, primary_key=True, index=True)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    url = Column(String(512), nullable=False)
    file_path = Column(String(512), nullable=False)
    file_size = Column(BigInteger, nullable=True)
    mime_type = Column(String(64), nullable=False)
    description = Column(Text, nullable=False, default="")
    is_public = Column(Boolean, default=False, nullable=False)
    likes_count = Column(BigInteger, default=0, nullable=False)

    def __repr__(self):
        return f"<Photo id={self.id} path={self.file_path}>"


class PhotoStatus(TimestampMixin, Base):
    """Строка модерации. Актуальна только самая свежая по created_at."""

    __tablename__ = "photo_statuses"

    id = Column(BigInteger, primary_key=True, index=True)
    photo_id = Column(BigInteger, ForeignKey("photos.id", ondelete="CASCADE"), index=True, nullable=False)
    status = Column(String(16), default=ModerationStatus.PENDING.value, nullable=False)
    reason = Column(Text, nullable=True)

    def __repr__(self):
        return f"<PhotoStatus photo_id={self.photo_id} status={self.status}>"


class PhotoVariant(Base):
    # Заготовка под ресайзы; генерации вариантов пока нет
    __tablename__ = "photo_variants"

    id = Column(BigInteger, primary_key=True, index=True)
    photo_id = Column(BigInteger, ForeignKey("photos.id", ondelete="CASCADE"), index=True, nullable=False)
    size_name = Column(String(16), nullable=False)
    format = Column(String(16), nullable=False)
    file_path = Column(String(512), nullable=False)
    file_size = Column(BigInteger, nullable=False, default=0)
    width = Column(Integer, nullable=False, default=0)
    height = Column(Integer, nullable=False, default=0)
    quality = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<PhotoVariant photo_id={self.photo_id} size={self.size_name}>"
