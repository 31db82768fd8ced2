# models/like.py
from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from .base import Base


class PhotoLike(Base):
    __tablename__ = "photo_likes"
    __table_args__ = (UniqueConstraint("photo_id", "user_id", name="uq_photo_likes_photo_user"),)

    id = Column(BigInteger, primary_key=True, index=True)
    photo_id = Column(BigInteger, ForeignKey("photos.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<PhotoLike {self.user_id}→{self.photo_id}>"


class CommentLike(Base):
    __tablename__ = "comment_likes"
    __table_args__ = (UniqueConstraint("comment_id", "user_id", name="uq_comment_likes_comment_user"),)

    id = Column(BigInteger, primary_key=True, index=True)
    comment_id = Column(BigInteger, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<CommentLike {self.user_id}→{self.comment_id}>"
