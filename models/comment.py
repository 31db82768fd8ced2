# models/comment.py
import enum

from sqlalchemy import Column, BigInteger, String, ForeignKey, Text

from .base import Base, TimestampMixin


class ReportStatus(str, enum.Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


class Comment(TimestampMixin, Base):
    __tablename__ = "comments"

    id = Column(BigInteger, primary_key=True, index=True)
    photo_id = Column(BigInteger, ForeignKey("photos.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    likes_count = Column(BigInteger, default=0, nullable=False)

    def __repr__(self):
        return f"<Comment id={self.id} photo_id={self.photo_id}>"


class CommentReport(TimestampMixin, Base):
    __tablename__ = "comment_reports"

    id = Column(BigInteger, primary_key=True, index=True)
    # После удаления комментария по жалобе ссылка обнуляется, сама жалоба остаётся
    comment_id = Column(BigInteger, ForeignKey("comments.id", ondelete="SET NULL"), index=True, nullable=True)
    reported_by = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String(16), default=ReportStatus.PENDING.value, nullable=False)
    admin_note = Column(Text, nullable=True)

    def __repr__(self):
        return f"<CommentReport id={self.id} comment_id={self.comment_id} status={self.status}>"
