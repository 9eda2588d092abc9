from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index
from quotedesk.core.db import Base
from quotedesk.models.base.mixins import TimestampMixin


class UserActivity(Base, TimestampMixin):
    """
    Append-only audit feed. Staff actions carry the acting user; public quote
    submissions are recorded with no user and the "public" snapshot.
    """

    __tablename__ = "user_activity"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    username_snapshot = Column(String(150), nullable=False, index=True)
    code = Column(String(50), nullable=False, index=True)
    message = Column(Text, nullable=False)

    __table_args__ = (Index("ix_user_activity_code_created", "code", "created_at"),)

    def __repr__(self):
        return f"<UserActivity id={self.id} code={self.code} user={self.username_snapshot}>"
