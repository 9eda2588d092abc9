from sqlalchemy import Column, Integer, String, Text, Enum as SAEnum, Index
from quotedesk.core.db import Base
from quotedesk.models.base.mixins import TimestampMixin, UpdatedByMixin
from quotedesk.models.enums.quote_status import QuoteStatus
from quotedesk.models.users.user_models import User  # noqa: F401


class Quote(Base, TimestampMixin, UpdatedByMixin):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    email = Column(String(255), nullable=False)
    service = Column(String(255), nullable=False)
    status = Column(SAEnum(QuoteStatus, name="quote_status"), nullable=False, default=QuoteStatus.PENDING, index=True)

    __table_args__ = (Index("ix_quotes_status_created", "status", "created_at"),)

    def __repr__(self):
        return f"<Quote id={self.id} status={self.status} service={self.service}>"
