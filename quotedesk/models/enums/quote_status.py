import enum

class QuoteStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    TRASHED = "trashed"

    @classmethod
    def active(cls) -> list["QuoteStatus"]:
        """Statuses shown in the default moderation view (everything but trash)."""
        return [cls.PENDING, cls.APPROVED, cls.REJECTED]

    @classmethod
    def parse(cls, value: str | None) -> "QuoteStatus | None":
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class QuoteAction(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"
    TRASH = "trash"
    RESTORE = "restore"
    PURGE = "purge"
