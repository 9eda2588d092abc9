import enum


class ActivityCode(str, enum.Enum):
    # ---------------- AUTH ----------------
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"

    # ---------------- QUOTES ----------------
    QUOTE_SUBMITTED = "QUOTE_SUBMITTED"
    UPDATE_QUOTE = "UPDATE_QUOTE"
    APPROVE_QUOTES = "APPROVE_QUOTES"
    REJECT_QUOTES = "REJECT_QUOTES"
    TRASH_QUOTES = "TRASH_QUOTES"
    RESTORE_QUOTES = "RESTORE_QUOTES"
    PURGE_QUOTES = "PURGE_QUOTES"
