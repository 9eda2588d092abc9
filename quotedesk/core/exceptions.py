from fastapi import HTTPException
from quotedesk.constants.error_codes import ErrorCode


class AppException(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: ErrorCode,
        details: dict | None = None,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.error_code = error_code
        self.details = details


class SecurityCheckFailed(AppException):
    """Form or action token is missing, expired, or was issued for something else."""

    def __init__(self):
        super().__init__(403, "Security check failed.", ErrorCode.SECURITY_CHECK_FAILED)


class PermissionDenied(AppException):
    def __init__(self, message: str = "You do not have permission to manage these quotes."):
        super().__init__(403, message, ErrorCode.PERMISSION_DENIED)


class QuoteNotFound(AppException):
    def __init__(self, quote_id: int):
        super().__init__(
            404,
            "Quote not found",
            ErrorCode.QUOTE_NOT_FOUND,
            details={"quote_id": quote_id},
        )
