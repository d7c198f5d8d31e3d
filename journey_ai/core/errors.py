from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class APIError(HTTPException):
    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.details = details


class NotFoundError(APIError):
    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_404_NOT_FOUND, "NOT_FOUND", message, details)


class ValidationError(APIError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message, details)


class CredentialMissingError(APIError):
    """Raised before any network call when a required API key has not been configured."""

    def __init__(self, setting: str, message: Optional[str] = None):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            "CREDENTIAL_MISSING",
            message or f"{setting} is required. Add it in settings before continuing.",
            {"field": setting},
        )
        self.setting = setting


class ConflictError(APIError):
    def __init__(self, message: str = "A request is already in progress", details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_409_CONFLICT, "BUSY", message, details)


class UpstreamServiceError(APIError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_502_BAD_GATEWAY, "UPSTREAM_ERROR", message, details)


class EmptyModelReplyError(UpstreamServiceError):
    """The model answered successfully but the reply carried no text (e.g. a blocked candidate)."""


def error_content(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"error": {"code": code, "message": message, "details": details}}
