"""Error taxonomy shared by every API view.

Services raise these; ``core.api.api_view`` turns them into JSON responses.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_INPUT = "INVALID_INPUT"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    FORBIDDEN = "FORBIDDEN"


@dataclass(eq=False)
class ApiError(Exception):
    """Base error with code, user-safe message and HTTP status."""

    code: ErrorCode
    message: str
    status: int = 400
    retryable: bool = False

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def as_dict(self) -> dict:
        return {
            "error": self.code.value,
            "message": self.message,
            "retryable": self.retryable,
        }


class AuthenticationError(ApiError):
    """Missing, invalid or expired credential. The caller must log in again."""

    def __init__(self, message: str = "Token manquant", *, expired_or_invalid: bool = False) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TOKEN if expired_or_invalid else ErrorCode.AUTHENTICATION_REQUIRED,
            message=message,
            status=403 if expired_or_invalid else 401,
        )


class InvalidInputError(ApiError):
    """Rejected before any write; ``field`` names the offending input."""

    def __init__(self, message: str, field: str = "") -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message, status=400)
        self.field = field

    def as_dict(self) -> dict:
        data = super().as_dict()
        if self.field:
            data["field"] = self.field
        return data


class ForbiddenError(ApiError):
    def __init__(self, message: str = "Accès refusé") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message, status=403)


class ConflictError(ApiError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.CONFLICT, message=message, status=409, retryable=True)


class NotFoundError(ApiError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=message, status=404)


class RateLimitedError(ApiError):
    def __init__(self, message: str = "Trop de tentatives. Réessayez dans 15 minutes.") -> None:
        super().__init__(code=ErrorCode.RATE_LIMITED, message=message, status=429, retryable=True)


class TransientStoreError(ApiError):
    """Database unreachable or timed out; safe to retry."""

    def __init__(self, message: str = "Service momentanément indisponible, réessayez.") -> None:
        super().__init__(code=ErrorCode.STORE_UNAVAILABLE, message=message, status=503, retryable=True)


class UpstreamUnavailableError(ApiError):
    def __init__(self, message: str = "Vérification impossible pour le moment, réessayez.") -> None:
        super().__init__(code=ErrorCode.UPSTREAM_UNAVAILABLE, message=message, status=503, retryable=True)
