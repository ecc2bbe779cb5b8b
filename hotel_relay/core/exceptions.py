"""Custom exception classes for structured error handling."""

from typing import Any


class RelayError(Exception):
    """Base exception for all relay errors."""

    def __init__(self, code: str, message: str, status_code: int = 500) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


class AuthorizationError(RelayError):
    def __init__(self, message: str = "Not authorized for this room") -> None:
        super().__init__(code="NOT_AUTHORIZED", message=message, status_code=403)


class ValidationError(RelayError):
    def __init__(self, message: str = "Invalid payload") -> None:
        super().__init__(code="INVALID_PAYLOAD", message=message, status_code=400)


class ProviderError(RelayError):
    def __init__(self, message: str = "Translation provider request failed") -> None:
        super().__init__(code="PROVIDER_ERROR", message=message, status_code=502)


class RoomNotFoundError(RelayError):
    def __init__(self, message: str = "Room not found") -> None:
        super().__init__(code="ROOM_NOT_FOUND", message=message, status_code=404)


class RateLimitExceededError(RelayError):
    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(code="RATE_LIMIT_EXCEEDED", message=message, status_code=429)
