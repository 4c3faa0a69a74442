"""
Domain errors for the booking / payment / settlement pipeline.

Each error carries the HTTP status it maps to; the handler registered in
``app.main`` renders them as ``{"success": false, "error": <message>}``.
"""
from fastapi import status


class BookingPlatformError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


class ValidationError(BookingPlatformError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request"


class AuthenticationError(BookingPlatformError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Unauthorized"


class AuthorizationError(BookingPlatformError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class NotFoundError(BookingPlatformError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class InvalidStateError(BookingPlatformError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Operation not allowed in the current booking state"


class ExternalServiceError(BookingPlatformError):
    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "Payment provider unavailable"


class InternalError(BookingPlatformError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"
