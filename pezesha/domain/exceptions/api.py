"""Pezesha API-related exceptions."""

from .base import PezeshaException


class AuthenticationException(PezeshaException):
    """Raised when a token cannot be obtained."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="AUTHENTICATION_FAILED",
        )


class InvalidResponseException(PezeshaException):
    """Raised when the API answers with a body of unexpected shape."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_RESPONSE",
        )


class TransportException(PezeshaException):
    """Raised when the request fails on the wire or returns a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="TRANSPORT_ERROR",
        )
        self.status_code = status_code


class TransportTimeoutException(TransportException):
    """Raised when the API does not answer within the configured timeout."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=None,
        )
        self.code = "TRANSPORT_TIMEOUT"
