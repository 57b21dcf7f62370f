"""Input validation exceptions."""

from .base import PezeshaException


class ValidationException(PezeshaException):
    """Raised when caller-supplied data fails validation before a request is sent."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
        )
        self.field = field
