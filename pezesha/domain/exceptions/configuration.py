"""Configuration-related exceptions."""

from .base import PezeshaException


class ConfigurationException(PezeshaException):
    """Raised when a required client setting is empty."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
        )
        self.field = field
