"""Client Exceptions - Configuration, validation and API errors."""

from .base import PezeshaException
from .configuration import ConfigurationException
from .validation import ValidationException
from .api import (
    AuthenticationException,
    InvalidResponseException,
    TransportException,
    TransportTimeoutException,
)

__all__ = [
    "PezeshaException",
    "ConfigurationException",
    "ValidationException",
    "AuthenticationException",
    "InvalidResponseException",
    "TransportException",
    "TransportTimeoutException",
]
