"""
Pezesha - Python client for the Pezesha lending API

A synchronous HTTP client that handles authentication, borrower
registration, loan lifecycle calls, transaction uploads and
M-Pesa STK push requests against the Pezesha platform.
"""

__version__ = "0.1.0"

from pezesha.domain.entities import UserType
from pezesha.domain.exceptions import (
    AuthenticationException,
    ConfigurationException,
    InvalidResponseException,
    PezeshaException,
    TransportException,
    TransportTimeoutException,
    ValidationException,
)
from pezesha.infrastructure.clients import PezeshaClient

__all__ = [
    "__version__",
    "PezeshaClient",
    "UserType",
    "PezeshaException",
    "ConfigurationException",
    "AuthenticationException",
    "ValidationException",
    "InvalidResponseException",
    "TransportException",
    "TransportTimeoutException",
]
