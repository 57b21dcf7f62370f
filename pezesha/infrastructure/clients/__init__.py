"""External API client implementations."""

from .pezesha_client import PezeshaClient
from .session import TokenSession

__all__ = [
    "PezeshaClient",
    "TokenSession",
]
