"""Domain Entities - Request payloads sent to the Pezesha API."""

from .base import require_flag, require_page, require_text, validate_payload
from .loan import LoanApplication, PaymentDetails
from .payment import StkPushRequest
from .transaction import MAX_TRANSACTIONS, OtherDetail, Transaction, TransactionBatch
from .user import UserRegistration, UserType

__all__ = [
    "validate_payload",
    "require_text",
    "require_flag",
    "require_page",
    "LoanApplication",
    "PaymentDetails",
    "StkPushRequest",
    "MAX_TRANSACTIONS",
    "OtherDetail",
    "Transaction",
    "TransactionBatch",
    "UserRegistration",
    "UserType",
]
