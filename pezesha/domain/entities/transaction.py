"""Merchant transaction history payloads."""

import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator
from pydantic_core import PydanticCustomError

from .base import check_format, is_numeric

MAX_TRANSACTIONS = 200

TRANSACTION_TIME_PATTERN = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}"
)


class OtherDetail(BaseModel):
    """Extra key/value pair attached to a transaction."""

    model_config = ConfigDict(extra="allow")

    key: StrictStr
    value: StrictStr


class Transaction(BaseModel):
    """
    A single historical transaction for credit scoring.

    Attributes:
        transaction_id: Partner's transaction reference
        merchant_id: Merchant the transaction belongs to
        face_amount: Number or numeric string
        transaction_time: YYYY-MM-DD HH:MM:SS
        other_details: Optional ordered key/value pairs
    """

    model_config = ConfigDict(extra="allow")

    transaction_id: StrictStr
    merchant_id: StrictStr
    face_amount: Any
    transaction_time: StrictStr
    other_details: Optional[List[OtherDetail]] = None

    @field_validator("face_amount")
    @classmethod
    def validate_face_amount(cls, v: Any) -> Any:
        if not is_numeric(v):
            raise PydanticCustomError("not_numeric", "must be numeric")
        return v

    @field_validator("transaction_time")
    @classmethod
    def validate_transaction_time(cls, v: str) -> str:
        return check_format(v, TRANSACTION_TIME_PATTERN, "YYYY-MM-DD HH:MM:SS")


class TransactionBatch(BaseModel):
    """Between 1 and 200 transactions uploaded in one request."""

    transactions: List[Transaction]

    @field_validator("transactions", mode="before")
    @classmethod
    def validate_size(cls, v: Any) -> Any:
        # Size is checked before any record is looked at
        if isinstance(v, (list, tuple)):
            if len(v) > MAX_TRANSACTIONS:
                raise PydanticCustomError(
                    "batch_size",
                    "must contain at most {limit} entries",
                    {"limit": MAX_TRANSACTIONS},
                )
            if not v:
                raise PydanticCustomError("batch_size", "cannot be empty")
        return v

    def to_payload(self) -> List[dict]:
        """Serialize records with only the keys the caller supplied."""
        records = []
        for txn in self.transactions:
            exclude = None if "other_details" in txn.model_fields_set else {"other_details"}
            records.append(txn.model_dump(exclude=exclude))
        return records
