"""M-Pesa STK push payload."""

import re

from pydantic import BaseModel, StrictStr, field_validator
from pydantic_core import PydanticCustomError

from .base import check_format, is_numeric

# Kenyan MSISDN with country code
PHONE_PATTERN = re.compile(r"\+254[0-9]{9}")


class StkPushRequest(BaseModel):
    """Payment prompt pushed to the merchant's phone."""

    amount: StrictStr
    phone: StrictStr
    account: StrictStr

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: str) -> str:
        if not is_numeric(v):
            raise PydanticCustomError("not_numeric", "must be numeric")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return check_format(v, PHONE_PATTERN, "+254XXXXXXXXX")
