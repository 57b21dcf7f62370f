"""User registration payload for borrowers, merchants and agents."""

import re
from datetime import date
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator
from pydantic_core import PydanticCustomError

from .base import check_format

DOB_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class UserType(str, Enum):
    """Kind of user being registered with Pezesha."""

    BORROWER = "borrower"
    MERCHANT = "merchant"
    AGENT = "agent"


def _default_geo_location() -> Dict[str, Any]:
    return {"long": "", "lat": ""}


class UserRegistration(BaseModel):
    """
    Body of POST /mfi/v1/borrowers.

    Keys not declared here are sent through unchanged.

    Attributes:
        terms: Whether the user accepted the Pezesha terms
        dob: Date of birth as YYYY-MM-DD, checked against the calendar
        channel: Partner channel, always set by the client
        other_phone_nos: Additional phone numbers
        geo_location: Mapping with long and lat
        meta_data: Free-form partner data
    """

    model_config = ConfigDict(extra="allow")

    terms: StrictBool
    location: StrictStr
    merchant_reg_date: StrictStr
    merchant_id: StrictStr
    email: StrictStr
    dob: StrictStr
    phone: StrictStr
    full_names: StrictStr
    national_id: StrictStr
    channel: StrictStr

    other_phone_nos: List[Any] = Field(default_factory=list)
    geo_location: Dict[str, Any] = Field(default_factory=_default_geo_location)
    meta_data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("dob")
    @classmethod
    def validate_dob(cls, v: str) -> str:
        check_format(v, DOB_PATTERN, "YYYY-MM-DD")
        try:
            date.fromisoformat(v)
        except ValueError as e:
            raise PydanticCustomError("invalid_date", "must be a real calendar date") from e
        return v
