"""Loan application payload."""

from pydantic import BaseModel, ConfigDict, StrictStr


class PaymentDetails(BaseModel):
    """Where the disbursed loan is sent."""

    model_config = ConfigDict(extra="allow")

    type: StrictStr
    number: StrictStr
    callback_url: StrictStr


class LoanApplication(BaseModel):
    """
    Body of POST /mfi/v1/borrowers/loans, before channel and pezesha_id are added.

    All amounts travel as strings, exactly as the API expects them.
    """

    model_config = ConfigDict(extra="allow")

    amount: StrictStr
    duration: StrictStr
    interest: StrictStr
    rate: StrictStr
    fee: StrictStr
    payment_details: PaymentDetails
