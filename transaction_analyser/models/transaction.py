"""
Transaction Record Model

A transaction moves `amount` from one account to another.
Two kinds exist:
1. PAYMENT - money actually moved
2. REVERSAL - cancels an earlier payment, referenced by id

DESIGN DECISION: A reversal is an additional record, never a mutation
of the payment it cancels. Records are frozen once constructed.
"""

import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# Fixed timestamp format used by both the ledger file and query arguments.
DATE_TIME_FORMAT = "%d/%m/%Y %H:%M:%S"

# strptime accepts single digit fields; the ledger format does not.
_DATE_TIME_PATTERN = re.compile(r"\d{2}/\d{2}/\d{4} \d{2}:\d{2}:\d{2}")

# Plain decimal literal; Decimal() also takes underscores, NaN and Infinity.
_AMOUNT_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def parse_timestamp(text: str) -> datetime:
    """
    Parse a `dd/MM/yyyy HH:mm:ss` timestamp.

    Raises:
        ValueError: If the text does not match the fixed pattern exactly
    """
    value = text.strip()
    if not _DATE_TIME_PATTERN.fullmatch(value):
        raise ValueError(
            f"Timestamp '{text}' does not match format dd/MM/yyyy HH:mm:ss"
        )
    return datetime.strptime(value, DATE_TIME_FORMAT)


def format_timestamp(value: datetime) -> str:
    """Render a datetime in the ledger's fixed format."""
    return value.strftime(DATE_TIME_FORMAT)


class TransactionType(str, Enum):
    """
    Supported transaction types.

    Matching is case-sensitive: only the exact upper-case names are valid.
    """
    PAYMENT = "PAYMENT"
    REVERSAL = "REVERSAL"


class Transaction(BaseModel):
    """
    A single ledger record.

    CRITICAL: `related_transaction` is present for REVERSAL records only.
    A payment carrying a related id, or a reversal without one, is rejected.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
    )

    transaction_id: str = Field(
        ...,
        description="Unique transaction identifier"
    )
    from_account_id: str = Field(
        ...,
        description="Account the amount is taken from"
    )
    to_account_id: str = Field(
        ...,
        description="Account the amount is credited to"
    )
    created_at: datetime = Field(
        ...,
        description="Creation time, no timezone"
    )
    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Exact decimal amount"
    )
    transaction_type: TransactionType = Field(
        ...,
        description="PAYMENT or REVERSAL"
    )
    related_transaction: Optional[str] = Field(
        default=None,
        description="Id of the payment a reversal cancels"
    )

    @field_validator('created_at', mode='before')
    @classmethod
    def parse_created_at(cls, v):
        """Accept ledger formatted strings as well as datetimes."""
        if isinstance(v, str):
            return parse_timestamp(v)
        return v

    @field_validator('amount', mode='before')
    @classmethod
    def validate_amount_literal(cls, v):
        if isinstance(v, str) and not _AMOUNT_PATTERN.fullmatch(v.strip()):
            raise ValueError(f"Amount '{v}' is not a decimal number")
        return v

    @field_validator('related_transaction', mode='before')
    @classmethod
    def empty_related_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode='after')
    def validate_related_transaction(self) -> 'Transaction':
        """A related id is required for reversals and forbidden otherwise."""
        if self.transaction_type == TransactionType.REVERSAL:
            if self.related_transaction is None:
                raise ValueError("Reversal transaction requires a related transaction id")
        elif self.related_transaction is not None:
            raise ValueError("Payment transaction cannot reference a related transaction")
        return self

    @property
    def is_payment(self) -> bool:
        return self.transaction_type == TransactionType.PAYMENT

    @property
    def is_reversal(self) -> bool:
        return self.transaction_type == TransactionType.REVERSAL

    def involves(self, account_id: str) -> bool:
        """True if the account is on either side of this transaction."""
        return account_id == self.from_account_id or account_id == self.to_account_id
