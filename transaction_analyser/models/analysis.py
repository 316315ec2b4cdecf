"""
Analysis Models

Inputs and outputs of a balance query:
- AnalysisQuery: validated account id and closed date interval
- TransactionGroups: relevant records partitioned by type
- TransactionsAnalysis: relative balance plus contributing payments

DESIGN DECISION: Query arguments are validated before any record is
touched. A malformed argument is an ArgumentError, never an empty result.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from transaction_analyser.models.transaction import (
    Transaction,
    format_timestamp,
    parse_timestamp,
)


class ArgumentError(Exception):
    """Query arguments are structurally invalid."""

    def __init__(self, argument: str, message: str):
        self.argument = argument
        super().__init__(message)


class AnalysisQuery(BaseModel):
    """
    A balance query for one account over [date_from, date_to].

    date_from > date_to is allowed; such a query simply matches nothing.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    account_id: str = Field(
        ...,
        min_length=1,
        description="Account to compute the balance for"
    )
    date_from: datetime = Field(
        ...,
        description="Inclusive start of the range"
    )
    date_to: datetime = Field(
        ...,
        description="Inclusive end of the range"
    )

    @field_validator('date_from', 'date_to', mode='before')
    @classmethod
    def parse_dates(cls, v):
        if isinstance(v, str):
            return parse_timestamp(v)
        return v

    @classmethod
    def from_arguments(
        cls,
        account_id: str,
        date_from: str,
        date_to: str,
    ) -> 'AnalysisQuery':
        """
        Build a query from raw command line strings.

        Raises:
            ArgumentError: Naming the first invalid argument
        """
        try:
            return cls(account_id=account_id, date_from=date_from, date_to=date_to)
        except ValidationError as e:
            error = e.errors()[0]
            argument = str(error["loc"][0]) if error["loc"] else "arguments"
            raise ArgumentError(
                argument,
                f"Invalid {argument}: {error['msg']}",
            ) from e


class TransactionGroups(BaseModel):
    """
    Relevant records split into the only two kinds that exist.

    Either group may be empty.
    """
    model_config = ConfigDict(frozen=True)

    payments: tuple[Transaction, ...] = ()
    reversals: tuple[Transaction, ...] = ()


class TransactionsAnalysis(BaseModel):
    """Result of one balance query. Produced fresh, never persisted."""
    model_config = ConfigDict(frozen=True)

    relative_balance: Decimal = Field(
        ...,
        description="Net signed movement for the account"
    )
    payment_transactions_in_range: tuple[Transaction, ...] = Field(
        default=(),
        description="Payments that contributed, in ledger order"
    )

    @property
    def transaction_count(self) -> int:
        return len(self.payment_transactions_in_range)

    def to_log_dict(self) -> dict:
        return {
            "relative_balance": str(self.relative_balance),
            "transaction_count": self.transaction_count,
            "transaction_ids": [
                t.transaction_id for t in self.payment_transactions_in_range
            ],
        }


def describe_range(date_from: datetime, date_to: datetime) -> str:
    """Format a query range for log and audit descriptions."""
    return f"{format_timestamp(date_from)} to {format_timestamp(date_to)}"
