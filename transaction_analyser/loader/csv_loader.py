"""
CSV Transaction Loader

Decodes a comma-delimited ledger into Transaction records:

    transactionId,fromAccountId,toAccountId,createdAt,amount,transactionType[,relatedTransaction]

DESIGN DECISION: Loading is fail-fast.
A single undecodable row aborts the whole load. We never return
a partial ledger, since a balance computed from one would be wrong
without any visible sign of it.
"""

import csv
from pathlib import Path
from typing import Iterable, Optional, Union

import structlog
from pydantic import ValidationError

from transaction_analyser.models.transaction import Transaction


PAYMENT_FIELD_COUNT = 6
REVERSAL_FIELD_COUNT = 7

# Positional layout of a ledger row
FIELD_NAMES = (
    "transaction_id",
    "from_account_id",
    "to_account_id",
    "created_at",
    "amount",
    "transaction_type",
    "related_transaction",
)

logger = structlog.get_logger(__name__)


class LoaderError(Exception):
    """Base exception for ledger loading errors."""
    pass


class SourceError(LoaderError):
    """The ledger source could not be located or read."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(message)


class FormatError(LoaderError):
    """A ledger row could not be decoded."""

    def __init__(
        self,
        row_number: int,
        field: Optional[str],
        row: list[str],
        message: str,
    ):
        self.row_number = row_number
        self.field = field
        self.row = row
        super().__init__(message)


def decode_row(elements: list[str], row_number: int) -> Transaction:
    """
    Decode one split row into a Transaction.

    Six fields make a payment, seven a reversal whose last field
    is the id of the payment it cancels.

    Raises:
        FormatError: On a wrong field count or any undecodable field
    """
    if len(elements) not in (PAYMENT_FIELD_COUNT, REVERSAL_FIELD_COUNT):
        raise FormatError(
            row_number,
            None,
            elements,
            f"Row {row_number}: expected {PAYMENT_FIELD_COUNT} or "
            f"{REVERSAL_FIELD_COUNT} fields but found {len(elements)}: {elements}",
        )

    values = dict(zip(FIELD_NAMES, (element.strip() for element in elements)))

    try:
        return Transaction(**values)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else None
        location = f"field '{field}'" if field else "row"
        raise FormatError(
            row_number,
            field,
            elements,
            f"Row {row_number}: invalid {location}: {error['msg']}",
        ) from e


class TransactionLoader:
    """
    Loads ledger rows into an immutable tuple of transactions.

    The first row of every source is a header and is discarded.
    Source order is preserved; nothing is deduplicated.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._encoding = encoding

    def load(self, source: Union[str, Path]) -> tuple[Transaction, ...]:
        """
        Load every transaction from a CSV file.

        Raises:
            SourceError: If the file cannot be opened or read
            FormatError: If any row cannot be decoded
        """
        path = Path(source)
        try:
            with path.open(encoding=self._encoding, newline="") as f:
                return self.load_lines(f, source_name=str(path))
        except OSError as e:
            raise SourceError(
                str(path),
                f"Could not read transactions file at {path}: {e.strerror or e}",
            ) from e
        except UnicodeDecodeError as e:
            raise SourceError(
                str(path),
                f"Could not decode transactions file at {path} as {self._encoding}",
            ) from e

    def load_lines(
        self,
        lines: Iterable[str],
        source_name: str = "<memory>",
    ) -> tuple[Transaction, ...]:
        """Decode already opened text lines, header first."""
        # Plain comma splitting; quote characters are ordinary data
        reader = csv.reader(lines, quoting=csv.QUOTE_NONE)

        transactions = []
        try:
            # Header row; structure is fixed so its content is not inspected
            if next(reader, None) is None:
                logger.warning("empty_source", source=source_name)
                return ()

            for elements in reader:
                # Row numbers are 1-based and count the header
                transactions.append(decode_row(elements, reader.line_num))
        except csv.Error as e:
            raise FormatError(
                reader.line_num,
                None,
                [],
                f"Row {reader.line_num}: could not split row: {e}",
            ) from e

        logger.info(
            "transactions_loaded",
            source=source_name,
            transaction_count=len(transactions),
        )
        return tuple(transactions)
