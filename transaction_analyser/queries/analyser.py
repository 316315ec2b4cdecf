"""
Relative Balance Analyser

DESIGN DECISION: Analysis is a pure function of a fixed ledger.
The ledger is loaded once; every query reads it and nothing writes it.
Calling analyse twice with the same arguments gives the same result.

A query runs four steps:
1. Select records touching the account (either side)
2. Partition them into payments and reversals
3. Drop reversed payments and payments outside the inclusive
   [date_from, date_to] range
4. Fold the survivors into a signed balance

Reversal matching is global: a payment is reversed if ANY reversal in
the ledger references its id, whatever that reversal's accounts or
timestamp are.

Amounts are summed with exact decimal arithmetic; no float ever
touches a balance.
"""

import decimal
from datetime import datetime
from decimal import Decimal
from typing import Iterable

import structlog

from transaction_analyser.models.analysis import (
    AnalysisQuery,
    TransactionGroups,
    TransactionsAnalysis,
    describe_range,
)
from transaction_analyser.models.transaction import Transaction


# Additions in this context are never rounded
_EXACT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
    traps=[decimal.InvalidOperation, decimal.Inexact],
)

logger = structlog.get_logger(__name__)


class TransactionsAnalyser:
    """
    Answers balance queries against an already loaded ledger.

    GUARANTEES:
    - The ledger is never mutated
    - Missing payments or reversals are treated as empty, never an error
    - A reversal pointing at an unknown payment is inert
    """

    def __init__(self, transactions: Iterable[Transaction]):
        self._transactions = tuple(transactions)
        # The ledger is immutable, so the exclusion set is built once
        self._reversed_ids = frozenset(
            t.related_transaction for t in self._transactions if t.is_reversal
        )

    @property
    def transaction_count(self) -> int:
        return len(self._transactions)

    def analyse(
        self,
        account_id: str,
        date_from: datetime,
        date_to: datetime,
    ) -> TransactionsAnalysis:
        """
        Compute the relative balance of an account over [date_from, date_to].

        date_from > date_to is not an error; the result is simply empty.
        """
        groups = self._find_relevant_transactions(account_id)
        in_range = self._find_payments_in_range(groups.payments, date_from, date_to)
        relative_balance = self._calculate_relative_balance(in_range, account_id)

        logger.debug(
            "analysis_computed",
            account_id=account_id,
            date_range=describe_range(date_from, date_to),
            payments=len(groups.payments),
            reversals=len(groups.reversals),
            included=len(in_range),
        )

        return TransactionsAnalysis(
            relative_balance=relative_balance,
            payment_transactions_in_range=in_range,
        )

    def analyse_query(self, query: AnalysisQuery) -> TransactionsAnalysis:
        """Run a validated query."""
        return self.analyse(query.account_id, query.date_from, query.date_to)

    def is_reversed(self, transaction_id: str) -> bool:
        return transaction_id in self._reversed_ids

    def _find_relevant_transactions(self, account_id: str) -> TransactionGroups:
        """Partition the records touching the account by type."""
        payments = []
        reversals = []

        for transaction in self._transactions:
            # A self transfer matches both sides but is selected once
            if not transaction.involves(account_id):
                continue
            if transaction.is_reversal:
                reversals.append(transaction)
            else:
                payments.append(transaction)

        return TransactionGroups(payments=tuple(payments), reversals=tuple(reversals))

    def _find_payments_in_range(
        self,
        payments: Iterable[Transaction],
        date_from: datetime,
        date_to: datetime,
    ) -> tuple[Transaction, ...]:
        """Keep unreversed payments inside the inclusive range."""
        return tuple(
            payment
            for payment in payments
            if date_from <= payment.created_at <= date_to
            and payment.transaction_id not in self._reversed_ids
        )

    def _calculate_relative_balance(
        self,
        payments: Iterable[Transaction],
        account_id: str,
    ) -> Decimal:
        """
        Fold payments into a signed balance.

        Outgoing amounts are subtracted and incoming amounts added.
        A self transfer gets both adjustments and nets to zero.
        """
        balance = Decimal(0)

        for payment in payments:
            if account_id == payment.from_account_id:
                balance = _EXACT.subtract(balance, payment.amount)
            if account_id == payment.to_account_id:
                balance = _EXACT.add(balance, payment.amount)

        return balance
