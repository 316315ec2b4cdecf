"""
Tests for the relative balance analyser.
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from transaction_analyser.loader import TransactionLoader
from transaction_analyser.models.analysis import AnalysisQuery
from transaction_analyser.models.transaction import Transaction, TransactionType
from transaction_analyser.queries import TransactionsAnalyser


DAY_START = datetime(2018, 10, 20, 0, 0, 0)
DAY_END = datetime(2018, 10, 20, 23, 59, 59)


def payment(transaction_id, from_account, to_account, created_at, amount) -> Transaction:
    return Transaction(
        transaction_id=transaction_id,
        from_account_id=from_account,
        to_account_id=to_account,
        created_at=created_at,
        amount=Decimal(amount),
        transaction_type=TransactionType.PAYMENT,
    )


def reversal(transaction_id, from_account, to_account, created_at, amount, related) -> Transaction:
    return Transaction(
        transaction_id=transaction_id,
        from_account_id=from_account,
        to_account_id=to_account,
        created_at=created_at,
        amount=Decimal(amount),
        transaction_type=TransactionType.REVERSAL,
        related_transaction=related,
    )


@pytest.fixture
def sample_analyser():
    """The ledger used in the original challenge description."""
    lines = [
        "transactionId,fromAccountId,toAccountId,createdAt,amount,transactionType,relatedTransaction",
        "TX10001, ACC334455, ACC778899, 20/10/2018 12:47:55, 25.00, PAYMENT",
        "TX10002, ACC334455, ACC998877, 20/10/2018 17:33:43, 10.50, PAYMENT",
        "TX10003, ACC998877, ACC778899, 20/10/2018 18:00:00, 5.00, PAYMENT",
        "TX10004, ACC334455, ACC998877, 20/10/2018 19:45:00, 10.50, REVERSAL, TX10002",
        "TX10005, ACC334455, ACC778899, 21/10/2018 09:30:00, 7.25, PAYMENT",
    ]
    return TransactionsAnalyser(TransactionLoader().load_lines(lines))


class TestRelativeBalance:
    """Tests for the end-to-end balance computation."""

    def test_sample_ledger(self, sample_analyser):
        analysis = sample_analyser.analyse(
            "ACC334455",
            datetime(2018, 10, 20, 12, 0, 0),
            datetime(2018, 10, 20, 19, 0, 0),
        )
        assert analysis.relative_balance == Decimal("-25.00")
        assert [t.transaction_id for t in analysis.payment_transactions_in_range] == ["TX10001"]

    def test_reversal_scenario(self):
        lines = [
            "transactionId,fromAccountId,toAccountId,createdAt,amount,transactionType,relatedTransaction",
            "T1,A,B,20/10/2018 10:00:00,100,PAYMENT",
            "T2,A,B,20/10/2018 11:00:00,50,PAYMENT",
            "T3,X,Y,20/10/2018 09:00:00,999,REVERSAL,T1",
        ]
        analyser = TransactionsAnalyser(TransactionLoader().load_lines(lines))
        analysis = analyser.analyse("A", DAY_START, DAY_END)

        assert analysis.relative_balance == Decimal("-50")
        assert [t.transaction_id for t in analysis.payment_transactions_in_range] == ["T2"]
        assert analyser.is_reversed("T1")
        assert not analyser.is_reversed("T2")

    def test_reversal_scenario_with_relevant_reversal(self):
        analyser = TransactionsAnalyser([
            payment("T1", "A", "B", datetime(2018, 10, 20, 10, 0, 0), "100"),
            payment("T2", "A", "B", datetime(2018, 10, 20, 11, 0, 0), "50"),
            reversal("T3", "A", "B", datetime(2018, 10, 20, 9, 0, 0), "999", "T1"),
        ])
        analysis = analyser.analyse("A", DAY_START, DAY_END)
        assert analysis.relative_balance == Decimal("-50")
        assert [t.transaction_id for t in analysis.payment_transactions_in_range] == ["T2"]

    def test_incoming_payment_is_positive(self, sample_analyser):
        analysis = sample_analyser.analyse("ACC778899", DAY_START, DAY_END)
        assert analysis.relative_balance == Decimal("30.00")
        assert analysis.transaction_count == 2

    def test_direction_sign(self):
        analyser = TransactionsAnalyser([
            payment("T1", "X", "Y", datetime(2018, 10, 20, 10, 0, 0), "12.34"),
        ])
        assert analyser.analyse("X", DAY_START, DAY_END).relative_balance == Decimal("-12.34")
        assert analyser.analyse("Y", DAY_START, DAY_END).relative_balance == Decimal("12.34")

        other = analyser.analyse("Z", DAY_START, DAY_END)
        assert other.relative_balance == Decimal("0")
        assert other.payment_transactions_in_range == ()

    def test_self_transfer_nets_to_zero(self):
        analyser = TransactionsAnalyser([
            payment("T1", "A", "A", datetime(2018, 10, 20, 10, 0, 0), "40"),
        ])
        analysis = analyser.analyse("A", DAY_START, DAY_END)
        assert analysis.relative_balance == Decimal("0")
        assert [t.transaction_id for t in analysis.payment_transactions_in_range] == ["T1"]

    def test_exact_decimal_arithmetic(self):
        analyser = TransactionsAnalyser([
            payment(f"T{i}", "A", "B", datetime(2018, 10, 20, 10, 0, 0), "0.1")
            for i in range(1000)
        ] + [
            payment("BIG", "B", "A", datetime(2018, 10, 20, 10, 0, 0), "12345678901234567890123456789.01"),
        ])
        analysis = analyser.analyse("A", DAY_START, DAY_END)
        assert analysis.relative_balance == Decimal("12345678901234567890123456689.01")

    def test_unknown_account_returns_zero(self, sample_analyser):
        analysis = sample_analyser.analyse("ACC000000", DAY_START, DAY_END)
        assert analysis.relative_balance == Decimal("0")
        assert analysis.payment_transactions_in_range == ()

    def test_empty_ledger(self):
        analysis = TransactionsAnalyser([]).analyse("A", DAY_START, DAY_END)
        assert analysis.relative_balance == Decimal("0")
        assert analysis.transaction_count == 0

    def test_only_reversals(self):
        analyser = TransactionsAnalyser([
            reversal("R1", "A", "B", datetime(2018, 10, 20, 10, 0, 0), "5", "T1"),
        ])
        analysis = analyser.analyse("A", DAY_START, DAY_END)
        assert analysis.relative_balance == Decimal("0")
        assert analysis.transaction_count == 0


class TestReversalExclusion:
    """Reversal matching is global by id."""

    def test_reversal_outside_range_still_excludes(self):
        analyser = TransactionsAnalyser([
            payment("T1", "A", "B", datetime(2018, 10, 20, 10, 0, 0), "100"),
            reversal("R1", "A", "B", datetime(2018, 12, 1, 0, 0, 0), "100", "T1"),
        ])
        analysis = analyser.analyse("A", DAY_START, DAY_END)
        assert analysis.relative_balance == Decimal("0")
        assert analysis.payment_transactions_in_range == ()

    def test_reversal_before_payment_still_excludes(self):
        analyser = TransactionsAnalyser([
            reversal("R1", "B", "A", datetime(2018, 1, 1, 0, 0, 0), "100", "T1"),
            payment("T1", "A", "B", datetime(2018, 10, 20, 10, 0, 0), "100"),
        ])
        analysis = analyser.analyse("A", DAY_START, DAY_END)
        assert analysis.transaction_count == 0

    def test_reversal_in_opposite_role_excludes(self):
        analyser = TransactionsAnalyser([
            payment("T1", "A", "B", datetime(2018, 10, 20, 10, 0, 0), "100"),
            reversal("R1", "C", "A", datetime(2018, 10, 20, 11, 0, 0), "100", "T1"),
        ])
        assert analyser.analyse("A", DAY_START, DAY_END).transaction_count == 0

    def test_unmatched_reversal_is_inert(self):
        analyser = TransactionsAnalyser([
            payment("T1", "A", "B", datetime(2018, 10, 20, 10, 0, 0), "100"),
            reversal("R1", "A", "B", datetime(2018, 10, 20, 11, 0, 0), "100", "T404"),
        ])
        analysis = analyser.analyse("A", DAY_START, DAY_END)
        assert analysis.relative_balance == Decimal("-100")
        assert analysis.transaction_count == 1

    def test_reversal_amount_never_counts(self, sample_analyser):
        analysis = sample_analyser.analyse("ACC998877", DAY_START, DAY_END)
        # TX10002 is reversed, TX10003 leaves the account
        assert analysis.relative_balance == Decimal("-5.00")
        assert [t.transaction_id for t in analysis.payment_transactions_in_range] == ["TX10003"]


class TestDateRange:
    """The range is closed on both ends."""

    @pytest.fixture
    def analyser(self):
        return TransactionsAnalyser([
            payment("T1", "A", "B", datetime(2018, 10, 20, 12, 0, 0), "1"),
            payment("T2", "A", "B", datetime(2018, 10, 20, 15, 0, 0), "2"),
            payment("T3", "A", "B", datetime(2018, 10, 20, 19, 0, 0), "4"),
        ])

    def test_bounds_are_inclusive(self, analyser):
        analysis = analyser.analyse(
            "A", datetime(2018, 10, 20, 12, 0, 0), datetime(2018, 10, 20, 19, 0, 0)
        )
        assert analysis.relative_balance == Decimal("-7")
        assert analysis.transaction_count == 3

    def test_one_second_outside_is_excluded(self, analyser):
        second = timedelta(seconds=1)
        analysis = analyser.analyse(
            "A",
            datetime(2018, 10, 20, 12, 0, 0) + second,
            datetime(2018, 10, 20, 19, 0, 0) - second,
        )
        assert [t.transaction_id for t in analysis.payment_transactions_in_range] == ["T2"]

    def test_single_instant_range(self, analyser):
        instant = datetime(2018, 10, 20, 15, 0, 0)
        analysis = analyser.analyse("A", instant, instant)
        assert analysis.relative_balance == Decimal("-2")

    def test_inverted_range_is_empty(self, analyser):
        analysis = analyser.analyse("A", DAY_END, DAY_START)
        assert analysis.relative_balance == Decimal("0")
        assert analysis.payment_transactions_in_range == ()

    def test_preserves_ledger_order(self):
        analyser = TransactionsAnalyser([
            payment("T2", "A", "B", datetime(2018, 10, 20, 15, 0, 0), "2"),
            payment("T1", "B", "A", datetime(2018, 10, 20, 12, 0, 0), "1"),
        ])
        analysis = analyser.analyse("A", DAY_START, DAY_END)
        assert [t.transaction_id for t in analysis.payment_transactions_in_range] == ["T2", "T1"]


class TestPurity:
    """Queries never change the analyser."""

    def test_analyse_is_idempotent(self, sample_analyser):
        first = sample_analyser.analyse("ACC334455", DAY_START, DAY_END)
        second = sample_analyser.analyse("ACC334455", DAY_START, DAY_END)
        assert first == second

    def test_other_queries_do_not_interfere(self, sample_analyser):
        before = sample_analyser.analyse("ACC334455", DAY_START, DAY_END)
        sample_analyser.analyse("ACC998877", DAY_START, DAY_END)
        sample_analyser.analyse("ACC778899", DAY_END, DAY_START)
        assert sample_analyser.analyse("ACC334455", DAY_START, DAY_END) == before
        assert sample_analyser.transaction_count == 5

    def test_analyse_query(self, sample_analyser):
        query = AnalysisQuery.from_arguments(
            "ACC334455", "20/10/2018 12:00:00", "20/10/2018 19:00:00"
        )
        analysis = sample_analyser.analyse_query(query)
        assert analysis.relative_balance == Decimal("-25.00")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
