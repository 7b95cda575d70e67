"""Regression tests for client ownership allocation and deposit drift checks."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from fund_ledger.domain import Profile, Transaction
from fund_ledger.ledger import ledger_allocate_ownership, ledger_detect_deposit_drift, ledger_replay_net_deposits


def _build_profile(profile_id: str, name: str, total_deposited_usd: str) -> Profile:
    """Create one deterministic client profile."""

    return Profile(profile_id=profile_id, name=name, total_deposited_usd=Decimal(total_deposited_usd))


def test_ledger_ownership_splits_value_by_deposits() -> None:
    """Allocate equity proportional to declared deposits and rank by equity.

    Returns:
        None: Assertions validate ownership percent, equity and P&L per client.

    Raises:
        AssertionError: Raised when allocation deviates from expected values.
    """

    client_equities = ledger_allocate_ownership(
        [
            _build_profile("p-1", "Alice", "2500"),
            _build_profile("p-2", "Bob", "7500"),
        ],
        total_portfolio_value_usd=Decimal("12000"),
    )

    assert [client.name for client in client_equities] == ["Bob", "Alice"]
    bob, alice = client_equities
    assert bob.ownership_percent == Decimal("75")
    assert bob.equity_value_usd == Decimal("9000")
    assert bob.pnl_usd == Decimal("1500")
    assert alice.ownership_percent == Decimal("25")
    assert alice.equity_value_usd == Decimal("3000")
    assert alice.pnl_usd == Decimal("500")


def test_ledger_ownership_percentages_sum_to_one_hundred() -> None:
    """Keep total ownership at 100% for uneven deposit splits.

    Returns:
        None: Assertions validate the ownership sum within tolerance.

    Raises:
        AssertionError: Raised when ownership does not sum to 100.
    """

    client_equities = ledger_allocate_ownership(
        [
            _build_profile("p-1", "A", "1000"),
            _build_profile("p-2", "B", "1000"),
            _build_profile("p-3", "C", "1000"),
        ],
        total_portfolio_value_usd=Decimal("3333.33"),
    )

    total_percent = sum((client.ownership_percent for client in client_equities), Decimal("0"))
    assert abs(total_percent - Decimal("100")) < Decimal("1e-20")
    assert [client.profile_id for client in client_equities] == ["p-1", "p-2", "p-3"]


def test_ledger_ownership_zero_deposits_yield_zero_ownership() -> None:
    """Return zero ownership instead of dividing by zero.

    Returns:
        None: Assertions validate zero-denominator handling.

    Raises:
        AssertionError: Raised when zero deposits produce non-zero equity.
    """

    client_equities = ledger_allocate_ownership(
        [_build_profile("p-1", "  ", "0")],
        total_portfolio_value_usd=Decimal("500"),
    )

    assert client_equities[0].ownership_percent == Decimal("0")
    assert client_equities[0].equity_value_usd == Decimal("0")
    assert client_equities[0].name == "Unnamed Client"


def test_ledger_deposit_drift_flags_profiles_out_of_sync_with_ledger() -> None:
    """Report profiles whose declared deposits disagree with the ledger replay.

    Returns:
        None: Assertions validate drift detection output.

    Raises:
        AssertionError: Raised when drift is missed or misreported.
    """

    created_at_utc = datetime(2026, 4, 1, tzinfo=timezone.utc)
    transactions = [
        Transaction("t-1", created_at_utc, "p-1", "DEPOSIT", "USD", Decimal("1000")),
        Transaction("t-2", created_at_utc, "p-1", "WITHDRAW", "USD", Decimal("200")),
        Transaction("t-3", created_at_utc, "p-2", "DEPOSIT", "USD", Decimal("500")),
        Transaction("t-4", created_at_utc, None, "DEPOSIT", "USD", Decimal("9999")),
        Transaction("t-5", created_at_utc, "p-2", "BUY", "BTC", Decimal("100"), Decimal("0.001")),
    ]

    net_deposits = ledger_replay_net_deposits(transactions)
    drift_records = ledger_detect_deposit_drift(
        [
            _build_profile("p-1", "Alice", "800"),
            _build_profile("p-2", "Bob", "700"),
        ],
        net_deposits,
    )

    assert net_deposits == {"p-1": Decimal("800"), "p-2": Decimal("500")}
    assert len(drift_records) == 1
    assert drift_records[0].profile_id == "p-2"
    assert drift_records[0].difference_usd == Decimal("200")
