"""Regression tests for the dashboard computation pass and its degradation paths."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from fund_ledger.domain import Profile, Transaction
from fund_ledger.ledger import PortfolioDashboardService, PriceQuote

_BASE_TIME = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


class _LedgerRepositoryStub:
    """In-memory ledger repository test double."""

    def __init__(self, transactions: list[Transaction], profiles: list[Profile], fail: bool = False):
        self._transactions = transactions
        self._profiles = profiles
        self._fail = fail

    def db_transaction_list(self) -> list[Transaction]:
        """Return stored transactions or raise a deterministic read failure.

        Returns:
            list[Transaction]: Stored transactions.

        Raises:
            RuntimeError: Raised when the stub is configured to fail.
        """

        if self._fail:
            raise RuntimeError("ledger transaction read failed")
        return list(self._transactions)

    def db_profile_list(self) -> list[Profile]:
        """Return stored profiles."""

        return list(self._profiles)


class _StaticPriceOracle:
    """Price oracle test double returning fixed quotes."""

    def __init__(self, prices: dict[str, PriceQuote]):
        self._prices = prices
        self.requested_symbols: list[list[str]] = []

    def adapter_source_name(self) -> str:
        """Return stub source label."""

        return "static"

    def adapter_fetch_prices(self, asset_symbols: list[str]) -> dict[str, PriceQuote]:
        """Return configured quotes for the requested symbols."""

        self.requested_symbols.append(list(asset_symbols))
        return {symbol: self._prices[symbol] for symbol in asset_symbols if symbol in self._prices}


class _FailingPriceOracle:
    """Price oracle test double that always times out."""

    def adapter_source_name(self) -> str:
        """Return stub source label."""

        return "failing"

    def adapter_fetch_prices(self, asset_symbols: list[str]) -> dict[str, PriceQuote]:
        """Raise deterministic timeout.

        Raises:
            TimeoutError: Always raised by this test double.
        """

        _ = asset_symbols
        raise TimeoutError("price oracle request timed out")


def _build_ledger() -> tuple[list[Transaction], list[Profile]]:
    """Create a small fund ledger with two clients and one BTC trade.

    Returns:
        tuple[list[Transaction], list[Profile]]: Transactions and profiles fixture.
    """

    transactions = [
        Transaction("t-1", _BASE_TIME, "p-1", "DEPOSIT", "USD", Decimal("6000")),
        Transaction("t-2", _BASE_TIME + timedelta(minutes=1), "p-2", "DEPOSIT", "USD", Decimal("4000")),
        Transaction(
            "t-3",
            _BASE_TIME + timedelta(minutes=2),
            None,
            "BUY",
            "BTC",
            Decimal("6000"),
            Decimal("0.1"),
            Decimal("60000"),
        ),
    ]
    profiles = [
        Profile(profile_id="p-1", name="Alice", total_deposited_usd=Decimal("6000")),
        Profile(profile_id="p-2", name="Bob", total_deposited_usd=Decimal("4000")),
    ]
    return transactions, profiles


def test_ledger_dashboard_build_values_portfolio_and_allocates_clients() -> None:
    """Run one full pass with live prices.

    Returns:
        None: Assertions validate snapshot totals, client equity and diagnostics.

    Raises:
        AssertionError: Raised when pass output deviates from expected values.
    """

    transactions, profiles = _build_ledger()
    price_oracle = _StaticPriceOracle({"BTC": PriceQuote(usd=Decimal("70000"))})
    service = PortfolioDashboardService(_LedgerRepositoryStub(transactions, profiles), price_oracle)

    result = service.ledger_dashboard_build()

    assert price_oracle.requested_symbols == [["BTC"]]
    assert result.price_status == "ok"
    assert result.snapshot.cash_balance_usd == Decimal("4000")
    assert result.snapshot.total_portfolio_value_usd == Decimal("11000")
    assert [client.equity_value_usd for client in result.client_equities] == [Decimal("6600"), Decimal("4400")]
    assert result.deposit_drift == ()
    assert result.realized_sales == ()
    assert [(event["stage"], event["status"]) for event in result.diagnostics] == [
        ("ledger", "started"),
        ("ledger", "completed"),
        ("prices", "started"),
        ("prices", "completed"),
        ("valuation", "completed"),
    ]


def test_ledger_dashboard_build_assigns_whole_fund_to_single_client() -> None:
    """Give a sole depositor full ownership of the appreciated BTC position.

    Raises:
        AssertionError: Raised when the single client does not own the whole fund.
    """

    transactions = [
        Transaction("t-1", _BASE_TIME, "p-1", "DEPOSIT", "USD", Decimal("10000")),
        Transaction(
            "t-2",
            _BASE_TIME + timedelta(minutes=1),
            None,
            "BUY",
            "BTC",
            Decimal("6000"),
            Decimal("0.1"),
            Decimal("60000"),
        ),
    ]
    profiles = [Profile(profile_id="p-1", name="Alice", total_deposited_usd=Decimal("10000"))]
    price_oracle = _StaticPriceOracle({"BTC": PriceQuote(usd=Decimal("70000"))})
    service = PortfolioDashboardService(_LedgerRepositoryStub(transactions, profiles), price_oracle)

    result = service.ledger_dashboard_build()

    (client,) = result.client_equities
    assert result.snapshot.total_portfolio_value_usd == Decimal("11000")
    assert client.ownership_percent == Decimal("100")
    assert client.equity_value_usd == Decimal("11000")
    assert client.pnl_usd == Decimal("1000")
    assert result.deposit_drift == ()


def test_ledger_dashboard_build_degrades_when_price_oracle_fails() -> None:
    """Value holdings at zero and mark the pass degraded on oracle failure.

    Returns:
        None: Assertions validate degraded price status and zero market value.

    Raises:
        AssertionError: Raised when oracle failure aborts the pass.
    """

    transactions, profiles = _build_ledger()
    service = PortfolioDashboardService(_LedgerRepositoryStub(transactions, profiles), _FailingPriceOracle())

    result = service.ledger_dashboard_build()

    assert result.price_status == "degraded"
    assert result.snapshot.total_market_value_usd == Decimal("0")
    assert result.snapshot.missing_price_assets == ("BTC",)
    assert result.snapshot.total_portfolio_value_usd == Decimal("4000")
    degraded_events = [event for event in result.diagnostics if event["status"] == "degraded"]
    assert degraded_events[0]["details"]["error_type"] == "TimeoutError"


def test_ledger_dashboard_build_skips_price_fetch_without_holdings() -> None:
    """Skip the oracle call when the fund holds only cash.

    Returns:
        None: Assertions validate skipped price stage.

    Raises:
        AssertionError: Raised when the oracle is queried for an empty portfolio.
    """

    transactions, profiles = _build_ledger()
    price_oracle = _StaticPriceOracle({})
    service = PortfolioDashboardService(_LedgerRepositoryStub(transactions[:2], profiles), price_oracle)

    result = service.ledger_dashboard_build()

    assert price_oracle.requested_symbols == []
    assert result.price_status == "ok"
    assert result.snapshot.total_portfolio_value_usd == Decimal("10000")


def test_ledger_dashboard_build_propagates_ledger_failure() -> None:
    """Fail the pass when the ledger store cannot be read.

    Returns:
        None: Assertions validate RuntimeError propagation.

    Raises:
        AssertionError: Raised when ledger failure is swallowed.
    """

    service = PortfolioDashboardService(_LedgerRepositoryStub([], [], fail=True), _StaticPriceOracle({}))

    with pytest.raises(RuntimeError, match="ledger transaction read failed"):
        service.ledger_dashboard_build()


def test_ledger_dashboard_service_rejects_missing_dependencies() -> None:
    """Reject construction without a ledger repository.

    Returns:
        None: Assertions validate constructor guard.

    Raises:
        AssertionError: Raised when None dependencies are accepted.
    """

    with pytest.raises(ValueError, match="ledger_repository must not be None"):
        PortfolioDashboardService(None, _StaticPriceOracle({}))
