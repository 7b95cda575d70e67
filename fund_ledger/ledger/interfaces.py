"""Typed result contracts for the portfolio accounting engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Final, Protocol


LEDGER_DUST_EPSILON: Final[Decimal] = Decimal("1e-9")
LEDGER_ZERO: Final[Decimal] = Decimal("0")
LEDGER_HUNDRED: Final[Decimal] = Decimal("100")

OVERSELL_WARNING_CODE: Final[str] = "OVERSELL"
SELL_WITHOUT_POSITION_WARNING_CODE: Final[str] = "SELL_WITHOUT_POSITION"
MISSING_QUANTITY_WARNING_CODE: Final[str] = "MISSING_ASSET_QUANTITY"


@dataclass(frozen=True)
class PriceQuote:
    """Live price quote for one asset.

    Attributes:
        usd: Current USD price.
        usd_7d_change: Optional 7-day percentage change.
    """

    usd: Decimal
    usd_7d_change: Decimal | None = None


@dataclass
class Position:
    """Weighted-average holding state for one asset.

    Attributes:
        asset: Asset symbol.
        quantity_held: Units currently held.
        total_cost_basis: USD cost of the units currently held.
    """

    asset: str
    quantity_held: Decimal = LEDGER_ZERO
    total_cost_basis: Decimal = LEDGER_ZERO

    def position_average_cost(self) -> Decimal:
        """Return average unit cost, or zero when nothing is held."""

        if self.quantity_held <= LEDGER_ZERO:
            return LEDGER_ZERO
        return self.total_cost_basis / self.quantity_held


@dataclass(frozen=True)
class LedgerDataQualityWarning:
    """Recoverable data-quality finding raised while folding the ledger.

    Attributes:
        code: Deterministic warning code.
        transaction_id: Offending transaction identifier.
        asset: Asset symbol the warning applies to.
        detail: Human-readable description.
    """

    code: str
    transaction_id: str
    asset: str
    detail: str


@dataclass(frozen=True)
class PositionAggregationResult:
    """Output of the position aggregator fold.

    Attributes:
        cash_balance_usd: Aggregate fund cash balance.
        positions: Per-asset positions in first-appearance order.
        warnings: Data-quality warnings observed during the fold.
    """

    cash_balance_usd: Decimal
    positions: dict[str, Position]
    warnings: tuple[LedgerDataQualityWarning, ...] = ()


@dataclass(frozen=True)
class PositionValuation:
    """Market valuation of one open position.

    Attributes:
        asset: Asset symbol.
        quantity_held: Units held.
        cost_basis_usd: Weighted-average cost of held units.
        live_price_usd: Oracle price, zero when missing.
        usd_7d_change: 7-day change percent, zero when unknown.
        market_value_usd: Quantity multiplied by live price.
        unrealized_pnl_usd: Market value minus cost basis.
        unrealized_pnl_percent: Unrealized P&L relative to cost basis.
        price_missing: Whether the oracle returned no price for this asset.
    """

    asset: str
    quantity_held: Decimal
    cost_basis_usd: Decimal
    live_price_usd: Decimal
    usd_7d_change: Decimal
    market_value_usd: Decimal
    unrealized_pnl_usd: Decimal
    unrealized_pnl_percent: Decimal
    price_missing: bool


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Ephemeral portfolio valuation derived from positions and prices.

    Attributes:
        cash_balance_usd: Fund cash balance.
        positions: Position valuations ranked by market value.
        total_market_value_usd: Sum of position market values.
        total_cost_basis_usd: Sum of position cost bases.
        total_unrealized_pnl_usd: Sum of position unrealized P&L.
        total_unrealized_pnl_percent: Summed P&L relative to summed cost basis.
        total_portfolio_value_usd: Market value plus cash.
        missing_price_assets: Held assets valued at zero for lack of a price.
    """

    cash_balance_usd: Decimal
    positions: tuple[PositionValuation, ...]
    total_market_value_usd: Decimal
    total_cost_basis_usd: Decimal
    total_unrealized_pnl_usd: Decimal
    total_unrealized_pnl_percent: Decimal
    total_portfolio_value_usd: Decimal
    missing_price_assets: tuple[str, ...] = ()


@dataclass(frozen=True)
class RealizedSaleRecord:
    """Realized gain or loss locked in by one SELL.

    Attributes:
        transaction_id: SELL transaction identifier.
        asset_label: Asset symbol sold.
        sold_at_utc: SELL timestamp.
        quantity_sold: Units sold.
        proceeds_usd: Sale value in USD.
        cost_of_sold_usd: Running average cost of the sold units.
        realized_pnl_usd: Proceeds minus cost of sold units.
        pnl_percent: Realized P&L relative to cost of sold units.
    """

    transaction_id: str
    asset_label: str
    sold_at_utc: datetime
    quantity_sold: Decimal
    proceeds_usd: Decimal
    cost_of_sold_usd: Decimal
    realized_pnl_usd: Decimal
    pnl_percent: Decimal


@dataclass(frozen=True)
class ClientEquity:
    """One client's share of fund equity.

    Attributes:
        profile_id: Client profile identifier.
        name: Client display name.
        net_deposited_usd: Declared net capital contributed.
        ownership_percent: Share of total deposits.
        equity_value_usd: Share of total portfolio value.
        pnl_usd: Equity value minus net capital contributed.
    """

    profile_id: str
    name: str
    net_deposited_usd: Decimal
    ownership_percent: Decimal
    equity_value_usd: Decimal
    pnl_usd: Decimal


@dataclass(frozen=True)
class DepositDriftRecord:
    """Mismatch between declared and ledger-replayed client deposits.

    Attributes:
        profile_id: Client profile identifier.
        declared_total_usd: Denormalized `total_deposited_usd` value.
        ledger_total_usd: Net of DEPOSIT/WITHDRAW transactions for the profile.
        difference_usd: Declared minus ledger total.
    """

    profile_id: str
    declared_total_usd: Decimal
    ledger_total_usd: Decimal
    difference_usd: Decimal


class PriceOraclePort(Protocol):
    """Port definition for live asset price lookups."""

    def adapter_source_name(self) -> str:
        """Return oracle source identifier for diagnostics.

        Returns:
            str: Human-readable upstream source identifier.
        """

    def adapter_fetch_prices(self, asset_symbols: list[str]) -> dict[str, PriceQuote]:
        """Fetch live prices for the requested symbols.

        Args:
            asset_symbols: Asset symbols to price.

        Returns:
            dict[str, PriceQuote]: Quotes keyed by requested symbol; unresolvable symbols are absent.

        Raises:
            ConnectionError: Raised when the upstream oracle cannot be reached.
            TimeoutError: Raised when the oracle does not answer in time.
        """


def ledger_percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Return `numerator / denominator * 100`, or zero for a non-positive denominator."""

    if denominator <= LEDGER_ZERO:
        return LEDGER_ZERO
    return numerator / denominator * LEDGER_HUNDRED
