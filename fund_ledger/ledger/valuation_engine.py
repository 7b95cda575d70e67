"""Mark-to-market valuation of aggregated positions."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from .interfaces import (
    LEDGER_DUST_EPSILON,
    LEDGER_ZERO,
    PortfolioSnapshot,
    Position,
    PositionValuation,
    PriceQuote,
    ledger_percent,
)


def ledger_valuate_portfolio(
    cash_balance_usd: Decimal,
    positions: Mapping[str, Position],
    prices: Mapping[str, PriceQuote],
    dust_epsilon: Decimal = LEDGER_DUST_EPSILON,
) -> PortfolioSnapshot:
    """Value open positions at live prices and derive portfolio totals.

    Assets without a quote are valued at zero and listed in
    `missing_price_assets`. Totals are sums over the valued positions, so the
    overall P&L percent always agrees with the per-position rows.

    Args:
        cash_balance_usd: Aggregate fund cash balance.
        positions: Per-asset positions in insertion order.
        prices: Live quotes keyed by asset symbol.
        dust_epsilon: Quantity at or below which a position is skipped.

    Returns:
        PortfolioSnapshot: Ranked valuations and consistent totals.
    """

    valuations: list[PositionValuation] = []
    missing_price_assets: list[str] = []

    for asset, position in positions.items():
        if position.quantity_held <= dust_epsilon:
            continue

        quote = prices.get(asset)
        price_missing = quote is None
        if price_missing:
            missing_price_assets.append(asset)
        live_price = LEDGER_ZERO if quote is None else Decimal(quote.usd)
        seven_day_change = LEDGER_ZERO
        if quote is not None and quote.usd_7d_change is not None:
            seven_day_change = Decimal(quote.usd_7d_change)

        market_value = position.quantity_held * live_price
        unrealized_pnl = market_value - position.total_cost_basis
        valuations.append(
            PositionValuation(
                asset=asset,
                quantity_held=position.quantity_held,
                cost_basis_usd=position.total_cost_basis,
                live_price_usd=live_price,
                usd_7d_change=seven_day_change,
                market_value_usd=market_value,
                unrealized_pnl_usd=unrealized_pnl,
                unrealized_pnl_percent=ledger_percent(unrealized_pnl, position.total_cost_basis),
                price_missing=price_missing,
            )
        )

    total_market_value = sum((valuation.market_value_usd for valuation in valuations), LEDGER_ZERO)
    total_cost_basis = sum((valuation.cost_basis_usd for valuation in valuations), LEDGER_ZERO)
    total_unrealized_pnl = sum((valuation.unrealized_pnl_usd for valuation in valuations), LEDGER_ZERO)

    return PortfolioSnapshot(
        cash_balance_usd=cash_balance_usd,
        positions=tuple(sorted(valuations, key=lambda valuation: valuation.market_value_usd, reverse=True)),
        total_market_value_usd=total_market_value,
        total_cost_basis_usd=total_cost_basis,
        total_unrealized_pnl_usd=total_unrealized_pnl,
        total_unrealized_pnl_percent=ledger_percent(total_unrealized_pnl, total_cost_basis),
        total_portfolio_value_usd=total_market_value + cash_balance_usd,
        missing_price_assets=tuple(missing_price_assets),
    )


__all__ = ["ledger_valuate_portfolio"]
