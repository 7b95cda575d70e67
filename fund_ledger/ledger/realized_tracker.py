"""Chronological realized P&L replay using running weighted-average cost."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from decimal import Decimal

from fund_ledger.domain import (
    TRANSACTION_TYPE_BUY,
    TRANSACTION_TYPE_SELL,
    Transaction,
    domain_normalize_transaction_type,
)

from .interfaces import LEDGER_DUST_EPSILON, LEDGER_ZERO, Position, RealizedSaleRecord, ledger_percent
from .replay import ledger_normalize_asset, ledger_sort_transactions


def ledger_track_realized_pnl(
    transactions: Iterable[Transaction],
    dust_epsilon: Decimal = LEDGER_DUST_EPSILON,
) -> Iterator[RealizedSaleRecord]:
    """Yield one realized P&L record per SELL in chronological order.

    The running state is local to each call, so the generator can be
    restarted by calling the function again with the same ledger. SELLs with
    no running quantity yield nothing because there is no cost to compare.

    Args:
        transactions: Ledger transactions in any order.
        dust_epsilon: Quantity at or below which running state resets to zero.

    Yields:
        RealizedSaleRecord: Realized gain or loss for one sale.

    Raises:
        ValueError: Raised when a transaction type is unsupported or a timestamp is offset-naive.
    """

    running_positions: dict[str, Position] = {}

    for transaction in ledger_sort_transactions(transactions):
        transaction_type = domain_normalize_transaction_type(transaction.transaction_type)
        if transaction_type not in (TRANSACTION_TYPE_BUY, TRANSACTION_TYPE_SELL):
            continue
        if transaction.transaction_is_cash_movement():
            continue

        quantity = transaction.asset_quantity
        if quantity is None or quantity <= LEDGER_ZERO:
            continue

        asset = ledger_normalize_asset(transaction.asset)
        value_usd = Decimal(transaction.value_usd)
        running = running_positions.setdefault(asset, Position(asset=asset))

        if transaction_type == TRANSACTION_TYPE_BUY:
            running.quantity_held += quantity
            running.total_cost_basis += value_usd
            continue

        if running.quantity_held <= LEDGER_ZERO:
            continue

        cost_of_sold = quantity * running.position_average_cost()
        realized_pnl = value_usd - cost_of_sold
        yield RealizedSaleRecord(
            transaction_id=transaction.transaction_id,
            asset_label=asset,
            sold_at_utc=transaction.created_at_utc,
            quantity_sold=quantity,
            proceeds_usd=value_usd,
            cost_of_sold_usd=cost_of_sold,
            realized_pnl_usd=realized_pnl,
            pnl_percent=ledger_percent(realized_pnl, cost_of_sold),
        )

        running.quantity_held -= quantity
        running.total_cost_basis -= cost_of_sold
        if running.quantity_held <= dust_epsilon:
            running.quantity_held = LEDGER_ZERO
            running.total_cost_basis = LEDGER_ZERO


__all__ = ["ledger_track_realized_pnl"]
