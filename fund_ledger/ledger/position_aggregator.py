"""Weighted-average position aggregation over the transaction ledger."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from fund_ledger.domain import (
    TRANSACTION_TYPE_BUY,
    TRANSACTION_TYPE_DEPOSIT,
    TRANSACTION_TYPE_SELL,
    TRANSACTION_TYPE_WITHDRAW,
    Transaction,
    domain_normalize_transaction_type,
)

from .interfaces import (
    LEDGER_DUST_EPSILON,
    LEDGER_ZERO,
    MISSING_QUANTITY_WARNING_CODE,
    OVERSELL_WARNING_CODE,
    SELL_WITHOUT_POSITION_WARNING_CODE,
    LedgerDataQualityWarning,
    Position,
    PositionAggregationResult,
)
from .replay import ledger_normalize_asset, ledger_sort_transactions


def ledger_aggregate_positions(
    transactions: Iterable[Transaction],
    dust_epsilon: Decimal = LEDGER_DUST_EPSILON,
) -> PositionAggregationResult:
    """Fold the ledger into a cash balance and weighted-average positions.

    Cash moves for every transaction regardless of asset: deposits and sells
    add, withdrawals and buys subtract. Non-cash BUY/SELL rows also update the
    per-asset position. Sales never drive a position below zero; the excess is
    clamped and reported as an `OVERSELL` warning.

    Args:
        transactions: Ledger transactions in any order.
        dust_epsilon: Quantity at or below which a position is treated as closed.

    Returns:
        PositionAggregationResult: Cash balance, positions and data-quality warnings.

    Raises:
        ValueError: Raised when a transaction type is unsupported or a timestamp is offset-naive.
    """

    cash_balance = LEDGER_ZERO
    positions: dict[str, Position] = {}
    warnings: list[LedgerDataQualityWarning] = []

    for transaction in ledger_sort_transactions(transactions):
        transaction_type = domain_normalize_transaction_type(transaction.transaction_type)
        value_usd = Decimal(transaction.value_usd)

        if transaction_type in (TRANSACTION_TYPE_DEPOSIT, TRANSACTION_TYPE_SELL):
            cash_balance += value_usd
        else:
            cash_balance -= value_usd

        if transaction_type in (TRANSACTION_TYPE_DEPOSIT, TRANSACTION_TYPE_WITHDRAW):
            continue
        if transaction.transaction_is_cash_movement():
            continue

        asset = ledger_normalize_asset(transaction.asset)
        quantity = transaction.asset_quantity
        if quantity is None or quantity <= LEDGER_ZERO:
            warnings.append(
                LedgerDataQualityWarning(
                    code=MISSING_QUANTITY_WARNING_CODE,
                    transaction_id=transaction.transaction_id,
                    asset=asset,
                    detail=f"{transaction_type} without positive asset_quantity leaves position unchanged",
                )
            )
            continue

        position = positions.setdefault(asset, Position(asset=asset))
        if transaction_type == TRANSACTION_TYPE_BUY:
            position.quantity_held += quantity
            position.total_cost_basis += value_usd
            continue

        _ledger_apply_sale(
            position=position,
            transaction=transaction,
            quantity=quantity,
            dust_epsilon=dust_epsilon,
            warnings=warnings,
        )

    return PositionAggregationResult(
        cash_balance_usd=cash_balance,
        positions=positions,
        warnings=tuple(warnings),
    )


def _ledger_apply_sale(
    position: Position,
    transaction: Transaction,
    quantity: Decimal,
    dust_epsilon: Decimal,
    warnings: list[LedgerDataQualityWarning],
) -> None:
    """Remove sold units from a position at its current average cost.

    Args:
        position: Mutable position being folded.
        transaction: SELL transaction.
        quantity: Units sold.
        dust_epsilon: Closed-position threshold.
        warnings: Mutable warning list.
    """

    if position.quantity_held <= LEDGER_ZERO:
        warnings.append(
            LedgerDataQualityWarning(
                code=SELL_WITHOUT_POSITION_WARNING_CODE,
                transaction_id=transaction.transaction_id,
                asset=position.asset,
                detail=f"sold {quantity} units with no held quantity",
            )
        )
        return

    sold_quantity = min(quantity, position.quantity_held)
    if quantity > position.quantity_held:
        warnings.append(
            LedgerDataQualityWarning(
                code=OVERSELL_WARNING_CODE,
                transaction_id=transaction.transaction_id,
                asset=position.asset,
                detail=f"sold {quantity} units but held {position.quantity_held}; clamped to zero",
            )
        )

    cost_removed = position.position_average_cost() * sold_quantity
    position.total_cost_basis -= cost_removed
    position.quantity_held -= sold_quantity

    if position.quantity_held <= dust_epsilon:
        position.quantity_held = LEDGER_ZERO
        position.total_cost_basis = LEDGER_ZERO


__all__ = ["ledger_aggregate_positions"]
