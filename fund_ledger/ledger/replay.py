"""Deterministic ledger replay ordering helpers."""

from __future__ import annotations

from collections.abc import Iterable

from fund_ledger.domain import Transaction


def ledger_sort_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return transactions in replay order.

    Ledger order is creation time, with the transaction identifier as a
    deterministic tie-break for rows written in the same instant.

    Args:
        transactions: Unordered ledger transactions.

    Returns:
        list[Transaction]: Transactions sorted for replay.

    Raises:
        ValueError: Raised when a transaction timestamp is missing or offset-naive.
    """

    materialized_transactions = list(transactions)
    for transaction in materialized_transactions:
        created_at_utc = transaction.created_at_utc
        if created_at_utc is None or created_at_utc.tzinfo is None or created_at_utc.utcoffset() is None:
            raise ValueError(f"transaction {transaction.transaction_id} created_at_utc must be offset-aware")

    return sorted(
        materialized_transactions,
        key=lambda transaction: (transaction.created_at_utc, transaction.transaction_id),
    )


def ledger_normalize_asset(asset: str | None) -> str:
    """Normalize an asset symbol to its stored upper-case form."""

    return (asset or "").strip().upper()
