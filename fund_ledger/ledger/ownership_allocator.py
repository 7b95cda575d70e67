"""Client ownership allocation and deposit bookkeeping cross-checks."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal

from fund_ledger.domain import (
    TRANSACTION_TYPE_DEPOSIT,
    TRANSACTION_TYPE_WITHDRAW,
    Profile,
    Transaction,
    domain_normalize_transaction_type,
)

from .interfaces import LEDGER_HUNDRED, LEDGER_ZERO, ClientEquity, DepositDriftRecord, ledger_percent


_UNNAMED_CLIENT_LABEL = "Unnamed Client"


def ledger_allocate_ownership(
    profiles: Iterable[Profile],
    total_portfolio_value_usd: Decimal,
) -> list[ClientEquity]:
    """Distribute total portfolio value across clients by declared net deposits.

    Args:
        profiles: Client profiles carrying `total_deposited_usd`.
        total_portfolio_value_usd: Portfolio value including cash.

    Returns:
        list[ClientEquity]: Client equity rows ranked by equity value, ties in input order.
    """

    materialized_profiles = list(profiles)
    total_deposited = sum(
        (Decimal(profile.total_deposited_usd or LEDGER_ZERO) for profile in materialized_profiles),
        LEDGER_ZERO,
    )

    client_equities: list[ClientEquity] = []
    for profile in materialized_profiles:
        deposited = Decimal(profile.total_deposited_usd or LEDGER_ZERO)
        ownership_percent = ledger_percent(deposited, total_deposited)
        equity_value = total_portfolio_value_usd * ownership_percent / LEDGER_HUNDRED
        client_equities.append(
            ClientEquity(
                profile_id=profile.profile_id,
                name=(profile.name or "").strip() or _UNNAMED_CLIENT_LABEL,
                net_deposited_usd=deposited,
                ownership_percent=ownership_percent,
                equity_value_usd=equity_value,
                pnl_usd=equity_value - deposited,
            )
        )

    return sorted(client_equities, key=lambda client_equity: client_equity.equity_value_usd, reverse=True)


def ledger_replay_net_deposits(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Net DEPOSIT and WITHDRAW cash movements per client profile.

    Fund-level rows without a profile and trade rows are ignored.

    Args:
        transactions: Ledger transactions.

    Returns:
        dict[str, Decimal]: Net deposited capital keyed by profile id.

    Raises:
        ValueError: Raised when a transaction type is unsupported.
    """

    net_deposits: dict[str, Decimal] = {}
    for transaction in transactions:
        if transaction.profile_id is None:
            continue
        transaction_type = domain_normalize_transaction_type(transaction.transaction_type)
        if transaction_type == TRANSACTION_TYPE_DEPOSIT:
            signed_value = Decimal(transaction.value_usd)
        elif transaction_type == TRANSACTION_TYPE_WITHDRAW:
            signed_value = -Decimal(transaction.value_usd)
        else:
            continue
        net_deposits[transaction.profile_id] = net_deposits.get(transaction.profile_id, LEDGER_ZERO) + signed_value
    return net_deposits


def ledger_detect_deposit_drift(
    profiles: Iterable[Profile],
    net_deposits: Mapping[str, Decimal],
    tolerance_usd: Decimal = Decimal("0.01"),
) -> list[DepositDriftRecord]:
    """Compare declared profile deposits against the ledger replay.

    Args:
        profiles: Client profiles carrying declared totals.
        net_deposits: Ledger-replayed net deposits keyed by profile id.
        tolerance_usd: Absolute difference tolerated before flagging drift.

    Returns:
        list[DepositDriftRecord]: Profiles whose declared total disagrees with the ledger.
    """

    drift_records: list[DepositDriftRecord] = []
    for profile in profiles:
        declared_total = Decimal(profile.total_deposited_usd or LEDGER_ZERO)
        ledger_total = net_deposits.get(profile.profile_id, LEDGER_ZERO)
        difference = declared_total - ledger_total
        if abs(difference) > tolerance_usd:
            drift_records.append(
                DepositDriftRecord(
                    profile_id=profile.profile_id,
                    declared_total_usd=declared_total,
                    ledger_total_usd=ledger_total,
                    difference_usd=difference,
                )
            )
    return drift_records


__all__ = ["ledger_allocate_ownership", "ledger_detect_deposit_drift", "ledger_replay_net_deposits"]
