"""JSON serialization helpers for ledger records and engine outputs.

Decimal values are serialized as strings so no precision is lost in transit.
"""

from __future__ import annotations

from decimal import Decimal

from fund_ledger.domain import Profile, Transaction
from fund_ledger.ledger import (
    ClientEquity,
    DepositDriftRecord,
    LedgerDataQualityWarning,
    PortfolioDashboardResult,
    PortfolioSnapshot,
    PositionValuation,
    RealizedSaleRecord,
)


def api_decimal_to_text(value: Decimal | None) -> str | None:
    """Render a Decimal without exponent notation."""

    if value is None:
        return None
    return format(value, "f")


def api_serialize_transaction(transaction: Transaction) -> dict[str, object]:
    """Serialize one ledger transaction."""

    return {
        "transaction_id": transaction.transaction_id,
        "created_at_utc": transaction.created_at_utc.isoformat(),
        "profile_id": transaction.profile_id,
        "transaction_type": transaction.transaction_type,
        "asset": transaction.asset,
        "value_usd": api_decimal_to_text(transaction.value_usd),
        "asset_quantity": api_decimal_to_text(transaction.asset_quantity),
        "price_per_unit_usd": api_decimal_to_text(transaction.price_per_unit_usd),
    }


def api_serialize_profile(profile: Profile) -> dict[str, object]:
    """Serialize one client profile."""

    return {
        "profile_id": profile.profile_id,
        "name": profile.name,
        "total_deposited_usd": api_decimal_to_text(profile.total_deposited_usd),
        "created_at_utc": None if profile.created_at_utc is None else profile.created_at_utc.isoformat(),
        "email": profile.email,
        "phone_number": profile.phone_number,
    }


def api_serialize_position(valuation: PositionValuation) -> dict[str, object]:
    """Serialize one valued position."""

    return {
        "asset": valuation.asset,
        "quantity_held": api_decimal_to_text(valuation.quantity_held),
        "cost_basis_usd": api_decimal_to_text(valuation.cost_basis_usd),
        "live_price_usd": api_decimal_to_text(valuation.live_price_usd),
        "usd_7d_change": api_decimal_to_text(valuation.usd_7d_change),
        "market_value_usd": api_decimal_to_text(valuation.market_value_usd),
        "unrealized_pnl_usd": api_decimal_to_text(valuation.unrealized_pnl_usd),
        "unrealized_pnl_percent": api_decimal_to_text(valuation.unrealized_pnl_percent),
        "price_missing": valuation.price_missing,
    }


def api_serialize_snapshot(snapshot: PortfolioSnapshot) -> dict[str, object]:
    """Serialize portfolio totals and ranked positions."""

    return {
        "cash_balance_usd": api_decimal_to_text(snapshot.cash_balance_usd),
        "total_market_value_usd": api_decimal_to_text(snapshot.total_market_value_usd),
        "total_cost_basis_usd": api_decimal_to_text(snapshot.total_cost_basis_usd),
        "total_unrealized_pnl_usd": api_decimal_to_text(snapshot.total_unrealized_pnl_usd),
        "total_unrealized_pnl_percent": api_decimal_to_text(snapshot.total_unrealized_pnl_percent),
        "total_portfolio_value_usd": api_decimal_to_text(snapshot.total_portfolio_value_usd),
        "missing_price_assets": list(snapshot.missing_price_assets),
        "positions": [api_serialize_position(valuation) for valuation in snapshot.positions],
    }


def api_serialize_client_equity(client_equity: ClientEquity) -> dict[str, object]:
    """Serialize one client ownership row."""

    return {
        "profile_id": client_equity.profile_id,
        "name": client_equity.name,
        "net_deposited_usd": api_decimal_to_text(client_equity.net_deposited_usd),
        "ownership_percent": api_decimal_to_text(client_equity.ownership_percent),
        "equity_value_usd": api_decimal_to_text(client_equity.equity_value_usd),
        "pnl_usd": api_decimal_to_text(client_equity.pnl_usd),
    }


def api_serialize_realized_sale(sale: RealizedSaleRecord) -> dict[str, object]:
    """Serialize one realized P&L record."""

    return {
        "transaction_id": sale.transaction_id,
        "asset_label": sale.asset_label,
        "sold_at_utc": sale.sold_at_utc.isoformat(),
        "quantity_sold": api_decimal_to_text(sale.quantity_sold),
        "proceeds_usd": api_decimal_to_text(sale.proceeds_usd),
        "cost_of_sold_usd": api_decimal_to_text(sale.cost_of_sold_usd),
        "realized_pnl_usd": api_decimal_to_text(sale.realized_pnl_usd),
        "pnl_percent": api_decimal_to_text(sale.pnl_percent),
    }


def api_serialize_warning(warning: LedgerDataQualityWarning) -> dict[str, object]:
    """Serialize one data-quality warning."""

    return {
        "code": warning.code,
        "transaction_id": warning.transaction_id,
        "asset": warning.asset,
        "detail": warning.detail,
    }


def api_serialize_deposit_drift(drift_record: DepositDriftRecord) -> dict[str, object]:
    """Serialize one deposit drift record."""

    return {
        "profile_id": drift_record.profile_id,
        "declared_total_usd": api_decimal_to_text(drift_record.declared_total_usd),
        "ledger_total_usd": api_decimal_to_text(drift_record.ledger_total_usd),
        "difference_usd": api_decimal_to_text(drift_record.difference_usd),
    }


def api_serialize_dashboard(result: PortfolioDashboardResult) -> dict[str, object]:
    """Serialize one full dashboard computation pass."""

    return {
        "snapshot": api_serialize_snapshot(result.snapshot),
        "clients": [api_serialize_client_equity(client_equity) for client_equity in result.client_equities],
        "realized_sales": [api_serialize_realized_sale(sale) for sale in result.realized_sales],
        "warnings": [api_serialize_warning(warning) for warning in result.warnings],
        "deposit_drift": [api_serialize_deposit_drift(drift_record) for drift_record in result.deposit_drift],
        "price_status": result.price_status,
        "diagnostics": list(result.diagnostics),
    }
