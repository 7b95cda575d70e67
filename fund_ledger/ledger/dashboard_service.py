"""Dashboard computation pass over the ledger store and price oracle."""
# pylint: disable=too-few-public-methods

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from fund_ledger.db import LedgerStoreRepositoryPort
from fund_ledger.domain import domain_build_stage_event, domain_utc_now

from .interfaces import (
    LEDGER_DUST_EPSILON,
    ClientEquity,
    DepositDriftRecord,
    LedgerDataQualityWarning,
    PortfolioSnapshot,
    PriceOraclePort,
    PriceQuote,
    RealizedSaleRecord,
)
from .ownership_allocator import ledger_allocate_ownership, ledger_detect_deposit_drift, ledger_replay_net_deposits
from .position_aggregator import ledger_aggregate_positions
from .realized_tracker import ledger_track_realized_pnl
from .valuation_engine import ledger_valuate_portfolio


logger = logging.getLogger(__name__)

PRICE_STATUS_OK = "ok"
PRICE_STATUS_DEGRADED = "degraded"


@dataclass(frozen=True)
class PortfolioDashboardResult:
    """Result payload for one dashboard computation pass.

    Attributes:
        snapshot: Portfolio valuation with ranked positions and totals.
        client_equities: Client ownership rows ranked by equity value.
        realized_sales: Realized P&L records in chronological order.
        warnings: Ledger data-quality warnings.
        deposit_drift: Profiles whose declared deposits disagree with the ledger.
        price_status: `ok`, or `degraded` when the price oracle failed.
        diagnostics: Structured stage timeline for the pass.
    """

    snapshot: PortfolioSnapshot
    client_equities: tuple[ClientEquity, ...]
    realized_sales: tuple[RealizedSaleRecord, ...]
    warnings: tuple[LedgerDataQualityWarning, ...]
    deposit_drift: tuple[DepositDriftRecord, ...]
    price_status: str
    diagnostics: tuple[dict[str, object], ...]


class PortfolioDashboardService:
    """Read the ledger, fetch prices and run the accounting engine."""

    def __init__(
        self,
        ledger_repository: LedgerStoreRepositoryPort,
        price_oracle: PriceOraclePort,
        dust_epsilon: Decimal = LEDGER_DUST_EPSILON,
        drift_tolerance_usd: Decimal = Decimal("0.01"),
    ):
        """Initialize dashboard service dependencies.

        Args:
            ledger_repository: DB-layer ledger store repository.
            price_oracle: Live price lookup adapter.
            dust_epsilon: Closed-position quantity threshold.
            drift_tolerance_usd: Allowed declared-vs-ledger deposit gap.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if ledger_repository is None:
            raise ValueError("ledger_repository must not be None")
        if price_oracle is None:
            raise ValueError("price_oracle must not be None")
        if dust_epsilon <= Decimal("0"):
            raise ValueError("dust_epsilon must be > 0")
        if drift_tolerance_usd < Decimal("0"):
            raise ValueError("drift_tolerance_usd must be >= 0")

        self._ledger_repository = ledger_repository
        self._price_oracle = price_oracle
        self._dust_epsilon = dust_epsilon
        self._drift_tolerance_usd = drift_tolerance_usd

    def ledger_dashboard_build(self) -> PortfolioDashboardResult:
        """Run one full dashboard computation pass.

        Ledger and profile reads are hard dependencies. Price oracle failures
        degrade the pass to zero prices instead of failing it.

        Returns:
            PortfolioDashboardResult: Valuation, ownership and diagnostics.

        Raises:
            RuntimeError: Raised when the ledger store cannot be read.
            ValueError: Raised when a stored transaction violates the ledger contract.
        """

        ledger_started_at = domain_utc_now()
        timeline: list[dict[str, object]] = [domain_build_stage_event(stage="ledger", status="started")]
        transactions = self._ledger_repository.db_transaction_list()
        profiles = self._ledger_repository.db_profile_list()
        timeline.append(
            domain_build_stage_event(
                stage="ledger",
                status="completed",
                details={"transaction_count": len(transactions), "profile_count": len(profiles)},
                started_at_utc=ledger_started_at,
            )
        )

        aggregation = ledger_aggregate_positions(transactions, dust_epsilon=self._dust_epsilon)
        for warning in aggregation.warnings:
            logger.warning(
                "ledger data-quality warning code=%s transaction_id=%s asset=%s detail=%s",
                warning.code,
                warning.transaction_id,
                warning.asset,
                warning.detail,
            )

        held_assets = [
            asset
            for asset, position in aggregation.positions.items()
            if position.quantity_held > self._dust_epsilon
        ]
        prices, price_status = self._ledger_fetch_prices(held_assets, timeline)

        snapshot = ledger_valuate_portfolio(
            cash_balance_usd=aggregation.cash_balance_usd,
            positions=aggregation.positions,
            prices=prices,
            dust_epsilon=self._dust_epsilon,
        )
        client_equities = ledger_allocate_ownership(profiles, snapshot.total_portfolio_value_usd)
        deposit_drift = ledger_detect_deposit_drift(
            profiles,
            ledger_replay_net_deposits(transactions),
            tolerance_usd=self._drift_tolerance_usd,
        )
        for drift_record in deposit_drift:
            logger.warning(
                "client deposit drift profile_id=%s declared=%s ledger=%s",
                drift_record.profile_id,
                drift_record.declared_total_usd,
                drift_record.ledger_total_usd,
            )
        realized_sales = tuple(ledger_track_realized_pnl(transactions, dust_epsilon=self._dust_epsilon))

        timeline.append(
            domain_build_stage_event(
                stage="valuation",
                status="completed",
                details={
                    "position_count": len(snapshot.positions),
                    "missing_price_assets": list(snapshot.missing_price_assets),
                    "warning_count": len(aggregation.warnings),
                    "deposit_drift_count": len(deposit_drift),
                },
            )
        )

        return PortfolioDashboardResult(
            snapshot=snapshot,
            client_equities=tuple(client_equities),
            realized_sales=realized_sales,
            warnings=aggregation.warnings,
            deposit_drift=tuple(deposit_drift),
            price_status=price_status,
            diagnostics=tuple(timeline),
        )

    def ledger_realized_list(self) -> list[RealizedSaleRecord]:
        """Replay the ledger and return realized P&L records.

        Returns:
            list[RealizedSaleRecord]: One record per SELL with a cost basis, oldest first.

        Raises:
            RuntimeError: Raised when the ledger store cannot be read.
        """

        transactions = self._ledger_repository.db_transaction_list()
        return list(ledger_track_realized_pnl(transactions, dust_epsilon=self._dust_epsilon))

    def _ledger_fetch_prices(
        self,
        asset_symbols: list[str],
        timeline: list[dict[str, object]],
    ) -> tuple[dict[str, PriceQuote], str]:
        """Fetch live prices, degrading to an empty map on oracle failure.

        Args:
            asset_symbols: Held asset symbols.
            timeline: Mutable diagnostics timeline list.

        Returns:
            tuple[dict[str, PriceQuote], str]: Quotes and price status marker.
        """

        if not asset_symbols:
            timeline.append(domain_build_stage_event(stage="prices", status="skipped"))
            return {}, PRICE_STATUS_OK

        prices_started_at = domain_utc_now()
        timeline.append(
            domain_build_stage_event(
                stage="prices",
                status="started",
                details={"source": self._price_oracle.adapter_source_name(), "assets": list(asset_symbols)},
            )
        )
        try:
            prices = self._price_oracle.adapter_fetch_prices(asset_symbols)
        except (ConnectionError, TimeoutError, ValueError) as error:
            logger.warning("price oracle unavailable, valuing holdings at zero: %s", error)
            timeline.append(
                domain_build_stage_event(
                    stage="prices",
                    status=PRICE_STATUS_DEGRADED,
                    details={"error_type": type(error).__name__, "error_message": str(error)},
                    started_at_utc=prices_started_at,
                )
            )
            return {}, PRICE_STATUS_DEGRADED

        timeline.append(
            domain_build_stage_event(
                stage="prices",
                status="completed",
                details={"resolved_assets": sorted(prices)},
                started_at_utc=prices_started_at,
            )
        )
        return dict(prices), PRICE_STATUS_OK


__all__ = ["PortfolioDashboardResult", "PortfolioDashboardService", "PRICE_STATUS_DEGRADED", "PRICE_STATUS_OK"]
