"""Ledger layer package for the portfolio accounting engine."""

from .interfaces import (
	LEDGER_DUST_EPSILON,
	ClientEquity,
	DepositDriftRecord,
	LedgerDataQualityWarning,
	PortfolioSnapshot,
	Position,
	PositionAggregationResult,
	PositionValuation,
	PriceOraclePort,
	PriceQuote,
	RealizedSaleRecord,
)
from .position_aggregator import ledger_aggregate_positions
from .valuation_engine import ledger_valuate_portfolio
from .realized_tracker import ledger_track_realized_pnl
from .ownership_allocator import ledger_allocate_ownership, ledger_detect_deposit_drift, ledger_replay_net_deposits
from .dashboard_service import PortfolioDashboardResult, PortfolioDashboardService

__all__ = [
	"LEDGER_DUST_EPSILON",
	"ClientEquity",
	"DepositDriftRecord",
	"LedgerDataQualityWarning",
	"PortfolioSnapshot",
	"Position",
	"PositionAggregationResult",
	"PositionValuation",
	"PriceOraclePort",
	"PriceQuote",
	"RealizedSaleRecord",
	"ledger_aggregate_positions",
	"ledger_valuate_portfolio",
	"ledger_track_realized_pnl",
	"ledger_allocate_ownership",
	"ledger_detect_deposit_drift",
	"ledger_replay_net_deposits",
	"PortfolioDashboardResult",
	"PortfolioDashboardService",
]
