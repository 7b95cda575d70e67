"""Domain models used across application layer boundaries."""

from .models import (
	CASH_ASSET_SYMBOL,
	TRANSACTION_TYPE_BUY,
	TRANSACTION_TYPE_DEPOSIT,
	TRANSACTION_TYPE_SELL,
	TRANSACTION_TYPE_WITHDRAW,
	TRANSACTION_TYPES,
	HealthStatus,
	Profile,
	Transaction,
	domain_normalize_transaction_type,
)
from .timeline import domain_build_stage_event, domain_utc_now

__all__ = [
	"CASH_ASSET_SYMBOL",
	"TRANSACTION_TYPE_BUY",
	"TRANSACTION_TYPE_DEPOSIT",
	"TRANSACTION_TYPE_SELL",
	"TRANSACTION_TYPE_WITHDRAW",
	"TRANSACTION_TYPES",
	"HealthStatus",
	"Profile",
	"Transaction",
	"domain_build_stage_event",
	"domain_normalize_transaction_type",
	"domain_utc_now",
]
