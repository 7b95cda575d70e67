"""Database layer package for all SQL and persistence boundaries."""

from .health import SQLAlchemyDatabaseHealthService
from .interfaces import (
	DatabaseHealthPort,
	LedgerStoreRepositoryPort,
	ProfileCreateRequest,
	ProfileNotFoundError,
	TransactionAppendRequest,
)
from .ledger_store import SQLAlchemyLedgerStoreService
from .session import db_create_engine

__all__ = [
	"DatabaseHealthPort",
	"LedgerStoreRepositoryPort",
	"ProfileCreateRequest",
	"ProfileNotFoundError",
	"TransactionAppendRequest",
	"SQLAlchemyDatabaseHealthService",
	"SQLAlchemyLedgerStoreService",
	"db_create_engine",
]
