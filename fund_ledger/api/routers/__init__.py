"""API router package for ledger, portfolio and price endpoints."""

from .health import api_create_health_router
from .ledger import api_create_ledger_router
from .portfolio import api_create_portfolio_router
from .prices import api_create_prices_router

__all__ = [
	"api_create_health_router",
	"api_create_ledger_router",
	"api_create_portfolio_router",
	"api_create_prices_router",
]
