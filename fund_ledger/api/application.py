"""FastAPI application factory for the fund ledger service."""

from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fund_ledger.adapters import PriceHistoryPort
from fund_ledger.config import AppSettings
from fund_ledger.db import DatabaseHealthPort, LedgerStoreRepositoryPort
from fund_ledger.ledger import PortfolioDashboardService

from .routers import (
	api_create_health_router,
	api_create_ledger_router,
	api_create_portfolio_router,
	api_create_prices_router,
)


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    ledger_repository: LedgerStoreRepositoryPort,
    dashboard_service: PortfolioDashboardService,
    price_history: PriceHistoryPort | None = None,
    shutdown_callbacks: Sequence[Callable[[], None]] = (),
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Database health service used by health endpoints.
        ledger_repository: Ledger store repository for transaction and profile APIs.
        dashboard_service: Accounting pass service for portfolio APIs.
        price_history: Optional price history adapter; chart routes are omitted when None.
        shutdown_callbacks: Resource release hooks run once when the application stops.

    Returns:
        FastAPI: Framework application instance with all routers mounted.
    """

    @asynccontextmanager
    async def api_lifespan(_application: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            for shutdown_callback in shutdown_callbacks:
                shutdown_callback()

    application = FastAPI(title="Crypto Fund Ledger", lifespan=api_lifespan)

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return service identity for bootstrap verification."""

        return {
            "service": "crypto-fund-ledger",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(api_create_ledger_router(settings=settings, ledger_repository=ledger_repository))
    application.include_router(api_create_portfolio_router(dashboard_service=dashboard_service))
    if price_history is not None:
        application.include_router(api_create_prices_router(price_history=price_history))

    return application
