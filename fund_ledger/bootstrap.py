"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from fund_ledger.adapters import CoinGeckoPriceOracleAdapter
from fund_ledger.api import create_api_application
from fund_ledger.config import AppSettings, config_load_settings
from fund_ledger.db import SQLAlchemyDatabaseHealthService, SQLAlchemyLedgerStoreService, db_create_engine
from fund_ledger.ledger import PortfolioDashboardService


def bootstrap_create_price_oracle(settings: AppSettings) -> CoinGeckoPriceOracleAdapter:
    """Build the CoinGecko price oracle adapter from runtime settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        CoinGeckoPriceOracleAdapter: Configured price oracle adapter.
    """

    return CoinGeckoPriceOracleAdapter(
        asset_ids=settings.price_oracle_asset_ids,
        base_url=settings.price_oracle_base_url,
        request_timeout_seconds=settings.price_oracle_timeout_seconds,
        api_key=settings.price_oracle_api_key,
    )


def bootstrap_create_dashboard_service(
    settings: AppSettings | None = None,
    price_oracle: CoinGeckoPriceOracleAdapter | None = None,
) -> PortfolioDashboardService:
    """Assemble the portfolio dashboard service with live store and oracle dependencies.

    Args:
        settings: Optional pre-loaded settings; loaded from environment when omitted.
        price_oracle: Optional caller-owned oracle adapter; built from settings when omitted.

    Returns:
        PortfolioDashboardService: Fully wired dashboard service.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    engine = db_create_engine(database_url=resolved_settings.database_url)
    return PortfolioDashboardService(
        ledger_repository=SQLAlchemyLedgerStoreService(engine=engine),
        price_oracle=bootstrap_create_price_oracle(resolved_settings) if price_oracle is None else price_oracle,
        dust_epsilon=resolved_settings.ledger_dust_epsilon,
        drift_tolerance_usd=resolved_settings.ownership_drift_tolerance_usd,
    )


def bootstrap_create_application() -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    settings = config_load_settings()
    engine = db_create_engine(database_url=settings.database_url)
    db_health_service = SQLAlchemyDatabaseHealthService(engine=engine)
    ledger_repository = SQLAlchemyLedgerStoreService(engine=engine)
    price_oracle = bootstrap_create_price_oracle(settings)
    dashboard_service = PortfolioDashboardService(
        ledger_repository=ledger_repository,
        price_oracle=price_oracle,
        dust_epsilon=settings.ledger_dust_epsilon,
        drift_tolerance_usd=settings.ownership_drift_tolerance_usd,
    )
    return create_api_application(
        settings=settings,
        db_health_service=db_health_service,
        ledger_repository=ledger_repository,
        dashboard_service=dashboard_service,
        price_history=price_oracle,
        shutdown_callbacks=(price_oracle.adapter_close,),
    )
