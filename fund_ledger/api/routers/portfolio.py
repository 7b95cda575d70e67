"""Portfolio API router composition for dashboard and realized P&L reads."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from fund_ledger.api.serializers import api_serialize_dashboard, api_serialize_realized_sale
from fund_ledger.ledger import PortfolioDashboardService


def api_create_portfolio_router(dashboard_service: PortfolioDashboardService) -> APIRouter:
    """Create portfolio router exposing the accounting engine outputs.

    Args:
        dashboard_service: Service running one computation pass per request.

    Returns:
        APIRouter: Router exposing `/portfolio` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if dashboard_service is None:
        raise ValueError("dashboard_service must not be None")

    router = APIRouter(prefix="/portfolio", tags=["portfolio"])

    @router.get("/dashboard")
    def api_portfolio_dashboard() -> JSONResponse:
        """Return valuation, ownership, realized P&L and diagnostics.

        Returns:
            JSONResponse: Dashboard payload, or an error envelope when the ledger is unavailable.
        """

        try:
            result = dashboard_service.ledger_dashboard_build()
        except RuntimeError as error:
            return api_ledger_error_response(error)
        except ValueError as error:
            return api_ledger_contract_error_response(error)
        return JSONResponse(content=api_serialize_dashboard(result), status_code=status.HTTP_200_OK)

    @router.get("/realized")
    def api_portfolio_realized() -> JSONResponse:
        """Return realized P&L records, oldest sale first.

        Returns:
            JSONResponse: Realized sale list envelope.
        """

        try:
            realized_sales = dashboard_service.ledger_realized_list()
        except RuntimeError as error:
            return api_ledger_error_response(error)
        except ValueError as error:
            return api_ledger_contract_error_response(error)

        payload = {
            "items": [api_serialize_realized_sale(sale) for sale in realized_sales],
            "returned": len(realized_sales),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_ledger_error_response(error: Exception) -> JSONResponse:
    """Build the 503 envelope returned when the ledger store cannot be reached."""

    payload = {
        "status": "error",
        "code": "LEDGER_UNAVAILABLE",
        "message": str(error),
    }
    return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


def api_ledger_contract_error_response(error: Exception) -> JSONResponse:
    """Build the 500 envelope returned when stored ledger rows break the record contract."""

    payload = {
        "status": "error",
        "code": "LEDGER_CONTRACT_VIOLATION",
        "message": str(error),
    }
    return JSONResponse(content=payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


__all__ = ["api_create_portfolio_router", "api_ledger_error_response", "api_ledger_contract_error_response"]
