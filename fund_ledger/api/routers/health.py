"""Ledger store liveness route."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from fund_ledger.db import DatabaseHealthPort
from fund_ledger.domain import domain_utc_now


def api_create_health_router(db_health_service: DatabaseHealthPort) -> APIRouter:
    """Create the `/health` router backed by the ledger store probe.

    Args:
        db_health_service: Ledger store health probe.

    Returns:
        APIRouter: Router exposing `/health`.

    Raises:
        ValueError: Raised when db_health_service is None.
    """

    if db_health_service is None:
        raise ValueError("db_health_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Probe the ledger store and report probe latency.

        Returns:
            JSONResponse: 200 when the ledger store answers, 503 otherwise.
        """

        checked_at = domain_utc_now()
        ledger_store: dict[str, object] = {"target": db_health_service.db_connection_label()}
        try:
            probe = db_health_service.db_check_health()
            ledger_store.update(state=probe.status, detail=probe.detail)
            status_code = status.HTTP_200_OK
        except ConnectionError as error:
            ledger_store.update(state="down", detail=str(error))
            status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        ledger_store["latency_ms"] = round((domain_utc_now() - checked_at).total_seconds() * 1000, 3)

        return JSONResponse(
            content={
                "status": "ok" if status_code == status.HTTP_200_OK else "degraded",
                "app": "up",
                "checked_at_utc": checked_at.isoformat(),
                "ledger_store": ledger_store,
            },
            status_code=status_code,
        )

    return router
