"""Price history API router composition for per-asset chart lookups."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from fund_ledger.adapters import PriceHistoryPort
from fund_ledger.api.serializers import api_decimal_to_text


def api_create_prices_router(price_history: PriceHistoryPort) -> APIRouter:
    """Create price router exposing chart and historical price endpoints.

    Args:
        price_history: Price oracle adapter with history support.

    Returns:
        APIRouter: Router exposing `/prices` endpoints.

    Raises:
        ValueError: Raised when price_history is invalid.
    """

    if price_history is None:
        raise ValueError("price_history must not be None")

    router = APIRouter(prefix="/prices", tags=["prices"])

    @router.get("/{asset_symbol}/chart")
    def api_price_chart(asset_symbol: str, days: int = Query(default=90, ge=1, le=365)) -> JSONResponse:
        """Return daily price points for one asset.

        Args:
            asset_symbol: Asset symbol such as `BTC`.
            days: Look-back window in days.

        Returns:
            JSONResponse: Chart points envelope, or 502 when the oracle fails.
        """

        normalized_symbol = asset_symbol.strip().upper()
        try:
            points = price_history.adapter_fetch_market_chart(normalized_symbol, days=days)
        except (ConnectionError, TimeoutError, ValueError) as error:
            return api_price_oracle_error_response(error)

        payload = {
            "asset": normalized_symbol,
            "days": days,
            "source": price_history.adapter_source_name(),
            "points": [
                {"timestamp_ms": timestamp_ms, "price_usd": api_decimal_to_text(price)}
                for timestamp_ms, price in points
            ],
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/{asset_symbol}/history")
    def api_price_history(asset_symbol: str, on_date: date = Query(alias="date")) -> JSONResponse:
        """Return the USD price of one asset on a calendar date.

        Args:
            asset_symbol: Asset symbol such as `BTC`.
            on_date: Calendar date in `YYYY-MM-DD` format.

        Returns:
            JSONResponse: Historical price payload, or 502 when the oracle fails.
        """

        normalized_symbol = asset_symbol.strip().upper()
        try:
            price = price_history.adapter_fetch_historical_price(normalized_symbol, on_date)
        except (ConnectionError, TimeoutError, ValueError) as error:
            return api_price_oracle_error_response(error)

        payload = {
            "asset": normalized_symbol,
            "date": on_date.isoformat(),
            "price_usd": api_decimal_to_text(price),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_price_oracle_error_response(error: Exception) -> JSONResponse:
    """Build the 502 envelope returned when the upstream price oracle fails."""

    payload = {
        "status": "error",
        "code": "PRICE_ORACLE_UNAVAILABLE",
        "message": str(error),
    }
    return JSONResponse(content=payload, status_code=status.HTTP_502_BAD_GATEWAY)


__all__ = ["api_create_prices_router"]
