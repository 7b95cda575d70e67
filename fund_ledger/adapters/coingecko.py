"""CoinGecko REST adapter implementing the price oracle port."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Final

import httpx

from fund_ledger.ledger.interfaces import PriceOraclePort, PriceQuote

from .price_errors import (
    PriceOracleConnectionError,
    PriceOracleResponseError,
    PriceOracleTimeoutError,
)


logger = logging.getLogger(__name__)


class CoinGeckoPriceOracleAdapter(PriceOraclePort):
    """Price oracle backed by the CoinGecko v3 markets, history and chart endpoints."""

    _USER_AGENT: Final[str] = "crypto-fund-ledger/1.0 (Python/httpx)"
    _API_KEY_HEADER: Final[str] = "x-cg-demo-api-key"
    _QUOTE_CURRENCY: Final[str] = "usd"

    def __init__(
        self,
        asset_ids: dict[str, str],
        base_url: str = "https://api.coingecko.com/api/v3",
        request_timeout_seconds: float = 10.0,
        api_key: str | None = None,
    ):
        """Initialize CoinGecko adapter.

        Args:
            asset_ids: Asset symbol to CoinGecko coin id mapping.
            base_url: REST base URL.
            request_timeout_seconds: HTTP request timeout in seconds.
            api_key: Optional CoinGecko demo API key.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip()
        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")
        if asset_ids is None:
            raise ValueError("asset_ids must not be None")

        self._asset_ids = {symbol.strip().upper(): coin_id.strip() for symbol, coin_id in asset_ids.items()}
        headers = {"User-Agent": self._USER_AGENT, "Accept": "application/json"}
        if api_key is not None and api_key.strip():
            headers[self._API_KEY_HEADER] = api_key.strip()
        self._client = httpx.Client(
            base_url=normalized_base_url.rstrip("/"),
            timeout=request_timeout_seconds,
            headers=headers,
        )

    def adapter_source_name(self) -> str:
        """Return stable adapter source label."""

        return "coingecko"

    def adapter_close(self) -> None:
        """Release the pooled HTTP client."""

        self._client.close()

    def adapter_fetch_prices(self, asset_symbols: list[str]) -> dict[str, PriceQuote]:
        """Fetch current USD price and 7-day change for the requested symbols.

        Args:
            asset_symbols: Asset symbols to price.

        Returns:
            dict[str, PriceQuote]: Quotes keyed by requested symbol. Symbols without a
            coin id mapping, or absent from the upstream payload, are omitted.

        Raises:
            ConnectionError: Raised for network and non-success HTTP status.
            TimeoutError: Raised when the request times out.
            ValueError: Raised when the upstream payload is malformed.
        """

        symbols_by_coin_id: dict[str, list[str]] = {}
        for symbol in asset_symbols:
            coin_id = self._asset_ids.get(symbol.strip().upper())
            if coin_id is None:
                logger.debug("no coin id mapping for asset symbol=%s", symbol)
                continue
            symbols_by_coin_id.setdefault(coin_id, []).append(symbol)

        if not symbols_by_coin_id:
            return {}

        payload = self._adapter_http_get_json(
            path="/coins/markets",
            query_parameters={
                "vs_currency": self._QUOTE_CURRENCY,
                "ids": ",".join(symbols_by_coin_id),
                "price_change_percentage": "7d",
            },
        )
        if not isinstance(payload, list):
            raise PriceOracleResponseError("coins/markets payload must be a list")

        quotes: dict[str, PriceQuote] = {}
        for market_row in payload:
            if not isinstance(market_row, dict):
                continue
            symbols = symbols_by_coin_id.get(str(market_row.get("id")))
            current_price = self._adapter_to_decimal(market_row.get("current_price"))
            if not symbols or current_price is None:
                continue
            quote = PriceQuote(
                usd=current_price,
                usd_7d_change=self._adapter_to_decimal(market_row.get("price_change_percentage_7d_in_currency")),
            )
            for symbol in symbols:
                quotes[symbol] = quote
        return quotes

    def adapter_fetch_historical_price(self, asset_symbol: str, on_date: date) -> Decimal:
        """Fetch the USD price of one asset on a calendar date.

        Args:
            asset_symbol: Asset symbol.
            on_date: Calendar date to price.

        Returns:
            Decimal: Historical USD price, zero when the asset or day has no data.

        Raises:
            ConnectionError: Raised for network failures and non-404 HTTP errors.
            TimeoutError: Raised when the request times out.
        """

        coin_id = self._asset_ids.get(asset_symbol.strip().upper())
        if coin_id is None:
            return Decimal("0")

        try:
            payload = self._adapter_http_get_json(
                path=f"/coins/{coin_id}/history",
                query_parameters={"date": on_date.strftime("%d-%m-%Y"), "localization": "false"},
            )
        except PriceOracleConnectionError as error:
            if error.status_code == 404:
                return Decimal("0")
            raise

        market_data = payload.get("market_data") if isinstance(payload, dict) else None
        current_price = market_data.get("current_price") if isinstance(market_data, dict) else None
        usd_price = current_price.get(self._QUOTE_CURRENCY) if isinstance(current_price, dict) else None
        return self._adapter_to_decimal(usd_price) or Decimal("0")

    def adapter_fetch_market_chart(self, asset_symbol: str, days: int = 90) -> list[tuple[int, Decimal]]:
        """Fetch daily USD price points for one asset.

        Args:
            asset_symbol: Asset symbol.
            days: Look-back window in days.

        Returns:
            list[tuple[int, Decimal]]: `(timestamp_ms, price)` points, empty for unknown assets.

        Raises:
            ValueError: Raised when days is not positive or the payload is malformed.
            ConnectionError: Raised for network and non-success HTTP status.
            TimeoutError: Raised when the request times out.
        """

        if days < 1:
            raise ValueError("days must be >= 1")

        coin_id = self._asset_ids.get(asset_symbol.strip().upper())
        if coin_id is None:
            return []

        payload = self._adapter_http_get_json(
            path=f"/coins/{coin_id}/market_chart",
            query_parameters={"vs_currency": self._QUOTE_CURRENCY, "days": str(days), "interval": "daily"},
        )
        raw_points = payload.get("prices", []) if isinstance(payload, dict) else None
        if not isinstance(raw_points, list):
            raise PriceOracleResponseError("market_chart payload must contain a prices list")

        chart_points: list[tuple[int, Decimal]] = []
        for raw_point in raw_points:
            if not isinstance(raw_point, (list, tuple)) or len(raw_point) != 2:
                raise PriceOracleResponseError("market_chart price point must be a [timestamp, price] pair")
            price = self._adapter_to_decimal(raw_point[1])
            if price is None:
                continue
            chart_points.append((int(raw_point[0]), price))
        return chart_points

    def _adapter_http_get_json(self, path: str, query_parameters: dict[str, str]) -> Any:
        """Execute one HTTP GET and decode the JSON body.

        Args:
            path: Endpoint path relative to the base URL.
            query_parameters: Query string parameters.

        Returns:
            Any: Decoded JSON payload.

        Raises:
            PriceOracleTimeoutError: Raised when the transport times out.
            PriceOracleConnectionError: Raised for network errors and HTTP status >= 400.
            PriceOracleResponseError: Raised when the body is not valid JSON.
        """

        try:
            response = self._client.get(path, params=query_parameters)
        except httpx.TimeoutException as error:
            raise PriceOracleTimeoutError(f"price oracle request timed out: path={path}") from error
        except httpx.HTTPError as error:
            raise PriceOracleConnectionError(f"price oracle request failed: path={path}") from error

        if response.status_code >= 400:
            raise PriceOracleConnectionError(
                f"price oracle returned HTTP {response.status_code}: path={path}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as error:
            raise PriceOracleResponseError(f"price oracle returned non-JSON payload: path={path}") from error

    def _adapter_to_decimal(self, value: object) -> Decimal | None:
        """Convert a JSON number to Decimal, returning None for missing or invalid values."""

        if value is None or isinstance(value, bool):
            return None
        try:
            return Decimal(str(value))
        except (InvalidOperation, ValueError):
            return None


__all__ = ["CoinGeckoPriceOracleAdapter"]
