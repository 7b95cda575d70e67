"""Typed interfaces for adapter-layer responsibilities."""

from datetime import date
from decimal import Decimal
from typing import Protocol

from fund_ledger.ledger.interfaces import PriceOraclePort, PriceQuote


class PriceHistoryPort(PriceOraclePort, Protocol):
    """Price oracle extension for historical price and chart lookups."""

    def adapter_fetch_historical_price(self, asset_symbol: str, on_date: date) -> Decimal:
        """Return the USD price of one asset on a calendar date.

        Args:
            asset_symbol: Asset symbol.
            on_date: Calendar date to price.

        Returns:
            Decimal: Historical price, zero when no data exists.

        Raises:
            ConnectionError: Raised when the upstream oracle cannot be reached.
        """

    def adapter_fetch_market_chart(self, asset_symbol: str, days: int = 90) -> list[tuple[int, Decimal]]:
        """Return daily `(timestamp_ms, price)` points for one asset.

        Args:
            asset_symbol: Asset symbol.
            days: Look-back window in days.

        Returns:
            list[tuple[int, Decimal]]: Chart points, empty for unknown assets.

        Raises:
            ConnectionError: Raised when the upstream oracle cannot be reached.
        """


__all__ = ["PriceHistoryPort", "PriceOraclePort", "PriceQuote"]
