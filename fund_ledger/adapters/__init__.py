"""Adapter layer package for price oracle integration boundaries."""

from .coingecko import CoinGeckoPriceOracleAdapter
from .interfaces import PriceHistoryPort, PriceOraclePort, PriceQuote
from .price_errors import (
	PriceOracleConnectionError,
	PriceOracleError,
	PriceOracleResponseError,
	PriceOracleTimeoutError,
)

__all__ = [
	"CoinGeckoPriceOracleAdapter",
	"PriceHistoryPort",
	"PriceOracleConnectionError",
	"PriceOracleError",
	"PriceOraclePort",
	"PriceOracleResponseError",
	"PriceOracleTimeoutError",
	"PriceQuote",
]
