"""Project-native typed exceptions for price oracle failures."""

from __future__ import annotations


class PriceOracleError(Exception):
    """Base exception for adapter-level price oracle failures.

    Attributes:
        status_code: Optional upstream HTTP status code.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PriceOracleConnectionError(PriceOracleError, ConnectionError):
    """Transport-level connectivity failure or non-success HTTP status."""


class PriceOracleTimeoutError(PriceOracleError, TimeoutError):
    """Transport timeout while waiting for the oracle."""


class PriceOracleResponseError(PriceOracleError, ValueError):
    """Upstream returned a payload that does not match the expected contract."""
