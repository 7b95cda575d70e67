"""API layer package for the fund ledger FastAPI application."""

from .application import create_api_application

__all__ = ["create_api_application"]
