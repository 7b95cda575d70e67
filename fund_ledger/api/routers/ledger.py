"""Ledger API router composition for transaction and client profile endpoints."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fund_ledger.api.serializers import api_serialize_profile, api_serialize_transaction
from fund_ledger.config import AppSettings
from fund_ledger.db import (
    LedgerStoreRepositoryPort,
    ProfileCreateRequest,
    ProfileNotFoundError,
    TransactionAppendRequest,
)

from .portfolio import api_ledger_error_response


class TransactionAppendBody(BaseModel):
    """Request body for appending one ledger transaction."""

    transaction_type: str = Field(min_length=1)
    asset: str = Field(default="USD", min_length=1)
    value_usd: Decimal = Field(gt=0)
    profile_id: str | None = None
    asset_quantity: Decimal | None = Field(default=None, gt=0)
    price_per_unit_usd: Decimal | None = Field(default=None, gt=0)
    created_at_utc: datetime | None = None


class ProfileCreateBody(BaseModel):
    """Request body for creating one client profile."""

    name: str = Field(min_length=1)
    initial_deposit_usd: Decimal = Field(default=Decimal("0"), ge=0)
    email: str | None = None
    phone_number: str | None = None


def api_create_ledger_router(
    settings: AppSettings,
    ledger_repository: LedgerStoreRepositoryPort,
) -> APIRouter:
    """Create ledger router exposing transaction and profile endpoints.

    Args:
        settings: Runtime settings used for pagination defaults.
        ledger_repository: DB-layer ledger store repository.

    Returns:
        APIRouter: Router exposing `/transactions` and `/profiles` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if ledger_repository is None:
        raise ValueError("ledger_repository must not be None")

    router = APIRouter(tags=["ledger"])

    @router.get("/transactions")
    def api_transaction_list(
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
        transaction_type: str | None = Query(default=None),
    ) -> JSONResponse:
        """List ledger transactions, newest first.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.
            transaction_type: Optional transaction type filter.

        Returns:
            JSONResponse: Transaction list envelope payload.
        """

        applied_limit = min(limit, settings.api_max_limit)
        try:
            transactions = ledger_repository.db_transaction_list_page(
                limit=applied_limit,
                offset=offset,
                transaction_type=transaction_type,
            )
        except RuntimeError as error:
            return api_ledger_error_response(error)
        except ValueError as error:
            return api_validation_error_response(error)

        payload = {
            "items": [api_serialize_transaction(transaction) for transaction in transactions],
            "page": {
                "limit": limit,
                "applied_limit": applied_limit,
                "offset": offset,
                "returned": len(transactions),
            },
            "filters": {"transaction_type": transaction_type},
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/transactions")
    def api_transaction_append(body: TransactionAppendBody) -> JSONResponse:
        """Append one transaction to the ledger.

        Args:
            body: Transaction append payload.

        Returns:
            JSONResponse: Persisted transaction with HTTP 201.
        """

        try:
            transaction = ledger_repository.db_transaction_append(
                TransactionAppendRequest(
                    transaction_type=body.transaction_type,
                    asset=body.asset,
                    value_usd=body.value_usd,
                    profile_id=body.profile_id,
                    asset_quantity=body.asset_quantity,
                    price_per_unit_usd=body.price_per_unit_usd,
                    created_at_utc=body.created_at_utc,
                )
            )
        except ProfileNotFoundError as error:
            payload = {"status": "error", "code": "PROFILE_NOT_FOUND", "message": str(error)}
            return JSONResponse(content=payload, status_code=status.HTTP_404_NOT_FOUND)
        except RuntimeError as error:
            return api_ledger_error_response(error)
        except ValueError as error:
            return api_validation_error_response(error)

        return JSONResponse(content=api_serialize_transaction(transaction), status_code=status.HTTP_201_CREATED)

    @router.get("/profiles")
    def api_profile_list() -> JSONResponse:
        """List client profiles.

        Returns:
            JSONResponse: Profile list envelope payload.
        """

        try:
            profiles = ledger_repository.db_profile_list()
        except RuntimeError as error:
            return api_ledger_error_response(error)

        payload = {
            "items": [api_serialize_profile(profile) for profile in profiles],
            "returned": len(profiles),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/profiles")
    def api_profile_create(body: ProfileCreateBody) -> JSONResponse:
        """Create one client profile and log its opening deposit.

        Args:
            body: Profile creation payload.

        Returns:
            JSONResponse: Persisted profile with HTTP 201.
        """

        try:
            profile = ledger_repository.db_profile_create(
                ProfileCreateRequest(
                    name=body.name,
                    initial_deposit_usd=body.initial_deposit_usd,
                    email=body.email,
                    phone_number=body.phone_number,
                )
            )
        except RuntimeError as error:
            return api_ledger_error_response(error)
        except ValueError as error:
            return api_validation_error_response(error)

        return JSONResponse(content=api_serialize_profile(profile), status_code=status.HTTP_201_CREATED)

    return router


def api_validation_error_response(error: Exception) -> JSONResponse:
    """Build the 400 envelope for rejected ledger inputs."""

    payload = {
        "status": "error",
        "code": "INVALID_LEDGER_INPUT",
        "message": str(error),
    }
    return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)


__all__ = ["api_create_ledger_router", "api_validation_error_response"]
