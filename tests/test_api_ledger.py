"""Tests for transaction and profile API endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from fastapi.testclient import TestClient

from fund_ledger.api.application import create_api_application
from fund_ledger.config import AppSettings
from fund_ledger.db import ProfileCreateRequest, ProfileNotFoundError, TransactionAppendRequest
from fund_ledger.domain import HealthStatus, Profile, Transaction
from fund_ledger.ledger import PortfolioDashboardService


class _HealthyDatabaseService:
    """Minimal health service stub for API factory dependency injection."""

    def db_connection_label(self) -> str:
        """Return deterministic target label."""

        return "sqlite://test"

    def db_check_health(self) -> HealthStatus:
        """Return healthy database result."""

        return HealthStatus(status="ok", detail="sqlite connectivity verified")


class _RecordingLedgerRepository:
    """Ledger repository stub that records calls and returns canned rows."""

    def __init__(self):
        self.page_calls: list[dict[str, object]] = []
        self.append_requests: list[TransactionAppendRequest] = []
        self.profile_requests: list[ProfileCreateRequest] = []

    def db_transaction_list(self) -> list[Transaction]:
        """Return empty ledger."""

        return []

    def db_transaction_list_page(
        self,
        limit: int,
        offset: int,
        transaction_type: str | None = None,
    ) -> list[Transaction]:
        """Record paging arguments and return one transaction.

        Args:
            limit: Max rows.
            offset: Rows to skip.
            transaction_type: Optional type filter.

        Returns:
            list[Transaction]: One deterministic transaction.
        """

        self.page_calls.append({"limit": limit, "offset": offset, "transaction_type": transaction_type})
        return [
            Transaction(
                transaction_id="t-1",
                created_at_utc=datetime(2026, 8, 1, tzinfo=timezone.utc),
                profile_id=None,
                transaction_type="BUY",
                asset="BTC",
                value_usd=Decimal("600"),
                asset_quantity=Decimal("0.01"),
                price_per_unit_usd=Decimal("60000"),
            )
        ]

    def db_profile_list(self) -> list[Profile]:
        """Return one deterministic profile."""

        return [Profile(profile_id="p-1", name="Alice", total_deposited_usd=Decimal("2500"))]

    def db_transaction_append(self, request: TransactionAppendRequest) -> Transaction:
        """Record request and echo it back as a persisted transaction.

        Raises:
            ProfileNotFoundError: Raised for the `missing` profile id.
            ValueError: Raised for trades without quantity or price.
        """

        if request.profile_id == "missing":
            raise ProfileNotFoundError("profile not found: profile_id=missing")
        if request.transaction_type == "BUY" and request.asset_quantity is None and request.price_per_unit_usd is None:
            raise ValueError("asset_quantity or price_per_unit_usd is required for trades")
        self.append_requests.append(request)
        return Transaction(
            transaction_id="t-new",
            created_at_utc=datetime(2026, 8, 2, tzinfo=timezone.utc),
            profile_id=request.profile_id,
            transaction_type=request.transaction_type,
            asset=request.asset.upper(),
            value_usd=request.value_usd,
            asset_quantity=request.asset_quantity,
            price_per_unit_usd=request.price_per_unit_usd,
        )

    def db_profile_create(self, request: ProfileCreateRequest) -> Profile:
        """Record request and echo it back as a persisted profile."""

        self.profile_requests.append(request)
        return Profile(profile_id="p-new", name=request.name, total_deposited_usd=request.initial_deposit_usd)


class _NoPriceOracle:
    """Price oracle stub for dashboard service construction."""

    def adapter_source_name(self) -> str:
        """Return stub source label."""

        return "none"

    def adapter_fetch_prices(self, asset_symbols: list[str]) -> dict[str, object]:
        """Return no quotes."""

        _ = asset_symbols
        return {}


def _build_client(repository: _RecordingLedgerRepository) -> TestClient:
    """Create a test client around the recording repository.

    Args:
        repository: Recording ledger repository stub.

    Returns:
        TestClient: Client for the assembled application.
    """

    application = create_api_application(
        settings=AppSettings(environment_name="test", api_default_limit=20, api_max_limit=50),
        db_health_service=_HealthyDatabaseService(),
        ledger_repository=repository,
        dashboard_service=PortfolioDashboardService(repository, _NoPriceOracle()),
    )
    return TestClient(application)


def test_api_transaction_list_caps_limit_and_serializes_decimals() -> None:
    """Clamp requested limit to the configured maximum and render decimals as strings.

    Returns:
        None: Assertions validate paging envelope and serialization.

    Raises:
        AssertionError: Raised when paging or serialization is incorrect.
    """

    repository = _RecordingLedgerRepository()

    response = _build_client(repository).get("/transactions", params={"limit": 500, "offset": 5, "transaction_type": "BUY"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["page"] == {"limit": 500, "applied_limit": 50, "offset": 5, "returned": 1}
    assert payload["filters"] == {"transaction_type": "BUY"}
    assert payload["items"][0]["value_usd"] == "600"
    assert payload["items"][0]["price_per_unit_usd"] == "60000"
    assert repository.page_calls == [{"limit": 50, "offset": 5, "transaction_type": "BUY"}]


def test_api_transaction_list_uses_default_limit() -> None:
    """Use configured default limit when none is requested.

    Returns:
        None: Assertions validate default paging.

    Raises:
        AssertionError: Raised when default limit is not applied.
    """

    repository = _RecordingLedgerRepository()

    response = _build_client(repository).get("/transactions")

    assert response.status_code == 200
    assert repository.page_calls[0]["limit"] == 20


def test_api_transaction_append_returns_created_transaction() -> None:
    """Persist a valid trade and return HTTP 201.

    Returns:
        None: Assertions validate append request mapping.

    Raises:
        AssertionError: Raised when body fields are not forwarded.
    """

    repository = _RecordingLedgerRepository()

    response = _build_client(repository).post(
        "/transactions",
        json={"transaction_type": "BUY", "asset": "eth", "value_usd": "1500", "price_per_unit_usd": "3000"},
    )

    assert response.status_code == 201
    assert response.json()["asset"] == "ETH"
    assert repository.append_requests[0].value_usd == Decimal("1500")
    assert repository.append_requests[0].price_per_unit_usd == Decimal("3000")


def test_api_transaction_append_maps_errors_to_status_codes() -> None:
    """Map validation failures to 400 and unknown profiles to 404.

    Returns:
        None: Assertions validate error envelopes.

    Raises:
        AssertionError: Raised when error mapping is incorrect.
    """

    client = _build_client(_RecordingLedgerRepository())

    invalid_response = client.post("/transactions", json={"transaction_type": "BUY", "asset": "BTC", "value_usd": "10"})
    missing_response = client.post(
        "/transactions",
        json={"transaction_type": "DEPOSIT", "asset": "USD", "value_usd": "10", "profile_id": "missing"},
    )
    negative_response = client.post("/transactions", json={"transaction_type": "DEPOSIT", "value_usd": "-5"})

    assert invalid_response.status_code == 400
    assert invalid_response.json()["code"] == "INVALID_LEDGER_INPUT"
    assert missing_response.status_code == 404
    assert missing_response.json()["code"] == "PROFILE_NOT_FOUND"
    assert negative_response.status_code == 422


def test_api_profile_endpoints_list_and_create() -> None:
    """List profiles and create one with an opening deposit.

    Returns:
        None: Assertions validate profile payloads.

    Raises:
        AssertionError: Raised when profile endpoints misbehave.
    """

    repository = _RecordingLedgerRepository()
    client = _build_client(repository)

    list_response = client.get("/profiles")
    create_response = client.post("/profiles", json={"name": "Carol", "initial_deposit_usd": "750"})

    assert list_response.status_code == 200
    assert list_response.json()["items"][0]["total_deposited_usd"] == "2500"
    assert create_response.status_code == 201
    assert create_response.json()["name"] == "Carol"
    assert repository.profile_requests[0].initial_deposit_usd == Decimal("750")
