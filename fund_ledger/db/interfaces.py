"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from fund_ledger.domain import HealthStatus, Profile, Transaction


class DatabaseHealthPort(Protocol):
    """Port definition for database connectivity verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active database connection target.

        Returns:
            str: Database target label for diagnostics.
        """

    def db_check_health(self) -> HealthStatus:
        """Check database connectivity and return deterministic health payload.

        Returns:
            HealthStatus: Database health status payload.

        Raises:
            ConnectionError: Raised when database cannot be reached.
        """


class ProfileNotFoundError(ValueError):
    """Raised when a ledger write references an unknown client profile."""


@dataclass(frozen=True)
class TransactionAppendRequest:
    """Input payload for appending one ledger transaction.

    Attributes:
        transaction_type: `DEPOSIT`, `WITHDRAW`, `BUY` or `SELL`.
        asset: Asset symbol; `USD` for cash movements.
        value_usd: Positive USD amount.
        profile_id: Optional owning client profile.
        asset_quantity: Units traded; derived from value and price when omitted.
        price_per_unit_usd: Unit price for trades.
        created_at_utc: Optional explicit creation timestamp.
    """

    transaction_type: str
    asset: str
    value_usd: Decimal
    profile_id: str | None = None
    asset_quantity: Decimal | None = None
    price_per_unit_usd: Decimal | None = None
    created_at_utc: datetime | None = None


@dataclass(frozen=True)
class ProfileCreateRequest:
    """Input payload for creating one client profile.

    Attributes:
        name: Client display name.
        initial_deposit_usd: Opening deposit, logged as a DEPOSIT transaction when positive.
        email: Optional contact email.
        phone_number: Optional contact phone number.
    """

    name: str
    initial_deposit_usd: Decimal = Decimal("0")
    email: str | None = None
    phone_number: str | None = None


class LedgerStoreRepositoryPort(Protocol):
    """Port definition for ledger and client profile persistence."""

    def db_transaction_list(self) -> list[Transaction]:
        """Return the full ledger in replay order.

        Returns:
            list[Transaction]: All transactions.

        Raises:
            RuntimeError: Raised when database read fails.
        """

    def db_transaction_list_page(
        self,
        limit: int,
        offset: int,
        transaction_type: str | None = None,
    ) -> list[Transaction]:
        """Return one page of transactions, newest first.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.
            transaction_type: Optional transaction type filter.

        Returns:
            list[Transaction]: Transactions ordered newest first.

        Raises:
            ValueError: Raised when paging or filter inputs are invalid.
            RuntimeError: Raised when database read fails.
        """

    def db_profile_list(self) -> list[Profile]:
        """Return all client profiles.

        Returns:
            list[Profile]: Profiles ordered by creation time.

        Raises:
            RuntimeError: Raised when database read fails.
        """

    def db_transaction_append(self, request: TransactionAppendRequest) -> Transaction:
        """Append one transaction and keep the owning profile's deposit total in sync.

        Args:
            request: Transaction append payload.

        Returns:
            Transaction: Persisted transaction.

        Raises:
            ValueError: Raised when the request is invalid.
            ProfileNotFoundError: Raised when the referenced profile does not exist.
            RuntimeError: Raised when database write fails.
        """

    def db_profile_create(self, request: ProfileCreateRequest) -> Profile:
        """Create one client profile and log its opening deposit.

        Args:
            request: Profile creation payload.

        Returns:
            Profile: Persisted profile.

        Raises:
            ValueError: Raised when the request is invalid.
            RuntimeError: Raised when database write fails.
        """
