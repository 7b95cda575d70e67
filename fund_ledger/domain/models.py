"""Typed domain models shared across runtime layers.

Ledger records are immutable contracts passed from the db layer into the
accounting engine and back out to the API layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Final


CASH_ASSET_SYMBOL: Final[str] = "USD"

TRANSACTION_TYPE_DEPOSIT: Final[str] = "DEPOSIT"
TRANSACTION_TYPE_WITHDRAW: Final[str] = "WITHDRAW"
TRANSACTION_TYPE_BUY: Final[str] = "BUY"
TRANSACTION_TYPE_SELL: Final[str] = "SELL"

TRANSACTION_TYPES: Final[frozenset[str]] = frozenset(
    {TRANSACTION_TYPE_DEPOSIT, TRANSACTION_TYPE_WITHDRAW, TRANSACTION_TYPE_BUY, TRANSACTION_TYPE_SELL}
)

_TRANSACTION_TYPE_ALIASES: Final[dict[str, str]] = {"WITHDRAWAL": TRANSACTION_TYPE_WITHDRAW}


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


@dataclass(frozen=True)
class Transaction:
    """Append-only ledger transaction.

    Attributes:
        transaction_id: Unique transaction identifier.
        created_at_utc: Offset-aware creation timestamp defining replay order.
        profile_id: Owning client profile, or None for fund-level trades.
        transaction_type: One of `DEPOSIT`, `WITHDRAW`, `BUY`, `SELL`.
        asset: Asset symbol; `USD` marks a pure cash movement.
        value_usd: Positive USD amount; direction is implied by type.
        asset_quantity: Units traded for `BUY`/`SELL`.
        price_per_unit_usd: Unit price for `BUY`/`SELL`.
    """

    transaction_id: str
    created_at_utc: datetime
    profile_id: str | None
    transaction_type: str
    asset: str
    value_usd: Decimal
    asset_quantity: Decimal | None = None
    price_per_unit_usd: Decimal | None = None

    def transaction_is_cash_movement(self) -> bool:
        """Return whether this transaction only moves cash."""

        return self.asset.strip().upper() == CASH_ASSET_SYMBOL


@dataclass(frozen=True)
class Profile:
    """Client profile with denormalized net deposit total.

    Attributes:
        profile_id: Unique client identifier.
        name: Client display name.
        total_deposited_usd: Net deposits minus withdrawals, maintained by the write path.
        created_at_utc: Optional profile creation timestamp.
        email: Optional contact email.
        phone_number: Optional contact phone number.
    """

    profile_id: str
    name: str
    total_deposited_usd: Decimal
    created_at_utc: datetime | None = None
    email: str | None = None
    phone_number: str | None = None


def domain_normalize_transaction_type(transaction_type: str) -> str:
    """Normalize transaction type spelling to the canonical upper-case value.

    Args:
        transaction_type: Raw transaction type value.

    Returns:
        str: Canonical transaction type.

    Raises:
        ValueError: Raised when the transaction type is unsupported.
    """

    normalized_type = (transaction_type or "").strip().upper()
    normalized_type = _TRANSACTION_TYPE_ALIASES.get(normalized_type, normalized_type)
    if normalized_type not in TRANSACTION_TYPES:
        raise ValueError(f"unsupported transaction_type={transaction_type}")
    return normalized_type
