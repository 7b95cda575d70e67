"""Database service for the append-only transaction ledger and client profiles."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Connection, Engine, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from fund_ledger.db.interfaces import (
    LedgerStoreRepositoryPort,
    ProfileCreateRequest,
    ProfileNotFoundError,
    TransactionAppendRequest,
)
from fund_ledger.domain import (
    CASH_ASSET_SYMBOL,
    TRANSACTION_TYPE_DEPOSIT,
    TRANSACTION_TYPE_WITHDRAW,
    Profile,
    Transaction,
    domain_normalize_transaction_type,
)


class SQLAlchemyLedgerStoreService(LedgerStoreRepositoryPort):
    """SQLAlchemy implementation for ledger reads and the thin append-only write path."""

    _TRANSACTION_SELECT_COLUMNS = (
        "SELECT "
        "id, created_at, profile_id, transaction_type, asset, transaction_value_usd, "
        "asset_quantity, price_per_asset_usd "
        "FROM transactions "
    )

    _TRANSACTION_LIST_QUERY = _TRANSACTION_SELECT_COLUMNS + "ORDER BY created_at asc, id asc"

    _TRANSACTION_PAGE_QUERY = (
        _TRANSACTION_SELECT_COLUMNS
        + "WHERE (CAST(:transaction_type AS TEXT) IS NULL OR transaction_type = CAST(:transaction_type AS TEXT)) "
        + "ORDER BY created_at desc, id desc LIMIT :limit OFFSET :offset"
    )

    _PROFILE_LIST_QUERY = (
        "SELECT id, created_at, name, total_deposited_usd, email, phone_number "
        "FROM profiles "
        "ORDER BY created_at asc, id asc"
    )

    _TRANSACTION_INSERT_QUERY = (
        "INSERT INTO transactions "
        "(id, created_at, profile_id, transaction_type, asset, transaction_value_usd, asset_quantity, price_per_asset_usd) "
        "VALUES (:id, :created_at, :profile_id, :transaction_type, :asset, :transaction_value_usd, "
        ":asset_quantity, :price_per_asset_usd)"
    )

    _PROFILE_INSERT_QUERY = (
        "INSERT INTO profiles (id, created_at, name, total_deposited_usd, email, phone_number) "
        "VALUES (:id, :created_at, :name, :total_deposited_usd, :email, :phone_number)"
    )

    _PROFILE_EXISTS_QUERY = "SELECT 1 FROM profiles WHERE id = :profile_id"

    _PROFILE_DEPOSIT_UPDATE_QUERY = (
        "UPDATE profiles "
        "SET total_deposited_usd = total_deposited_usd + CAST(:deposit_delta AS NUMERIC) "
        "WHERE id = :profile_id"
    )

    def __init__(self, engine: Engine):
        """Initialize ledger store database service.

        Args:
            engine: SQLAlchemy engine used for persistence and reads.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_transaction_list(self) -> list[Transaction]:
        """List the full ledger in replay order.

        Returns:
            list[Transaction]: Transactions ordered by creation time and id.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(text(self._TRANSACTION_LIST_QUERY)).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("ledger transaction read failed") from error

        return [self._db_ledger_build_transaction(row) for row in rows]

    def db_transaction_list_page(
        self,
        limit: int,
        offset: int,
        transaction_type: str | None = None,
    ) -> list[Transaction]:
        """List one page of transactions, newest first.

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

        if limit < 1:
            raise ValueError("limit must be >= 1")
        if offset < 0:
            raise ValueError("offset must be >= 0")
        normalized_type = None if transaction_type is None else domain_normalize_transaction_type(transaction_type)

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(self._TRANSACTION_PAGE_QUERY),
                    {"transaction_type": normalized_type, "limit": limit, "offset": offset},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("ledger transaction page read failed") from error

        return [self._db_ledger_build_transaction(row) for row in rows]

    def db_profile_list(self) -> list[Profile]:
        """List all client profiles.

        Returns:
            list[Profile]: Profiles ordered by creation time.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(text(self._PROFILE_LIST_QUERY)).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("ledger profile read failed") from error

        return [
            Profile(
                profile_id=str(row["id"]),
                name=row["name"],
                total_deposited_usd=self._db_ledger_to_decimal(row["total_deposited_usd"]) or Decimal("0"),
                created_at_utc=self._db_ledger_parse_timestamp(row["created_at"]),
                email=row["email"],
                phone_number=row["phone_number"],
            )
            for row in rows
        ]

    def db_transaction_append(self, request: TransactionAppendRequest) -> Transaction:
        """Append one transaction and adjust the owning profile's deposit total.

        The referenced profile is looked up before the insert. DEPOSIT and
        WITHDRAW cash movements for a profile update `total_deposited_usd` in
        the same database transaction.

        Args:
            request: Transaction append payload.

        Returns:
            Transaction: Persisted transaction.

        Raises:
            ValueError: Raised when the request is invalid or violates store constraints.
            ProfileNotFoundError: Raised when the referenced profile does not exist.
            RuntimeError: Raised when database write fails.
        """

        transaction = self._db_ledger_build_append_transaction(request)

        try:
            with self._engine.begin() as connection:
                if transaction.profile_id is not None:
                    profile_row = connection.execute(
                        text(self._PROFILE_EXISTS_QUERY), {"profile_id": transaction.profile_id}
                    ).first()
                    if profile_row is None:
                        raise ProfileNotFoundError(f"profile not found: profile_id={transaction.profile_id}")
                self._db_ledger_insert_transaction(connection, transaction)
                deposit_delta = self._db_ledger_deposit_delta(transaction)
                if deposit_delta is not None:
                    connection.execute(
                        text(self._PROFILE_DEPOSIT_UPDATE_QUERY),
                        {"deposit_delta": str(deposit_delta), "profile_id": transaction.profile_id},
                    )
        except IntegrityError as error:
            raise ValueError("transaction violates ledger store constraints") from error
        except SQLAlchemyError as error:
            raise RuntimeError("ledger transaction append failed") from error

        return transaction

    def db_profile_create(self, request: ProfileCreateRequest) -> Profile:
        """Create one client profile and log its opening deposit atomically.

        Args:
            request: Profile creation payload.

        Returns:
            Profile: Persisted profile.

        Raises:
            ValueError: Raised when the request is invalid.
            RuntimeError: Raised when database write fails.
        """

        normalized_name = (request.name or "").strip()
        if not normalized_name:
            raise ValueError("name must not be blank")
        initial_deposit = Decimal(request.initial_deposit_usd)
        if initial_deposit < Decimal("0"):
            raise ValueError("initial_deposit_usd must be >= 0")

        created_at_utc = datetime.now(timezone.utc)
        profile = Profile(
            profile_id=str(uuid4()),
            name=normalized_name,
            total_deposited_usd=initial_deposit,
            created_at_utc=created_at_utc,
            email=(request.email or "").strip() or None,
            phone_number=(request.phone_number or "").strip() or None,
        )

        try:
            with self._engine.begin() as connection:
                connection.execute(
                    text(self._PROFILE_INSERT_QUERY),
                    {
                        "id": profile.profile_id,
                        "created_at": created_at_utc.isoformat(),
                        "name": profile.name,
                        "total_deposited_usd": str(initial_deposit),
                        "email": profile.email,
                        "phone_number": profile.phone_number,
                    },
                )
                if initial_deposit > Decimal("0"):
                    self._db_ledger_insert_transaction(
                        connection,
                        Transaction(
                            transaction_id=str(uuid4()),
                            created_at_utc=created_at_utc,
                            profile_id=profile.profile_id,
                            transaction_type=TRANSACTION_TYPE_DEPOSIT,
                            asset=CASH_ASSET_SYMBOL,
                            value_usd=initial_deposit,
                        ),
                    )
        except SQLAlchemyError as error:
            raise RuntimeError("ledger profile create failed") from error

        return profile

    def _db_ledger_build_append_transaction(self, request: TransactionAppendRequest) -> Transaction:
        """Validate an append request and build the immutable transaction row.

        Args:
            request: Transaction append payload.

        Returns:
            Transaction: Transaction ready for insert.

        Raises:
            ValueError: Raised when the request is invalid.
        """

        if request is None:
            raise ValueError("request must not be None")

        transaction_type = domain_normalize_transaction_type(request.transaction_type)
        asset = (request.asset or "").strip().upper()
        if not asset:
            raise ValueError("asset must not be blank")
        value_usd = Decimal(request.value_usd)
        if value_usd <= Decimal("0"):
            raise ValueError("value_usd must be > 0")

        profile_id = (request.profile_id or "").strip() or None
        if profile_id is not None:
            try:
                profile_id = str(UUID(profile_id))
            except ValueError as error:
                raise ValueError(f"profile_id must be a UUID: profile_id={profile_id}") from error
        asset_quantity = request.asset_quantity
        price_per_unit = request.price_per_unit_usd

        if transaction_type in (TRANSACTION_TYPE_DEPOSIT, TRANSACTION_TYPE_WITHDRAW) or asset == CASH_ASSET_SYMBOL:
            asset_quantity = None
            price_per_unit = None
        else:
            if price_per_unit is not None and price_per_unit <= Decimal("0"):
                raise ValueError("price_per_unit_usd must be > 0")
            if asset_quantity is None:
                if price_per_unit is None:
                    raise ValueError("asset_quantity or price_per_unit_usd is required for trades")
                asset_quantity = value_usd / price_per_unit
            if asset_quantity <= Decimal("0"):
                raise ValueError("asset_quantity must be > 0")
            if price_per_unit is None:
                price_per_unit = value_usd / asset_quantity

        created_at_utc = request.created_at_utc or datetime.now(timezone.utc)
        if created_at_utc.tzinfo is None or created_at_utc.utcoffset() is None:
            raise ValueError("created_at_utc must be offset-aware")

        return Transaction(
            transaction_id=str(uuid4()),
            created_at_utc=created_at_utc,
            profile_id=profile_id,
            transaction_type=transaction_type,
            asset=asset,
            value_usd=value_usd,
            asset_quantity=asset_quantity,
            price_per_unit_usd=price_per_unit,
        )

    def _db_ledger_deposit_delta(self, transaction: Transaction) -> Decimal | None:
        """Return the profile deposit adjustment for a transaction, if any."""

        if transaction.profile_id is None or not transaction.transaction_is_cash_movement():
            return None
        if transaction.transaction_type == TRANSACTION_TYPE_DEPOSIT:
            return transaction.value_usd
        if transaction.transaction_type == TRANSACTION_TYPE_WITHDRAW:
            return -transaction.value_usd
        return None

    def _db_ledger_insert_transaction(self, connection: Connection, transaction: Transaction) -> None:
        """Insert one transaction row on an open connection."""

        connection.execute(
            text(self._TRANSACTION_INSERT_QUERY),
            {
                "id": transaction.transaction_id,
                "created_at": transaction.created_at_utc.isoformat(),
                "profile_id": transaction.profile_id,
                "transaction_type": transaction.transaction_type,
                "asset": transaction.asset,
                "transaction_value_usd": str(transaction.value_usd),
                "asset_quantity": None if transaction.asset_quantity is None else str(transaction.asset_quantity),
                "price_per_asset_usd": (
                    None if transaction.price_per_unit_usd is None else str(transaction.price_per_unit_usd)
                ),
            },
        )

    def _db_ledger_build_transaction(self, row: Any) -> Transaction:
        """Build a typed transaction from one row mapping."""

        return Transaction(
            transaction_id=str(row["id"]),
            created_at_utc=self._db_ledger_parse_timestamp(row["created_at"]),
            profile_id=None if row["profile_id"] is None else str(row["profile_id"]),
            transaction_type=row["transaction_type"],
            asset=row["asset"],
            value_usd=self._db_ledger_to_decimal(row["transaction_value_usd"]) or Decimal("0"),
            asset_quantity=self._db_ledger_to_decimal(row["asset_quantity"]),
            price_per_unit_usd=self._db_ledger_to_decimal(row["price_per_asset_usd"]),
        )

    def _db_ledger_parse_timestamp(self, value: Any) -> datetime:
        """Normalize driver timestamp values to offset-aware datetimes.

        Args:
            value: Driver value (`datetime` or ISO-8601 text).

        Returns:
            datetime: Offset-aware timestamp; naive values are treated as UTC.

        Raises:
            RuntimeError: Raised when the stored timestamp cannot be parsed.
        """

        if isinstance(value, datetime):
            parsed_timestamp = value
        else:
            try:
                parsed_timestamp = datetime.fromisoformat(str(value))
            except ValueError as error:
                raise RuntimeError(f"invalid stored timestamp={value}") from error

        if parsed_timestamp.tzinfo is None:
            return parsed_timestamp.replace(tzinfo=timezone.utc)
        return parsed_timestamp

    def _db_ledger_to_decimal(self, value: Any) -> Decimal | None:
        """Convert a numeric column value to Decimal."""

        if value is None:
            return None
        try:
            return Decimal(str(value))
        except InvalidOperation as error:
            raise RuntimeError(f"invalid stored numeric value={value}") from error


__all__ = ["SQLAlchemyLedgerStoreService"]
