"""Ledger store health probe covering connectivity and the ledger schema."""

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from fund_ledger.domain import HealthStatus

from .interfaces import DatabaseHealthPort


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Verify the ledger store answers and its ledger tables are readable."""

    _LEDGER_TABLE_COUNT_QUERY = (
        "SELECT "
        "(SELECT COUNT(*) FROM transactions) AS transaction_count, "
        "(SELECT COUNT(*) FROM profiles) AS profile_count"
    )

    def __init__(self, engine: Engine):
        """Initialize ledger store health service.

        Args:
            engine: SQLAlchemy engine bound to the ledger store.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the ledger store URL with the password masked."""

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Probe the ledger store and count ledger rows.

        A reachable server whose `transactions` or `profiles` table is missing
        is reported as unhealthy, since every dashboard pass reads both.

        Returns:
            HealthStatus: `ok` with dialect and row counts.

        Raises:
            ConnectionError: Raised when the server or ledger tables cannot be read.
        """

        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                counts = connection.execute(text(self._LEDGER_TABLE_COUNT_QUERY)).mappings().one()
        except SQLAlchemyError as error:
            raise ConnectionError("ledger store connectivity check failed") from error

        return HealthStatus(
            status="ok",
            detail=(
                f"{self._engine.dialect.name} ledger store reachable: "
                f"transactions={counts['transaction_count']} profiles={counts['profile_count']}"
            ),
        )
