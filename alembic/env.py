"""Alembic environment for ledger store schema migrations.

The target URL comes from `-x database_url=...` when given, otherwise from
`DATABASE_URL` through the migration settings loader.
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from fund_ledger.config import config_load_database_url

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _migration_resolve_database_url() -> str:
    """Return the ledger store URL for this Alembic invocation."""

    override_url = context.get_x_argument(as_dictionary=True).get("database_url")
    if override_url:
        return override_url
    return config_load_database_url()


config.set_main_option("sqlalchemy.url", _migration_resolve_database_url())


def run_migrations_offline() -> None:
    """Emit migration SQL without a live ledger store connection."""

    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=None,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        transaction_per_migration=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against the configured ledger store, one transaction per revision."""

    ledger_store_engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with ledger_store_engine.connect() as connection:
        context.configure(connection=connection, target_metadata=None, transaction_per_migration=True)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
