"""Alembic environment for the payments database."""

from alembic import context
from sqlalchemy import create_engine, pool

from paysvc.common.config import settings
from paysvc.common.db import Base
from paysvc.services.payment import models  # noqa: F401  registers tables on Base.metadata

config = context.config
target_metadata = Base.metadata


def get_database_url() -> str:
    """Prefer an explicit `sqlalchemy.url`, fall back to `DATABASE_URL`."""

    return config.get_main_option("sqlalchemy.url") or settings.database_url


def run_migrations_offline() -> None:
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(get_database_url(), poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
