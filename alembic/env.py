"""Alembic environment configuration."""

import sys
from pathlib import Path
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

# Add the parent directory to Python path so we can import app
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import settings
from app.db.base import Base

# Import all models to ensure they are registered
from app.models import application, drive, inbox, student, user  # noqa

# asyncpg query options -> psycopg2 equivalents
SSL_OPTION_MAP = {
    "ssl=false": "sslmode=disable",
    "ssl=true": "sslmode=require",
    "ssl=require": "sslmode=require",
}


def sync_database_url(url: str) -> str:
    """Migrations run synchronously through psycopg2."""
    if not url.startswith("postgresql+asyncpg://"):
        return url
    url = url.replace("postgresql+asyncpg://", "postgresql://")
    for async_option, sync_option in SSL_OPTION_MAP.items():
        url = url.replace(f"?{async_option}", f"?{sync_option}")
        url = url.replace(f"&{async_option}", f"&{sync_option}")
    return url


# Alembic Config object
config = context.config
config.set_main_option("sqlalchemy.url", sync_database_url(str(settings.DATABASE_URL)))

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
