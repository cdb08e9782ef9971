"""
Alembic environment for the marketplace schema.

The URL comes from DATABASE_URL_SYNC unless overridden on the command line:
  alembic -x db_url=sqlite:///./marketplace.db upgrade head
SQLite targets run in batch mode so ALTERs on CHECK-constrained tables work.
"""

from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context

from marketplace.db.base import Base
from marketplace.models import User, Company, OrganizerProfile, DoctorProfile, Event, TicketTier  # noqa: F401 - registers tables on Base.metadata
from marketplace.core.config import get_settings

config = context.config

db_url = context.get_x_argument(as_dictionary=True).get("db_url") or get_settings().DATABASE_URL_SYNC
config.set_main_option("sqlalchemy.url", db_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        # Category / status / role CHECKs change with the enums; catch column type drift too
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit the migration as a SQL script."""
    context.configure(
        url=db_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(db_url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options(db_url))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
