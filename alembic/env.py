from logging.config import fileConfig
from sqlalchemy import pool, create_engine
from alembic import context

# Base SQLAlchemy + enregistrement de toutes les tables dans la MetaData
from leaders.config import settings
from leaders.db.session import Base, import_models

import_models()
target_metadata = Base.metadata

# Chargement config Alembic
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def get_sync_url() -> str:
    url = config.get_main_option("sqlalchemy.url") or settings.DATABASE_URL
    # Transformer URL async en URL sync (enlever +asyncpg / +aiosqlite)
    return url.replace("postgresql+asyncpg://", "postgresql://").replace("sqlite+aiosqlite://", "sqlite://")


def run_migrations_offline() -> None:
    context.configure(
        url=get_sync_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(
        get_sync_url(),
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
