from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from schedule_bsuir.config import get_settings
from schedule_bsuir.db.models import Base

config = context.config

# соединение может передать вызывающий код (тесты, init из приложения),
# тогда логирование приложения не перенастраиваем
external_connection = config.attributes.get("connection")

if config.config_file_name is not None and external_connection is None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", get_settings().DATABASE_URL)


def _configure_kwargs(url: str) -> dict:
    # SQLite не умеет ALTER COLUMN, изменения идут через пересоздание таблицы
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_with(connection):
    context.configure(
        connection=connection,
        **_configure_kwargs(connection.engine.url.drivername),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    if external_connection is not None:
        _run_with(external_connection)
        return

    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _run_with(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
