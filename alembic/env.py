from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from filevault.core.config import get_settings
from filevault.infrastructure.models import Base

config = context.config

# 应用内调用时已由setup_logging配置日志，只有命令行调用时才加载ini中的日志配置
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# 命令行调用时从应用配置中读取连接串
if not config.get_main_option("sqlalchemy.url"):
    from filevault.infrastructure.storage.migration import build_alembic_database_url

    config.set_main_option(
        "sqlalchemy.url", build_alembic_database_url(get_settings().database_url)
    )

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """以离线模式运行迁移，只输出sql"""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """以在线模式运行迁移"""
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
