from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Base metadata 가져오기
from essay_review.db.base import Base
from essay_review.core.config import settings

# 모델 등록: 개별 import 대신 한 방에 등록(누락/실수 방지)
# essay_review/db/models/__init__.py 에서 모든 모델을 import
import essay_review.db.models  # noqa: F401

# Alembic Config
config = context.config

# Logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# .env / 환경변수의 DB URL 을 alembic.ini 의 sqlalchemy.url 에 런타임 주입
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

# autogenerate 대상 metadata
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        # 변경 감지 옵션(추천)
        compare_type=True,
        compare_server_default=True,
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
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # 변경 감지 옵션(추천)
            compare_type=True,
            compare_server_default=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
