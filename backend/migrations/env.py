import os
import sys
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url
from alembic import context

# ---- 프로젝트 루트 경로 추가 ----
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, ".."))
sys.path.insert(0, project_root)

from moodchat.models import Base  # noqa: E402

# Alembic 설정 객체
config = context.config

# logging 설정
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# 대상 메타데이터 (모든 모델의 Base.metadata)
target_metadata = Base.metadata

# 앱은 async 드라이버를 쓰지만 alembic은 동기 엔진으로 돌립니다.
SYNC_DRIVERS = {
    "sqlite+aiosqlite": "sqlite",
    "postgresql+asyncpg": "postgresql",
}


def get_db_url() -> str:
    """
    DB URL 우선순위:
    1) 환경변수 ALEMBIC_DB_URL
    2) 환경변수 DATABASE_URL
    3) alembic.ini 의 sqlalchemy.url (fallback)
    """
    env_url = os.getenv("ALEMBIC_DB_URL") or os.getenv("DATABASE_URL")
    url = make_url(env_url or config.get_main_option("sqlalchemy.url"))
    drivername = SYNC_DRIVERS.get(url.drivername, url.drivername)
    return url.set(drivername=drivername).render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    """offline 모드 (SQL 출력 전용)"""
    url = get_db_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """online 모드 (실제 DB에 적용)"""
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_db_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
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
