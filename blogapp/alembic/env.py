import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from dotenv import load_dotenv


# 프로젝트 루트를 PYTHONPATH에 추가
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

# 환경 변수 로딩
ENV_PATH = os.path.join(os.path.dirname(__file__), '..', '..', 'config', 'settings.env')


def load_environment(env_path: str = ENV_PATH) -> None:
    """
    .env 파일을 읽어 환경 변수를 설정 (파일이 없으면 기존 환경 변수만 사용)
    """
    if os.path.exists(env_path):
        load_dotenv(env_path, override=True)


# .env 로드
load_environment()

from blogapp.core.config import get_settings  # noqa: E402
from blogapp.core.database import Base, to_sync_url  # noqa: E402
import blogapp.models.user  # noqa: E402,F401

# 알렘빅 설정 객체 가져오기
alembic_cfg = context.config
if alembic_cfg.config_file_name:
    fileConfig(alembic_cfg.config_file_name)

# SQLAlchemy URL 설정 (asyncmy → pymysql 동기 커넥터)
alembic_cfg.set_main_option('sqlalchemy.url', to_sync_url(get_settings().SQLALCHEMY_DATABASE_URI))

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """
    오프라인 모드에서 SQL 스크립트를 생성
    """
    url = alembic_cfg.get_main_option('sqlalchemy.url')
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={'paramstyle': 'named'},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    온라인 모드에서 데이터베이스에 직접 연결하여 마이그레이션을 실행
    """
    connectable = engine_from_config(
        alembic_cfg.get_section(alembic_cfg.config_ini_section),
        prefix='sqlalchemy.',
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


# 엔트리포인트
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
