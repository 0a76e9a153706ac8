"""
File: alembic/env.py
Description: Alembic 迁移环境配置 - 同步版本

策略：
- 迁移 (Migration): 使用同步驱动 (psycopg / pysqlite) -> 稳定，无 EventLoop 问题
- 运行 (Runtime): 使用异步驱动 (asyncpg / aiosqlite) -> 高性能

Author: jinmozhe
Created: 2025-11-26
Updated: 2026-10-19 (Derive sync URL from settings)
"""

import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import create_engine, make_url, pool

from alembic import context  # type: ignore

# ------------------------------------------------------------------------------
# 0. 将项目根目录加入 sys.path
# ------------------------------------------------------------------------------
sys.path.insert(0, str(Path(__file__).parent.parent.resolve()))

# ------------------------------------------------------------------------------
# 1. 导入项目配置与模型
# ------------------------------------------------------------------------------
from app.core.config import settings
from app.db.models import Base

# Alembic Config 对象
config = context.config

# 2. 配置日志
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# ------------------------------------------------------------------------------
# 3. 构建同步数据库 URL (异步驱动 -> 同步驱动)
# ------------------------------------------------------------------------------
SYNC_DRIVERS = {
    "postgresql+asyncpg": "postgresql+psycopg",
    "sqlite+aiosqlite": "sqlite",
}

async_url = make_url(str(settings.SQLALCHEMY_DATABASE_URI))
sync_url = async_url.set(
    drivername=SYNC_DRIVERS.get(async_url.drivername, async_url.drivername)
)

# 使用 URL 对象直接传给引擎，避免 configparser 对密码中 '%' 的插值问题
SYNC_URL = sync_url.render_as_string(hide_password=False)

# 4. 指定目标元数据
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """离线模式迁移：生成 SQL 脚本而不实际连接数据库"""
    context.configure(
        url=SYNC_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """在线模式迁移：连接数据库并执行迁移"""
    connectable = create_engine(sync_url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


# ------------------------------------------------------------------------------
# 执行迁移
# ------------------------------------------------------------------------------
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
