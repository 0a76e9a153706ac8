"""
File: app/db/session.py
Description: 数据库会话管理 (Async SQLAlchemy)

本模块负责：
1. 创建全局唯一的 AsyncEngine (生产: postgresql+asyncpg，本地/测试: sqlite+aiosqlite)
2. 连接池参数仅对服务端数据库生效，从 Settings 读取
3. 创建 AsyncSession 工厂 (AsyncSessionLocal)
4. 提供引擎关闭函数用于优雅退出

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-19 (SQLite support for local runs and tests)
"""

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings


def engine_options() -> dict[str, Any]:
    """
    按数据库类型返回 create_async_engine 的额外参数。
    SQLite 使用 SQLAlchemy 默认池，不接受 pool_size 等参数。
    """
    if settings.is_sqlite:
        return {}

    return {
        "pool_pre_ping": settings.DB_POOL_PRE_PING,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
    }


# 1. 创建异步引擎
# echo 仅在调试模式开启 (日志由 app.core.logging 接管)
engine: AsyncEngine = create_async_engine(
    str(settings.SQLALCHEMY_DATABASE_URI),
    echo=settings.is_debug,
    **engine_options(),
)

# 2. 创建异步会话工厂
# expire_on_commit=False 是 AsyncSession 的强制要求
# 避免在 commit 后访问属性时触发隐式 IO
AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def close_engine() -> None:
    """
    关闭数据库引擎，释放连接池资源。
    应在应用 shutdown 阶段调用。
    """
    await engine.dispose()
