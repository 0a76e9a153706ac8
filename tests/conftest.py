"""
File: tests/conftest.py
Description: Pytest 全局 Fixtures 配置 (Async + 独立测试库)

说明：
1. 每个测试使用独立的内存 SQLite (sqlite+aiosqlite + StaticPool)，互不污染
2. 环境变量必须在导入 app 之前设置 (Settings 在导入时实例化)
3. 提供三种角色的用户与对应 Bearer Header

Author: jinmozhe
Created: 2025-11-26
Updated: 2026-10-19 (In-memory SQLite per test)
"""

import asyncio
import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import time
from typing import Any

# ------------------------------------------------------------------------------
# Windows 平台特定修复 (必须在任何 async 操作之前)
# ------------------------------------------------------------------------------
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# ------------------------------------------------------------------------------
# 1. 环境配置覆写 (必须在导入 app 之前)
# ------------------------------------------------------------------------------
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production-0123456789"
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "local"
os.environ["LOG_FILE_ENABLED"] = "false"
# 降低迭代次数以加快测试；哈希记录自带迭代次数，校验不受影响
os.environ["PASSWORD_HASH_ITERATIONS"] = "1000"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient, Response
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.messages import resolve
from app.core.security import create_access_token, hash_password
from app.db.models import Base, Role, SwimmingSchedule, User
from app.main import app

TEST_PASSWORD = "secreta123"


# ------------------------------------------------------------------------------
# 2. 数据库 Fixtures
# ------------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    创建测试专用的内存数据库引擎。
    StaticPool 保证同一引擎内所有连接共享同一个内存库。
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    获取测试用的数据库会话 (Function 级别)。
    """
    async_session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    获取异步 HTTP 客户端 (get_db 指向测试会话)。
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"  # type: ignore
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ------------------------------------------------------------------------------
# 3. 用户与鉴权 Fixtures
# ------------------------------------------------------------------------------


async def create_test_user(
    session: AsyncSession,
    email: str,
    role: Role = Role.USER,
    is_active: bool = True,
    name: str = "Usuario Prueba",
) -> User:
    """直接写库创建用户 (绕过 API)"""
    user = User(
        email=email,
        password=hash_password(TEST_PASSWORD),
        name=name,
        phone="+56911111111",
        role=role,
        is_active=is_active,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user_id=user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def swimmer(db_session: AsyncSession) -> User:
    return await create_test_user(db_session, "nadador@example.com")


@pytest_asyncio.fixture
async def other_swimmer(db_session: AsyncSession) -> User:
    return await create_test_user(db_session, "otro@example.com", name="Otro Nadador")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await create_test_user(db_session, "admin@example.com", role=Role.ADMIN)


@pytest_asyncio.fixture
async def treasurer(db_session: AsyncSession) -> User:
    return await create_test_user(
        db_session, "tesorero@example.com", role=Role.TREASURER
    )


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """用户工厂：await make_user("x@example.com", role=Role.ADMIN)"""

    async def _make(email: str, **kwargs: Any) -> User:
        return await create_test_user(db_session, email, **kwargs)

    return _make


@pytest.fixture
def headers_for() -> Callable[[User], dict[str, str]]:
    return auth_headers


@pytest_asyncio.fixture
async def swimmer_headers(swimmer: User) -> dict[str, str]:
    return auth_headers(swimmer)


@pytest_asyncio.fixture
async def admin_headers(admin: User) -> dict[str, str]:
    return auth_headers(admin)


@pytest_asyncio.fixture
async def treasurer_headers(treasurer: User) -> dict[str, str]:
    return auth_headers(treasurer)


# ------------------------------------------------------------------------------
# 4. 时段 Fixtures
# ------------------------------------------------------------------------------


@pytest.fixture
def make_schedule(
    db_session: AsyncSession,
) -> Callable[..., Awaitable[SwimmingSchedule]]:
    """时段工厂 (默认：周一 07:00-08:00，容量 2)"""

    async def _make(**overrides: Any) -> SwimmingSchedule:
        fields: dict[str, Any] = {
            "day_of_week": 1,
            "start_time": time(7, 0),
            "end_time": time(8, 0),
            "max_capacity": 2,
            "lane_count": 4,
            "is_active": True,
        }
        fields.update(overrides)
        schedule = SwimmingSchedule(**fields)
        db_session.add(schedule)
        await db_session.commit()
        await db_session.refresh(schedule)
        return schedule

    return _make


@pytest_asyncio.fixture
async def schedule(
    make_schedule: Callable[..., Awaitable[SwimmingSchedule]],
) -> SwimmingSchedule:
    return await make_schedule()


# ------------------------------------------------------------------------------
# 5. 响应断言
# ------------------------------------------------------------------------------


def check_envelope(response: Response, category: str) -> dict[str, Any]:
    """
    断言响应的状态码与信封文案都来自同一个消息类别，返回响应体。
    """
    status_code, text = resolve(category)
    body = response.json()

    assert response.status_code == status_code, body
    assert body["success"] is (status_code < 400)
    assert body["message" if status_code < 400 else "error"] == text
    return body


@pytest.fixture
def expect() -> Callable[[Response, str], dict[str, Any]]:
    return check_envelope
