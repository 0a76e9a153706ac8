"""
File: tests/unit/test_user_service.py
Description: 用户与认证领域服务单元测试

本模块测试 UserService / AuthService 的核心业务逻辑：
1. 正常用户创建 (Happy Path) 与邮箱唯一性
2. 密码哈希安全验证
3. 登录：凭证错误与停用账号的判定顺序
4. 个人资料更新与修改密码

Author: jinmozhe
Created: 2025-11-26
Updated: 2026-10-19
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException
from app.core.security import verify_password
from app.db.models.user import Role, User
from app.domains.auth.schemas import LoginRequest, ProfileUpdate, RegisterRequest
from app.domains.auth.service import AuthService
from app.domains.users.repository import UserRepository
from app.domains.users.schemas import UserCreate
from app.domains.users.service import UserService

# ------------------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------------------


@pytest.fixture
def user_repo(db_session: AsyncSession) -> UserRepository:
    return UserRepository(model=User, session=db_session)


@pytest.fixture
def user_service(user_repo: UserRepository) -> UserService:
    return UserService(repo=user_repo)


@pytest.fixture
def auth_service(user_repo: UserRepository) -> AuthService:
    return AuthService(user_repo=user_repo)


# ------------------------------------------------------------------------------
# UserService
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_user_success(user_service: UserService) -> None:
    """测试：管理员创建财务账号"""
    user_in = UserCreate(
        email="caja@example.com",
        password="securepassword",
        name="Caja",
        role=Role.TREASURER,
    )

    user = await user_service.create_user(user_in)

    assert user.id is not None
    assert user.role == Role.TREASURER
    assert user.is_active is True
    # 密码以哈希记录存储
    assert user.password != "securepassword"
    assert verify_password("securepassword", user.password)


@pytest.mark.asyncio
async def test_create_user_duplicate_email(user_service: UserService) -> None:
    user_in = UserCreate(email="dup@example.com", password="securepassword", name="A")
    await user_service.create_user(user_in)

    with pytest.raises(AppException) as exc_info:
        await user_service.create_user(user_in)

    assert exc_info.value.category == "USER_EMAIL_ALREADY_EXISTS"
    assert exc_info.value.http_status == 400


@pytest.mark.asyncio
async def test_get_user_not_found(user_service: UserService) -> None:
    with pytest.raises(AppException) as exc_info:
        await user_service.get_user(9999)

    assert exc_info.value.category == "USER_NOT_FOUND"


# ------------------------------------------------------------------------------
# AuthService
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_register_creates_plain_user_with_token(
    auth_service: AuthService,
) -> None:
    session = await auth_service.register(
        RegisterRequest(email="nueva@example.com", password="secreta123", name="Nueva")
    )

    assert session.role == Role.USER
    assert session.token
    assert session.token_type == "bearer"
    assert session.expires_in > 0


@pytest.mark.asyncio
async def test_login_unknown_email_and_wrong_password_look_the_same(
    auth_service: AuthService, swimmer: User
) -> None:
    with pytest.raises(AppException) as unknown:
        await auth_service.login(
            LoginRequest(email="nadie@example.com", password="secreta123")
        )
    with pytest.raises(AppException) as wrong:
        await auth_service.login(LoginRequest(email=swimmer.email, password="mala"))

    assert unknown.value.category == wrong.value.category == "AUTH_INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_checks_password_before_active_flag(
    auth_service: AuthService, make_user
) -> None:
    inactive = await make_user("inactivo@example.com", is_active=False)

    with pytest.raises(AppException) as wrong:
        await auth_service.login(LoginRequest(email=inactive.email, password="mala"))
    assert wrong.value.category == "AUTH_INVALID_CREDENTIALS"

    with pytest.raises(AppException) as disabled:
        await auth_service.login(
            LoginRequest(email=inactive.email, password="secreta123")
        )
    assert disabled.value.category == "AUTH_ACCOUNT_DISABLED"


@pytest.mark.asyncio
async def test_update_profile_requires_current_password(
    auth_service: AuthService, swimmer: User
) -> None:
    with pytest.raises(AppException) as exc_info:
        await auth_service.update_profile(
            swimmer.id, ProfileUpdate(new_password="nuevaclave")
        )
    assert exc_info.value.category == "AUTH_MISSING_CURRENT_PASSWORD"

    with pytest.raises(AppException) as exc_info:
        await auth_service.update_profile(
            swimmer.id,
            ProfileUpdate(current_password="incorrecta", new_password="nuevaclave"),
        )
    assert exc_info.value.category == "AUTH_WRONG_CURRENT_PASSWORD"


@pytest.mark.asyncio
async def test_update_profile_changes_fields_and_password(
    auth_service: AuthService, swimmer: User
) -> None:
    user = await auth_service.update_profile(
        swimmer.id,
        ProfileUpdate(
            name="Nombre Nuevo",
            current_password="secreta123",
            new_password="nuevaclave",
        ),
    )

    assert user.name == "Nombre Nuevo"
    assert user.phone == "+56911111111"
    assert verify_password("nuevaclave", user.password)
    assert not verify_password("secreta123", user.password)
