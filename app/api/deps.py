"""
File: app/api/deps.py
Description: 全局依赖注入定义 (DB Session + Authentication + Roles)

本模块负责：
1. 数据库会话管理 (get_db / DBSession)
2. JWT 鉴权与用户身份提取 (get_current_user / CurrentUser)
3. 角色白名单校验 (require_roles / AdminUser / StaffUser)

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-19 (Role allow-list)
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException
from app.core.security import decode_access_token
from app.db.models.user import Role, User
from app.db.session import AsyncSessionLocal

# ------------------------------------------------------------------------------
# 1. Database Dependencies
# ------------------------------------------------------------------------------


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取异步数据库会话依赖。
    使用 async with 确保请求结束时自动关闭 session。
    """
    async with AsyncSessionLocal() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db)]


# ------------------------------------------------------------------------------
# 2. Authentication Dependencies (JWT 鉴权)
# ------------------------------------------------------------------------------


async def get_token_from_header(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """
    从 Authorization Header 提取 Bearer Token。
    格式要求: Authorization: Bearer <token>
    """
    if not authorization:
        raise AppException("AUTH_NOT_AUTHENTICATED")

    scheme, _, param = authorization.partition(" ")
    if scheme.lower() != "bearer" or not param:
        raise AppException("AUTH_NOT_AUTHORIZED")

    return param


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_header)],
    session: DBSession,
) -> User:
    """
    解析 JWT 并获取当前登录用户。

    流程:
    1. 校验 JWT 签名与有效期
    2. 提取 sub (user_id)
    3. 查库校验用户是否存在、是否激活 (角色以数据库为准)
    """
    try:
        payload = decode_access_token(token)
        user_id = int(payload["sub"])
    except (JWTError, KeyError, ValueError):
        # from None 截断异常链，避免暴露底层 jose 细节
        raise AppException("AUTH_TOKEN_INVALID") from None

    user = await session.get(User, user_id)
    if not user:
        raise AppException("AUTH_TOKEN_INVALID")

    if not user.is_active:
        raise AppException("AUTH_ACCOUNT_DISABLED")

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


# ------------------------------------------------------------------------------
# 3. Permission Dependencies (角色白名单)
# ------------------------------------------------------------------------------


def require_roles(*allowed: Role) -> Callable[[User], Awaitable[User]]:
    """
    生成角色校验依赖。

    用法:
        StaffUser = Annotated[User, Depends(require_roles(Role.ADMIN, Role.TREASURER))]
    """
    allowed_roles = frozenset(allowed)

    async def check_role(current_user: CurrentUser) -> User:
        if current_user.role not in allowed_roles:
            raise AppException("AUTH_INSUFFICIENT_PERMISSIONS")
        return current_user

    return check_role


# 管理员
AdminUser = Annotated[User, Depends(require_roles(Role.ADMIN))]

# 管理员或财务
StaffUser = Annotated[User, Depends(require_roles(Role.ADMIN, Role.TREASURER))]
