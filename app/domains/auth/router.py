"""
File: app/domains/auth/router.py
Description: 认证领域 HTTP 路由层

本模块定义认证相关的 API 端点：
1. POST /register: 自助注册 (返回用户 + Token)
2. POST /login: 登录 (返回用户 + Token)
3. GET  /profile: 当前用户资料
4. PUT  /profile: 更新当前用户资料 (含修改密码)

规范：
- 所有响应经 respond(category) 输出统一信封
- 请求校验失败时使用 @invalid_params 声明的类别

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-19 (Register + profile endpoints)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import ORJSONResponse

from app.api.deps import CurrentUser, DBSession
from app.core.exceptions import invalid_params
from app.core.response import ResponseModel, respond
from app.db.models.user import User
from app.domains.auth.schemas import (
    AuthSession,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
)
from app.domains.auth.service import AuthService
from app.domains.users.repository import UserRepository
from app.domains.users.schemas import UserRead

router = APIRouter()

# ------------------------------------------------------------------------------
# 依赖注入构造器 (Dependencies)
# ------------------------------------------------------------------------------


async def get_auth_service(session: DBSession) -> AuthService:
    """
    构造 AuthService 实例。
    复用 User 领域的 Repository。
    """
    user_repo = UserRepository(model=User, session=session)
    return AuthService(user_repo=user_repo)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


# ------------------------------------------------------------------------------
# Endpoints (路由定义)
# ------------------------------------------------------------------------------


@router.post(
    "/register",
    response_model=ResponseModel[AuthSession],
    status_code=status.HTTP_201_CREATED,
    summary="用户注册",
    description="使用邮箱、密码 (至少 6 位)、姓名注册。邮箱必须唯一。成功后直接返回 Token。",
)
@invalid_params("AUTH_MISSING_REGISTER_DATA")
async def register(
    register_data: RegisterRequest, service: AuthServiceDep
) -> ORJSONResponse:
    session = await service.register(register_data)
    return respond("AUTH_REGISTER", data=session)


@router.post(
    "/login",
    response_model=ResponseModel[AuthSession],
    summary="用户登录",
    description="使用邮箱密码登录，成功后返回用户信息与 Access Token (JWT)。",
)
@invalid_params("AUTH_MISSING_CREDENTIALS")
async def login(login_data: LoginRequest, service: AuthServiceDep) -> ORJSONResponse:
    session = await service.login(login_data)
    return respond("AUTH_LOGIN", data=session)


@router.get(
    "/profile",
    response_model=ResponseModel[UserRead],
    summary="获取我的个人资料",
    description="需携带有效 Token。",
)
async def read_profile(
    current_user: CurrentUser, service: AuthServiceDep
) -> ORJSONResponse:
    user = await service.get_profile(current_user.id)
    return respond("AUTH_PROFILE_RETRIEVED", data=UserRead.model_validate(user))


@router.put(
    "/profile",
    response_model=ResponseModel[UserRead],
    summary="更新我的个人资料",
    description="可更新姓名、电话；修改密码时需同时提供 current_password。",
)
async def update_profile(
    profile_in: ProfileUpdate,
    current_user: CurrentUser,
    service: AuthServiceDep,
) -> ORJSONResponse:
    user = await service.update_profile(current_user.id, profile_in)
    return respond("AUTH_PROFILE_UPDATED", data=UserRead.model_validate(user))
