"""
File: app/domains/users/router.py
Description: 用户管理 HTTP 路由层 (仅管理员)

本模块定义了管理员用户管理的 API 端点：
1. GET  /users            用户列表
2. GET  /users/{user_id}  用户详情 (附带预约)
3. POST /users            创建用户 (可指定角色)

所有端点都依赖 AdminUser，非管理员统一返回 AUTH_INSUFFICIENT_PERMISSIONS。

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-19 (Admin user management)
"""

from fastapi import APIRouter, status
from fastapi.responses import ORJSONResponse

from app.api.deps import AdminUser
from app.core.exceptions import invalid_params
from app.core.response import ResponseModel, respond
from app.domains.users.dependencies import UserServiceDep
from app.domains.users.schemas import UserCreate, UserDetail, UserRead

router = APIRouter()


@router.get(
    "",
    response_model=ResponseModel[list[UserRead]],
    summary="用户列表",
    description="返回全部用户 (按 ID 升序)。仅管理员。",
)
async def list_users(_admin: AdminUser, service: UserServiceDep) -> ORJSONResponse:
    users = await service.list_users()
    return respond(
        "USER_LIST_RETRIEVED", data=[UserRead.model_validate(u) for u in users]
    )


@router.get(
    "/{user_id}",
    response_model=ResponseModel[UserDetail],
    summary="用户详情",
    description="返回指定用户及其全部预约。仅管理员。",
)
@invalid_params("USER_INVALID_ID")
async def get_user(
    user_id: int, _admin: AdminUser, service: UserServiceDep
) -> ORJSONResponse:
    user = await service.get_user(user_id)
    return respond("USER_RETRIEVED", data=UserDetail.model_validate(user))


@router.post(
    "",
    response_model=ResponseModel[UserRead],
    status_code=status.HTTP_201_CREATED,
    summary="创建用户",
    description="管理员直接创建用户，可指定 USER / ADMIN / TREASURER 角色。邮箱必须唯一。",
)
@invalid_params("USER_MISSING_REQUIRED_FIELDS")
async def create_user(
    user_in: UserCreate, _admin: AdminUser, service: UserServiceDep
) -> ORJSONResponse:
    user = await service.create_user(user_in)
    return respond("USER_CREATED", data=UserRead.model_validate(user))
