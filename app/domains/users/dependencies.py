"""
File: app/domains/users/dependencies.py
Description: 用户管理依赖注入 (管理员 /users 路由)

组装管理员用户管理所需的对象：
- UserRepository 绑定当前请求的 AsyncSession (get_db 提供，请求结束即关闭)
- UserService 持有该仓储，负责邮箱唯一校验、密码哈希与提交

权限校验 (AdminUser) 在路由层声明，不在此处注入。
认证领域 (auth) 自行构造 UserRepository，不经过本模块。

依赖链：
DBSession → UserRepoDep → UserServiceDep → /users 路由

Author: jinmozhe
Created: 2025-11-26
Updated: 2026-10-19
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession
from app.db.models.user import User
from app.domains.users.repository import UserRepository
from app.domains.users.service import UserService


async def get_user_repository(session: DBSession) -> UserRepository:
    """
    按请求构造 UserRepository，绑定当前请求的会话。
    """
    return UserRepository(model=User, session=session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]


async def get_user_service(repo: UserRepoDep) -> UserService:
    """
    构造管理员用户管理服务 UserService。
    """
    return UserService(repo=repo)


# Router 中只需写: service: UserServiceDep
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
