"""
File: app/domains/users/service.py
Description: 用户领域服务 (业务逻辑层，管理员用户管理)

本模块封装用户管理的核心业务逻辑：
1. 用户列表 / 详情 (详情附带预约)
2. 管理员创建用户：校验邮箱唯一、哈希密码、写入数据库
3. 异常处理：抛出携带消息类别的 AppException

注意：
- 事务提交 (Commit) 由本层负责。
- 数据库异常经 db_errors_as 转换为本操作的 500 类别。

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-19
"""

from app.core.exceptions import AppException, db_errors_as
from app.core.logging import logger
from app.core.security import hash_password_async
from app.db.models.user import User
from app.domains.users.repository import UserRepository
from app.domains.users.schemas import UserCreate


class UserService:
    """
    用户领域服务。
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    async def list_users(self) -> list[User]:
        """获取全部用户"""
        with db_errors_as("USER_FETCH_ERROR"):
            return await self.repo.list_all()

    async def get_user(self, user_id: int) -> User:
        """
        获取用户详情 (含预约)。
        用户不存在时抛出 USER_NOT_FOUND。
        """
        with db_errors_as("USER_FETCH_ERROR"):
            user = await self.repo.get_with_reservations(user_id)

        if not user:
            raise AppException("USER_NOT_FOUND")
        return user

    async def create_user(self, obj_in: UserCreate) -> User:
        """
        管理员创建用户。
        """
        with db_errors_as("USER_CREATE_ERROR"):
            if await self.repo.get_by_email(obj_in.email):
                raise AppException("USER_EMAIL_ALREADY_EXISTS")

            hashed_password = await hash_password_async(obj_in.password)

            user_data = obj_in.model_dump(exclude={"password"})
            user = await self.repo.create(
                {**user_data, "password": hashed_password, "is_active": True}
            )
            await self.repo.session.commit()

        logger.bind(user_id=user.id, role=user.role).info("User created by admin")
        return user
