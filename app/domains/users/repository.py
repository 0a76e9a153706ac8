"""
File: app/domains/users/repository.py
Description: 用户领域仓储层 (Repository)

本模块负责用户数据的数据库访问，继承自通用 BaseRepository。
扩展功能：
1. get_by_email: 根据邮箱查询 (登录 / 唯一性校验)
2. get_with_reservations: 查询用户并预加载其预约 (管理员详情)

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-19
"""

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.db.models.user import User
from app.db.repositories.base import BaseRepository


class UserRepository(BaseRepository[User, BaseModel, BaseModel]):
    """
    用户仓储类。
    创建时需要写入密码哈希，因此 create 由 Service 以字典形式传参。
    """

    async def get_by_email(self, email: str) -> User | None:
        """
        根据邮箱查询用户。
        """
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_with_reservations(self, user_id: int) -> User | None:
        """
        查询用户并预加载 reservations (异步会话不允许隐式懒加载)。
        """
        stmt = (
            select(User)
            .where(User.id == user_id)
            .options(selectinload(User.reservations))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
