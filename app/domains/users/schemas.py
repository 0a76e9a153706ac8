"""
File: app/domains/users/schemas.py
Description: 用户领域 Pydantic 模型 (Schema)

本模块定义了用户相关的输入/输出数据结构：
1. UserCreate: 管理员创建用户参数 (包含密码明文)
2. UserRead: 用户信息响应 (屏蔽密码)
3. UserDetail: 用户详情响应 (附带其预约列表)

规范：
- 严格遵循 Pydantic V2 写法 (ConfigDict)
- 响应模型开启 from_attributes=True 以支持 ORM 转换
- 空字符串视为缺失 (min_length=1)

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-19
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.db.models.user import Role
from app.domains.reservations.schemas import ReservationRead

PASSWORD_MIN_LENGTH = 6

# ------------------------------------------------------------------------------
# Input Schemas (输入模型)
# ------------------------------------------------------------------------------


class UserCreate(BaseModel):
    """
    管理员创建用户。
    角色缺省为 USER。
    """

    email: EmailStr = Field(..., description="登录邮箱 (唯一)")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LENGTH, max_length=128, description="明文密码"
    )
    name: str = Field(..., min_length=1, max_length=100, description="姓名")
    phone: str | None = Field(default=None, max_length=30, description="联系电话")
    role: Role = Field(default=Role.USER, description="角色")


# ------------------------------------------------------------------------------
# Output Schemas (输出/响应模型)
# ------------------------------------------------------------------------------


class UserRead(BaseModel):
    """
    用户读取模型 (响应)，不包含 password 字段。
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="用户 ID")
    email: str
    name: str
    phone: str | None
    role: Role
    is_active: bool
    created_at: datetime = Field(..., description="创建时间 (UTC)")
    updated_at: datetime = Field(..., description="更新时间 (UTC)")


class UserDetail(UserRead):
    """
    用户详情 (管理员视角)，附带该用户的全部预约。
    """

    reservations: list[ReservationRead] = Field(default_factory=list)
