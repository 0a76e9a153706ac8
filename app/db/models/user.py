"""
File: app/db/models/user.py
Description: 用户核心账号模型

继承自 IntIdModel，自动拥有：
1. 自增整数主键
2. created_at / updated_at (UTC)

严格模式:
- CheckConstraint 防止关键字段存入空字符串 ("")
- password 存储 PBKDF2 自描述哈希记录，绝不存明文

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-19 (Roles, reservations relationship)
"""

from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Enum, String, text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from app.db.models.base import IntIdModel

if TYPE_CHECKING:
    from app.db.models.reservation import Reservation


class Role(StrEnum):
    """用户角色 (静态白名单鉴权)"""

    USER = "USER"
    ADMIN = "ADMIN"
    TREASURER = "TREASURER"


class User(IntIdModel):
    """
    用户模型 (账号域)
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        # user 为 PostgreSQL 保留字
        return "users"

    __table_args__ = (
        CheckConstraint("length(trim(email)) > 0", name="email_not_empty"),
        CheckConstraint("length(password) > 0", name="password_not_empty"),
    )

    # --------------------------------------------------------------------------
    # 核心凭证
    # --------------------------------------------------------------------------

    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, comment="登录邮箱 (唯一)"
    )

    # 格式: iterations$key_length$salt_hex$hash_hex
    password: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="密码哈希记录"
    )

    # --------------------------------------------------------------------------
    # 基础资料
    # --------------------------------------------------------------------------

    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="姓名")

    phone: Mapped[str | None] = mapped_column(
        String(30), nullable=True, comment="联系电话"
    )

    # --------------------------------------------------------------------------
    # 状态与权限
    # --------------------------------------------------------------------------

    role: Mapped[Role] = mapped_column(
        Enum(Role, name="role", native_enum=False, length=20),
        default=Role.USER,
        server_default=Role.USER.value,
        nullable=False,
        comment="角色",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=text("true"),
        nullable=False,
        comment="是否激活",
    )

    # --------------------------------------------------------------------------
    # 关联
    # --------------------------------------------------------------------------

    reservations: Mapped[list["Reservation"]] = relationship(
        back_populates="user",
        foreign_keys="Reservation.user_id",
        order_by="Reservation.date",
    )
