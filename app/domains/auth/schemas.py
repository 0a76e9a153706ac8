"""
File: app/domains/auth/schemas.py
Description: 认证领域 Pydantic 模型 (Schema)

本模块定义了认证相关的输入/输出数据结构：
1. RegisterRequest: 自助注册参数
2. LoginRequest: 邮箱密码登录参数
3. ProfileUpdate: 个人资料部分更新 (PUT /profile, exclude_unset 语义)
4. AuthSession: 注册/登录成功后返回的用户信息 + Bearer Token

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-19 (Email login)
"""

from pydantic import BaseModel, EmailStr, Field

from app.domains.users.schemas import PASSWORD_MIN_LENGTH, UserRead


class RegisterRequest(BaseModel):
    """
    自助注册请求参数。注册用户的角色固定为 USER。
    """

    email: EmailStr = Field(..., description="登录邮箱", examples=["ana@example.com"])
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LENGTH, max_length=128, description="用户密码"
    )
    name: str = Field(..., min_length=1, max_length=100, description="姓名")
    phone: str | None = Field(default=None, max_length=30, description="联系电话")


class LoginRequest(BaseModel):
    """
    邮箱密码登录请求参数。
    """

    email: EmailStr = Field(..., description="登录邮箱", examples=["ana@example.com"])
    password: str = Field(..., min_length=1, description="用户密码")


class ProfileUpdate(BaseModel):
    """
    个人资料更新。
    修改密码时必须同时提供 current_password。
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    current_password: str | None = Field(default=None, description="当前密码")
    new_password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LENGTH, max_length=128
    )


class AuthSession(UserRead):
    """
    注册 / 登录响应：用户信息 + 访问令牌。
    """

    token: str = Field(..., description="访问令牌 (JWT)")
    token_type: str = Field(default="bearer", description="令牌类型")
    expires_in: int = Field(..., description="令牌有效期 (秒)")
