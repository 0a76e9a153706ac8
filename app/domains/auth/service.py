"""
File: app/domains/auth/service.py
Description: 认证领域服务 (Service)

本模块封装认证核心业务逻辑：
1. 注册: 校验邮箱唯一，哈希密码，创建 USER 并签发令牌
2. 登录: 校验邮箱与密码，签发令牌
3. 个人资料: 读取与部分更新 (含修改密码)

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-19 (Email + PBKDF2 credentials)
"""

from app.core.config import settings
from app.core.exceptions import AppException, db_errors_as
from app.core.logging import logger
from app.core.security import (
    create_access_token,
    hash_password_async,
    verify_password_async,
)
from app.db.models.user import Role, User
from app.domains.auth.schemas import (
    AuthSession,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
)
from app.domains.users.repository import UserRepository
from app.domains.users.schemas import UserRead


class AuthService:
    """
    认证服务类。
    """

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def register(self, obj_in: RegisterRequest) -> AuthSession:
        """
        用户自助注册。
        """
        with db_errors_as("AUTH_REGISTER_ERROR"):
            if await self.user_repo.get_by_email(obj_in.email):
                raise AppException("AUTH_EMAIL_ALREADY_EXISTS")

            hashed_password = await hash_password_async(obj_in.password)
            user = await self.user_repo.create(
                {
                    **obj_in.model_dump(exclude={"password"}),
                    "password": hashed_password,
                    "role": Role.USER,
                    "is_active": True,
                }
            )
            await self.user_repo.session.commit()

        logger.bind(user_id=user.id).info("User registered")
        return self._issue_session(user)

    async def login(self, login_data: LoginRequest) -> AuthSession:
        """
        用户登录流程。

        流程:
        1. 查库获取用户
        2. 验证密码哈希 (线程池)
        3. 检查用户激活状态 (仅在密码正确后，避免泄露账号状态)
        4. 签发 Access Token
        """
        with db_errors_as("AUTH_LOGIN_ERROR"):
            user = await self.user_repo.get_by_email(login_data.email)

        # 用户不存在与密码错误返回完全一致的响应，防止枚举
        if not user:
            raise AppException("AUTH_INVALID_CREDENTIALS")

        if not await verify_password_async(login_data.password, user.password):
            raise AppException("AUTH_INVALID_CREDENTIALS")

        if not user.is_active:
            raise AppException("AUTH_ACCOUNT_DISABLED")

        logger.bind(user_id=user.id).info("User logged in")
        return self._issue_session(user)

    async def get_profile(self, user_id: int) -> User:
        """读取当前用户资料"""
        with db_errors_as("AUTH_PROFILE_ERROR"):
            user = await self.user_repo.get(user_id)

        if not user:
            raise AppException("AUTH_USER_NOT_FOUND")
        return user

    async def update_profile(self, user_id: int, obj_in: ProfileUpdate) -> User:
        """
        更新个人资料。
        new_password 需要 current_password 校验通过后才会写入。
        """
        with db_errors_as("AUTH_UPDATE_ERROR"):
            user = await self.user_repo.get(user_id)
            if not user:
                raise AppException("AUTH_USER_NOT_FOUND")

            # 显式 null 视为未提供，不清空已有资料
            update_data = {
                k: v
                for k, v in obj_in.model_dump(
                    exclude_unset=True, exclude={"current_password", "new_password"}
                ).items()
                if v is not None
            }

            if obj_in.new_password:
                if not obj_in.current_password:
                    raise AppException("AUTH_MISSING_CURRENT_PASSWORD")
                if not await verify_password_async(
                    obj_in.current_password, user.password
                ):
                    raise AppException("AUTH_WRONG_CURRENT_PASSWORD")
                update_data["password"] = await hash_password_async(
                    obj_in.new_password
                )

            user = await self.user_repo.update(user, update_data)
            await self.user_repo.session.commit()

        logger.bind(
            user_id=user.id, password_changed="password" in update_data
        ).info("Profile updated")
        return user

    @staticmethod
    def _issue_session(user: User) -> AuthSession:
        """
        [内部方法] 签发令牌并组装响应。
        """
        token = create_access_token(user_id=user.id, email=user.email, role=user.role)
        return AuthSession(
            **UserRead.model_validate(user).model_dump(),
            token=token,
            token_type="bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )
