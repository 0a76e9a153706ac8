"""
File: app/core/security.py
Description: 安全工具模块 (PBKDF2-SHA512 + JWT)

本模块负责：
1. 密码加密 (Hash): PBKDF2-HMAC-SHA512，自描述存储格式
       "<iterations>$<key_length>$<salt_hex>$<hash_hex>"
2. 密码验证 (Verify): 按存储串中的参数重新派生，常量时间比较；任何格式异常都返回 False
3. JWT 签发与解析: 载荷为 {sub, email, role, exp}
4. 异步封装: KDF 属于 CPU 密集型操作，在线程池中执行

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-19 (PBKDF2 credential records)
"""

import hashlib
import hmac
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt
from starlette.concurrency import run_in_threadpool

from app.core.config import settings

# ------------------------------------------------------------------------------
# 1. 密码处理 (Password Hashing)
# ------------------------------------------------------------------------------

HASH_DIGEST = "sha512"
HASH_KEY_LENGTH = 64  # 派生密钥字节数
SALT_BYTES = 32  # 随机盐字节数 (十六进制后 64 字符)
RECORD_SEPARATOR = "$"
HEX_DIGITS = frozenset("0123456789abcdef")  # 记录中的哈希一律小写


def _derive(password: str, salt: str, iterations: int, key_length: int) -> bytes:
    # 盐以其十六进制文本的 UTF-8 字节参与派生，与既有记录保持兼容
    return hashlib.pbkdf2_hmac(
        HASH_DIGEST,
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
        key_length,
    )


def hash_password(password: str, salt: str | None = None) -> str:
    """
    生成密码哈希记录。

    Args:
        password: 明文密码 (允许空串与任意 Unicode)
        salt: 十六进制盐 (可选，缺省时随机生成 32 字节)

    Returns:
        str: "iterations$key_length$salt_hex$hash_hex"
    """
    salt = salt or secrets.token_hex(SALT_BYTES)
    iterations = settings.PASSWORD_HASH_ITERATIONS
    derived = _derive(password, salt, iterations, HASH_KEY_LENGTH)
    return RECORD_SEPARATOR.join(
        [str(iterations), str(HASH_KEY_LENGTH), salt, derived.hex()]
    )


def _parse_count(field: str) -> int | None:
    # 仅接受规范的十进制写法: ASCII 数字、无前导零、大于 0
    if not (field.isascii() and field.isdigit()):
        return None
    value = int(field)
    if value < 1 or str(value) != field:
        return None
    return value


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    验证明文密码与哈希记录是否匹配。

    使用记录中解析出的迭代次数、密钥长度和盐，而非当前默认配置，
    因此调整 PASSWORD_HASH_ITERATIONS 不会使旧记录失效。
    记录格式不合法 (含非规范数字、大写十六进制) 时一律返回 False，绝不抛出异常。
    """
    parts = hashed_password.split(RECORD_SEPARATOR)
    if len(parts) != 4:
        return False

    iterations_str, key_length_str, salt, stored_hex = parts
    if not (salt and stored_hex):
        return False
    if not HEX_DIGITS.issuperset(stored_hex):
        return False

    iterations = _parse_count(iterations_str)
    key_length = _parse_count(key_length_str)
    if iterations is None or key_length is None:
        return False

    try:
        stored = bytes.fromhex(stored_hex)
        derived = _derive(plain_password, salt, iterations, key_length)
    except (ValueError, OverflowError):
        return False

    return hmac.compare_digest(derived, stored)


async def hash_password_async(password: str) -> str:
    """异步生成密码哈希（线程池执行，避免阻塞事件循环）"""
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    """异步验证密码（线程池执行，避免阻塞事件循环）"""
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


# ------------------------------------------------------------------------------
# 2. JWT 处理 (JSON Web Token)
# ------------------------------------------------------------------------------


def _secret_key() -> str:
    secret_key = settings.SECRET_KEY
    if secret_key is None:
        raise ValueError("SECRET_KEY configuration is missing.")
    return secret_key


def create_access_token(
    user_id: int,
    email: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    生成 JWT Access Token。

    Args:
        user_id: 用户 ID (写入 sub，JWT 规范要求为字符串)
        email: 用户邮箱
        role: 用户角色 (USER / ADMIN / TREASURER)
        expires_delta: 自定义过期时间差 (默认 ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        str: 编码后的 JWT 字符串
    """
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(user_id), "email": email, "role": role, "exp": expire}
    return jwt.encode(to_encode, _secret_key(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    校验签名与有效期并返回载荷。

    Raises:
        JWTError: 签名错误、格式错误或已过期
    """
    return jwt.decode(token, _secret_key(), algorithms=[settings.ALGORITHM])
