"""
File: tests/unit/test_security.py
Description: 密码哈希与 JWT 单元测试

验证：
1. 哈希记录格式与往返校验 (含空串、多字节 Unicode、指定盐)
2. 篡改任一字段、格式错误时返回 False 而不抛异常
3. 调整默认迭代次数后，旧记录仍按其自身迭代次数校验通过
4. JWT 载荷与过期

Author: jinmozhe
Created: 2026-10-19
"""

from datetime import timedelta

import pytest
from jose import JWTError

from app.core import security
from app.core.config import settings
from app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    hash_password_async,
    verify_password,
    verify_password_async,
)

# ------------------------------------------------------------------------------
# Password hashing
# ------------------------------------------------------------------------------


def test_hash_record_format() -> None:
    record = hash_password("nadar2024")
    iterations, key_length, salt, digest = record.split("$")

    assert int(iterations) == settings.PASSWORD_HASH_ITERATIONS
    assert int(key_length) == security.HASH_KEY_LENGTH
    assert len(salt) == security.SALT_BYTES * 2
    assert len(digest) == security.HASH_KEY_LENGTH * 2
    int(salt, 16)
    int(digest, 16)


@pytest.mark.parametrize(
    "password",
    ["", "secreta123", "contraseña-ñandú", "密码🔒パスワード", " espacios al final  "],
)
def test_round_trip(password: str) -> None:
    assert verify_password(password, hash_password(password)) is True


def test_round_trip_with_explicit_salt() -> None:
    record = hash_password("piscina", salt="abcdef0123")
    assert record.split("$")[2] == "abcdef0123"
    assert verify_password("piscina", record) is True


def test_random_salt_gives_distinct_records() -> None:
    assert hash_password("misma") != hash_password("misma")


def test_wrong_password_is_rejected() -> None:
    record = hash_password("correcta")
    assert verify_password("incorrecta", record) is False
    assert verify_password("", record) is False


def _mutate(field: str) -> str:
    if field.isdigit():
        return str(int(field) + 1)
    last = field[-1]
    return field[:-1] + ("0" if last != "0" else "1")


@pytest.mark.parametrize("index", [0, 1, 2, 3])
def test_tampered_field_is_rejected(index: int) -> None:
    parts = hash_password("original").split("$")
    parts[index] = _mutate(parts[index])

    assert verify_password("original", "$".join(parts)) is False


_FULLWIDTH = str.maketrans("0123456789", "０１２３４５６７８９")


@pytest.mark.parametrize(
    ("index", "rewrite"),
    [
        (0, lambda field: "0" + field),
        (1, lambda field: "0" + field),
        (0, lambda field: field.translate(_FULLWIDTH)),
        (1, lambda field: field.translate(_FULLWIDTH)),
        (3, str.upper),
    ],
    ids=[
        "iter-leading-zero",
        "len-leading-zero",
        "iter-fullwidth",
        "len-fullwidth",
        "hash-upper",
    ],
)
def test_same_value_different_text_is_rejected(index: int, rewrite) -> None:
    """数值不变但写法被改动的字段同样视为篡改"""
    parts = hash_password("original").split("$")
    parts[index] = rewrite(parts[index])

    assert verify_password("original", "$".join(parts)) is False


@pytest.mark.parametrize(
    "record",
    [
        "",
        "solo-un-campo",
        "1000$64$abcdef",
        "1000$64$abc$def$extra",
        "mil$64$abcd$abcd",
        "1000$sesenta$abcd$abcd",
        "-5$64$abcd$abcd",
        "0$64$abcd$abcd",
        "1000$0$abcd$abcd",
        "1000$64$$abcd",
        "1000$64$abcd$",
        "1000$64$abcd$no-es-hex",
        "1000$64$abcd$ABCD",
        "01000$64$abcd$abcd",
        "1000$064$abcd$abcd",
        "1000$99999999999999999999999$abcd$abcd",
    ],
)
def test_malformed_records_return_false(record: str) -> None:
    assert verify_password("cualquiera", record) is False


def test_old_records_survive_iteration_change(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "PASSWORD_HASH_ITERATIONS", 1200)
    old_record = hash_password("durable")
    assert old_record.startswith("1200$")

    monkeypatch.setattr(settings, "PASSWORD_HASH_ITERATIONS", 3400)
    new_record = hash_password("durable")
    assert new_record.startswith("3400$")

    assert verify_password("durable", old_record) is True
    assert verify_password("durable", new_record) is True


@pytest.mark.asyncio
async def test_async_helpers() -> None:
    record = await hash_password_async("hilo")
    assert await verify_password_async("hilo", record) is True
    assert await verify_password_async("otro", record) is False


# ------------------------------------------------------------------------------
# JWT
# ------------------------------------------------------------------------------


def test_access_token_claims() -> None:
    token = create_access_token(user_id=7, email="ana@example.com", role="ADMIN")
    payload = decode_access_token(token)

    assert payload["sub"] == "7"
    assert payload["email"] == "ana@example.com"
    assert payload["role"] == "ADMIN"
    assert "exp" in payload


def test_expired_token_is_rejected() -> None:
    token = create_access_token(
        user_id=1,
        email="ana@example.com",
        role="USER",
        expires_delta=timedelta(seconds=-10),
    )
    with pytest.raises(JWTError):
        decode_access_token(token)


def test_token_signed_with_other_key_is_rejected(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    token = create_access_token(user_id=1, email="ana@example.com", role="USER")
    monkeypatch.setattr(settings, "SECRET_KEY", "otra-clave-completamente-distinta")

    with pytest.raises(JWTError):
        decode_access_token(token)
