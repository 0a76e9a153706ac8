"""
File: tests/unit/test_exceptions.py
Description: 业务异常与全局异常处理器单元测试

Author: jinmozhe
Created: 2026-10-19
"""

import orjson
import pytest
from sqlalchemy.exc import OperationalError
from starlette.requests import Request

from app.core.exceptions import (
    AppException,
    db_errors_as,
    general_exception_handler,
    invalid_params,
)
from app.core.messages import UnknownMessageCategory


def _request() -> Request:
    return Request({"type": "http", "method": "GET", "path": "/", "headers": []})


def test_app_exception_resolves_category() -> None:
    exc = AppException("RESERVATION_NOT_FOUND", details="id=9")

    assert exc.http_status == 404
    assert exc.message == "Reserva no encontrada"
    assert exc.category == "RESERVATION_NOT_FOUND"
    assert exc.details == "id=9"


def test_app_exception_rejects_unknown_category() -> None:
    with pytest.raises(UnknownMessageCategory):
        AppException("RESERVATION_TYPO")


def test_invalid_params_marks_endpoint() -> None:
    @invalid_params("AUTH_MISSING_CREDENTIALS")
    async def endpoint() -> None: ...

    assert endpoint.__validation_category__ == "AUTH_MISSING_CREDENTIALS"


def test_invalid_params_rejects_unknown_category() -> None:
    with pytest.raises(UnknownMessageCategory):
        invalid_params("AUTH_NOPE")


def test_db_errors_as_converts_sqlalchemy_errors() -> None:
    cause = OperationalError("SELECT 1", {}, Exception("connection lost"))

    with pytest.raises(AppException) as exc_info:
        with db_errors_as("RESERVATION_CREATE_ERROR"):
            raise cause

    assert exc_info.value.category == "RESERVATION_CREATE_ERROR"
    assert exc_info.value.http_status == 500
    assert exc_info.value.__cause__ is cause


def test_db_errors_as_passes_business_errors_through() -> None:
    with pytest.raises(AppException) as exc_info:
        with db_errors_as("RESERVATION_CREATE_ERROR"):
            raise AppException("RESERVATION_NO_AVAILABILITY")

    assert exc_info.value.category == "RESERVATION_NO_AVAILABILITY"


@pytest.mark.asyncio
async def test_general_handler_hides_exception_details() -> None:
    response = await general_exception_handler(
        _request(), RuntimeError("secreto interno")
    )
    body = orjson.loads(response.body)

    assert response.status_code == 500
    assert body == {"success": False, "error": "Error interno del servidor"}
