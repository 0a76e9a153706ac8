"""
File: app/core/exceptions.py
Description: 业务异常类与全局异常处理器

本模块负责：
1. 业务异常基类（AppException）只接受消息类别，状态码与文案由注册表解析
2. invalid_params: 为路由声明请求校验失败时使用的消息类别
3. db_errors_as: 将 SQLAlchemy 异常转换为指定操作的 500 类别（记录堆栈，不外泄细节）
4. 全局异常处理器统一通过 respond() 输出响应信封

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-19 (Category-driven errors)
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.logging import logger
from app.core.messages import resolve
from app.core.response import respond

# 路由函数上记录校验类别的属性名
VALIDATION_CATEGORY_ATTR = "__validation_category__"
DEFAULT_VALIDATION_CATEGORY = "APP_INVALID_PARAMS"

# 框架层 HTTP 异常的状态码 -> 类别
HTTP_ERROR_CATEGORIES: dict[int, str] = {
    404: "APP_ROUTE_NOT_FOUND",
    405: "APP_METHOD_NOT_ALLOWED",
}

EndpointT = TypeVar("EndpointT", bound=Callable[..., Any])

# ------------------------------------------------------------------------------
# 1. 自定义业务异常类
# ------------------------------------------------------------------------------


class AppException(Exception):
    """
    应用基础异常类。

    用法示例:
        raise AppException("RESERVATION_NOT_FOUND")
        raise AppException("APP_INVALID_PARAMS", details="date: formato inválido")
    """

    def __init__(
        self,
        category: str,
        details: str | None = None,
        data: Any = None,
    ):
        # 立即解析，未注册的类别在抛出点就暴露出来
        self.http_status, self.message = resolve(category)
        self.category = category
        self.details = details
        self.data = data
        super().__init__(self.message)


# ------------------------------------------------------------------------------
# 2. 路由与服务层辅助工具
# ------------------------------------------------------------------------------


def invalid_params(category: str) -> Callable[[EndpointT], EndpointT]:
    """
    声明路由在请求校验失败时使用的消息类别。

    用法:
        @router.post("/login")
        @invalid_params("AUTH_MISSING_CREDENTIALS")
        async def login(...): ...
    """
    resolve(category)

    def decorator(endpoint: EndpointT) -> EndpointT:
        setattr(endpoint, VALIDATION_CATEGORY_ATTR, category)
        return endpoint

    return decorator


@contextmanager
def db_errors_as(category: str) -> Iterator[None]:
    """
    数据库异常边界。
    块内抛出的 SQLAlchemyError 记录完整堆栈后转换为 AppException(category)；
    AppException 等其他异常原样透传。
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.opt(exception=exc).bind(category=category).error(
            "Database operation failed"
        )
        raise AppException(category) from exc


def _get_request_id(request: Request) -> str:
    """尝试从 request.state 获取 request_id，如果不存在则返回 'unknown'"""
    return str(getattr(request.state, "request_id", "unknown"))


# ------------------------------------------------------------------------------
# 3. 全局异常处理器 (Handlers)
# ------------------------------------------------------------------------------


async def app_exception_handler(request: Request, exc: AppException) -> ORJSONResponse:
    """
    处理自定义业务异常 (AppException)
    """
    logger.bind(
        request_id=_get_request_id(request),
        category=exc.category,
        http_status=exc.http_status,
    ).warning("Business exception occurred")

    return respond(exc.category, data=exc.data, details=exc.details)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """
    处理 Pydantic 校验异常 (FastAPI 默认 422)
    使用路由声明的校验类别 (默认 APP_INVALID_PARAMS)，details 为 "字段: 原因"
    """
    endpoint = request.scope.get("endpoint")
    category = getattr(endpoint, VALIDATION_CATEGORY_ATTR, DEFAULT_VALIDATION_CATEGORY)

    errors = exc.errors()
    first_error = errors[0] if errors else {}

    # loc 示例: ('body', 'email')
    loc = first_error.get("loc", [])
    field_name = str(loc[-1]) if loc else "unknown"
    msg = first_error.get("msg", "Invalid parameter")
    readable_message = f"{field_name}: {msg}"

    logger.bind(
        request_id=_get_request_id(request),
        category=category,
        detail=readable_message,
    ).warning("Request validation failed")

    return respond(category, details=readable_message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> ORJSONResponse:
    """
    处理框架层面的 HTTP 异常 (如 404 Not Found, 405 Method Not Allowed)
    """
    category = HTTP_ERROR_CATEGORIES.get(exc.status_code, DEFAULT_VALIDATION_CATEGORY)

    logger.bind(
        request_id=_get_request_id(request),
        status_code=exc.status_code,
        detail=str(exc.detail),
    ).warning("Framework HTTP exception occurred")

    details = None if exc.status_code in HTTP_ERROR_CATEGORIES else str(exc.detail)
    return respond(category, details=details)


async def general_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """
    处理所有未捕获的异常 (500 Internal Server Error)
    记录完整堆栈，对客户端只返回通用文案
    """
    logger.opt(exception=exc).bind(request_id=_get_request_id(request)).error(
        "Unhandled system exception occurred"
    )

    return respond("APP_INTERNAL_ERROR")


# ------------------------------------------------------------------------------
# 4. 异常处理器注册函数
# ------------------------------------------------------------------------------


def register_exception_handlers(app: FastAPI) -> None:
    """
    统一注册所有异常处理器。
    应在 main.py 中调用。
    """
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore
    app.add_exception_handler(Exception, general_exception_handler)
