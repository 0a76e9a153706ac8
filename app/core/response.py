"""
File: app/core/response.py
Description: 统一响应信封（Unified Response Envelope）模型与响应函数

所有 HTTP 接口（含异常处理器）都通过 respond() 返回，信封结构固定为：
    {"success": bool, "message" | "error": str, "data"?: any, "details"?: str}

规则：
1. 状态码与文案均由 app.core.messages 注册表按消息类别解析，调用方不直接写状态码
2. success = status_code < 400；成功用 message 键，失败用 error 键
3. data / details 未提供 (None) 时整个键省略，而不是输出 null

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-19 (Category-driven envelope)
"""

from typing import Any, Generic, TypeVar

from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, Field

from app.core.messages import resolve

T = TypeVar("T")


class ResponseModel(BaseModel, Generic[T]):
    """
    统一响应信封。
    路由层将其作为 response_model 用于 OpenAPI 文档；
    实际序列化由 respond() 以 exclude_unset 完成，未赋值的键不会出现在响应中。
    """

    success: bool = Field(..., description="status_code < 400")
    message: str | None = Field(default=None, description="成功时的提示文案")
    error: str | None = Field(default=None, description="失败时的错误文案")
    data: T | None = Field(default=None, description="业务数据")
    details: str | None = Field(default=None, description="补充诊断信息")


def build_envelope(
    category: str,
    data: Any = None,
    details: str | None = None,
) -> tuple[int, dict[str, Any]]:
    """
    根据消息类别构造 (状态码, 信封字典)。

    Raises:
        UnknownMessageCategory: 类别未注册
    """
    status_code, text = resolve(category)
    success = status_code < 400

    fields: dict[str, Any] = {"success": success}
    fields["message" if success else "error"] = text
    if data is not None:
        fields["data"] = data
    if details is not None:
        fields["details"] = details

    # data 声明为 Any：Pydantic 按运行时类型序列化嵌套模型、日期与 Decimal
    envelope = ResponseModel[Any](**fields)
    return status_code, envelope.model_dump(mode="json", exclude_unset=True)


def respond(
    category: str,
    data: Any = None,
    details: str | None = None,
) -> ORJSONResponse:
    """
    构造最终的 HTTP 响应 (每次调用对应一次响应写出)。

    用法:
        return respond("RESERVATION_CREATED", data=ReservationRead.model_validate(r))
    """
    status_code, content = build_envelope(category, data=data, details=details)
    return ORJSONResponse(status_code=status_code, content=content)
