"""
File: app/core/middleware.py
Description: 中间件配置与实现

本模块负责：
1. RequestLogMiddleware：
   - 生成 UUID v7 request_id 并写入 request.state
   - 绑定 Loguru 上下文
   - 记录访问日志 (Access Log)
   - 添加 X-Request-ID 响应头 (响应信封本身不携带 request_id)
2. register_middlewares：统一注册 CORS 与 RequestLogMiddleware

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-19
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from uuid6 import uuid7

from app.core.config import settings
from app.core.logging import logger

REQUEST_ID_HEADER = "X-Request-ID"

# 跳过访问日志的路径（健康检查等高频低价值请求）
SKIP_LOG_PATHS: set[str] = {"/health", "/favicon.ico"}


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    全局请求日志中间件
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid7())
        request.state.request_id = request_id

        skip_log = request.url.path in SKIP_LOG_PATHS

        # 在此 with 块内，Router/Service/Repo 产生的日志都会自动携带 request_id
        with logger.contextualize(request_id=request_id):
            start_time = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception as exc:
                process_time = (time.perf_counter() - start_time) * 1000
                logger.bind(
                    method=request.method,
                    path=request.url.path,
                    duration_ms=round(process_time, 2),
                ).opt(exception=exc).error("Request failed with unhandled exception")
                raise

            response.headers[REQUEST_ID_HEADER] = request_id

            if not skip_log:
                process_time = (time.perf_counter() - start_time) * 1000
                logger.bind(
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round(process_time, 2),
                    client_ip=request.client.host if request.client else "unknown",
                ).info("Request finished")

            return response


def register_middlewares(app: FastAPI) -> None:
    """
    统一注册所有中间件。
    Starlette 中间件为"洋葱模型"，后注册的先执行。
    """
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.BACKEND_CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=[REQUEST_ID_HEADER],
        )

    app.add_middleware(RequestLogMiddleware)
