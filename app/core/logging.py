"""
File: app/core/logging.py
Description: 全局日志配置模块 (Loguru)

本模块负责：
1. 替代 Python 标准库 logging，接管 Uvicorn/FastAPI/SQLAlchemy 日志
2. 配置 Loguru 的输出格式（开发环境文本，生产环境 JSON）
3. 设置文件日志的轮转 (Rotation) 和保留 (Retention) 策略
4. 日志行附带 request_id / user_id 上下文（request_id 由中间件注入，user_id 由服务层 bind）

Author: jinmozhe
Created: 2025-11-24
Updated: 2026-10-19 (user_id context, SQL echo routing)
"""

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from app.core.config import settings

# 需要接管的第三方 logger 前缀
INTERCEPTED_LOGGER_PREFIXES: tuple[str, ...] = ("uvicorn", "fastapi", "sqlalchemy")


class InterceptHandler(logging.Handler):
    """
    将 Python 标准库 logging 拦截并转发到 Loguru 的 Handler。
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 跳过 logging 模块自身的栈帧，保证行号指向真实调用方
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            if frame.f_back:
                frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def format_record(record: dict[str, Any]) -> str:
    """
    文本格式化函数。
    上下文中存在 request_id / user_id 时追加到行尾。
    """
    format_string = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )

    extra = record["extra"]
    if extra.get("request_id"):
        format_string += " | <magenta>req_id={extra[request_id]}</magenta>"
    if extra.get("user_id"):
        format_string += " | <blue>user_id={extra[user_id]}</blue>"

    format_string += "\n{exception}"
    return format_string


def _sink_options(**overrides: Any) -> dict[str, Any]:
    """构造单个 Sink 的参数 (文本或 JSON)"""
    options: dict[str, Any] = {
        "level": settings.LOG_LEVEL,
        "enqueue": True,
        "backtrace": True,
        "diagnose": settings.LOG_DIAGNOSE,
    }
    if settings.LOG_JSON_FORMAT:
        options["serialize"] = True
    else:
        options["format"] = format_record
    options.update(overrides)
    return options


def setup_logging() -> None:
    """
    初始化日志配置。
    应在应用 lifespan 启动阶段调用。
    """
    # 1. 拦截标准库日志
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(settings.LOG_LEVEL)

    for name in list(logging.root.manager.loggerDict.keys()):
        if name.startswith(INTERCEPTED_LOGGER_PREFIXES):
            logging.getLogger(name).handlers = []
            logging.getLogger(name).propagate = True

    # SQL 回显仅在调试模式下输出
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.is_debug else logging.WARNING
    )

    # 2. 配置 Loguru Sink
    logger.remove()

    # Sink 1: 控制台
    console_overrides: dict[str, Any] = {}
    if not settings.LOG_JSON_FORMAT:
        console_overrides["colorize"] = True
    logger.add(sys.stdout, **_sink_options(**console_overrides))

    # Sink 2: 文件 (按配置启用)
    if settings.LOG_FILE_ENABLED:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(log_dir / "reservas_{time:YYYY-MM-DD}.log"),
            **_sink_options(
                rotation=settings.LOG_ROTATION,
                retention=settings.LOG_RETENTION,
                compression=settings.LOG_COMPRESSION,
            ),
        )

    logger.bind(environment=settings.ENVIRONMENT).info("Logging configured")
