"""
File: app/api_router.py
Description: 根 API 路由聚合层

本模块负责：
1. 聚合所有业务领域的 Router (auth, users, schedules, reservations)
2. 统一设置路由前缀 (如 /auth, /reservations)
3. 统一设置标签 (Tags) 用于 OpenAPI 文档分组

Author: jinmozhe
Created: 2025-12-05
Updated: 2026-10-19 (Pool reservation domains)
"""

from fastapi import APIRouter

from app.domains.auth.router import router as auth_router
from app.domains.reservations.router import router as reservations_router
from app.domains.schedules.router import router as schedules_router
from app.domains.users.router import router as users_router

api_router = APIRouter()

# 1. 认证模块
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])

# 2. 用户管理 (管理员)
api_router.include_router(users_router, prefix="/users", tags=["users"])

# 3. 泳池时段
api_router.include_router(schedules_router, prefix="/schedules", tags=["schedules"])

# 4. 预约
api_router.include_router(
    reservations_router, prefix="/reservations", tags=["reservations"]
)
