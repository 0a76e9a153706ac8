"""
File: app/db/models/__init__.py
Description: ORM 模型注册表

本模块负责：
1. 导入所有业务模型 (User, SwimmingSchedule, Reservation, PaymentRecord)
2. 导入基类 (Base, IntIdModel, Mixins)
3. 导出它们供 Alembic (env.py) 与测试夹具发现 metadata

注意：
每当新增一个 Model 文件，必须在此处导入，
否则 Alembic autogenerate 无法检测到新表。

Author: jinmozhe
Created: 2025-11-25
Updated: 2026-10-19
"""

# 1. 导入基类与组件
from app.db.models.base import Base, IntIdBase, IntIdModel, TimestampMixin

# 2. 导入业务模型
from app.db.models.reservation import PaymentRecord, Reservation, ReservationStatus
from app.db.models.swimming_schedule import SwimmingSchedule
from app.db.models.user import Role, User

# 3. 显式导出
__all__ = [
    # 基类
    "Base",
    "IntIdBase",
    "IntIdModel",
    "TimestampMixin",
    # 业务模型
    "User",
    "Role",
    "SwimmingSchedule",
    "Reservation",
    "ReservationStatus",
    "PaymentRecord",
]
