"""
File: app/domains/reservations/constants.py
Description: 预约领域常量

Author: jinmozhe
Created: 2026-10-19
"""

from app.db.models.reservation import ReservationStatus
from app.db.models.user import Role

# 员工角色：可查看/取消任意预约，可确认付款，可查看付款流水
STAFF_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.TREASURER})

# 不占用名额的状态
RELEASED_STATUSES: tuple[ReservationStatus, ...] = (ReservationStatus.CANCELLED,)
