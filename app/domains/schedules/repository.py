"""
File: app/domains/schedules/repository.py
Description: 泳池时段仓储层 (Repository)

扩展功能：
1. list_active: 开放中的时段，按星期、开始时刻排序
2. get_for_update: 行级锁读取 (预约名额检查期间锁定时段)

Author: jinmozhe
Created: 2026-10-19
"""

from sqlalchemy import select

from app.db.models.swimming_schedule import SwimmingSchedule
from app.db.repositories.base import BaseRepository
from app.domains.schedules.schemas import ScheduleCreate, ScheduleUpdate


class ScheduleRepository(
    BaseRepository[SwimmingSchedule, ScheduleCreate, ScheduleUpdate]
):
    async def list_active(self) -> list[SwimmingSchedule]:
        stmt = (
            select(SwimmingSchedule)
            .where(SwimmingSchedule.is_active.is_(True))
            .order_by(SwimmingSchedule.day_of_week, SwimmingSchedule.start_time)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_update(self, schedule_id: int) -> SwimmingSchedule | None:
        """
        SELECT ... FOR UPDATE。
        同一时段的并发预约在事务内串行化，名额计数不会超卖。
        (SQLite 不支持该子句，会被方言忽略)
        """
        stmt = (
            select(SwimmingSchedule)
            .where(SwimmingSchedule.id == schedule_id)
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
