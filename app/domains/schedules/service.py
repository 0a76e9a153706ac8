"""
File: app/domains/schedules/service.py
Description: 泳池时段领域服务 (业务逻辑层)

本模块封装时段管理的业务逻辑：
1. 开放时段列表 / 单个时段查询
2. 创建与部分更新 (校验 end_time > start_time)
3. 删除：已被预约引用的时段改为停用，保留历史预约
4. 名额统计：容量减去非取消预约数

Author: jinmozhe
Created: 2026-10-19
"""

import datetime as dt

from app.core.exceptions import AppException, db_errors_as
from app.core.logging import logger
from app.db.models.swimming_schedule import SwimmingSchedule
from app.domains.reservations.repository import ReservationRepository
from app.domains.schedules.repository import ScheduleRepository
from app.domains.schedules.schemas import (
    ScheduleAvailability,
    ScheduleCreate,
    ScheduleRead,
    ScheduleUpdate,
)


def ensure_time_range(start_time: dt.time, end_time: dt.time) -> None:
    """结束时刻必须晚于开始时刻"""
    if end_time <= start_time:
        raise AppException(
            "SCHEDULE_INVALID_TIME_RANGE",
            details=f"{start_time.isoformat()} - {end_time.isoformat()}",
        )


class ScheduleService:
    """
    时段领域服务。
    名额统计需要查询预约表，因此同时依赖 ReservationRepository。
    """

    def __init__(
        self, repo: ScheduleRepository, reservation_repo: ReservationRepository
    ):
        self.repo = repo
        self.reservation_repo = reservation_repo

    async def list_active(self) -> list[SwimmingSchedule]:
        with db_errors_as("SCHEDULE_FETCH_ERROR"):
            return await self.repo.list_active()

    async def get_schedule(self, schedule_id: int) -> SwimmingSchedule:
        with db_errors_as("SCHEDULE_FETCH_ERROR"):
            schedule = await self.repo.get(schedule_id)

        if not schedule:
            raise AppException("SCHEDULE_NOT_FOUND")
        return schedule

    async def create_schedule(self, obj_in: ScheduleCreate) -> SwimmingSchedule:
        ensure_time_range(obj_in.start_time, obj_in.end_time)

        with db_errors_as("SCHEDULE_CREATE_ERROR"):
            schedule = await self.repo.create({**obj_in.model_dump(), "is_active": True})
            await self.repo.session.commit()

        logger.bind(schedule_id=schedule.id).info("Schedule created")
        return schedule

    async def update_schedule(
        self, schedule_id: int, obj_in: ScheduleUpdate
    ) -> SwimmingSchedule:
        """
        部分更新。合并后的起止时刻同样需要满足先后关系。
        """
        with db_errors_as("SCHEDULE_UPDATE_ERROR"):
            schedule = await self.repo.get(schedule_id)
            if not schedule:
                raise AppException("SCHEDULE_NOT_FOUND")

            update_data = {
                k: v
                for k, v in obj_in.model_dump(exclude_unset=True).items()
                if v is not None
            }
            ensure_time_range(
                update_data.get("start_time", schedule.start_time),
                update_data.get("end_time", schedule.end_time),
            )

            schedule = await self.repo.update(schedule, update_data)
            await self.repo.session.commit()

        logger.bind(schedule_id=schedule.id, fields=sorted(update_data)).info(
            "Schedule updated"
        )
        return schedule

    async def delete_schedule(self, schedule_id: int) -> SwimmingSchedule | None:
        """
        删除时段。

        Returns:
            被引用时返回停用后的时段；物理删除时返回 None
        """
        with db_errors_as("SCHEDULE_DELETE_ERROR"):
            schedule = await self.repo.get(schedule_id)
            if not schedule:
                raise AppException("SCHEDULE_NOT_FOUND")

            if await self.reservation_repo.count_for_schedule(schedule_id) > 0:
                schedule = await self.repo.update(schedule, {"is_active": False})
                await self.repo.session.commit()
                logger.bind(schedule_id=schedule_id).info(
                    "Schedule deactivated (has reservations)"
                )
                return schedule

            await self.repo.delete(schedule)
            await self.repo.session.commit()

        logger.bind(schedule_id=schedule_id).info("Schedule deleted")
        return None

    async def get_availability(
        self, schedule_id: int, date: dt.date
    ) -> ScheduleAvailability:
        with db_errors_as("SCHEDULE_AVAILABILITY_ERROR"):
            schedule = await self.repo.get(schedule_id)
            if not schedule:
                raise AppException("SCHEDULE_NOT_FOUND")

            reserved = await self.reservation_repo.count_booked(schedule_id, date)

        available = max(0, schedule.max_capacity - reserved)
        return ScheduleAvailability(
            schedule=ScheduleRead.model_validate(schedule),
            date=date,
            total_capacity=schedule.max_capacity,
            reserved_spots=reserved,
            available_spots=available,
            is_full=available == 0,
        )
