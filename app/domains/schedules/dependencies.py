"""
File: app/domains/schedules/dependencies.py
Description: 泳池时段领域依赖注入 (DI)

依赖链：
DBSession → ScheduleRepository + ReservationRepository → ScheduleService → ScheduleServiceDep

Author: jinmozhe
Created: 2026-10-19
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession
from app.db.models.reservation import Reservation
from app.db.models.swimming_schedule import SwimmingSchedule
from app.domains.reservations.repository import ReservationRepository
from app.domains.schedules.repository import ScheduleRepository
from app.domains.schedules.service import ScheduleService


async def get_schedule_service(session: DBSession) -> ScheduleService:
    return ScheduleService(
        repo=ScheduleRepository(model=SwimmingSchedule, session=session),
        reservation_repo=ReservationRepository(model=Reservation, session=session),
    )


ScheduleServiceDep = Annotated[ScheduleService, Depends(get_schedule_service)]
