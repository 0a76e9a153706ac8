"""
File: app/domains/reservations/dependencies.py
Description: 预约领域依赖注入 (DI)

依赖链：
DBSession → Reservation / Schedule / PaymentRecord 仓储 → ReservationService

Author: jinmozhe
Created: 2026-10-19
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession
from app.db.models.reservation import PaymentRecord, Reservation
from app.db.models.swimming_schedule import SwimmingSchedule
from app.domains.reservations.repository import (
    PaymentRecordRepository,
    ReservationRepository,
)
from app.domains.reservations.service import ReservationService
from app.domains.schedules.repository import ScheduleRepository


async def get_reservation_service(session: DBSession) -> ReservationService:
    """
    三个仓储共享同一个会话，保证付款确认等操作处于同一事务。
    """
    return ReservationService(
        repo=ReservationRepository(model=Reservation, session=session),
        schedule_repo=ScheduleRepository(model=SwimmingSchedule, session=session),
        payment_repo=PaymentRecordRepository(model=PaymentRecord, session=session),
    )


ReservationServiceDep = Annotated[ReservationService, Depends(get_reservation_service)]
