"""
File: app/domains/reservations/service.py
Description: 预约领域服务 (业务逻辑层)

本模块封装预约的核心业务逻辑：
1. 创建预约：锁定时段行 → 校验开放状态 → 名额计数 → 重复预约检查
2. 取消 / 确认付款 / 完成：状态机校验
3. 查询：我的预约、员工筛选、详情 (USER 只能访问自己的预约)

状态机：
    PENDING ──confirm-payment──▶ CONFIRMED ──complete──▶ COMPLETED
       └──────────cancel──────────┴──▶ CANCELLED
    - COMPLETED 不可取消
    - CANCELLED 不可确认付款、不可完成

Author: jinmozhe
Created: 2026-10-19
"""

import datetime as dt

from app.core.exceptions import AppException, db_errors_as
from app.core.logging import logger
from app.db.models.reservation import Reservation, ReservationStatus
from app.db.models.user import User
from app.domains.reservations.constants import STAFF_ROLES
from app.domains.reservations.repository import (
    PaymentRecordRepository,
    ReservationRepository,
)
from app.domains.reservations.schemas import PaymentConfirm, ReservationCreate
from app.domains.schedules.repository import ScheduleRepository


def is_staff(user: User) -> bool:
    return user.role in STAFF_ROLES


class ReservationService:
    """
    预约领域服务。
    """

    def __init__(
        self,
        repo: ReservationRepository,
        schedule_repo: ScheduleRepository,
        payment_repo: PaymentRecordRepository,
    ):
        self.repo = repo
        self.schedule_repo = schedule_repo
        self.payment_repo = payment_repo

    # --------------------------------------------------------------------------
    # 查询
    # --------------------------------------------------------------------------

    async def list_mine(
        self, user: User, status: ReservationStatus | None = None
    ) -> list[Reservation]:
        with db_errors_as("RESERVATION_FETCH_ERROR"):
            return await self.repo.list_for_user(user.id, status)

    async def list_all(
        self,
        status: ReservationStatus | None = None,
        date: dt.date | None = None,
        user_id: int | None = None,
    ) -> list[Reservation]:
        with db_errors_as("RESERVATION_FETCH_ERROR"):
            return await self.repo.list_filtered(status, date, user_id)

    async def get_reservation(self, reservation_id: int, user: User) -> Reservation:
        """
        预约详情。USER 角色只能查看自己的预约。
        """
        with db_errors_as("RESERVATION_FETCH_ERROR"):
            reservation = await self.repo.get_detailed(reservation_id)

        if not reservation:
            raise AppException("RESERVATION_NOT_FOUND")
        self._ensure_access(reservation, user)
        return reservation

    # --------------------------------------------------------------------------
    # 写操作
    # --------------------------------------------------------------------------

    async def create_reservation(
        self, user: User, obj_in: ReservationCreate
    ) -> Reservation:
        """
        创建预约。
        时段行在事务内加锁，名额计数与插入之间不会有其他预约插入同一时段。
        """
        with db_errors_as("RESERVATION_CREATE_ERROR"):
            schedule = await self.schedule_repo.get_for_update(obj_in.schedule_id)
            if not schedule:
                raise AppException("SCHEDULE_NOT_FOUND")

            if not schedule.is_active:
                raise AppException("RESERVATION_SCHEDULE_INACTIVE")

            booked = await self.repo.count_booked(schedule.id, obj_in.date)
            if booked >= schedule.max_capacity:
                raise AppException("RESERVATION_NO_AVAILABILITY")

            if await self.repo.has_booking(user.id, schedule.id, obj_in.date):
                raise AppException("RESERVATION_ALREADY_EXISTS")

            reservation = await self.repo.create(
                {
                    "user_id": user.id,
                    "schedule_id": schedule.id,
                    "date": obj_in.date,
                    "status": ReservationStatus.PENDING,
                    "is_paid": False,
                }
            )
            await self.repo.session.commit()

            created = await self.repo.get_detailed(reservation.id)

        logger.bind(
            user_id=user.id,
            reservation_id=reservation.id,
            schedule_id=schedule.id,
            date=obj_in.date.isoformat(),
        ).info("Reservation created")
        return created

    async def cancel_reservation(self, reservation_id: int, user: User) -> Reservation:
        with db_errors_as("RESERVATION_CANCEL_ERROR"):
            reservation = await self._get_or_404(reservation_id)
            self._ensure_access(reservation, user)

            if reservation.status == ReservationStatus.COMPLETED:
                raise AppException("RESERVATION_CANCEL_COMPLETED")

            await self.repo.update(reservation, {"status": ReservationStatus.CANCELLED})
            await self.repo.session.commit()
            cancelled = await self.repo.get_detailed(reservation_id)

        logger.bind(reservation_id=reservation_id, cancelled_by=user.id).info(
            "Reservation cancelled"
        )
        return cancelled

    async def confirm_payment(
        self, reservation_id: int, staff: User, obj_in: PaymentConfirm
    ) -> Reservation:
        """
        确认付款。预约状态更新与付款流水写入在同一事务内提交。
        """
        with db_errors_as("RESERVATION_PAYMENT_ERROR"):
            reservation = await self._get_or_404(reservation_id)

            if reservation.status == ReservationStatus.CANCELLED:
                raise AppException("RESERVATION_PAYMENT_CANCELLED")

            await self.repo.update(
                reservation,
                {
                    "is_paid": True,
                    "payment_date": dt.datetime.now(dt.UTC),
                    "payment_confirmed_by": staff.id,
                    "status": ReservationStatus.CONFIRMED,
                },
            )
            await self.payment_repo.create(
                {
                    "reservation_id": reservation_id,
                    "amount": obj_in.amount,
                    "payment_method": obj_in.payment_method,
                    "confirmed_by_id": staff.id,
                    "notes": obj_in.notes,
                }
            )
            await self.repo.session.commit()
            confirmed = await self.repo.get_detailed(reservation_id)

        logger.bind(
            reservation_id=reservation_id,
            confirmed_by=staff.id,
            amount=obj_in.amount,
            payment_method=obj_in.payment_method,
        ).info("Reservation payment confirmed")
        return confirmed

    async def complete_reservation(self, reservation_id: int) -> Reservation:
        with db_errors_as("RESERVATION_COMPLETE_ERROR"):
            reservation = await self._get_or_404(reservation_id)

            if reservation.status == ReservationStatus.CANCELLED:
                raise AppException("RESERVATION_COMPLETE_CANCELLED")

            await self.repo.update(reservation, {"status": ReservationStatus.COMPLETED})
            await self.repo.session.commit()
            completed = await self.repo.get_detailed(reservation_id)

        logger.bind(reservation_id=reservation_id).info("Reservation completed")
        return completed

    # --------------------------------------------------------------------------
    # 内部方法
    # --------------------------------------------------------------------------

    async def _get_or_404(self, reservation_id: int) -> Reservation:
        reservation = await self.repo.get(reservation_id)
        if not reservation:
            raise AppException("RESERVATION_NOT_FOUND")
        return reservation

    @staticmethod
    def _ensure_access(reservation: Reservation, user: User) -> None:
        """USER 角色只能访问自己的预约；员工不受限"""
        if not is_staff(user) and reservation.user_id != user.id:
            raise AppException("RESERVATION_FORBIDDEN")
