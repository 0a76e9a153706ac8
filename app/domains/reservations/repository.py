"""
File: app/domains/reservations/repository.py
Description: 预约领域仓储层 (Repository)

本模块负责预约与付款流水的数据库访问：
1. 名额计数 / 重复预约检查 (均排除已取消的预约)
2. 列表查询 (我的预约 / 员工筛选)，预加载时段与预约人
3. get_detailed: 详情查询，预加载全部关联

注意：异步会话下关联对象不能懒加载，
所有需要序列化关联的查询都必须显式 selectinload。

Author: jinmozhe
Created: 2026-10-19
"""

import datetime as dt

from pydantic import BaseModel
from sqlalchemy import Select, exists, select
from sqlalchemy.orm import selectinload

from app.db.models.reservation import PaymentRecord, Reservation, ReservationStatus
from app.db.repositories.base import BaseRepository
from app.domains.reservations.constants import RELEASED_STATUSES
from app.domains.reservations.schemas import PaymentConfirm, ReservationCreate


def _holding_spot():
    """占用名额的预约 (非取消)"""
    return Reservation.status.not_in(RELEASED_STATUSES)


class ReservationRepository(BaseRepository[Reservation, ReservationCreate, BaseModel]):
    """
    预约仓储类。
    """

    # --------------------------------------------------------------------------
    # 计数与存在性检查
    # --------------------------------------------------------------------------

    async def count_booked(self, schedule_id: int, date: dt.date) -> int:
        """某时段某日期已占用的名额"""
        return await self.count(
            Reservation.schedule_id == schedule_id,
            Reservation.date == date,
            _holding_spot(),
        )

    async def has_booking(self, user_id: int, schedule_id: int, date: dt.date) -> bool:
        """用户在该时段该日期是否已有未取消的预约"""
        stmt = select(
            exists().where(
                Reservation.user_id == user_id,
                Reservation.schedule_id == schedule_id,
                Reservation.date == date,
                _holding_spot(),
            )
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def count_for_schedule(self, schedule_id: int) -> int:
        """引用该时段的预约总数 (含已取消)"""
        return await self.count(Reservation.schedule_id == schedule_id)

    # --------------------------------------------------------------------------
    # 列表与详情
    # --------------------------------------------------------------------------

    @staticmethod
    def _with_relations() -> Select[tuple[Reservation]]:
        return (
            select(Reservation)
            .options(
                selectinload(Reservation.schedule),
                selectinload(Reservation.user),
            )
            .execution_options(populate_existing=True)
        )

    async def list_for_user(
        self, user_id: int, status: ReservationStatus | None = None
    ) -> list[Reservation]:
        stmt = self._with_relations().where(Reservation.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Reservation.status == status)
        stmt = stmt.order_by(Reservation.date, Reservation.id)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_filtered(
        self,
        status: ReservationStatus | None = None,
        date: dt.date | None = None,
        user_id: int | None = None,
    ) -> list[Reservation]:
        """员工筛选，按日期、创建时间排序"""
        stmt = self._with_relations()
        if status is not None:
            stmt = stmt.where(Reservation.status == status)
        if date is not None:
            stmt = stmt.where(Reservation.date == date)
        if user_id is not None:
            stmt = stmt.where(Reservation.user_id == user_id)
        stmt = stmt.order_by(Reservation.date, Reservation.created_at, Reservation.id)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_detailed(self, reservation_id: int) -> Reservation | None:
        stmt = (
            self._with_relations()
            .options(selectinload(Reservation.payment_records))
            .where(Reservation.id == reservation_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class PaymentRecordRepository(BaseRepository[PaymentRecord, PaymentConfirm, BaseModel]):
    """付款流水仓储 (只增不改)"""
