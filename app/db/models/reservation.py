"""
File: app/db/models/reservation.py
Description: 预约与付款记录模型

1. Reservation: 用户对某时段某日期的预约，状态机
       PENDING -> CONFIRMED (确认付款) -> COMPLETED
       PENDING / CONFIRMED -> CANCELLED
2. PaymentRecord: 财务确认付款时写入的流水 (只增不改)

Author: jinmozhe
Created: 2026-10-19
"""

import datetime as dt
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.models.base import IntIdModel
from app.db.models.swimming_schedule import SwimmingSchedule

if TYPE_CHECKING:
    from app.db.models.user import User


class ReservationStatus(StrEnum):
    """预约状态"""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class Reservation(IntIdModel):
    """
    预约 (表名: reservation)
    """

    __table_args__ = (
        # 名额计数与重复预约检查都按 (时段, 日期) 过滤
        Index("ix_reservation_schedule_date", "schedule_id", "date"),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), index=True, nullable=False, comment="预约人"
    )
    schedule_id: Mapped[int] = mapped_column(
        ForeignKey("swimming_schedule.id"), nullable=False, comment="时段"
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, comment="预约日期")

    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus, name="reservation_status", native_enum=False, length=20),
        default=ReservationStatus.PENDING,
        server_default=ReservationStatus.PENDING.value,
        nullable=False,
        comment="预约状态",
    )

    is_paid: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=text("false"),
        nullable=False,
        comment="是否已付款",
    )
    payment_date: Mapped[dt.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="付款确认时间 (UTC)"
    )
    payment_confirmed_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"), nullable=True, comment="确认付款的员工"
    )

    user: Mapped["User"] = relationship(
        back_populates="reservations", foreign_keys=[user_id]
    )
    schedule: Mapped[SwimmingSchedule] = relationship()
    payment_records: Mapped[list["PaymentRecord"]] = relationship(
        back_populates="reservation", order_by="PaymentRecord.created_at"
    )


class PaymentRecord(IntIdModel):
    """
    付款流水 (表名: payment_record)
    """

    __table_args__ = (CheckConstraint("amount > 0", name="amount_positive"),)

    reservation_id: Mapped[int] = mapped_column(
        ForeignKey("reservation.id"), index=True, nullable=False, comment="所属预约"
    )
    # 金额单位: 智利比索 (无小数)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, comment="金额")
    payment_method: Mapped[str] = mapped_column(
        String(50), nullable=False, comment="付款方式"
    )
    confirmed_by_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, comment="确认人"
    )
    notes: Mapped[str] = mapped_column(
        Text, default="", server_default="", nullable=False, comment="备注"
    )

    reservation: Mapped[Reservation] = relationship(back_populates="payment_records")
