"""
File: app/domains/reservations/schemas.py
Description: 预约领域 Pydantic 模型 (Schema)

本模块定义了预约相关的输入/输出数据结构：
1. ReservationCreate: 创建预约 (时段 + 日期)
2. PaymentConfirm: 确认付款 (金额 + 付款方式 + 备注)
3. ReservationRead / ReservationWithSchedule: 预约响应 (是否附带时段)
4. ReservationDetail: 详情 (附带预约人摘要与时段)
5. ReservationStaffDetail: 员工视角详情 (额外附带付款流水)

Author: jinmozhe
Created: 2026-10-19
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from app.db.models.reservation import ReservationStatus
from app.domains.schedules.schemas import ScheduleRead

# ------------------------------------------------------------------------------
# Input Schemas (输入模型)
# ------------------------------------------------------------------------------


class ReservationCreate(BaseModel):
    schedule_id: int = Field(..., gt=0, description="时段 ID")
    date: dt.date = Field(..., description="预约日期", examples=["2026-11-02"])


class PaymentConfirm(BaseModel):
    """
    确认付款参数。金额单位为智利比索 (整数)。
    """

    amount: int = Field(..., gt=0, description="金额 (CLP)")
    payment_method: str = Field(..., min_length=1, max_length=50, examples=["EFECTIVO"])
    notes: str = Field(default="", max_length=1000)


# ------------------------------------------------------------------------------
# Output Schemas (输出/响应模型)
# ------------------------------------------------------------------------------


class ReservationUser(BaseModel):
    """预约人摘要"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str | None


class PaymentRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    reservation_id: int
    amount: int
    payment_method: str
    confirmed_by_id: int
    notes: str
    created_at: dt.datetime


class ReservationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    schedule_id: int
    date: dt.date
    status: ReservationStatus
    is_paid: bool
    payment_date: dt.datetime | None
    payment_confirmed_by: int | None
    created_at: dt.datetime
    updated_at: dt.datetime


class ReservationWithSchedule(ReservationRead):
    schedule: ScheduleRead


class ReservationDetail(ReservationWithSchedule):
    user: ReservationUser


class ReservationStaffDetail(ReservationDetail):
    payment_records: list[PaymentRecordRead]
