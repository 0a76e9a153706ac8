"""
File: app/db/models/swimming_schedule.py
Description: 泳池时段模型

每条记录代表每周固定的一段开放时间 (星期几 + 起止时刻)，
容量上限 max_capacity 用于预约时的名额计数。

Author: jinmozhe
Created: 2026-10-19
"""

from datetime import time

from sqlalchemy import Boolean, CheckConstraint, Integer, SmallInteger, Time, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import IntIdModel


class SwimmingSchedule(IntIdModel):
    """
    泳池时段 (表名: swimming_schedule)
    """

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="day_of_week_range"),
        CheckConstraint("end_time > start_time", name="time_range"),
        CheckConstraint("max_capacity > 0", name="capacity_positive"),
        CheckConstraint("lane_count > 0", name="lanes_positive"),
    )

    # 0 = 周日 ... 6 = 周六
    day_of_week: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, comment="星期 (0=周日)"
    )
    start_time: Mapped[time] = mapped_column(Time, nullable=False, comment="开始时刻")
    end_time: Mapped[time] = mapped_column(Time, nullable=False, comment="结束时刻")

    max_capacity: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="最大容纳人数"
    )
    lane_count: Mapped[int] = mapped_column(Integer, nullable=False, comment="泳道数")

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=text("true"),
        nullable=False,
        comment="是否开放预约",
    )
