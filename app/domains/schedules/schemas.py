"""
File: app/domains/schedules/schemas.py
Description: 泳池时段领域 Pydantic 模型 (Schema)

1. ScheduleCreate: 创建时段 (全部字段必填)
2. ScheduleUpdate: 部分更新 (exclude_unset 语义)
3. ScheduleRead: 时段响应
4. ScheduleAvailability: 某时段某日期的名额统计

起止时刻的先后关系 (end_time > start_time) 在 Service 层校验，
以便返回 SCHEDULE_INVALID_TIME_RANGE 而不是通用参数错误。

Author: jinmozhe
Created: 2026-10-19
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

# 0 = 周日 ... 6 = 周六
DAY_OF_WEEK_MIN = 0
DAY_OF_WEEK_MAX = 6


class ScheduleCreate(BaseModel):
    day_of_week: int = Field(..., ge=DAY_OF_WEEK_MIN, le=DAY_OF_WEEK_MAX)
    start_time: dt.time = Field(..., examples=["07:00"])
    end_time: dt.time = Field(..., examples=["08:00"])
    max_capacity: int = Field(..., gt=0, description="最大容纳人数")
    lane_count: int = Field(..., gt=0, description="泳道数")


class ScheduleUpdate(BaseModel):
    """
    时段部分更新。显式传 null 的字段会被忽略。
    """

    day_of_week: int | None = Field(
        default=None, ge=DAY_OF_WEEK_MIN, le=DAY_OF_WEEK_MAX
    )
    start_time: dt.time | None = None
    end_time: dt.time | None = None
    max_capacity: int | None = Field(default=None, gt=0)
    lane_count: int | None = Field(default=None, gt=0)
    is_active: bool | None = None


class ScheduleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    day_of_week: int
    start_time: dt.time
    end_time: dt.time
    max_capacity: int
    lane_count: int
    is_active: bool
    created_at: dt.datetime
    updated_at: dt.datetime


class ScheduleAvailability(BaseModel):
    """
    名额统计。reserved_spots 只计非取消状态的预约。
    """

    schedule: ScheduleRead
    date: dt.date
    total_capacity: int
    reserved_spots: int
    available_spots: int = Field(..., ge=0)
    is_full: bool
