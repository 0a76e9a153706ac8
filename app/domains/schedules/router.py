"""
File: app/domains/schedules/router.py
Description: 泳池时段 HTTP 路由层

1. 公开接口: 时段列表、名额查询、时段详情
2. 管理员接口: 创建、更新、删除 (被引用时改为停用)

注意：/availability 必须在 /{schedule_id} 之前注册。

Author: jinmozhe
Created: 2026-10-19
"""

import datetime as dt

from fastapi import APIRouter, status
from fastapi.responses import ORJSONResponse

from app.api.deps import AdminUser
from app.core.exceptions import invalid_params
from app.core.response import ResponseModel, respond
from app.domains.schedules.dependencies import ScheduleServiceDep
from app.domains.schedules.schemas import (
    ScheduleAvailability,
    ScheduleCreate,
    ScheduleRead,
    ScheduleUpdate,
)

router = APIRouter()


# ------------------------------------------------------------------------------
# Public Endpoints (公开接口)
# ------------------------------------------------------------------------------


@router.get(
    "",
    response_model=ResponseModel[list[ScheduleRead]],
    summary="开放时段列表",
    description="按星期、开始时刻排序。",
)
async def list_schedules(service: ScheduleServiceDep) -> ORJSONResponse:
    schedules = await service.list_active()
    return respond(
        "SCHEDULE_LIST_RETRIEVED",
        data=[ScheduleRead.model_validate(s) for s in schedules],
    )


@router.get(
    "/availability",
    response_model=ResponseModel[ScheduleAvailability],
    summary="名额查询",
    description="查询某时段在指定日期的剩余名额。",
)
@invalid_params("SCHEDULE_MISSING_AVAILABILITY_PARAMS")
async def get_availability(
    schedule_id: int, date: dt.date, service: ScheduleServiceDep
) -> ORJSONResponse:
    availability = await service.get_availability(schedule_id, date)
    return respond("SCHEDULE_AVAILABILITY_RETRIEVED", data=availability)


@router.get(
    "/{schedule_id}",
    response_model=ResponseModel[ScheduleRead],
    summary="时段详情",
)
async def get_schedule(schedule_id: int, service: ScheduleServiceDep) -> ORJSONResponse:
    schedule = await service.get_schedule(schedule_id)
    return respond("SCHEDULE_RETRIEVED", data=ScheduleRead.model_validate(schedule))


# ------------------------------------------------------------------------------
# Admin Endpoints (管理员接口)
# ------------------------------------------------------------------------------


@router.post(
    "",
    response_model=ResponseModel[ScheduleRead],
    status_code=status.HTTP_201_CREATED,
    summary="创建时段",
)
@invalid_params("SCHEDULE_MISSING_REQUIRED_FIELDS")
async def create_schedule(
    schedule_in: ScheduleCreate, _admin: AdminUser, service: ScheduleServiceDep
) -> ORJSONResponse:
    schedule = await service.create_schedule(schedule_in)
    return respond("SCHEDULE_CREATED", data=ScheduleRead.model_validate(schedule))


@router.put(
    "/{schedule_id}",
    response_model=ResponseModel[ScheduleRead],
    summary="更新时段",
    description="仅更新提供的字段。",
)
async def update_schedule(
    schedule_id: int,
    schedule_in: ScheduleUpdate,
    _admin: AdminUser,
    service: ScheduleServiceDep,
) -> ORJSONResponse:
    schedule = await service.update_schedule(schedule_id, schedule_in)
    return respond("SCHEDULE_UPDATED", data=ScheduleRead.model_validate(schedule))


@router.delete(
    "/{schedule_id}",
    response_model=ResponseModel[ScheduleRead],
    summary="删除时段",
    description="已有预约引用的时段不会被删除，而是停用并返回停用后的时段。",
)
async def delete_schedule(
    schedule_id: int, _admin: AdminUser, service: ScheduleServiceDep
) -> ORJSONResponse:
    deactivated = await service.delete_schedule(schedule_id)
    if deactivated is not None:
        return respond(
            "SCHEDULE_DEACTIVATED", data=ScheduleRead.model_validate(deactivated)
        )
    return respond("SCHEDULE_DELETED")
