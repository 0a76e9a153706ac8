"""
File: app/domains/reservations/router.py
Description: 预约 HTTP 路由层

1. 登录用户: 我的预约、创建预约、取消 (本人)、详情 (本人)
2. 员工 (ADMIN / TREASURER): 全部预约筛选、确认付款、取消/查看任意预约
3. 管理员: 标记完成

注意：/my-reservations 必须在 /{reservation_id} 之前注册。

Author: jinmozhe
Created: 2026-10-19
"""

import datetime as dt
from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import ORJSONResponse

from app.api.deps import AdminUser, CurrentUser, StaffUser
from app.core.exceptions import invalid_params
from app.core.response import ResponseModel, respond
from app.db.models.reservation import ReservationStatus
from app.domains.reservations.dependencies import ReservationServiceDep
from app.domains.reservations.schemas import (
    PaymentConfirm,
    ReservationCreate,
    ReservationDetail,
    ReservationStaffDetail,
    ReservationWithSchedule,
)
from app.domains.reservations.service import is_staff

router = APIRouter()

StatusFilter = Annotated[ReservationStatus | None, Query(alias="status")]


# ------------------------------------------------------------------------------
# Authenticated Endpoints (登录用户)
# ------------------------------------------------------------------------------


@router.get(
    "/my-reservations",
    response_model=ResponseModel[list[ReservationWithSchedule]],
    summary="我的预约",
    description="按日期升序，可按状态筛选。",
)
async def list_my_reservations(
    current_user: CurrentUser,
    service: ReservationServiceDep,
    status_filter: StatusFilter = None,
) -> ORJSONResponse:
    reservations = await service.list_mine(current_user, status_filter)
    return respond(
        "RESERVATION_LIST_RETRIEVED",
        data=[ReservationWithSchedule.model_validate(r) for r in reservations],
    )


@router.post(
    "",
    response_model=ResponseModel[ReservationWithSchedule],
    status_code=status.HTTP_201_CREATED,
    summary="创建预约",
    description="同一用户在同一时段同一日期只能有一个未取消的预约。",
)
@invalid_params("RESERVATION_MISSING_REQUIRED_FIELDS")
async def create_reservation(
    reservation_in: ReservationCreate,
    current_user: CurrentUser,
    service: ReservationServiceDep,
) -> ORJSONResponse:
    reservation = await service.create_reservation(current_user, reservation_in)
    return respond(
        "RESERVATION_CREATED",
        data=ReservationWithSchedule.model_validate(reservation),
    )


@router.put(
    "/{reservation_id}/cancel",
    response_model=ResponseModel[ReservationWithSchedule],
    summary="取消预约",
    description="USER 只能取消自己的预约；已完成的预约不可取消。",
)
async def cancel_reservation(
    reservation_id: int,
    current_user: CurrentUser,
    service: ReservationServiceDep,
) -> ORJSONResponse:
    reservation = await service.cancel_reservation(reservation_id, current_user)
    return respond(
        "RESERVATION_CANCELLED",
        data=ReservationWithSchedule.model_validate(reservation),
    )


# ------------------------------------------------------------------------------
# Staff Endpoints (员工)
# ------------------------------------------------------------------------------


@router.get(
    "",
    response_model=ResponseModel[list[ReservationDetail]],
    summary="全部预约",
    description="可按 status / date / user_id 筛选，按日期、创建时间排序。",
)
async def list_reservations(
    _staff: StaffUser,
    service: ReservationServiceDep,
    status_filter: StatusFilter = None,
    date: dt.date | None = None,
    user_id: int | None = None,
) -> ORJSONResponse:
    reservations = await service.list_all(status_filter, date, user_id)
    return respond(
        "RESERVATION_LIST_RETRIEVED",
        data=[ReservationDetail.model_validate(r) for r in reservations],
    )


@router.put(
    "/{reservation_id}/confirm-payment",
    response_model=ResponseModel[ReservationWithSchedule],
    summary="确认付款",
    description="写入付款流水并将预约置为 CONFIRMED。已取消的预约不可确认。",
)
@invalid_params("RESERVATION_MISSING_PAYMENT_DATA")
async def confirm_payment(
    reservation_id: int,
    payment_in: PaymentConfirm,
    staff: StaffUser,
    service: ReservationServiceDep,
) -> ORJSONResponse:
    reservation = await service.confirm_payment(reservation_id, staff, payment_in)
    return respond(
        "RESERVATION_PAYMENT_CONFIRMED",
        data=ReservationWithSchedule.model_validate(reservation),
    )


@router.put(
    "/{reservation_id}/complete",
    response_model=ResponseModel[ReservationWithSchedule],
    summary="标记完成",
    description="仅管理员。已取消的预约不可完成。",
)
async def complete_reservation(
    reservation_id: int,
    _admin: AdminUser,
    service: ReservationServiceDep,
) -> ORJSONResponse:
    reservation = await service.complete_reservation(reservation_id)
    return respond(
        "RESERVATION_COMPLETED",
        data=ReservationWithSchedule.model_validate(reservation),
    )


@router.get(
    "/{reservation_id}",
    response_model=ResponseModel[ReservationStaffDetail],
    summary="预约详情",
    description="USER 只能查看自己的预约；付款流水仅对员工可见。",
)
async def get_reservation(
    reservation_id: int,
    current_user: CurrentUser,
    service: ReservationServiceDep,
) -> ORJSONResponse:
    reservation = await service.get_reservation(reservation_id, current_user)
    schema = ReservationStaffDetail if is_staff(current_user) else ReservationDetail
    return respond("RESERVATION_RETRIEVED", data=schema.model_validate(reservation))
