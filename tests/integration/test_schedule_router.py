"""
File: tests/integration/test_schedule_router.py
Description: 泳池时段接口集成测试

Author: jinmozhe
Created: 2026-10-19
"""

from datetime import time

import pytest
from httpx import AsyncClient

from app.core.config import settings
from app.db.models.swimming_schedule import SwimmingSchedule

SCHEDULES = f"{settings.API_PREFIX}/schedules"

NEW_SCHEDULE = {
    "day_of_week": 0,
    "start_time": "18:00",
    "end_time": "19:30",
    "max_capacity": 20,
    "lane_count": 5,
}


@pytest.mark.asyncio
async def test_list_is_public_sorted_and_only_active(
    client: AsyncClient, expect, make_schedule
) -> None:
    late_monday = await make_schedule(
        day_of_week=1, start_time=time(19, 0), end_time=time(20, 0)
    )
    early_monday = await make_schedule(day_of_week=1)
    sunday = await make_schedule(day_of_week=0)
    await make_schedule(day_of_week=2, is_active=False)

    response = await client.get(SCHEDULES)

    data = expect(response, "SCHEDULE_LIST_RETRIEVED")["data"]
    assert [s["id"] for s in data] == [sunday.id, early_monday.id, late_monday.id]
    assert data[0]["start_time"] == "07:00:00"


@pytest.mark.asyncio
async def test_empty_list_still_has_data(client: AsyncClient, expect) -> None:
    response = await client.get(SCHEDULES)
    assert expect(response, "SCHEDULE_LIST_RETRIEVED")["data"] == []


@pytest.mark.asyncio
async def test_get_schedule(
    client: AsyncClient, expect, schedule: SwimmingSchedule
) -> None:
    found = await client.get(f"{SCHEDULES}/{schedule.id}")
    assert expect(found, "SCHEDULE_RETRIEVED")["data"]["max_capacity"] == 2

    missing = await client.get(f"{SCHEDULES}/999")
    expect(missing, "SCHEDULE_NOT_FOUND")


@pytest.mark.asyncio
async def test_create_schedule_requires_admin(
    client: AsyncClient,
    expect,
    swimmer_headers: dict[str, str],
    admin_headers: dict[str, str],
) -> None:
    forbidden = await client.post(SCHEDULES, json=NEW_SCHEDULE, headers=swimmer_headers)
    expect(forbidden, "AUTH_INSUFFICIENT_PERMISSIONS")

    created = await client.post(SCHEDULES, json=NEW_SCHEDULE, headers=admin_headers)
    data = expect(created, "SCHEDULE_CREATED")["data"]
    assert data["day_of_week"] == 0
    assert data["end_time"] == "19:30:00"
    assert data["is_active"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override",
    [
        {"max_capacity": None},
        {"day_of_week": 7},
        {"day_of_week": -1},
        {"lane_count": 0},
        {"start_time": "25:00"},
    ],
)
async def test_create_schedule_invalid_fields(
    client: AsyncClient, expect, admin_headers: dict[str, str], override: dict
) -> None:
    payload = {**NEW_SCHEDULE, **override}
    response = await client.post(SCHEDULES, json=payload, headers=admin_headers)
    expect(response, "SCHEDULE_MISSING_REQUIRED_FIELDS")


@pytest.mark.asyncio
async def test_create_schedule_inverted_times(
    client: AsyncClient, expect, admin_headers: dict[str, str]
) -> None:
    payload = {**NEW_SCHEDULE, "start_time": "20:00", "end_time": "19:00"}
    response = await client.post(SCHEDULES, json=payload, headers=admin_headers)
    expect(response, "SCHEDULE_INVALID_TIME_RANGE")


@pytest.mark.asyncio
async def test_update_schedule(
    client: AsyncClient,
    expect,
    schedule: SwimmingSchedule,
    admin_headers: dict[str, str],
) -> None:
    response = await client.put(
        f"{SCHEDULES}/{schedule.id}",
        json={"max_capacity": 30, "lane_count": None},
        headers=admin_headers,
    )

    data = expect(response, "SCHEDULE_UPDATED")["data"]
    assert data["max_capacity"] == 30
    assert data["lane_count"] == 4
    assert data["start_time"] == "07:00:00"

    inverted = await client.put(
        f"{SCHEDULES}/{schedule.id}",
        json={"end_time": "06:00"},
        headers=admin_headers,
    )
    expect(inverted, "SCHEDULE_INVALID_TIME_RANGE")

    missing = await client.put(
        f"{SCHEDULES}/999", json={"max_capacity": 3}, headers=admin_headers
    )
    expect(missing, "SCHEDULE_NOT_FOUND")


@pytest.mark.asyncio
async def test_delete_schedule_without_reservations(
    client: AsyncClient,
    expect,
    schedule: SwimmingSchedule,
    admin_headers: dict[str, str],
) -> None:
    response = await client.delete(f"{SCHEDULES}/{schedule.id}", headers=admin_headers)

    body = expect(response, "SCHEDULE_DELETED")
    assert "data" not in body

    gone = await client.get(f"{SCHEDULES}/{schedule.id}")
    expect(gone, "SCHEDULE_NOT_FOUND")


@pytest.mark.asyncio
async def test_delete_schedule_with_reservations_deactivates(
    client: AsyncClient,
    expect,
    schedule: SwimmingSchedule,
    swimmer_headers: dict[str, str],
    admin_headers: dict[str, str],
) -> None:
    booked = await client.post(
        f"{settings.API_PREFIX}/reservations",
        json={"schedule_id": schedule.id, "date": "2026-11-02"},
        headers=swimmer_headers,
    )
    expect(booked, "RESERVATION_CREATED")

    response = await client.delete(f"{SCHEDULES}/{schedule.id}", headers=admin_headers)

    data = expect(response, "SCHEDULE_DEACTIVATED")["data"]
    assert data["id"] == schedule.id
    assert data["is_active"] is False

    listing = await client.get(SCHEDULES)
    assert expect(listing, "SCHEDULE_LIST_RETRIEVED")["data"] == []


@pytest.mark.asyncio
async def test_availability(
    client: AsyncClient,
    expect,
    schedule: SwimmingSchedule,
    swimmer_headers: dict[str, str],
) -> None:
    await client.post(
        f"{settings.API_PREFIX}/reservations",
        json={"schedule_id": schedule.id, "date": "2026-11-02"},
        headers=swimmer_headers,
    )

    response = await client.get(
        f"{SCHEDULES}/availability",
        params={"schedule_id": schedule.id, "date": "2026-11-02"},
    )

    data = expect(response, "SCHEDULE_AVAILABILITY_RETRIEVED")["data"]
    assert data["schedule"]["id"] == schedule.id
    assert data["date"] == "2026-11-02"
    assert data["total_capacity"] == 2
    assert data["reserved_spots"] == 1
    assert data["available_spots"] == 1
    assert data["is_full"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [{}, {"schedule_id": 1}, {"date": "2026-11-02"}, {"schedule_id": 1, "date": "ayer"}],
)
async def test_availability_missing_params(
    client: AsyncClient, expect, params: dict
) -> None:
    response = await client.get(f"{SCHEDULES}/availability", params=params)
    expect(response, "SCHEDULE_MISSING_AVAILABILITY_PARAMS")


@pytest.mark.asyncio
async def test_availability_unknown_schedule(client: AsyncClient, expect) -> None:
    response = await client.get(
        f"{SCHEDULES}/availability", params={"schedule_id": 404, "date": "2026-11-02"}
    )
    expect(response, "SCHEDULE_NOT_FOUND")
