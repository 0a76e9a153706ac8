"""
File: tests/unit/test_response.py
Description: 统一响应信封单元测试

Author: jinmozhe
Created: 2026-10-19
"""

import datetime as dt

import orjson
import pytest
from pydantic import BaseModel

from app.core.messages import MESSAGES, all_categories
from app.core.response import build_envelope, respond


def test_success_flag_follows_status_code_for_every_category() -> None:
    for category in all_categories():
        status_code, envelope = build_envelope(category)
        assert envelope["success"] is (status_code < 400)
        text_key = "message" if status_code < 400 else "error"
        other_key = "error" if status_code < 400 else "message"
        assert envelope[text_key] == MESSAGES[status_code][category]
        assert other_key not in envelope


def test_respond_error_example() -> None:
    response = respond("AUTH_EMAIL_ALREADY_EXISTS")

    assert response.status_code == 400
    assert orjson.loads(response.body) == {
        "success": False,
        "error": "Este email ya está registrado",
    }


def test_data_and_details_are_omitted_when_none() -> None:
    _, envelope = build_envelope("APP_WELCOME")
    assert set(envelope) == {"success", "message"}


def test_empty_list_is_still_sent_as_data() -> None:
    _, envelope = build_envelope("SCHEDULE_LIST_RETRIEVED", data=[])
    assert envelope["data"] == []


def test_details_are_included_when_given() -> None:
    status_code, envelope = build_envelope(
        "APP_INVALID_PARAMS", details="date: Input should be a valid date"
    )
    assert status_code == 400
    assert envelope["details"] == "date: Input should be a valid date"


class _Slot(BaseModel):
    day: dt.date
    start: dt.time


def test_nested_models_are_serialized_to_json_types() -> None:
    _, envelope = build_envelope(
        "SCHEDULE_RETRIEVED",
        data=_Slot(day=dt.date(2026, 11, 2), start=dt.time(7, 30)),
    )
    assert envelope["data"] == {"day": "2026-11-02", "start": "07:30:00"}


@pytest.mark.parametrize("category", ["APP_INTERNAL_ERROR", "RESERVATION_CREATE_ERROR"])
def test_server_errors_use_error_key(category: str) -> None:
    response = respond(category)
    body = orjson.loads(response.body)

    assert response.status_code == 500
    assert body["success"] is False
    assert body["error"] == MESSAGES[500][category]
