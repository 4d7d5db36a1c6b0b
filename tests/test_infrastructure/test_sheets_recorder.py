"""
Unit tests for the spreadsheet recorder.

Note: requests.post is mocked; no network calls are made.
"""

import json
from unittest.mock import Mock, patch

import pytest
import requests

from devpulse.infrastructure.config import Settings, SheetsSettings
from devpulse.infrastructure.sheets import SheetsRecorder

POST = "devpulse.infrastructure.sheets.sheets_recorder.requests.post"
GET = "devpulse.infrastructure.sheets.sheets_recorder.requests.get"


def _response(body=None, ok=True, status_code=200, json_error=False):
    response = Mock()
    response.ok = ok
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def sheets(settings):
    return SheetsRecorder(settings)


def test_check_sends_check_action_as_text_plain(sheets):
    with patch(POST, return_value=_response({"success": True, "exists": True})) as post:
        assert sheets.check_exists("dev@sooft.com", "2026-10") is True

    args, kwargs = post.call_args
    assert args[0] == "https://sheet.test/exec"
    assert kwargs["headers"]["Content-Type"] == "text/plain;charset=utf-8"
    assert json.loads(kwargs["data"]) == {"action": "check", "email": "dev@sooft.com", "monthId": "2026-10"}


def test_check_returns_false_when_sheet_says_no(sheets):
    with patch(POST, return_value=_response({"success": True, "exists": False})):
        assert sheets.check_exists("dev@sooft.com", "2026-10") is False


@pytest.mark.parametrize("response", [
    _response({"success": False, "error": "Missing email or monthId"}),
    _response({"success": True}),
    _response({"success": True, "exists": "yes"}),
    _response(["unexpected"]),
    _response(json_error=True),
    _response(ok=False, status_code=500),
])
def test_check_falls_back_to_false_on_ambiguous_answers(sheets, response):
    with patch(POST, return_value=response):
        assert sheets.check_exists("dev@sooft.com", "2026-10") is False


def test_check_falls_back_to_false_on_network_error(sheets):
    with patch(POST, side_effect=requests.ConnectionError("unreachable")):
        assert sheets.check_exists("dev@sooft.com", "2026-10") is False


def test_append_sends_review_row(sheets, make_review):
    review = make_review(comments=None)
    with patch(POST, return_value=_response({"success": True, "row": 7})) as post:
        assert sheets.append(review) is True

    payload = json.loads(post.call_args.kwargs["data"])
    assert payload == {
        "action": "append",
        "data": {
            "email": "dev@sooft.com",
            "completion": 80,
            "bugs": 1,
            "satisfaction": 4,
            "comments": "",
            "timestamp": "19/10/2026, 14:30:05",
            "monthId": "2026-10",
            "monthName": "octubre de 2026",
        },
    }


def test_append_reflects_success_field(sheets, make_review):
    with patch(POST, return_value=_response({"success": False, "error": "Sheet locked"})):
        assert sheets.append(make_review()) is False


def test_append_non_json_ok_response_counts_as_accepted(sheets, make_review):
    with patch(POST, return_value=_response(json_error=True)):
        assert sheets.append(make_review()) is True


def test_append_failures_return_false(sheets, make_review):
    with patch(POST, side_effect=requests.Timeout("slow")):
        assert sheets.append(make_review()) is False
    with patch(POST, return_value=_response(ok=False, status_code=403)):
        assert sheets.append(make_review()) is False


def test_status_pings_with_parameterless_get(sheets):
    body = {"success": True, "message": "Google Apps Script is running"}
    with patch(GET, return_value=_response(body)) as get, patch(POST) as post:
        assert sheets.status() == "Google Apps Script is running"

    post.assert_not_called()
    args, kwargs = get.call_args
    assert args == ("https://sheet.test/exec",)
    assert "params" not in kwargs and "data" not in kwargs


@pytest.mark.parametrize("response", [
    _response({"success": False, "error": "Invalid action or missing parameters"}),
    _response({"message": "no success flag"}),
    _response(json_error=True),
    _response(ok=False, status_code=502),
])
def test_status_is_none_unless_endpoint_reports_success(sheets, response):
    with patch(GET, return_value=response):
        assert sheets.status() is None


def test_status_is_none_when_unreachable(sheets):
    with patch(GET, side_effect=requests.ConnectionError("unreachable")):
        assert sheets.status() is None


def test_unconfigured_recorder_never_calls_network(make_review):
    sheets = SheetsRecorder(Settings(sheets=SheetsSettings(script_url="")))
    assert not sheets.is_configured

    with patch(POST) as post, patch(GET) as get:
        assert sheets.check_exists("dev@sooft.com", "2026-10") is False
        assert sheets.append(make_review()) is False
        assert sheets.status() is None
    post.assert_not_called()
    get.assert_not_called()
