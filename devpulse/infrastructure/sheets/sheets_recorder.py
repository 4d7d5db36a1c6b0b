"""
Sheets Recorder - Remote Spreadsheet Append/Check
==================================================

ARCHITECTURAL DECISION:
- Talks to a spreadsheet web-app endpoint (e.g. a Google Apps Script deployment)
- Readable-response mode only: check and append are POSTs whose JSON body
  is sent as text/plain and whose JSON response is parsed
- status is a parameterless GET, the only request the endpoint answers
  without an action
- Never raises: any failure degrades to False / None and is logged

FALLBACK BEHAVIOR:
- No endpoint configured: nothing is sent, returns False / None
- Network error or non-OK status: returns False / None
- check with an ambiguous payload: returns False ("does not exist")
- append with an OK but non-JSON body: treated as accepted
"""

import json
import logging
import requests
from typing import Optional

from pydantic import BaseModel, StrictBool, ValidationError

from devpulse.domain import Review
from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class AppendResponse(BaseModel):
    success: StrictBool
    row: Optional[int] = None
    error: Optional[str] = None


class CheckResponse(BaseModel):
    success: StrictBool
    exists: Optional[StrictBool] = None
    error: Optional[str] = None


class StatusResponse(BaseModel):
    success: StrictBool
    message: Optional[str] = None
    error: Optional[str] = None


class SheetsRecorder:
    """
    Remote recorder backed by a spreadsheet endpoint.

    USAGE:
        recorder = SheetsRecorder()
        if not recorder.check_exists("dev@example.com", "2026-10"):
            recorder.append(review)
    """

    HEADERS = {"Content-Type": "text/plain;charset=utf-8"}

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self._url = settings.sheets.script_url
        self._timeout = settings.sheets.timeout_seconds

        if not self._url:
            logger.warning(
                "No SHEETS_SCRIPT_URL set. "
                "Reviews will only be stored locally."
            )

    @property
    def is_configured(self) -> bool:
        return bool(self._url)

    def check_exists(self, identity: str, period: str) -> bool:
        """
        Ask the sheet whether a row exists for this identity and period.

        Returns False whenever the answer is not a clear yes.
        """
        if not self.is_configured:
            return False

        payload = {"action": "check", "email": identity, "monthId": period}
        response = self._post(payload)
        if response is None:
            return False

        try:
            result = CheckResponse.model_validate(response.json())
        except ValueError as e:
            # ValidationError is a ValueError too
            logger.warning(f"Sheet check returned an unreadable payload: {e}")
            return False

        if not result.success:
            logger.warning(f"Sheet check reported an error: {result.error}")
            return False
        if result.exists is None:
            logger.warning("Sheet check response has no 'exists' flag, assuming False")
            return False

        logger.info(f"Sheet check for {identity}/{period}: exists={result.exists}")
        return result.exists

    def append(self, review: Review) -> bool:
        """Append one review as a sheet row. Returns True if the sheet accepted it."""
        if not self.is_configured:
            return False

        payload = {"action": "append", "data": self.to_row(review)}
        response = self._post(payload)
        if response is None:
            return False

        try:
            body = response.json()
        except ValueError:
            logger.info("Review sent to sheet (non-JSON response, assuming success)")
            return True

        try:
            result = AppendResponse.model_validate(body)
        except ValidationError as e:
            logger.warning(f"Sheet append returned an unexpected payload: {e}")
            return False

        if result.success:
            logger.info(f"Review {review.id} appended to sheet (row {result.row})")
        else:
            logger.warning(f"Sheet append failed: {result.error}")
        return result.success

    def status(self) -> Optional[str]:
        """
        Ping the endpoint with a parameterless GET.

        Returns the service message when the endpoint reports success,
        otherwise None.
        """
        if not self.is_configured:
            return None

        response = self._send(requests.get, timeout=self._timeout)
        if response is None:
            return None

        try:
            result = StatusResponse.model_validate(response.json())
        except ValueError as e:
            logger.warning(f"Sheet status returned an unreadable payload: {e}")
            return None

        if not result.success:
            logger.warning(f"Sheet status reported an error: {result.error}")
            return None
        return result.message

    @staticmethod
    def to_row(review: Review) -> dict:
        """Sheet row payload for a review."""
        return {
            "email": review.identity,
            "completion": review.completion_percent,
            "bugs": review.bug_count,
            "satisfaction": review.satisfaction,
            "comments": review.comments or "",
            "timestamp": review.created_at,
            "monthId": review.period,
            "monthName": review.period_label,
        }

    def _post(self, payload: dict) -> Optional[requests.Response]:
        """POST a JSON payload as text/plain. Returns None on any transport failure."""
        return self._send(
            requests.post,
            data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
            headers=self.HEADERS,
            timeout=self._timeout
        )

    def _send(self, method, **kwargs) -> Optional[requests.Response]:
        try:
            response = method(self._url, **kwargs)
        except requests.Timeout:
            logger.warning("Sheet endpoint timeout")
            return None
        except requests.RequestException as e:
            logger.warning(f"Sheet endpoint error: {e}")
            return None

        if not response.ok:
            logger.warning(f"Sheet endpoint returned HTTP {response.status_code}")
            return None
        return response
