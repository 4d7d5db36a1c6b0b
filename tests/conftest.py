"""Shared fixtures: isolated settings, a temp local store and a fixed clock."""

from datetime import datetime
from unittest.mock import Mock

import pytest

from devpulse.application import CheckInWorkflow
from devpulse.domain import Review
from devpulse.infrastructure.config import CheckInSettings, LLMSettings, Settings, SheetsSettings
from devpulse.infrastructure.llm import InsightService
from devpulse.infrastructure.persistence import LocalStore
from devpulse.infrastructure.sheets import SheetsRecorder

FIXED_NOW = datetime(2026, 10, 19, 14, 30, 5)
FALLBACK = (
    "¡Buen trabajo completando tu revisión mensual! "
    "Desde Sooft vamos a estar acompañándote para que sigas creciendo."
)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        llm=LLMSettings(api_key="test-key", api_url="https://llm.test/v1/chat/completions"),
        sheets=SheetsSettings(script_url="https://sheet.test/exec"),
        checkin=CheckInSettings(organization_name="Sooft"),
        database_file=tmp_path / "devpulse-test.db",
    )


@pytest.fixture
def store(tmp_path):
    store = LocalStore(tmp_path / "store.db")
    store.init()
    return store


@pytest.fixture
def recorder():
    """Remote recorder double: sheet reachable, nothing recorded yet."""
    recorder = Mock(spec=SheetsRecorder)
    recorder.check_exists.return_value = False
    recorder.append.return_value = True
    recorder.status.return_value = "Google Apps Script is running"
    return recorder


@pytest.fixture
def insights():
    insights = Mock(spec=InsightService)
    insights.request_insight.return_value = "¡Excelente mes, sigue así!"
    insights.fallback_message = FALLBACK
    return insights


@pytest.fixture
def workflow(store, recorder, insights):
    return CheckInWorkflow(store, recorder, insights, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_review():
    """Factory for reviews with sensible defaults."""
    def _make(**overrides) -> Review:
        fields = dict(
            identity="dev@sooft.com",
            period="2026-10",
            period_label="octubre de 2026",
            completion_percent=80,
            bug_count=1,
            satisfaction=4,
            created_at="19/10/2026, 14:30:05",
            comments=None,
        )
        fields.update(overrides)
        return Review(**fields)
    return _make
