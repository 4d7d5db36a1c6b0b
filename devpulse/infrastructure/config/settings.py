"""
Settings Module - Centralized Configuration Management
=======================================================

ARCHITECTURAL DECISION:
- All configuration is loaded from environment variables (no hardcoded secrets)
- Settings are immutable dataclasses
- Single source of truth for all configurable values

EXTENSIBILITY:
- To switch LLM provider: change api_url/model (any OpenAI-compatible API works)
- To point at another spreadsheet: change SHEETS_SCRIPT_URL
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file if present (development convenience)
load_dotenv()


@dataclass(frozen=True)
class LLMSettings:
    """OpenRouter LLM settings for the motivational insight."""

    api_key: str = field(default_factory=lambda: os.getenv("OPENROUTER_API_KEY", ""))
    api_url: str = field(
        default_factory=lambda: os.getenv(
            "OPENROUTER_API_URL", "https://openrouter.ai/api/v1/chat/completions"
        )
    )

    model: str = field(
        default_factory=lambda: os.getenv("INSIGHT_MODEL", "meta-llama/llama-3.2-3b-instruct:free")
    )

    # Some variety is wanted here, unlike classification
    temperature: float = 0.7
    max_tokens: int = 200
    timeout_seconds: int = 20


@dataclass(frozen=True)
class SheetsSettings:
    """Spreadsheet web-app endpoint (append/check)."""

    script_url: str = field(default_factory=lambda: os.getenv("SHEETS_SCRIPT_URL", ""))
    timeout_seconds: int = 15


@dataclass(frozen=True)
class CheckInSettings:
    """Check-in form settings."""

    organization_name: str = field(default_factory=lambda: os.getenv("ORGANIZATION_NAME", "Sooft"))
    default_completion: int = 80


@dataclass(frozen=True)
class Settings:
    """
    Root settings container - Single source of truth for all configuration.

    Usage:
        from devpulse.infrastructure.config import get_settings
        settings = get_settings()
        print(settings.sheets.script_url)
    """

    llm: LLMSettings = field(default_factory=LLMSettings)
    sheets: SheetsSettings = field(default_factory=SheetsSettings)
    checkin: CheckInSettings = field(default_factory=CheckInSettings)

    database_file: Path = field(
        default_factory=lambda: Path(os.getenv("DEVPULSE_DB", "devpulse.db"))
    )

    def validate(self) -> list[str]:
        """
        Validate settings and return list of warnings.
        Returns empty list if all settings are valid.
        """
        issues = []

        if not self.llm.api_key:
            issues.append(
                "WARNING: OPENROUTER_API_KEY not set. "
                "Insights will use the static fallback message."
            )

        if not self.sheets.script_url:
            issues.append(
                "WARNING: SHEETS_SCRIPT_URL not set. "
                "Reviews will only be stored locally."
            )

        return issues


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get singleton Settings instance.
    Cached to ensure consistent settings throughout application lifecycle.
    """
    return Settings()
