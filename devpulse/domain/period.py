"""Review period helpers. A period is one calendar month keyed as YYYY-MM."""

import re
from datetime import datetime
from typing import Optional

MONTH_NAMES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


def current_period(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return now.strftime("%Y-%m")


def period_label(period: str) -> str:
    """'2026-10' -> 'octubre de 2026'"""
    match = _PERIOD_RE.match(period)
    if not match:
        raise ValueError(f"Period must look like YYYY-MM, got {period!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in period {period!r}")
    return f"{MONTH_NAMES[month - 1]} de {year}"


def format_timestamp(now: Optional[datetime] = None) -> str:
    """Display timestamp for a review. Not meant to be sorted."""
    now = now or datetime.now()
    return now.strftime("%d/%m/%Y, %H:%M:%S")
