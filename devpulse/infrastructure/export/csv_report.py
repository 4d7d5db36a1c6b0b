"""
CSV Report - Spreadsheet-Friendly Review Export
================================================

Semicolon-separated, UTF-8 with a byte-order mark so spreadsheet
applications pick the right encoding on double click.
"""

import logging
from datetime import date
from typing import Iterable, Optional

import pandas as pd

from devpulse.domain import Review

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Fecha", "Email", "Mes", "Completitud %", "Bugs", "Satisfaccion", "Comentarios"]
CSV_SEPARATOR = ";"
COMMENTS_COLUMN = "Comentarios"
BOM = "\ufeff"


def build_csv(reviews: Iterable[Review]) -> str:
    """
    Render reviews as CSV text, one row per review in stored order.

    Only the comment field is quoted, always, with embedded quotes doubled.
    The other fields are written as they are.
    """
    rows = [
        [
            r.created_at,
            r.identity,
            r.period_label,
            r.completion_percent,
            r.bug_count,
            r.satisfaction_label,
            r.comments or "",
        ]
        for r in reviews
    ]
    df = pd.DataFrame(rows, columns=CSV_HEADERS)
    df[COMMENTS_COLUMN] = '"' + df[COMMENTS_COLUMN].astype(str).str.replace('"', '""', regex=False) + '"'

    lines = [CSV_SEPARATOR.join(CSV_HEADERS)]
    lines += [CSV_SEPARATOR.join(map(str, row)) for row in df.itertuples(index=False, name=None)]
    body = "\n".join(lines) + "\n"
    logger.debug(f"Built CSV report with {len(rows)} rows")
    return BOM + body


def report_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"Check-in_Reporte_{today.isoformat()}.csv"
