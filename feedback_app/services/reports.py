from __future__ import annotations

from datetime import date, datetime, timezone
from io import BytesIO
from typing import Iterable, List
from zoneinfo import ZoneInfo

import pandas as pd

from feedback_app.models import FeedbackEntry
from feedback_app.services.storage import FeedbackStore

EXPORT_COLUMNS = [
    "Name",
    "Email",
    "Phone",
    "Job Title",
    "Company Name",
    "Topic of Interest",
    "Reason for Contact",
    "Submitted At",
    "IP Address",
]
EXPORT_SHEET = "Feedback Data"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
NOT_AVAILABLE = "N/A"
RECENT_LIMIT = 5


def feedback_stats(store: FeedbackStore) -> dict:
    """
    Totals for the admin dashboard:
      - total:          number of entries
      - topicBreakdown: [{"_id": topic, "count": n}], counts sum to total
      - recent:         newest five, name/email/topic/submittedAt only
    """
    return {
        "total": store.count(),
        "topicBreakdown": store.topic_breakdown(),
        "recent": [e.summary() for e in store.recent(RECENT_LIMIT)],
    }


def format_locale(dt: datetime | None, tz: str = "UTC") -> str:
    """Render as M/D/YYYY, h:mm:ss AM|PM in the given zone."""
    if dt is None:
        return NOT_AVAILABLE
    local = dt.astimezone(ZoneInfo(tz))
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local.minute:02d}:{local.second:02d} {meridiem}"


def export_rows(entries: Iterable[FeedbackEntry], tz: str = "UTC") -> List[dict]:
    return [
        {
            "Name": e.name,
            "Email": e.email,
            "Phone": e.phone or NOT_AVAILABLE,
            "Job Title": e.job_title,
            "Company Name": e.company_name,
            "Topic of Interest": e.topic,
            "Reason for Contact": e.reason or NOT_AVAILABLE,
            "Submitted At": format_locale(e.submitted_at, tz),
            "IP Address": e.ip_address or NOT_AVAILABLE,
        }
        for e in entries
    ]


def build_workbook(rows: List[dict]) -> BytesIO:
    """Single-sheet .xlsx; header row is written even with no rows."""
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=EXPORT_SHEET, index=False)
    buf.seek(0)
    return buf


def export_filename(today: date | None = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return f"feedback-export-{today.isoformat()}.xlsx"
