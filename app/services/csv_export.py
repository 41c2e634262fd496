from __future__ import annotations

import json
import re
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping
from urllib.parse import quote

from app.services.field_keys import derive_field_key
from app.services.numbers import format_number

SUBMITTED_AT_HEADER = "Submitted At"
_FILENAME_UNSAFE_RE = re.compile(r'["\\\x00-\x1f\x7f]')


def _row_value(row: Any, *keys: str):
    for key in keys:
        if isinstance(row, Mapping):
            if key in row:
                return row[key]
        elif hasattr(row, key):
            return getattr(row, key)
    return None


def _to_utc(value) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_submitted_at(value) -> str:
    """Render a timestamp as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    moment = _to_utc(value)
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ",".join(_cell_text(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def escape_csv_cell(value) -> str:
    text = _cell_text(value)
    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def build_submissions_csv(fields: Iterable[Any], rows: Iterable[Any]) -> str:
    """Project stored submissions into CSV text with one column per field label.

    Values are looked up by the key derived from each label, so the columns
    line up with how submissions were normalized when they were accepted.
    No trailing newline is appended.
    """
    if fields is None or rows is None:
        raise TypeError("fields and rows must be lists")
    labels = [str(_row_value(field, "label") or "") for field in fields]
    keys = [derive_field_key(label) for label in labels]

    lines = [",".join(escape_csv_cell(header) for header in [SUBMITTED_AT_HEADER, *labels])]
    for row in rows:
        data = _row_value(row, "data") or {}
        cells = [escape_csv_cell(format_submitted_at(_row_value(row, "submitted_at", "submittedAt")))]
        cells.extend(escape_csv_cell(data.get(key)) for key in keys)
        lines.append(",".join(cells))
    return "\n".join(lines)


def export_filename(form_name: str | None) -> str:
    name = _FILENAME_UNSAFE_RE.sub("", str(form_name or "").strip()) or "form"
    return f"{name}-submissions.csv"


def export_content_disposition(form_name: str | None) -> str:
    file_name = export_filename(form_name)
    ascii_name = file_name.encode("ascii", "ignore").decode("ascii").strip() or "submissions.csv"
    encoded_name = quote(file_name, safe="")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{encoded_name}"
