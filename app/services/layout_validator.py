from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from app.services.validation_result import ValidationResult

# Row letter A-Z followed by a column digit 1-4, e.g. A1, B3.
POSITION_RE = re.compile(r"^[A-Z][1-4]$")


def _field_value(field: Any, key: str):
    if isinstance(field, Mapping):
        return field.get(key)
    return getattr(field, key, None)


def _format_errors(fields: list) -> list[str]:
    errors: list[str] = []
    for field in fields:
        position = _field_value(field, "position")
        if isinstance(position, str) and POSITION_RE.fullmatch(position):
            continue
        label = _field_value(field, "label") or "unknown"
        errors.append(
            f'Invalid position format "{"" if position is None else position}" for field "{label}". '
            "Expected format: A-Z followed by 1-4 (e.g., A1, B3)"
        )
    return errors


def _duplicate_errors(positions: list[str]) -> list[str]:
    errors: list[str] = []
    seen: set[str] = set()
    for position in positions:
        if position in seen:
            errors.append(f'Duplicate position "{position}" found. Each field must have a unique position.')
        seen.add(position)
    return errors


def _group_by_row(positions: list[str]) -> dict[str, list[int]]:
    rows: dict[str, list[int]] = {}
    for position in positions:
        rows.setdefault(position[0], []).append(int(position[1]))
    return {row: sorted(columns) for row, columns in rows.items()}


def _row_errors(rows: Iterable[str]) -> list[str]:
    ordered = sorted(rows)
    if not ordered:
        return []
    errors: list[str] = []
    if ordered[0] != "A":
        errors.append(
            f"Rows must start from A. Found first row: {ordered[0]}. "
            "Add row A or adjust field positions."
        )
    for previous, current in zip(ordered, ordered[1:]):
        expected = chr(ord(previous) + 1)
        if current != expected:
            errors.append(
                f"Gap in rows: missing row {expected}. "
                f"Rows must be contiguous (found row {previous} and row {current})."
            )
    return errors


def _column_errors(rows: dict[str, list[int]]) -> list[str]:
    errors: list[str] = []
    for row, columns in rows.items():
        if columns[0] != 1:
            errors.append(
                f"Row {row} must start at column 1. Found: {row}{columns[0]}. "
                f"Add {row}1 or adjust field positions."
            )
            continue
        for previous, current in zip(columns, columns[1:]):
            if current != previous + 1:
                errors.append(
                    f"Gap in row {row}: missing position {row}{previous + 1}. "
                    f"Columns must be contiguous (found {row}{previous} and {row}{current})."
                )
    return errors


def validate_field_positions(fields: Iterable[Any]) -> ValidationResult:
    """Check that field positions form a contiguous grid.

    Checks run in order: format, uniqueness, row contiguity, then column
    contiguity per row. Format or uniqueness failures end the check early,
    since contiguity over malformed or collapsed positions means nothing.
    """
    if fields is None:
        raise TypeError("fields must be a list of field definitions")
    items = list(fields)

    errors = _format_errors(items)
    if errors:
        return ValidationResult.from_errors(errors)

    positions = [_field_value(field, "position") for field in items]
    errors = _duplicate_errors(positions)
    if errors:
        return ValidationResult.from_errors(errors)

    rows = _group_by_row(positions)
    errors = _row_errors(rows.keys()) + _column_errors(rows)
    return ValidationResult.from_errors(errors)
