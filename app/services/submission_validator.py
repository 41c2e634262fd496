from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping

from email_validator import EmailNotValidError, validate_email

from app.services.field_keys import derive_field_key
from app.services.numbers import format_number, parse_leading_number
from app.services.validation_result import ValidationResult

FIELD_TYPES = ("single-line-text", "textarea", "number", "email", "dropdown", "checkbox", "date")


def _field_value(field: Any, key: str, default=None):
    if isinstance(field, Mapping):
        value = field.get(key, default)
    else:
        value = getattr(field, key, default)
    return default if value is None else value


def _is_empty(value) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _coerce_number(value) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = parse_leading_number(value)
        if number is None:
            return None
    else:
        return None
    if math.isnan(number):
        return None
    return number


def _is_valid_email(value: str) -> bool:
    # Special-use domains such as corp.local pass; only a dotted domain is required.
    try:
        validate_email(value, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return False
    return "." in value.split("@", 1)[1]


def _is_valid_date(value: str) -> bool:
    """ISO-8601 dates and date-times only; ``2024/03/05`` or ``March 5, 2024`` are rejected."""
    text = value.strip()
    if not text:
        return False
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _check_text(label: str, value, rules: Mapping) -> list[str]:
    if not isinstance(value, str):
        return [f"{label} must be a string"]
    errors: list[str] = []
    min_length = rules.get("minLength")
    max_length = rules.get("maxLength")
    if min_length is not None and len(value) < min_length:
        errors.append(f"{label} must be at least {format_number(min_length)} characters")
    if max_length is not None and len(value) > max_length:
        errors.append(f"{label} must be at most {format_number(max_length)} characters")
    pattern = rules.get("regex")
    if pattern:
        try:
            compiled = re.compile(pattern)
        except re.error:
            # Broken patterns are an authoring defect, not the submitter's.
            compiled = None
        if compiled is not None and compiled.search(value) is None:
            errors.append(f"{label} does not match the required pattern")
    return errors


def _check_number(label: str, value, rules: Mapping) -> list[str]:
    number = _coerce_number(value)
    if number is None:
        return [f"{label} must be a valid number"]
    errors: list[str] = []
    minimum = rules.get("min")
    maximum = rules.get("max")
    if minimum is not None and number < minimum:
        errors.append(f"{label} must be at least {format_number(minimum)}")
    if maximum is not None and number > maximum:
        errors.append(f"{label} must be at most {format_number(maximum)}")
    return errors


def _check_email(label: str, value, rules: Mapping) -> list[str]:
    if not isinstance(value, str):
        return [f"{label} must be a string"]
    if not _is_valid_email(value):
        return [f"{label} must be a valid email address"]
    allowed = rules.get("allowedDomains")
    if rules.get("emailPolicy") == "allowed-domains" and allowed is not None:
        domain = value.split("@", 1)[1].lower()
        if domain not in {str(item).lower() for item in allowed}:
            return [f"{label} must be from one of the allowed domains: {', '.join(str(item) for item in allowed)}"]
    return []


def _check_dropdown(label: str, value, rules: Mapping) -> list[str]:
    # Membership in the declared options is not enforced at this layer.
    if not isinstance(value, str):
        return [f"{label} must be a string"]
    return []


def _check_checkbox(label: str, value, rules: Mapping) -> list[str]:
    if not isinstance(value, bool):
        return [f"{label} must be a boolean"]
    return []


def _check_date(label: str, value, rules: Mapping) -> list[str]:
    if not isinstance(value, str):
        return [f"{label} must be a string"]
    if not _is_valid_date(value):
        return [f"{label} must be a valid date"]
    return []


_CHECKS: dict[str, Callable[[str, Any, Mapping], list[str]]] = {
    "single-line-text": _check_text,
    "textarea": _check_text,
    "number": _check_number,
    "email": _check_email,
    "dropdown": _check_dropdown,
    "checkbox": _check_checkbox,
    "date": _check_date,
}


def _field_errors(field: Any, value) -> list[str]:
    label = str(_field_value(field, "label", ""))
    if _is_empty(value):
        if _field_value(field, "required", False):
            return [f"{label} is required"]
        return []
    check = _CHECKS.get(str(_field_value(field, "fieldType", "")))
    if check is None:
        return []
    rules = _field_value(field, "validation", {})
    return check(label, value, rules if isinstance(rules, Mapping) else {})


def validate_submission(fields: Iterable[Any], payload: Mapping[str, Any] | None) -> ValidationResult:
    """Validate a public submission against the form's field definitions.

    Every field is checked independently and all failures are collected.
    A missing required value is reported once, without type errors on top.
    """
    if fields is None:
        raise TypeError("fields must be a list of field definitions")
    data = payload if isinstance(payload, Mapping) else {}

    errors: list[str] = []
    field_errors: dict[str, str] = {}
    for field in fields:
        key = derive_field_key(_field_value(field, "label", ""))
        found = _field_errors(field, data.get(key))
        if found:
            errors.extend(found)
            field_errors.setdefault(key, found[0])
    return ValidationResult.from_errors(errors, field_errors)


def normalize_submission(fields: Iterable[Any], payload: Mapping[str, Any] | None) -> dict[str, Any]:
    """Keep only the payload values that belong to declared fields, keyed by field key."""
    if fields is None:
        raise TypeError("fields must be a list of field definitions")
    data = payload if isinstance(payload, Mapping) else {}
    normalized: dict[str, Any] = {}
    for field in fields:
        key = derive_field_key(_field_value(field, "label", ""))
        if key in data:
            normalized[key] = data[key]
    return normalized
