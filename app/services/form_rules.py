from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, Mapping

from fastapi import HTTPException

from app.core.config import settings
from app.services.field_keys import derive_field_key
from app.services.layout_validator import validate_field_positions
from app.services.submission_validator import normalize_submission, validate_submission
from app.services.validation_result import ValidationResult

_LOG = logging.getLogger("app.forms")
_VERSION_SUFFIX_RE = re.compile(r"^(.+)-(\d+)$")

POSITION_ERROR = "Position Validation Error"
SUBMISSION_ERROR = "Validation Error"


def _error_detail(error: str, result: ValidationResult) -> dict:
    detail = {
        "error": error,
        "message": ", ".join(result.errors),
        "errors": list(result.errors),
    }
    if result.field_errors:
        detail["field_errors"] = dict(result.field_errors)
    return detail


def validate_form_fields_or_400(fields: Iterable[Mapping[str, Any]]) -> None:
    items = list(fields)
    result = validate_field_positions(items)
    if not result.valid:
        _LOG.info("form layout rejected fields=%s errors=%s", len(items), len(result.errors))
        raise HTTPException(status_code=400, detail=_error_detail(POSITION_ERROR, result))
    _LOG.debug("form layout accepted fields=%s", len(items))


def validate_submission_or_400(
    fields: Iterable[Mapping[str, Any]],
    payload: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Validate a submission and return the payload reduced to declared field keys."""
    items = list(fields)
    if settings.LOG_SUBMISSION_PAYLOADS:
        _LOG.debug(
            "submission received payload=%s keys=%s",
            json.dumps(payload, ensure_ascii=False, default=str),
            [derive_field_key(field.get("label")) for field in items],
        )
    result = validate_submission(items, payload)
    if not result.valid:
        _LOG.info("submission rejected fields=%s errors=%s", len(items), len(result.errors))
        raise HTTPException(status_code=400, detail=_error_detail(SUBMISSION_ERROR, result))
    normalized = normalize_submission(items, payload)
    _LOG.info("submission accepted fields=%s stored_keys=%s", len(items), len(normalized))
    return normalized


def next_version_name(name: str) -> str:
    """Name for the form version that replaces ``name``: ``Survey`` -> ``Survey-2`` -> ``Survey-3``."""
    text = str(name or "").strip()
    match = _VERSION_SUFFIX_RE.match(text)
    if match:
        return f"{match.group(1)}-{int(match.group(2)) + 1}"
    return f"{text}-2"
