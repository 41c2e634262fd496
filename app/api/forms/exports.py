from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import Response

from app.schemas.forms import SubmissionExportRequest
from app.services.csv_export import build_submissions_csv, export_content_disposition

router = APIRouter()

_LOG = logging.getLogger("app.forms")


@router.post("/submissions/export", response_class=Response)
def export_submissions(payload: SubmissionExportRequest):
    content = build_submissions_csv(
        [field.model_dump() for field in payload.fields],
        [row.model_dump() for row in payload.submissions],
    )
    _LOG.info("submissions exported fields=%s rows=%s", len(payload.fields), len(payload.submissions))
    headers = {"Content-Disposition": export_content_disposition(payload.name)}
    return Response(content=content, media_type="text/csv", headers=headers)
