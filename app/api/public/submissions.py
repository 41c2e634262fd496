from __future__ import annotations

from fastapi import APIRouter

from app.schemas.forms import SubmissionAccepted, SubmissionCheckRequest
from app.services.form_rules import validate_submission_or_400

router = APIRouter()


@router.post("/validate", response_model=SubmissionAccepted)
def validate_public_submission(payload: SubmissionCheckRequest):
    fields = [field.to_wire() for field in payload.fields]
    data = validate_submission_or_400(fields, payload.data)
    return SubmissionAccepted(data=data)
