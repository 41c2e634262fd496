from __future__ import annotations

from fastapi import APIRouter

from app.schemas.forms import (
    FormValidated,
    FormValidateRequest,
    LayoutCheckRequest,
    ValidationResultRead,
)
from app.services.form_rules import next_version_name, validate_form_fields_or_400
from app.services.layout_validator import validate_field_positions

router = APIRouter()


@router.post("/layout/validate", response_model=ValidationResultRead)
def check_layout(payload: LayoutCheckRequest):
    result = validate_field_positions([field.model_dump() for field in payload.fields])
    return ValidationResultRead(**result.as_dict())


@router.post("/validate", response_model=FormValidated)
def validate_form(payload: FormValidateRequest):
    fields = [field.to_wire() for field in payload.fields]
    validate_form_fields_or_400(fields)
    name = payload.name.strip()
    if payload.previous_name:
        name = next_version_name(payload.previous_name)
    return FormValidated(name=name, fields=fields)
