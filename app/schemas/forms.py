from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

FieldType = Literal["single-line-text", "textarea", "number", "email", "dropdown", "checkbox", "date"]
EmailPolicy = Literal["any", "allowed-domains"]
Number = Union[int, float]

TEXT_TYPES = {"single-line-text", "textarea"}
LENGTH_KEYS = ("min_length", "max_length")
BOUND_KEYS = ("min", "max")
EMAIL_KEYS = ("email_policy", "allowed_domains")


class FieldValidation(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    min_length: Optional[int] = Field(default=None, alias="minLength", ge=0)
    max_length: Optional[int] = Field(default=None, alias="maxLength", ge=1)
    min: Optional[Number] = None
    max: Optional[Number] = None
    email_policy: Optional[EmailPolicy] = Field(default=None, alias="emailPolicy")
    allowed_domains: Optional[List[str]] = Field(default=None, alias="allowedDomains", min_length=1)
    regex: Optional[str] = None

    @model_validator(mode="after")
    def check_ranges(self) -> "FieldValidation":
        if self.allowed_domains is not None and any(not str(item).strip() for item in self.allowed_domains):
            raise ValueError("allowedDomains must not contain empty values")
        if self.min_length is not None and self.max_length is not None and self.min_length > self.max_length:
            raise ValueError("minLength must not exceed maxLength")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError("min must not exceed max")
        return self

    def present(self, *names: str) -> List[str]:
        return [name for name in names if getattr(self, name) is not None]


class FormFieldDefinition(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    # Client-side drag-and-drop handle; never stored.
    id: Optional[str] = Field(default=None, exclude=True)
    label: str = Field(min_length=1, max_length=255)
    field_type: FieldType = Field(alias="fieldType")
    required: bool
    # Format is reported by the layout validator, not here.
    position: str
    placeholder: Optional[str] = Field(default=None, min_length=1, max_length=255)
    help_text: Optional[str] = Field(default=None, alias="helpText", min_length=1, max_length=255)
    validation: Optional[FieldValidation] = None
    options: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_type_rules(self) -> "FormFieldDefinition":
        rules = self.validation
        if self.field_type in TEXT_TYPES:
            self._require_rules(rules, LENGTH_KEYS, forbidden=BOUND_KEYS + EMAIL_KEYS)
        elif self.field_type == "number":
            self._require_rules(rules, BOUND_KEYS, forbidden=LENGTH_KEYS + EMAIL_KEYS + ("regex",))
        elif self.field_type == "email":
            self._require_rules(rules, ("email_policy",), forbidden=LENGTH_KEYS + BOUND_KEYS + ("regex",))
            if rules.email_policy == "allowed-domains" and not rules.allowed_domains:
                raise ValueError(f'Field "{self.label}": allowedDomains is required for the allowed-domains policy')

        if self.field_type == "dropdown":
            if not self.options:
                raise ValueError(f'Field "{self.label}": dropdown fields need at least one option')
        elif self.options is not None:
            raise ValueError(f'Field "{self.label}": options are only allowed for dropdown fields')
        return self

    def _require_rules(self, rules: Optional[FieldValidation], required: tuple, *, forbidden: tuple) -> None:
        if rules is None:
            raise ValueError(f'Field "{self.label}": validation is required for {self.field_type} fields')
        missing = [name for name in required if getattr(rules, name) is None]
        if missing:
            raise ValueError(
                f'Field "{self.label}": validation for {self.field_type} needs '
                + ", ".join(_wire_name(name) for name in missing)
            )
        extra = rules.present(*forbidden)
        if extra:
            raise ValueError(
                f'Field "{self.label}": validation for {self.field_type} does not accept '
                + ", ".join(_wire_name(name) for name in extra)
            )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def _wire_name(name: str) -> str:
    return FieldValidation.model_fields[name].alias or name


class FormDefinitionIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=255)
    fields: List[FormFieldDefinition] = Field(min_length=1)


class FormValidateRequest(FormDefinitionIn):
    model_config = ConfigDict(populate_by_name=True)

    previous_name: Optional[str] = Field(default=None, alias="previousName")


class FormValidated(BaseModel):
    status: bool = True
    name: str
    fields: List[Dict[str, Any]]


class FieldPosition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    position: Optional[str] = None
    label: Optional[str] = None


class LayoutCheckRequest(BaseModel):
    fields: List[FieldPosition] = Field(default_factory=list)


class ValidationResultRead(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)
    field_errors: Dict[str, str] = Field(default_factory=dict)


class SubmissionCheckRequest(BaseModel):
    fields: List[FormFieldDefinition] = Field(min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)


class SubmissionAccepted(BaseModel):
    status: bool = True
    data: Dict[str, Any]


class ExportField(BaseModel):
    model_config = ConfigDict(extra="ignore")

    label: str


class SubmissionExportRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    submitted_at: datetime = Field(alias="submittedAt")
    data: Dict[str, Any] = Field(default_factory=dict)


class SubmissionExportRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    fields: List[ExportField]
    submissions: List[SubmissionExportRow] = Field(default_factory=list)
