from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    # field key -> first error reported for that field
    field_errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_errors(cls, errors: list[str], field_errors: dict[str, str] | None = None) -> "ValidationResult":
        return cls(valid=not errors, errors=list(errors), field_errors=dict(field_errors or {}))

    def as_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors), "field_errors": dict(self.field_errors)}
