from pydantic import BaseModel, field_validator
from typing import Any, List
import json

SECTION_FIELDS = (
    "introduction", "system_analysis", "system_design",
    "implementation", "testing", "result", "conclusion",
)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return "\n".join(_as_text(v) for v in value)
    if isinstance(value, dict):
        return "\n\n".join(f"{key}: {_as_text(v)}" for key, v in value.items())
    return json.dumps(value)


class Documentation(BaseModel):
    introduction: str = ""
    system_analysis: str = ""
    system_design: str = ""
    implementation: str = ""
    testing: str = ""
    result: str = ""
    conclusion: str = ""
    references: List[str] = []

    @field_validator(*SECTION_FIELDS, mode="before")
    @classmethod
    def section_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("references", mode="before")
    @classmethod
    def reference_list(cls, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, list):
            return [_as_text(v) for v in value if v]
        return [_as_text(value)]


class DocumentationRequest(BaseModel):
    project_id: str


class DocumentationResponse(BaseModel):
    documentation: Documentation
