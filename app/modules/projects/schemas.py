from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal, Union, Any
from datetime import datetime

from app.modules.ideas.schemas import Difficulty, clean_list

ProjectType = Literal["web", "mobile", "desktop", "ml", "game"]
Purpose = Literal["portfolio", "learning", "hackathon", "startup"]

COMPLEXITY_LABELS = {
    0: "Very Simple",
    25: "Simple",
    50: "Moderate",
    75: "Complex",
    100: "Very Complex",
}


def complexity_label(value: int) -> str:
    """Label of the slider anchor closest to value; ties go to the lower anchor"""
    closest = 0
    for anchor in COMPLEXITY_LABELS:
        if abs(anchor - value) < abs(closest - value):
            closest = anchor
    return COMPLEXITY_LABELS[closest]


class ProjectGenerateRequest(BaseModel):
    project_type: ProjectType
    domains: List[str]
    purpose: Purpose
    complexity: Union[int, str] = Field(default=50, validate_default=True)
    technologies: Union[List[str], str]
    skill_level: Difficulty = "intermediate"

    @field_validator("domains")
    @classmethod
    def domains_required(cls, value: List[str]) -> List[str]:
        value = clean_list(value)
        if not value:
            raise ValueError("Select at least one domain")
        return value

    @field_validator("complexity")
    @classmethod
    def complexity_as_label(cls, value: Union[int, str]) -> str:
        if isinstance(value, int):
            if not 0 <= value <= 100:
                raise ValueError("Complexity must be between 0 and 100")
            return complexity_label(value)
        if value not in COMPLEXITY_LABELS.values():
            raise ValueError(f"Complexity must be one of: {', '.join(COMPLEXITY_LABELS.values())}")
        return value

    @field_validator("technologies")
    @classmethod
    def split_technologies(cls, value: Union[List[str], str]) -> List[str]:
        if isinstance(value, str):
            value = value.split(",")
        value = clean_list(value)
        if not value:
            raise ValueError("Enter at least one technology")
        return value


class ProjectResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str = ""
    project_type: Optional[str] = None
    domain: List[str] = []
    complexity: Optional[str] = None
    skill_level: Optional[str] = None
    technologies: List[str] = []
    overview: Optional[str] = None
    roadmap: Optional[Any] = None
    project_structure: Optional[Any] = None
    pseudo_code: Optional[str] = None
    resource_links: Optional[Any] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GenerateProjectsResponse(BaseModel):
    projects: List[ProjectResponse]


class DashboardResponse(BaseModel):
    recent_projects: List[ProjectResponse]
    saved_count: int
