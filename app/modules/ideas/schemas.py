from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime

Difficulty = Literal["beginner", "intermediate", "advanced"]
ProviderChoice = Literal["openai", "gemini", "both"]

DIFFICULTY_LEVELS = ("beginner", "intermediate", "advanced")


def clean_list(values: Optional[List[str]]) -> List[str]:
    """Strip entries, drop blanks and duplicates, keep order."""
    seen = []
    for value in values or []:
        value = (value or "").strip()
        if value and value not in seen:
            seen.append(value)
    return seen


class GenerationRequest(BaseModel):
    domain: str
    difficulty: Difficulty
    technologies: List[str] = []
    features: List[str] = []
    count: int = Field(default=3, ge=1, le=10)
    provider: ProviderChoice = "both"

    @field_validator("domain")
    @classmethod
    def domain_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Domain and difficulty are required")
        return value

    @field_validator("technologies", "features")
    @classmethod
    def drop_blank_entries(cls, value: List[str]) -> List[str]:
        return clean_list(value)


class ProjectIdea(BaseModel):
    title: str
    description: str = ""
    difficulty: Difficulty = "intermediate"
    domain: str = "General"
    technologies: List[str] = []
    features: List[str] = []
    estimated_time: Optional[str] = None


class GenerateIdeasResponse(BaseModel):
    projects: List[ProjectIdea]


class ProjectIdeaResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    difficulty_level: Difficulty
    domain: str
    technologies: List[str] = []
    features: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
