from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.modules.projects.schemas import ProjectResponse


class SaveProjectRequest(BaseModel):
    project_id: str


class SavedProjectResponse(BaseModel):
    id: str
    user_id: str
    project_id: str
    saved_at: Optional[datetime] = None
    projects: Optional[ProjectResponse] = None

    class Config:
        from_attributes = True


class SavedStatusResponse(BaseModel):
    project_id: str
    saved: bool


class SavedCountResponse(BaseModel):
    count: int
