from fastapi import APIRouter, Depends, Query, Request
from app.modules.projects.schemas import (
    ProjectGenerateRequest, ProjectResponse, GenerateProjectsResponse, DashboardResponse
)
from app.modules.projects.service import ProjectService
from app.modules.ideas.service import IdeaGenerator
from app.modules.ideas.routes import get_idea_generator
from app.core.dependencies import get_current_user, get_user_db
from app.core.rate_limit import limiter
from app.config import settings
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(supabase: Client = Depends(get_user_db)) -> ProjectService:
    return ProjectService(supabase)


@router.post("/generate", response_model=GenerateProjectsResponse, status_code=201)
@limiter.limit(settings.generation_rate_limit)
async def generate_projects(
    request: Request,
    generate_request: ProjectGenerateRequest,
    user_data: Dict = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
    generator: IdeaGenerator = Depends(get_idea_generator)
):
    """Generate projects from the wizard answers and store them"""
    projects = await service.generate_projects(user_data["id"], generate_request, generator)
    return {"projects": projects}


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    limit: Optional[int] = Query(None, ge=1, le=100),
    user_data: Dict = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    """List the user's projects, newest first"""
    return service.list_projects(user_data["id"], limit)


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    user_data: Dict = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    """Recent projects and saved count"""
    return service.dashboard(user_data["id"])


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    return service.get_project(project_id)


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    service.delete_project(user_data["id"], project_id)
    return None
