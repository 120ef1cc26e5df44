from fastapi import APIRouter, Depends
from app.modules.saved_projects.schemas import (
    SaveProjectRequest, SavedProjectResponse, SavedStatusResponse, SavedCountResponse
)
from app.modules.saved_projects.service import SavedProjectService
from app.core.dependencies import get_current_user, get_user_db
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(prefix="/saved-projects", tags=["saved-projects"])


def get_saved_project_service(supabase: Client = Depends(get_user_db)) -> SavedProjectService:
    return SavedProjectService(supabase)


@router.get("", response_model=List[SavedProjectResponse])
async def list_saved_projects(
    q: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    service: SavedProjectService = Depends(get_saved_project_service)
):
    """List saved projects, optionally filtered by title/description"""
    return service.list_saved(user_data["id"], q)


@router.post("", response_model=SavedProjectResponse, status_code=201)
async def save_project(
    save_request: SaveProjectRequest,
    user_data: Dict = Depends(get_current_user),
    service: SavedProjectService = Depends(get_saved_project_service)
):
    """Add a project to the saved list"""
    return service.save(user_data["id"], save_request.project_id)


@router.post("/toggle", response_model=SavedStatusResponse)
async def toggle_saved_project(
    save_request: SaveProjectRequest,
    user_data: Dict = Depends(get_current_user),
    service: SavedProjectService = Depends(get_saved_project_service)
):
    """Save the project if it is not saved yet, otherwise remove it"""
    return service.toggle(user_data["id"], save_request.project_id)


@router.get("/count", response_model=SavedCountResponse)
async def count_saved_projects(
    user_data: Dict = Depends(get_current_user),
    service: SavedProjectService = Depends(get_saved_project_service)
):
    return {"count": service.count(user_data["id"])}


@router.get("/status/{project_id}", response_model=SavedStatusResponse)
async def saved_status(
    project_id: str,
    user_data: Dict = Depends(get_current_user),
    service: SavedProjectService = Depends(get_saved_project_service)
):
    return {"project_id": project_id, "saved": service.is_saved(user_data["id"], project_id)}


@router.delete("/by-project/{project_id}", status_code=204)
async def unsave_project(
    project_id: str,
    user_data: Dict = Depends(get_current_user),
    service: SavedProjectService = Depends(get_saved_project_service)
):
    """Remove a project from the saved list"""
    service.unsave(user_data["id"], project_id)
    return None


@router.delete("/{saved_id}", status_code=204)
async def delete_saved_project(
    saved_id: str,
    user_data: Dict = Depends(get_current_user),
    service: SavedProjectService = Depends(get_saved_project_service)
):
    """Delete a saved entry by its id"""
    service.delete_saved(user_data["id"], saved_id)
    return None
