from fastapi import APIRouter, Depends, Request
from app.modules.ideas.schemas import (
    GenerationRequest, GenerateIdeasResponse, ProjectIdea, ProjectIdeaResponse
)
from app.modules.ideas.service import IdeaGenerator, IdeaService
from app.modules.llm.providers import openai_from_settings, gemini_from_settings
from app.core.dependencies import get_current_user, get_user_db
from app.core.rate_limit import limiter
from app.config import settings
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/ideas", tags=["ideas"])


def get_idea_generator() -> IdeaGenerator:
    return IdeaGenerator(openai_from_settings(), gemini_from_settings())


def get_idea_service(supabase: Client = Depends(get_user_db)) -> IdeaService:
    return IdeaService(supabase)


@router.post("/generate", response_model=GenerateIdeasResponse)
@limiter.limit(settings.generation_rate_limit)
async def generate_ideas(
    request: Request,
    generation_request: GenerationRequest,
    user_data: Dict = Depends(get_current_user),
    generator: IdeaGenerator = Depends(get_idea_generator)
):
    """Generate project ideas with the selected provider(s)"""
    ideas = await generator.generate(generation_request)
    return {"projects": ideas}


@router.get("", response_model=List[ProjectIdeaResponse])
async def list_ideas(
    user_data: Dict = Depends(get_current_user),
    service: IdeaService = Depends(get_idea_service)
):
    """List the user's saved ideas"""
    return service.list_ideas(user_data["id"])


@router.post("", response_model=ProjectIdeaResponse, status_code=201)
async def save_idea(
    idea: ProjectIdea,
    user_data: Dict = Depends(get_current_user),
    service: IdeaService = Depends(get_idea_service)
):
    """Save a generated idea"""
    return service.save_idea(user_data["id"], idea)


@router.delete("/{idea_id}", status_code=204)
async def delete_idea(
    idea_id: str,
    user_data: Dict = Depends(get_current_user),
    service: IdeaService = Depends(get_idea_service)
):
    """Delete a saved idea"""
    service.delete_idea(user_data["id"], idea_id)
    return None
