from supabase import Client
from app.modules.projects.schemas import ProjectGenerateRequest, ProjectResponse, DashboardResponse
from app.modules.ideas.schemas import GenerationRequest
from app.modules.ideas.service import IdeaGenerator
from app.modules.saved_projects.service import SavedProjectService
from app.core.errors import ApiError, ErrorCode
from typing import List, Optional
from fastapi import HTTPException
import json
import logging

logger = logging.getLogger(__name__)

IDEAS_PER_GENERATION = 3
DASHBOARD_RECENT_LIMIT = 5


class ProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    async def generate_projects(
        self,
        user_id: str,
        request: ProjectGenerateRequest,
        generator: IdeaGenerator
    ) -> List[ProjectResponse]:
        """Generate ideas from the wizard answers and store them as projects"""
        generation_request = GenerationRequest(
            domain=", ".join(request.domains),
            difficulty=request.skill_level,
            technologies=request.technologies,
            count=IDEAS_PER_GENERATION,
            provider="both",
        )
        ideas = await generator.generate(
            generation_request,
            purpose=request.purpose,
            project_type=request.project_type,
        )
        if not ideas:
            raise ApiError("No projects generated", ErrorCode.UPSTREAM_ERROR)

        rows = [
            {
                "user_id": user_id,
                "title": idea.title,
                "description": idea.description,
                "project_type": request.project_type,
                "domain": request.domains,
                "complexity": request.complexity,
                "skill_level": request.skill_level,
                "technologies": idea.technologies or request.technologies,
                "overview": json.dumps({
                    "keyFeatures": idea.features,
                    "estimatedTime": idea.estimated_time,
                    "purpose": request.purpose,
                }),
            }
            for idea in ideas
        ]
        try:
            result = self.supabase.table("projects").insert(rows).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to store generated projects: {str(e)}")

        if not result.data:
            raise ApiError("No projects generated", ErrorCode.UPSTREAM_ERROR)
        logger.info(f"Stored {len(result.data)} generated projects for user {user_id}")
        return [ProjectResponse(**row) for row in result.data]

    def list_projects(self, user_id: str, limit: Optional[int] = None) -> List[ProjectResponse]:
        """Projects for a user, newest first"""
        try:
            query = self.supabase.table("projects")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)
            if limit:
                query = query.limit(limit)
            result = query.execute()
            return [ProjectResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_project(self, project_id: str) -> ProjectResponse:
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .eq("id", project_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if not result or not result.data:
            raise ApiError("Project not found", ErrorCode.NOT_FOUND)
        return ProjectResponse(**result.data)

    def delete_project(self, user_id: str, project_id: str) -> None:
        try:
            result = self.supabase.table("projects")\
                .delete()\
                .eq("id", project_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise ApiError("Project not found", ErrorCode.NOT_FOUND)

    def dashboard(self, user_id: str) -> DashboardResponse:
        """Most recent projects plus the number of saved projects"""
        recent = self.list_projects(user_id, limit=DASHBOARD_RECENT_LIMIT)
        try:
            saved_count = SavedProjectService(self.supabase).count(user_id)
        except HTTPException as e:
            logger.error(f"Error counting saved projects for {user_id}: {e}")
            saved_count = 0
        return DashboardResponse(recent_projects=recent, saved_count=saved_count)
