from supabase import Client
from app.modules.saved_projects.schemas import SavedProjectResponse, SavedStatusResponse
from app.core.errors import ApiError, ErrorCode
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _matches(saved: SavedProjectResponse, query: str) -> bool:
    project = saved.projects
    if project is None:
        return False
    return query in project.title.lower() or query in (project.description or "").lower()


class SavedProjectService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_saved(self, user_id: str, q: Optional[str] = None) -> List[SavedProjectResponse]:
        """Saved projects with their project rows, most recently saved first"""
        try:
            result = self.supabase.table("saved_projects")\
                .select("*, projects (*)")\
                .eq("user_id", user_id)\
                .order("saved_at", desc=True)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        saved = [SavedProjectResponse(**row) for row in (result.data or [])]
        query = (q or "").strip().lower()
        if query:
            saved = [s for s in saved if _matches(s, query)]
        return saved

    def _find(self, user_id: str, project_id: str) -> Optional[dict]:
        result = self.supabase.table("saved_projects")\
            .select("*")\
            .eq("project_id", project_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def is_saved(self, user_id: str, project_id: str) -> bool:
        try:
            return self._find(user_id, project_id) is not None
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def save(self, user_id: str, project_id: str) -> SavedProjectResponse:
        """Save a project for the user; saving twice returns the existing row"""
        try:
            project = self.supabase.table("projects")\
                .select("id")\
                .eq("id", project_id)\
                .limit(1)\
                .execute()
            if not project.data:
                raise ApiError("Project not found", ErrorCode.NOT_FOUND)

            existing = self._find(user_id, project_id)
            if existing:
                return SavedProjectResponse(**existing)

            result = self.supabase.table("saved_projects").insert({
                "project_id": project_id,
                "user_id": user_id,
            }).execute()
        except (ApiError, HTTPException):
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save project")
        return SavedProjectResponse(**result.data[0])

    def unsave(self, user_id: str, project_id: str) -> bool:
        """Remove a project from the user's saved list"""
        try:
            result = self.supabase.table("saved_projects")\
                .delete()\
                .eq("project_id", project_id)\
                .eq("user_id", user_id)\
                .execute()
            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def toggle(self, user_id: str, project_id: str) -> SavedStatusResponse:
        if self.is_saved(user_id, project_id):
            self.unsave(user_id, project_id)
            return SavedStatusResponse(project_id=project_id, saved=False)
        self.save(user_id, project_id)
        return SavedStatusResponse(project_id=project_id, saved=True)

    def delete_saved(self, user_id: str, saved_id: str) -> None:
        """Delete a saved entry by its own id"""
        try:
            result = self.supabase.table("saved_projects")\
                .delete()\
                .eq("id", saved_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise ApiError("Saved project not found", ErrorCode.NOT_FOUND)

    def count(self, user_id: str) -> int:
        try:
            result = self.supabase.table("saved_projects")\
                .select("id", count="exact")\
                .eq("user_id", user_id)\
                .execute()
            return result.count or 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
