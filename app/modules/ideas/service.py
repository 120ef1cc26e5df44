import json
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from supabase import Client

from app.config import settings
from app.core.errors import ApiError, ErrorCode, UpstreamError
from app.modules.ideas.mock_data import mock_ideas
from app.modules.ideas.schemas import (
    DIFFICULTY_LEVELS, GenerationRequest, ProjectIdea, ProjectIdeaResponse
)
from app.modules.llm.parsing import parse_json_array
from app.modules.llm.prompts import IDEAS_SYSTEM_PROMPT, build_ideas_prompt
from app.modules.llm.providers import LLMProvider

logger = logging.getLogger(__name__)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def _overview_features(overview: Any) -> List[str]:
    if isinstance(overview, str):
        try:
            overview = json.loads(overview)
        except ValueError:
            return []
    if isinstance(overview, dict):
        return _string_list(overview.get("keyFeatures"))
    return []


def normalize_idea(raw: Dict[str, Any]) -> ProjectIdea:
    """Coerce one provider idea, whatever its field names, into a ProjectIdea"""
    domain = raw.get("domain")
    if isinstance(domain, list):
        domain = domain[0] if domain else None
    difficulty = str(raw.get("difficulty") or raw.get("complexity") or "intermediate").lower()
    if difficulty not in DIFFICULTY_LEVELS:
        difficulty = "intermediate"
    technologies = raw.get("technologies")
    if not isinstance(technologies, list):
        technologies = raw.get("techStack")
    features = _string_list(raw.get("features")) or _overview_features(raw.get("overview"))
    estimated_time = raw.get("estimated_time") or raw.get("estimatedTime")
    return ProjectIdea(
        title=str(raw.get("title") or "").strip() or "Untitled Project",
        description=str(raw.get("description") or raw.get("realWorldApplication") or ""),
        difficulty=difficulty,
        domain=str(domain or "").strip() or "General",
        technologies=_string_list(technologies),
        features=features,
        estimated_time=str(estimated_time) if estimated_time else None,
    )


def dedupe_by_title(ideas: List[ProjectIdea]) -> List[ProjectIdea]:
    """Later ideas replace earlier ones with the same title; first-seen order is kept"""
    unique: Dict[str, ProjectIdea] = {}
    for idea in ideas:
        unique[idea.title] = idea
    return list(unique.values())


class IdeaGenerator:
    def __init__(self, openai: Optional[LLMProvider], gemini: Optional[LLMProvider]):
        self.openai = openai
        self.gemini = gemini

    async def _ideas_from(self, provider: LLMProvider, prompt: str) -> List[Dict[str, Any]]:
        text = await provider.complete(prompt, system=IDEAS_SYSTEM_PROMPT)
        parsed = parse_json_array(text)
        if parsed is None:
            logger.error("Failed to parse %s response: %.500s", provider.name, text)
            raise UpstreamError(provider.name, "Failed to parse project ideas from the AI response")
        return [item for item in parsed if isinstance(item, dict)]

    async def generate(
        self,
        request: GenerationRequest,
        purpose: Optional[str] = None,
        project_type: Optional[str] = None,
    ) -> List[ProjectIdea]:
        request_id = uuid.uuid4().hex[:7]
        want_openai = request.provider in ("openai", "both")
        want_gemini = request.provider in ("gemini", "both")
        logger.info(
            "[%s] Generating %d ideas (provider=%s, openai_key=%s, gemini_key=%s)",
            request_id, request.count, request.provider, self.openai is not None, self.gemini is not None,
        )

        prompt = build_ideas_prompt(
            request.domain, request.difficulty, request.technologies, request.features,
            request.count, purpose=purpose, project_type=project_type,
        )
        raw_ideas: List[Dict[str, Any]] = []
        last_error: Optional[UpstreamError] = None

        if want_openai:
            if self.openai is not None:
                try:
                    raw_ideas = await self._ideas_from(self.openai, prompt)
                except UpstreamError as e:
                    last_error = e
                    logger.warning("[%s] OpenAI generation failed, will try Gemini if available: %s", request_id, e.message)
            elif request.provider == "openai":
                raise ApiError("OpenAI API key is not configured", ErrorCode.CONFIG_ERROR)

        if want_gemini:
            if self.gemini is not None:
                try:
                    raw_ideas = raw_ideas + await self._ideas_from(self.gemini, prompt)
                except UpstreamError as e:
                    last_error = e
                    logger.error("[%s] Gemini generation failed: %s", request_id, e.message)
            elif request.provider == "gemini":
                raise ApiError("Gemini API key is not configured", ErrorCode.CONFIG_ERROR)

        if not raw_ideas:
            if settings.mock_fallback_enabled:
                logger.warning("[%s] No provider produced ideas, serving mock ideas", request_id)
                return mock_ideas(request.domain, request.difficulty, request.count)
            if self.openai is None and self.gemini is None:
                raise ApiError("No AI providers are configured on the server", ErrorCode.CONFIG_ERROR)
            if last_error is not None:
                raise last_error.to_api_error()
            raise ApiError("Both providers failed to generate ideas", ErrorCode.UPSTREAM_ERROR)

        ideas = dedupe_by_title([normalize_idea(raw) for raw in raw_ideas])[:request.count]
        logger.info("[%s] Generated %d ideas", request_id, len(ideas))
        return ideas


class IdeaService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def save_idea(self, user_id: str, idea: ProjectIdea) -> ProjectIdeaResponse:
        """Store a generated idea in project_ideas"""
        now = datetime.utcnow().isoformat()
        idea_data = {
            "title": idea.title,
            "description": idea.description,
            "difficulty_level": idea.difficulty,
            "domain": idea.domain,
            "technologies": idea.technologies or [],
            "features": idea.features or [],
            "user_id": user_id,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.supabase.table("project_ideas").insert(idea_data).execute()
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            code = getattr(e, "code", None) or ""
            if code == "PGRST202" or ("relation" in message and "does not exist" in message):
                raise HTTPException(
                    status_code=500,
                    detail="Project ideas table is missing. Please run the migration to create public.project_ideas."
                )
            raise HTTPException(status_code=500, detail=f"Failed to save project idea: {message}")

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save idea")
        return ProjectIdeaResponse(**result.data[0])

    def list_ideas(self, user_id: str) -> List[ProjectIdeaResponse]:
        """Saved ideas for a user, newest first"""
        try:
            result = self.supabase.table("project_ideas")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [ProjectIdeaResponse(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_idea(self, user_id: str, idea_id: str) -> None:
        try:
            result = self.supabase.table("project_ideas")\
                .delete()\
                .eq("id", idea_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise ApiError("Project idea not found", ErrorCode.NOT_FOUND)
