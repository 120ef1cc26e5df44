from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from app.modules.documentation.schemas import DocumentationRequest, DocumentationResponse
from app.modules.documentation.service import DocumentationService
from app.modules.projects.service import ProjectService
from app.modules.llm.providers import gemini_from_settings
from app.core.dependencies import get_current_user, get_user_db
from app.core.rate_limit import limiter
from app.config import settings
from supabase import Client
from typing import Dict
from urllib.parse import quote

router = APIRouter(prefix="/documentation", tags=["documentation"])


def attachment_header(filename: str) -> str:
    """Content-Disposition value with an ASCII fallback and the RFC 5987 UTF-8 name"""
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace("\"", "").replace("\\", "")
    return f"attachment; filename=\"{fallback or 'documentation.md'}\"; filename*=UTF-8''{quote(filename)}"


def get_documentation_service(supabase: Client = Depends(get_user_db)) -> DocumentationService:
    return DocumentationService(ProjectService(supabase), gemini_from_settings())


@router.post("/generate", response_model=DocumentationResponse)
@limiter.limit(settings.generation_rate_limit)
async def generate_documentation(
    request: Request,
    doc_request: DocumentationRequest,
    user_data: Dict = Depends(get_current_user),
    service: DocumentationService = Depends(get_documentation_service)
):
    """Generate narrative documentation for a project"""
    documentation = await service.generate(doc_request.project_id)
    return {"documentation": documentation}


@router.get("/{project_id}/markdown")
@limiter.limit(settings.generation_rate_limit)
async def download_documentation(
    request: Request,
    project_id: str,
    user_data: Dict = Depends(get_current_user),
    service: DocumentationService = Depends(get_documentation_service)
):
    """Generate documentation and return it as a Markdown file"""
    filename, content = await service.generate_markdown(project_id)
    return Response(
        content=content,
        media_type="text/markdown",
        headers={"Content-Disposition": attachment_header(filename)},
    )
