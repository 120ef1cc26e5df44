import logging
import re
from typing import Optional, Tuple

from app.config import settings
from app.core.errors import ApiError, ErrorCode, UpstreamError
from app.modules.documentation.schemas import Documentation
from app.modules.llm.parsing import parse_json_object
from app.modules.llm.prompts import build_documentation_prompt
from app.modules.llm.providers import GeminiProvider
from app.modules.projects.schemas import ProjectResponse
from app.modules.projects.service import ProjectService

logger = logging.getLogger(__name__)


_WHITESPACE_RE = re.compile(r"\s+")


def markdown_filename(title: str) -> str:
    return _WHITESPACE_RE.sub("-", title.strip()) + "-documentation.md"


def render_markdown(title: str, documentation: Documentation) -> str:
    """Downloadable Markdown version of generated documentation"""
    references = "\n".join(f"{i}. {ref}" for i, ref in enumerate(documentation.references, start=1))
    content = f"""
# {title} - Project Documentation

## 1. Introduction
{documentation.introduction}

## 2. System Analysis
{documentation.system_analysis}

## 3. System Design
{documentation.system_design}

## 4. Implementation and Testing
{documentation.implementation}

### Testing
{documentation.testing}

## 5. Result and Discussion
{documentation.result}

## 6. Conclusion
{documentation.conclusion}

## 7. References
{references}
"""
    return content.strip() + "\n"


class DocumentationService:
    def __init__(self, projects: ProjectService, gemini: Optional[GeminiProvider]):
        self.projects = projects
        self.gemini = gemini

    async def generate(self, project_id: str) -> Documentation:
        return await self._generate_for(self.projects.get_project(project_id))

    async def generate_markdown(self, project_id: str) -> Tuple[str, str]:
        """(filename, markdown) for a freshly generated document"""
        project = self.projects.get_project(project_id)
        documentation = await self._generate_for(project)
        return markdown_filename(project.title), render_markdown(project.title, documentation)

    async def _generate_for(self, project: ProjectResponse) -> Documentation:
        if self.gemini is None:
            raise ApiError("GEMINI_API_KEY is not configured", ErrorCode.CONFIG_ERROR)

        prompt = build_documentation_prompt(project.title, project.description, project.technologies)
        try:
            text = await self.gemini.complete(prompt, model=settings.gemini_docs_model)
        except UpstreamError as e:
            raise e.to_api_error()

        parsed = parse_json_object(text)
        if parsed is None:
            logger.warning("No documentation object in Gemini response for project %s", project.id)
            return Documentation()
        return Documentation(**{k: v for k, v in parsed.items() if k in Documentation.model_fields})
