from typing import List, Optional

IDEAS_SYSTEM_PROMPT = (
    "You are a helpful assistant that generates project ideas. "
    "Always respond with valid JSON arrays only."
)


def build_ideas_prompt(
    domain: str,
    difficulty: str,
    technologies: List[str],
    features: List[str],
    count: int,
    purpose: Optional[str] = None,
    project_type: Optional[str] = None,
) -> str:
    lines = [
        f"Generate {count} project ideas with these requirements:",
        f"- Domain: {domain}",
        f"- Difficulty: {difficulty}",
    ]
    if project_type:
        lines.append(f"- Project type: {project_type}")
    if purpose:
        lines.append(f"- Purpose: {purpose}")
    if technologies:
        lines.append(f"- Technologies: {', '.join(technologies)}")
    if features:
        lines.append(f"- Features: {', '.join(features)}")
    lines.append("")
    lines.append("Format the response as a JSON array of objects with these properties:")
    lines.append("""{
  "title": "Project Title",
  "description": "Detailed description of the project",
  "technologies": ["tech1", "tech2"],
  "difficulty": "beginner|intermediate|advanced",
  "domain": "Project domain",
  "features": ["feature1", "feature2"],
  "estimated_time": "Time estimate"
}""")
    return "\n".join(lines)


def build_documentation_prompt(title: str, description: str, technologies: List[str]) -> str:
    return f"""Generate comprehensive project documentation for:
Title: {title}
Description: {description}
Technologies: {', '.join(technologies)}

Include these sections:
1. Introduction (overview, objectives, scope)
2. System Analysis (existing vs proposed, requirements)
3. System Design (architecture, database, UI/UX)
4. Implementation and Testing (approach, testing strategy)
5. Result and Discussion (performance, efficiency)
6. Conclusion (summary, future work)
7. References (5-7 relevant links)

Return as JSON with fields: introduction, system_analysis, system_design, implementation, testing, result, conclusion, references (array)."""
