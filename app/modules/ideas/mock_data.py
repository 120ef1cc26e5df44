"""Static ideas served when every provider fails and mock fallback is enabled."""

from typing import List

from app.modules.ideas.schemas import ProjectIdea

_MOCK_IDEAS = [
    {
        "title": "{domain} Task Tracker",
        "description": "A collaborative tracker for planning and following up on {domain_lower} work, "
                       "with due dates, assignees and a progress dashboard.",
        "technologies": ["React", "Node.js", "PostgreSQL"],
        "features": ["User accounts", "Kanban board", "Email reminders", "Progress charts"],
        "estimated_time": "2-3 weeks",
    },
    {
        "title": "{domain} Insights Dashboard",
        "description": "Collects public {domain_lower} data, cleans it and presents trends "
                       "through interactive charts and scheduled reports.",
        "technologies": ["Python", "FastAPI", "Pandas", "Chart.js"],
        "features": ["Data import", "Interactive charts", "CSV export", "Scheduled reports"],
        "estimated_time": "3-4 weeks",
    },
    {
        "title": "{domain} Community Forum",
        "description": "A discussion platform where people interested in {domain_lower} can ask "
                       "questions, share resources and vote on answers.",
        "technologies": ["Next.js", "Supabase", "Tailwind CSS"],
        "features": ["Threads and replies", "Voting", "Tagging", "Moderation tools"],
        "estimated_time": "3-5 weeks",
    },
    {
        "title": "{domain} Learning Assistant",
        "description": "A study companion that turns {domain_lower} notes into flashcards and "
                       "quizzes and tracks what the learner still needs to review.",
        "technologies": ["Flutter", "Firebase"],
        "features": ["Flashcards", "Quizzes", "Spaced repetition", "Offline mode"],
        "estimated_time": "4-6 weeks",
    },
]


def mock_ideas(domain: str, difficulty: str, count: int) -> List[ProjectIdea]:
    """Templates repeat with a numbered title once count exceeds them"""
    domain = domain.strip() or "General"
    ideas = []
    for i in range(count):
        template = _MOCK_IDEAS[i % len(_MOCK_IDEAS)]
        title = template["title"].format(domain=domain)
        rounds = i // len(_MOCK_IDEAS)
        if rounds:
            title = f"{title} {rounds + 1}"
        ideas.append(ProjectIdea(
            title=title,
            description=template["description"].format(domain_lower=domain.lower()),
            difficulty=difficulty,
            domain=domain,
            technologies=list(template["technologies"]),
            features=list(template["features"]),
            estimated_time=template["estimated_time"],
        ))
    return ideas
