"""Breaks a deliverable down into a short list of canned, typed tasks."""
import random
import re
from dataclasses import dataclass

MAX_TASKS = 7
MIN_MINUTES = 15
JITTER_MINUTES = 15

CATEGORY_TERMS = {
    "ui": ("ui", "interface", "design", "frontend", "layout", "component"),
    "backend": ("api", "server", "database", "backend", "storage", "data"),
    "algorithm": ("algorithm", "calculate", "compute", "analysis", "logic"),
    "research": ("research", "analyze", "investigate", "study", "explore"),
}

CATEGORY_TASKS = {
    "ui": (
        "Create wireframes for {}",
        "Implement responsive design for {}",
        "Add styles and animations to {}",
    ),
    "backend": (
        "Design data model for {}",
        "Implement API endpoints for {}",
        "Add data validation to {}",
    ),
    "algorithm": (
        "Research algorithm options for {}",
        "Create algorithm pseudocode for {}",
        "Optimize algorithm performance for {}",
    ),
    "research": (
        "Collect research materials for {}",
        "Analyze findings for {}",
        "Prepare presentation of {} research",
    ),
}

BASE_TASKS = (
    "Research requirements for {}",
    "Create initial design for {}",
    "Implement core functionality for {}",
    "Test and debug {}",
    "Document {}",
)

# checked in order, first match wins
BASE_MINUTES = (
    ("research", 90),
    ("design", 75),
    ("test", 45),
    ("document", 30),
    ("implement", 120),
)
DEFAULT_MINUTES = 60


@dataclass
class TaskTemplate:
    name: str
    priority: int
    estimated_minutes: int


def short_name(name):
    if len(name) <= 40:
        return name
    return " ".join(name.split()[:5]) + "..."


def _words(name, description):
    text = name if description is None else f"{name} {description}"
    return re.findall(r"[a-z0-9]+", text.lower())


def matched_categories(name, description=None):
    words = _words(name, description)
    return [
        category for category, terms in CATEGORY_TERMS.items()
        if any(word.startswith(term) for word in words for term in terms)
    ]


def determine_priority(task_name, position):
    lowered = task_name.lower()
    if "implement" in lowered or position == 0:
        return 3
    if "research" in lowered or "design" in lowered or "create" in lowered:
        return 2
    if "document" in lowered or "test" in lowered:
        return 1
    return 2


def estimate_minutes(task_name, rng=None):
    rng = rng or random
    lowered = task_name.lower()
    base = DEFAULT_MINUTES
    for keyword, minutes in BASE_MINUTES:
        if keyword in lowered:
            base = minutes
            break
    return max(MIN_MINUTES, base + rng.randint(-JITTER_MINUTES, JITTER_MINUTES))


def task_names(name, description=None):
    label = short_name(name)
    names = [template.format(label) for template in BASE_TASKS]
    for category in matched_categories(name, description):
        names.extend(template.format(label) for template in CATEGORY_TASKS[category])
    return names[:MAX_TASKS]


def expand(name, description=None, rng=None):
    """Return the ordered task templates for one deliverable.

    Always five base tasks, followed by category-specific extras when the
    deliverable's wording suggests UI, backend, algorithm or research work,
    capped at seven. Only the time estimate is random; pass ``rng`` (a
    ``random.Random``) to make it repeatable.
    """
    return [
        TaskTemplate(
            name=task_name,
            priority=determine_priority(task_name, position),
            estimated_minutes=estimate_minutes(task_name, rng),
        )
        for position, task_name in enumerate(task_names(name, description))
    ]
