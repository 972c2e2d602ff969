"""Rubric parsing: turns pasted assignment text into deliverable candidates."""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidInput

logger = logging.getLogger(__name__)

KEYWORDS = (
    "deliverable", "feature", "requirement", "task", "implement", "create",
    "develop", "submit", "design", "write", "analyze", "prepare",
)

NUMBERED_RE = re.compile(r"^\d+[.:]")
BULLET_RE = re.compile(r"^[-*•]")
KEYWORD_RE = re.compile("|".join(KEYWORDS), re.IGNORECASE)
PREFIX_RE = re.compile(r"^(?:\d+[.:]|[-*•]+)\s*")
POINTS_RE = re.compile(r"(\d+)\s*(?:points?\b|pts?\b|marks?\b|%)", re.IGNORECASE)
PAREN_POINTS_RE = re.compile(r"\(\s*\d+\s*(?:points?|pts?|marks?|%)\s*\)", re.IGNORECASE)

FALLBACK_NAME = "Complete the main assignment"
FALLBACK_POINTS = 100


@dataclass
class ParsedDeliverable:
    name: str
    description: Optional[str] = None
    points: Optional[int] = None

    def to_dict(self):
        return {"name": self.name, "description": self.description, "points": self.points}


def is_deliverable_line(line):
    return bool(NUMBERED_RE.match(line) or KEYWORD_RE.search(line) or BULLET_RE.match(line))


def _strip_points(text):
    """Return (text without the points fragment, points or None)."""
    match = POINTS_RE.search(text)
    if match is None:
        return text, None
    points = int(match.group(1))
    cleaned, count = PAREN_POINTS_RE.subn("", text, count=1)
    if count == 0:
        cleaned = text[:match.start()] + text[match.end():]
    cleaned = re.sub(r"\s{2,}", " ", cleaned).strip(" -:,;")
    return cleaned, points


def _description_for(lines, index):
    if index + 1 >= len(lines):
        return None
    candidate = lines[index + 1]
    # a dash item is not a description, and neither is the next deliverable:
    # otherwise "1. A\n2. B" would describe A as "2. B"
    if candidate.startswith("- ") or is_deliverable_line(candidate):
        return None
    return candidate


def parse(text):
    if not isinstance(text, str) or not text.strip():
        raise InvalidInput.for_field("text", "Rubric text must not be empty")

    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]

    deliverables = []
    for i, line in enumerate(lines):
        if not is_deliverable_line(line):
            continue
        name, points = _strip_points(PREFIX_RE.sub("", line, count=1).strip())
        if not name:
            continue
        deliverables.append(ParsedDeliverable(
            name=name,
            description=_description_for(lines, i),
            points=points,
        ))

    if not deliverables:
        logger.debug("No deliverables recognised in rubric, using fallback")
        deliverables.append(ParsedDeliverable(name=FALLBACK_NAME, points=FALLBACK_POINTS))

    logger.debug(f"Parsed {len(deliverables)} deliverables from {len(lines)} rubric lines")
    return deliverables
