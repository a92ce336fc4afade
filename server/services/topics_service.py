"""
CAPS topic table and resource catalog.

Both are hand-maintained JSON files under data/. The topic table is
scanned linearly; the first topic whose grade and subject match and whose
keyword appears in the question wins.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

logger = logging.getLogger("homework.topics")


@dataclass(frozen=True)
class Topic:
    grade: str
    subject: str
    keywords: Tuple[str, ...] = field(default_factory=tuple)
    topic: str = ""
    explanation: str = ""
    video: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Topic":
        return cls(
            grade=str(data.get("grade", "")),
            subject=str(data.get("subject", "")),
            keywords=tuple(str(k) for k in data.get("keywords") or ()),
            topic=data.get("topic") or "",
            explanation=data.get("explanation") or "",
            video=data.get("video") or None,
        )


def _read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_topics(path: Path) -> Tuple[Topic, ...]:
    """Load topics.json; empty table if missing or unreadable."""
    path = Path(path)
    if not path.exists():
        logger.warning("Topic table not found: %s", path)
        return ()
    try:
        return tuple(Topic.from_dict(t) for t in _read_json(path))
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Ignoring unreadable topic table %s: %s", path, e)
        return ()


def load_resources(path: Path) -> Dict[str, Any]:
    """Load resources.json (grade -> subject -> topic names); {} on failure."""
    path = Path(path)
    if not path.exists():
        return {}
    try:
        data = _read_json(path)
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable resources file %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def find_topic(
    topics: Sequence[Topic],
    question: str,
    grade: Any,
    subject: Any,
) -> Optional[Topic]:
    """First topic matching grade + subject (as strings) with a keyword hit."""
    q = (question or "").lower()
    grade_s = str(grade)
    subject_s = str(subject)
    for t in topics:
        if t.grade != grade_s or t.subject != subject_s:
            continue
        if any(kw.lower() in q for kw in t.keywords):
            return t
    return None
