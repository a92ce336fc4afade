"""
Filename-based grade/subject detection for textbook PDFs.

Textbooks arrive with names like "Grade7_NST_Term2.pdf" or "gr 5 maths.pdf".
Detection is plain substring and regex matching; anything unrecognised is
reported as None rather than guessed.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

_GRADE_RE = re.compile(r"grade\s*([4-9])|gr\s*([4-9])|\bg\s*([4-9])\b")

_MATH_TOKENS = ("math", "maths", "mathematics")
_NST_TOKENS = ("nst", "natural", "science", "sciences")

_SUBJECT_ALIASES = {
    "mathematics": "Mathematics",
    "maths": "Mathematics",
    "math": "Mathematics",
    "natural sciences": "Natural Sciences",
    "natural science": "Natural Sciences",
    "nst": "Natural Sciences",
    "ns": "Natural Sciences",
}


class Subject(str, Enum):
    MATHEMATICS = "Mathematics"
    NATURAL_SCIENCES = "Natural Sciences"

    @classmethod
    def parse(cls, value: Any) -> Optional["Subject"]:
        """Map a request/persisted subject string to the enum; None if unknown."""
        if value is None:
            return None
        if isinstance(value, Subject):
            return value
        key = re.sub(r"\s+", " ", str(value)).strip().lower()
        canonical = _SUBJECT_ALIASES.get(key)
        return cls(canonical) if canonical else None


def parse_grade(value: Any) -> Optional[int]:
    """Coerce 7, "7" or " 7 " to int; None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text.isdigit():
        return None
    return int(text)


@dataclass(frozen=True)
class DocumentMetadata:
    grade: Optional[int] = None
    subject: Optional[Subject] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grade": self.grade,
            "subject": self.subject.value if self.subject else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DocumentMetadata":
        data = data or {}
        return cls(
            grade=parse_grade(data.get("grade")),
            subject=Subject.parse(data.get("subject")),
        )


def detect_grade(filename: str) -> Optional[int]:
    """First "grade N" / "gr N" / standalone "g N" (N in 4..9), else None."""
    match = _GRADE_RE.search((filename or "").lower())
    if not match:
        return None
    digit = match.group(1) or match.group(2) or match.group(3)
    return int(digit)


def detect_subject(filename: str) -> Optional[Subject]:
    """
    Mathematics or Natural Sciences from filename tokens.

    Natural Sciences is checked last, so a name carrying both families
    (e.g. "maths_and_science.pdf") resolves to Natural Sciences.
    """
    name = (filename or "").lower()
    subject = None
    if any(tok in name for tok in _MATH_TOKENS):
        subject = Subject.MATHEMATICS
    if any(tok in name for tok in _NST_TOKENS):
        subject = Subject.NATURAL_SCIENCES
    return subject


def detect_meta(filename: str) -> DocumentMetadata:
    return DocumentMetadata(
        grade=detect_grade(filename),
        subject=detect_subject(filename),
    )
