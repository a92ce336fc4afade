"""
Question answering for the API layer.

Order of attempts for /answer:
  1. CAPS topic table (hardcoded, curriculum-aligned)
  2. Keyword search over the textbook PDFs for the requested grade/subject

Every miss is a normal outcome with a friendly message; only missing input
raises (InputError -> HTTP 400).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from server.services.answer_compose import compose_answer
from server.services.index_service import IndexedDocument, PdfIndex
from server.services.metadata_detect import Subject, parse_grade
from server.services.query_terms import extract_terms, long_word_terms
from server.services.retrieval import DEFAULT_TOP_N, filter_documents, retrieve
from server.services.topics_service import Topic, find_topic

logger = logging.getLogger("homework.query")

DEFAULT_TITLE = "Answer"

CAPS_MISS_MESSAGE = "No CAPS match found yet. Try 'Search Textbooks' below."
NO_INDEX_MESSAGE = (
    "I couldn’t find a match in saved lessons yet. Please add textbooks (PDFs) "
    "and reindex them, or try rephrasing your question."
)
VAGUE_QUERY_MESSAGE = "Please ask with more detail (include key topic words)."
NO_TEXTBOOK_MESSAGE = (
    "I don't have a textbook loaded for this Grade + Subject yet. "
    "Please ensure the correct PDF exists and reindex."
)
NO_HITS_MESSAGE = (
    "I couldn’t find this in your saved textbooks. Try different keywords "
    "or a simpler version of the question."
)

SEARCH_NO_INDEX_MESSAGE = "No PDFs indexed yet. Put PDFs in the pdfs folder and call /pdf/reindex."
SEARCH_TOO_SHORT_MESSAGE = "Query too short. Use a longer question or keywords."
SEARCH_NO_MATCH_MESSAGE = "No matches found in your indexed PDFs."
MISSING_SNIPPET = "(match found but snippet not generated)"


class InputError(ValueError):
    """Missing or empty request field; surfaced as a client error."""


@dataclass(frozen=True)
class AnswerResult:
    found: bool
    answer: str
    title: str = DEFAULT_TITLE
    video: Optional[str] = None
    source: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "found": self.found,
            "title": self.title,
            "answer": self.answer,
            "video": self.video,
            "source": self.source,
        }


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def ask_caps(
    question: Optional[str],
    grade: Any,
    subject: Any,
    topics: Sequence[Topic],
) -> Dict[str, Any]:
    """Strict CAPS-only lookup. Grade and subject are required."""
    if _blank(question):
        raise InputError("Question is required")
    if _blank(grade) or _blank(subject):
        raise InputError("Grade and subject are required")

    match = find_topic(topics, question, grade, subject)
    if match is None:
        return {"found": False, "message": CAPS_MISS_MESSAGE}
    return {
        "found": True,
        "topic": match.topic,
        "explanation": match.explanation,
        "video": match.video,
    }


def select_candidates(index: PdfIndex, grade: Any, subject: Any) -> List[IndexedDocument]:
    """
    Documents matching the supplied grade and subject.

    A blank field does not filter. A supplied value that cannot be parsed
    (e.g. grade "ten", subject "History") matches nothing.
    """
    grade_n = parse_grade(grade)
    subject_e = Subject.parse(subject)
    if not _blank(grade) and grade_n is None:
        return []
    if not _blank(subject) and subject_e is None:
        return []
    return filter_documents(index.documents, grade=grade_n, subject=subject_e)


def answer_question(
    question: Optional[str],
    grade: Any = None,
    subject: Any = None,
    *,
    index: PdfIndex,
    topics: Sequence[Topic] = (),
    top_n: int = DEFAULT_TOP_N,
) -> AnswerResult:
    """CAPS first, then textbook search filtered by grade/subject."""
    if _blank(question):
        raise InputError("Question is required")

    match = find_topic(topics, question, grade, subject)
    if match is not None:
        return AnswerResult(
            found=True,
            answer=match.explanation,
            title=match.topic or DEFAULT_TITLE,
            video=match.video,
            source="caps",
        )

    if index.is_empty:
        return AnswerResult(found=False, answer=NO_INDEX_MESSAGE)

    terms = extract_terms(question)
    if terms.is_empty:
        return AnswerResult(found=False, answer=VAGUE_QUERY_MESSAGE)

    candidates = select_candidates(index, grade, subject)
    if not candidates:
        return AnswerResult(found=False, answer=NO_TEXTBOOK_MESSAGE)

    scored = retrieve(candidates, terms.all_terms, top_n=top_n)
    logger.debug(
        "answer: %d keywords, %d phrases, %d/%d candidates hit",
        len(terms.keywords), len(terms.phrases), len(scored), len(candidates),
    )
    if not scored:
        return AnswerResult(found=False, answer=NO_HITS_MESSAGE)

    snippets = [s.snippet for s in scored if s.snippet]
    return AnswerResult(found=True, answer=compose_answer(snippets), source="textbook")


def search_textbooks(query: Optional[str], *, index: PdfIndex, top_n: int = DEFAULT_TOP_N) -> Dict[str, Any]:
    """Unfiltered raw search returning per-file scores and snippets."""
    if _blank(query):
        raise InputError("query is required")
    if index.is_empty:
        return {"ok": False, "message": SEARCH_NO_INDEX_MESSAGE}

    keywords = long_word_terms(query)
    if not keywords:
        return {"ok": False, "message": SEARCH_TOO_SHORT_MESSAGE}

    scored = retrieve(index.documents, keywords, top_n=top_n)
    if not scored:
        return {"ok": True, "results": [], "message": SEARCH_NO_MATCH_MESSAGE}

    return {
        "ok": True,
        "updatedAt": index.updated_at,
        "keywords": keywords,
        "results": [
            {"file": s.file_id, "score": s.score, "snippet": s.snippet or MISSING_SNIPPET}
            for s in scored
        ],
    }
