"""
Keyword retrieval over indexed textbooks.

Scoring is literal, case-insensitive substring counting summed over terms.
No word boundaries: "cell" also counts inside "cellular", and overlapping
terms are counted independently.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from server.services.index_service import IndexedDocument
from server.services.metadata_detect import DocumentMetadata, Subject
from server.services.text_clean import clean_text

SNIPPET_BEFORE = 180
SNIPPET_AFTER = 420
DEFAULT_TOP_N = 3


@dataclass(frozen=True)
class Snippet:
    term: str
    snippet: str


@dataclass(frozen=True)
class ScoredDocument:
    file_id: str
    score: int
    snippet: Optional[str] = None
    meta: DocumentMetadata = field(default_factory=DocumentMetadata)


def score_text(text: str, terms: Iterable[str]) -> int:
    """Sum of non-overlapping occurrence counts of each term."""
    lower = (text or "").lower()
    score = 0
    for term in terms:
        kw = term.lower()
        if kw:
            score += lower.count(kw)
    return score


def best_snippet(text: str, terms: Sequence[str]) -> Optional[Snippet]:
    """
    Window around the earliest first-occurrence of any term.

    Ties on position go to the earlier term. The window runs from 180 chars
    before the match to 420 chars after its start, clamped to the text.
    """
    if not text:
        return None
    lower = text.lower()
    best_pos = -1
    best_term = ""
    for term in terms:
        kw = term.lower()
        if not kw:
            continue
        pos = lower.find(kw)
        if pos != -1 and (best_pos == -1 or pos < best_pos):
            best_pos = pos
            best_term = term

    if best_pos == -1:
        return None

    start = max(0, best_pos - SNIPPET_BEFORE)
    end = min(len(text), best_pos + SNIPPET_AFTER)
    return Snippet(term=best_term, snippet=clean_text(text[start:end]))


def retrieve(
    candidates: Sequence[IndexedDocument],
    terms: Sequence[str],
    *,
    top_n: int = DEFAULT_TOP_N,
) -> List[ScoredDocument]:
    """Top-N documents with score > 0, best first, each with a snippet."""
    if not terms:
        raise ValueError("retrieve() requires at least one search term")

    scored = [(score_text(doc.text, terms), doc) for doc in candidates]
    scored = [(s, doc) for s, doc in scored if s > 0]
    # stable sort: equal scores keep candidate order
    scored.sort(key=lambda pair: pair[0], reverse=True)

    results = []
    for score, doc in scored[:top_n]:
        snip = best_snippet(doc.text, terms)
        results.append(ScoredDocument(
            file_id=doc.file_id,
            score=score,
            snippet=snip.snippet if snip else None,
            meta=doc.meta,
        ))
    return results


def filter_documents(
    documents: Iterable[IndexedDocument],
    grade: Optional[int] = None,
    subject: Optional[Subject] = None,
) -> List[IndexedDocument]:
    """
    Keep documents matching every supplied field exactly.

    Never widens to the full corpus when nothing matches; a Natural
    Sciences question must not surface a Mathematics textbook.
    """
    out = []
    for doc in documents:
        if grade is not None and doc.meta.grade != grade:
            continue
        if subject is not None and doc.meta.subject != subject:
            continue
        out.append(doc)
    return out
