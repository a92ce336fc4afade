"""Tests for keyword scoring, snippet windows and top-N retrieval."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from server.services.index_service import IndexedDocument
from server.services.metadata_detect import DocumentMetadata, Subject
from server.services.retrieval import (
    SNIPPET_AFTER,
    SNIPPET_BEFORE,
    best_snippet,
    filter_documents,
    retrieve,
    score_text,
)


# ============================================================================
# HELPERS
# ============================================================================

def _doc(file_id, text, grade=None, subject=None):
    return IndexedDocument(
        file_id=file_id,
        text=text,
        chars=len(text),
        meta=DocumentMetadata(grade=grade, subject=subject),
    )


# ============================================================================
# score_text
# ============================================================================

def test_score_counts_occurrences():
    assert score_text("cell wall cell wall", ["cell"]) == 2


def test_score_is_case_insensitive_and_additive():
    assert score_text("Cell wall. CELL membrane.", ["cell", "wall"]) == 3


def test_score_counts_inside_longer_words():
    """Literal substring counting: no word-boundary awareness."""
    assert score_text("cellular cells", ["cell"]) == 2
    assert score_text("cellular cells", ["cell", "cellular"]) == 3


def test_score_non_overlapping_within_a_term():
    assert score_text("aaaa", ["aa"]) == 2


def test_score_zero_when_absent():
    assert score_text("photosynthesis", ["mitosis"]) == 0


# ============================================================================
# best_snippet
# ============================================================================

def test_snippet_picks_earliest_occurrence_across_terms():
    text = "Intro text. Meiosis comes later. Mitosis appears after meiosis."
    snip = best_snippet(text, ["mitosis", "meiosis"])
    assert snip.term == "meiosis"


def test_snippet_tie_goes_to_earlier_term():
    text = "mitosis meiosis"
    snip = best_snippet(text, ["mitosis meiosis", "mitosis"])
    assert snip.term == "mitosis meiosis"


def test_snippet_none_when_no_term_occurs():
    assert best_snippet("nothing relevant here", ["glucose"]) is None
    assert best_snippet("", ["glucose"]) is None


def test_snippet_window_is_asymmetric_and_clamped():
    before = "a" * 500
    after = "b" * 1000
    text = before + "KEY" + after
    snip = best_snippet(text, ["key"])
    assert snip.term == "key"
    assert len(snip.snippet) == SNIPPET_BEFORE + SNIPPET_AFTER
    assert snip.snippet.startswith("a" * SNIPPET_BEFORE + "KEY")
    assert snip.snippet in text


def test_snippet_near_document_start_is_clamped():
    text = "KEY term at the very start. " + "x" * 50
    snip = best_snippet(text, ["key"])
    assert snip.snippet == text.strip()


# ============================================================================
# retrieve
# ============================================================================

def test_retrieve_orders_by_score_and_drops_zero():
    docs = [
        _doc("a.pdf", "glucose once"),
        _doc("b.pdf", "nothing here"),
        _doc("c.pdf", "glucose glucose glucose"),
    ]
    results = retrieve(docs, ["glucose"])
    assert [r.file_id for r in results] == ["c.pdf", "a.pdf"]
    assert [r.score for r in results] == [3, 1]
    assert all(r.snippet for r in results)


def test_retrieve_ties_keep_candidate_order():
    docs = [_doc(f"{i}.pdf", "energy") for i in range(3)]
    assert [r.file_id for r in retrieve(docs, ["energy"])] == ["0.pdf", "1.pdf", "2.pdf"]


def test_retrieve_truncates_to_top_three():
    docs = [_doc(f"{i}.pdf", "energy " * (i + 1)) for i in range(5)]
    results = retrieve(docs, ["energy"])
    assert len(results) == 3
    assert [r.file_id for r in results] == ["4.pdf", "3.pdf", "2.pdf"]


def test_retrieve_no_hits_is_empty():
    assert retrieve([_doc("a.pdf", "cells")], ["glucose"]) == []


def test_retrieve_requires_terms():
    with pytest.raises(ValueError):
        retrieve([_doc("a.pdf", "cells")], [])


# ============================================================================
# filter_documents
# ============================================================================

def test_filter_requires_exact_grade_and_subject():
    docs = [
        _doc("g7_nst.pdf", "energy", 7, Subject.NATURAL_SCIENCES),
        _doc("g7_maths.pdf", "energy", 7, Subject.MATHEMATICS),
        _doc("g8_nst.pdf", "energy", 8, Subject.NATURAL_SCIENCES),
        _doc("unknown.pdf", "energy"),
    ]
    kept = filter_documents(docs, grade=7, subject=Subject.NATURAL_SCIENCES)
    assert [d.file_id for d in kept] == ["g7_nst.pdf"]


def test_filter_never_falls_back_to_whole_corpus():
    docs = [_doc("g7_maths.pdf", "energy", 7, Subject.MATHEMATICS)]
    assert filter_documents(docs, grade=7, subject=Subject.NATURAL_SCIENCES) == []


def test_filter_with_no_fields_keeps_everything():
    docs = [_doc("a.pdf", "x"), _doc("b.pdf", "y", 5, Subject.MATHEMATICS)]
    assert filter_documents(docs) == docs


def test_retrieve_after_filter_never_returns_other_subject():
    docs = [
        _doc("g7_maths.pdf", "energy energy energy", 7, Subject.MATHEMATICS),
        _doc("g7_nst.pdf", "energy", 7, Subject.NATURAL_SCIENCES),
    ]
    candidates = filter_documents(docs, grade=7, subject=Subject.NATURAL_SCIENCES)
    results = retrieve(candidates, ["energy"])
    assert [r.file_id for r in results] == ["g7_nst.pdf"]
    assert all(r.meta.subject is Subject.NATURAL_SCIENCES for r in results)
