"""Assemble a short bulleted answer from retrieved textbook snippets."""

import re
from typing import List, Sequence

from server.services.text_clean import clean_text

MIN_SENTENCE_CHARS = 40
DEDUPE_KEY_CHARS = 80
MAX_SENTENCES = 7
BULLET = "• "

NO_SNIPPET_MESSAGE = (
    "I found something relevant, but couldn’t extract a clear section. "
    "Try rephrasing your question."
)

_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> List[str]:
    """Split after . ! ? followed by whitespace; drop fragments under 40 chars."""
    parts = _SENTENCE_END_RE.split(clean_text(text))
    return [s.strip() for s in parts if len(s.strip()) >= MIN_SENTENCE_CHARS]


def dedupe_key(sentence: str) -> str:
    """Rough near-duplicate key: lowercased leading 80 chars."""
    return sentence.lower()[:DEDUPE_KEY_CHARS]


def pick_sentences(snippets: Sequence[str], limit: int = MAX_SENTENCES) -> List[str]:
    """Unique sentences across snippets in order, stopping at limit."""
    seen = set()
    picked: List[str] = []
    for snip in snippets:
        for sentence in split_sentences(snip):
            key = dedupe_key(sentence)
            if key in seen:
                continue
            seen.add(key)
            picked.append(sentence)
            if len(picked) >= limit:
                return picked
    return picked


def compose_answer(snippets: Sequence[str]) -> str:
    picked = pick_sentences(snippets)
    if not picked:
        return snippets[0] if snippets and snippets[0] else NO_SNIPPET_MESSAGE
    return "\n".join(BULLET + s for s in picked)
