"""
Turn a free-text homework question into search terms.

Deterministic: lowercase, strip punctuation, drop stopwords and short
tokens, then keep unique keywords plus adjacent-word bigrams so concepts
like "cell membrane" can match as a phrase.
"""

import re
from dataclasses import dataclass, field
from typing import List

from server.services.text_clean import clean_text

MAX_KEYWORDS = 12
MAX_PHRASES = 6
MIN_TOKEN_LEN = 3

# Legacy raw-search term rules
LONG_WORD_MIN_LEN = 4
LONG_WORD_MAX_TERMS = 8

STOPWORDS = frozenset(
    "what is are was were the a an of to and or for in on with from about "
    "explain define difference between how do does can you please give me "
    "show steps step calculate solve".split()
)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


@dataclass(frozen=True)
class SearchTerms:
    keywords: List[str] = field(default_factory=list)
    phrases: List[str] = field(default_factory=list)

    @property
    def all_terms(self) -> List[str]:
        """Keywords first, then phrases (order matters for snippet ties)."""
        return list(self.keywords) + list(self.phrases)

    @property
    def is_empty(self) -> bool:
        return not self.keywords and not self.phrases


def _unique(items: List[str]) -> List[str]:
    """Dedupe preserving first-seen order."""
    return list(dict.fromkeys(items))


def tokenize_query(query: str) -> List[str]:
    """Filtered token sequence (duplicates kept, order preserved)."""
    cleaned = clean_text(query).lower()
    words = (_NON_ALNUM_RE.sub("", w) for w in cleaned.split(" "))
    return [w for w in words if len(w) >= MIN_TOKEN_LEN and w not in STOPWORDS]


def extract_terms(query: str) -> SearchTerms:
    words = tokenize_query(query)

    keywords = _unique(words)[:MAX_KEYWORDS]

    bigrams = [
        f"{a} {b}"
        for a, b in zip(words, words[1:])
        if len(a) >= MIN_TOKEN_LEN and len(b) >= MIN_TOKEN_LEN
    ]
    phrases = _unique(bigrams)[:MAX_PHRASES]

    return SearchTerms(keywords=keywords, phrases=phrases)


def long_word_terms(query: str) -> List[str]:
    """Raw search terms: first 8 whitespace words of 4+ chars, punctuation kept."""
    words = clean_text(query).lower().split(" ")
    return [w for w in words if len(w) >= LONG_WORD_MIN_LEN][:LONG_WORD_MAX_TERMS]
