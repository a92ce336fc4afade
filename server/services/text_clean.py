"""Whitespace and control-character cleanup shared by indexing and search."""

import re

_WS_RE = re.compile(r"\s+")
_CTRL_RE = re.compile(r"[\x00-\x1f]")


def clean_text(text: str) -> str:
    """Collapse whitespace runs to one space, drop ASCII control chars, strip."""
    if not text:
        return ""
    text = _WS_RE.sub(" ", text)
    text = _CTRL_RE.sub("", text)
    return text.strip()
