"""Tests for whitespace/control-char cleanup."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from server.services.text_clean import clean_text


def test_collapses_whitespace_runs():
    assert clean_text("cell   wall\n\n\tmembrane") == "cell wall membrane"


def test_strips_control_chars_and_trims():
    """Non-whitespace control chars (NUL, BEL, ESC) are dropped."""
    assert clean_text("  \x00photo\x07synthesis\x1b  ") == "photosynthesis"


def test_empty_and_none():
    assert clean_text("") == ""
    assert clean_text(None) == ""


def test_clean_text_is_idempotent():
    s = "Already clean sentence."
    assert clean_text(s) == s
    assert clean_text(clean_text(" a \n b ")) == "a b"
