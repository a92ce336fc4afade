"""
PDF bytes -> plain text extraction.

Provides a single entry point so the indexer can switch backends via a
string flag without touching internals.

Supported backends:
  - "text"   : page.get_text("text") -- simple, fast, good for single-column
  - "blocks" : page.get_text("blocks") -- approximates reading order for
               multi-column textbook layouts

Usage:
  from extractors.pdf_backends import extract_pdf_text

  text = extract_pdf_text(pdf_bytes, backend="blocks")
"""

from typing import Callable, Dict

import fitz


class ExtractionError(Exception):
    """Raised when a single PDF cannot be opened or read."""


def _extract_text_mode(page: fitz.Page) -> str:
    return page.get_text("text") or ""


def _extract_blocks_mode(page: fitz.Page) -> str:
    """
    Block-based extraction via page.get_text('blocks').

    Each block is (x0, y0, x1, y1, text_or_image, block_no, block_type).
    block_type 0 = text, 1 = image. Blocks are sorted top-to-bottom, then
    left-to-right.
    """
    blocks = page.get_text("blocks") or []
    text_blocks = [b for b in blocks if b[6] == 0]
    text_blocks.sort(key=lambda b: (b[1], b[0]))
    return "\n".join(b[4].strip() for b in text_blocks if b[4].strip())


_BACKENDS: Dict[str, Callable[[fitz.Page], str]] = {
    "text": _extract_text_mode,
    "blocks": _extract_blocks_mode,
}


def extract_pdf_text(data: bytes, *, backend: str = "text") -> str:
    """
    Extract the text of every page, joined by newlines.

    Args:
        data:     Raw PDF bytes.
        backend:  "text" (default) or "blocks".

    Raises:
        ValueError:       unknown backend.
        ExtractionError:  PyMuPDF could not parse the document.
    """
    if backend not in _BACKENDS:
        raise ValueError(
            f"Unknown backend: {backend!r}. "
            f"Choose from: {', '.join(sorted(_BACKENDS))}"
        )
    extractor = _BACKENDS[backend]

    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            return "\n".join(extractor(doc[i]) for i in range(len(doc)))
    except Exception as e:
        raise ExtractionError(str(e) or type(e).__name__) from e
