"""
Textbook PDF index: build, persist, load.

One flat JSON file holds the whole index:

  {"updatedAt": "...Z", "index": [{"file", "text", "chars", "meta"}, ...]}

The index is rebuilt wholesale from the PDF directory (no incremental
update). A missing or corrupt file loads as an empty index so the service
stays queryable.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from extractors.pdf_backends import ExtractionError, extract_pdf_text
from server.services.metadata_detect import DocumentMetadata, detect_meta
from server.services.text_clean import clean_text

logger = logging.getLogger("homework.index")

Extractor = Callable[[bytes], str]


@dataclass(frozen=True)
class IndexedDocument:
    file_id: str
    text: str
    chars: int
    meta: DocumentMetadata = field(default_factory=DocumentMetadata)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file_id,
            "text": self.text,
            "chars": self.chars,
            "meta": self.meta.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexedDocument":
        text = data.get("text") or ""
        if not isinstance(text, str):
            raise ValueError("'text' must be a string")
        return cls(
            file_id=str(data["file"]),
            text=text,
            chars=int(data.get("chars", len(text))),
            meta=DocumentMetadata.from_dict(data.get("meta")),
        )


@dataclass(frozen=True)
class PdfIndex:
    updated_at: Optional[str] = None
    documents: Tuple[IndexedDocument, ...] = ()

    @classmethod
    def empty(cls) -> "PdfIndex":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.documents

    def to_dict(self) -> Dict[str, Any]:
        return {
            "updatedAt": self.updated_at,
            "index": [doc.to_dict() for doc in self.documents],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PdfIndex":
        entries = data.get("index") or []
        if not isinstance(entries, list):
            raise ValueError("'index' must be a list")
        updated_at = data.get("updatedAt")
        if updated_at is not None and not isinstance(updated_at, str):
            raise ValueError("'updatedAt' must be a string")
        return cls(
            updated_at=updated_at,
            documents=tuple(IndexedDocument.from_dict(e) for e in entries),
        )


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def list_pdfs(pdf_dir: Path) -> List[Path]:
    """PDF files (any-case .pdf suffix) directly under pdf_dir, sorted by name."""
    return sorted(
        p for p in Path(pdf_dir).iterdir()
        if p.is_file() and p.suffix.lower() == ".pdf"
    )


def index_document(path: Path, extract: Extractor = extract_pdf_text) -> IndexedDocument:
    """Extract, normalize and tag one PDF. Raises ExtractionError on failure."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ExtractionError(str(e)) from e
    text = clean_text(extract(data))
    return IndexedDocument(
        file_id=path.name,
        text=text,
        chars=len(text),
        meta=detect_meta(path.name),
    )


def build_index(pdf_dir: Path, extract: Extractor = extract_pdf_text) -> PdfIndex:
    """
    Scan pdf_dir and extract every PDF.

    Creates pdf_dir if missing. A file that fails extraction is logged and
    skipped; the rest are still indexed.
    """
    pdf_dir = Path(pdf_dir)
    pdf_dir.mkdir(parents=True, exist_ok=True)

    documents: List[IndexedDocument] = []
    for path in list_pdfs(pdf_dir):
        try:
            doc = index_document(path, extract)
        except ExtractionError as e:
            logger.warning("Failed to index %s: %s", path.name, e)
            continue
        documents.append(doc)
        logger.info("Indexed PDF: %s (%d chars)", doc.file_id, doc.chars)

    return PdfIndex(updated_at=_utc_now_iso(), documents=tuple(documents))


def save_index(index: PdfIndex, index_path: Path) -> None:
    """Write the index JSON atomically via .tmp then rename."""
    path = Path(index_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(index.to_dict(), f, ensure_ascii=False, indent=2)
    tmp.replace(path)


def load_index(index_path: Path) -> PdfIndex:
    """Load the persisted index; empty index on missing or unreadable file."""
    path = Path(index_path)
    if not path.exists():
        return PdfIndex.empty()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return PdfIndex.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Ignoring unreadable index %s: %s", path, e)
        return PdfIndex.empty()


def reindex(
    pdf_dir: Path,
    index_path: Path,
    extract: Extractor = extract_pdf_text,
) -> PdfIndex:
    """Full rebuild from pdf_dir, persisted to index_path."""
    index = build_index(pdf_dir, extract)
    save_index(index, index_path)
    return index


def get_index_status(index: PdfIndex, pdf_dir: Path, index_path: Path) -> Dict[str, Any]:
    """Cheap summary of the in-memory index for first-run UX."""
    return {
        "ok": True,
        "pdf_dir": str(pdf_dir),
        "index_path": str(index_path),
        "updatedAt": index.updated_at,
        "pdf_count": len(index.documents),
        "documents": [
            {
                "file": doc.file_id,
                "chars": doc.chars,
                "grade": doc.meta.grade,
                "subject": doc.meta.subject.value if doc.meta.subject else None,
            }
            for doc in index.documents
        ],
    }
