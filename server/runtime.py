from __future__ import annotations

import threading
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

from extractors.pdf_backends import extract_pdf_text
from server.services import index_service
from server.services.index_service import PdfIndex
from server.services.topics_service import Topic, load_topics


@dataclass
class RuntimePaths:
    pdf_dir: Path
    index_path: Path
    topics_path: Path


class Runtime:
    """
    Process-wide runtime cache.

    - PDF index: loaded lazily from disk; replaced wholesale on reindex
    - CAPS topic table: loaded lazily, read-only

    Readers grab the current PdfIndex reference once per request. Reindex
    builds the new index completely before swapping the reference, so a
    reader sees either the old or the new index, never a partial one.
    """

    def __init__(self, paths: RuntimePaths, pdf_backend: str = "text"):
        self.paths = paths
        self.pdf_backend = pdf_backend

        self._index_lock = threading.Lock()
        self._reindex_lock = threading.Lock()
        self._topics_lock = threading.Lock()

        self._index: Optional[PdfIndex] = None
        self._topics: Optional[Tuple[Topic, ...]] = None

    # ----------------------------
    # Index
    # ----------------------------
    def get_index(self) -> PdfIndex:
        """Current index snapshot, loading from disk on first use."""
        index = self._index
        if index is not None:
            return index
        with self._index_lock:
            if self._index is None:
                self._index = index_service.load_index(self.paths.index_path)
            return self._index

    def reindex(self) -> PdfIndex:
        """Rebuild from the PDF directory, persist, then swap the snapshot."""
        extract = partial(extract_pdf_text, backend=self.pdf_backend)
        with self._reindex_lock:
            index = index_service.reindex(self.paths.pdf_dir, self.paths.index_path, extract)
            with self._index_lock:
                self._index = index
        return index

    # ----------------------------
    # Topics
    # ----------------------------
    def get_topics(self) -> Tuple[Topic, ...]:
        if self._topics is not None:
            return self._topics
        with self._topics_lock:
            if self._topics is None:
                self._topics = load_topics(self.paths.topics_path)
        return self._topics


if TYPE_CHECKING:
    from server.config import Settings


def runtime_from_settings(settings: "Settings") -> Runtime:
    """Build Runtime from Settings. Used by get_runtime dependency."""
    paths = RuntimePaths(
        pdf_dir=Path(settings.pdf_dir),
        index_path=Path(settings.index_path),
        topics_path=Path(settings.topics_path),
    )
    return Runtime(paths, pdf_backend=settings.pdf_backend)
