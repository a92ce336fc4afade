"""Configuration for the homework helper API server."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


@dataclass
class Settings:
    """
    All filesystem paths and knobs the server needs.

    Defaults resolve relative to the project root.
    Every field is overridable at construction for testing.
    """
    pdf_dir: Optional[Path] = None
    index_path: Optional[Path] = None
    topics_path: Optional[Path] = None
    resources_path: Optional[Path] = None
    cors_origins: Optional[List[str]] = None
    top_n: int = 3
    pdf_backend: str = "text"

    def __post_init__(self):
        project_root = Path(__file__).resolve().parent.parent

        if self.pdf_dir is None:
            env_pdf = os.environ.get("PDF_DIR")
            self.pdf_dir = Path(env_pdf) if env_pdf else project_root / "pdfs"
        self.pdf_dir = Path(self.pdf_dir)

        if self.index_path is None:
            env_index = os.environ.get("PDF_INDEX_FILE")
            self.index_path = Path(env_index) if env_index else project_root / "pdf_index.json"
        self.index_path = Path(self.index_path)

        if self.topics_path is None:
            env_topics = os.environ.get("TOPICS_FILE")
            self.topics_path = Path(env_topics) if env_topics else project_root / "data" / "topics.json"
        self.topics_path = Path(self.topics_path)

        if self.resources_path is None:
            env_res = os.environ.get("RESOURCES_FILE")
            self.resources_path = Path(env_res) if env_res else project_root / "data" / "resources.json"
        self.resources_path = Path(self.resources_path)

        if self.cors_origins is None:
            env_origins = os.environ.get("CORS_ORIGINS", "*")
            self.cors_origins = [o.strip() for o in env_origins.split(",") if o.strip()]

        env_top_n = os.environ.get("RETRIEVAL_TOP_N")
        if env_top_n is not None:
            try:
                self.top_n = int(env_top_n)
            except ValueError:
                pass

        if os.environ.get("PDF_BACKEND"):
            self.pdf_backend = os.environ["PDF_BACKEND"]
