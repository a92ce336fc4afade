"""Pydantic request/response schemas for the homework helper API."""

from typing import List, Optional, Union
from pydantic import BaseModel, Field


# ---- Ask / Answer ----
# Fields are optional at the schema level so a missing question maps to the
# service's 400 message instead of a 422 validation error.

class AskRequest(BaseModel):
    question: Optional[str] = Field(default=None, max_length=2000)
    grade: Optional[Union[int, str]] = None
    subject: Optional[str] = None


class AskResponse(BaseModel):
    found: bool
    message: Optional[str] = None
    topic: Optional[str] = None
    explanation: Optional[str] = None
    video: Optional[str] = None


class AnswerResponse(BaseModel):
    ok: bool = True
    found: bool
    title: str
    answer: str
    video: Optional[str] = None
    source: Optional[str] = None


# ---- PDF index ----

class ReindexResponse(BaseModel):
    ok: bool = True
    updatedAt: Optional[str] = None
    pdfCount: int
    message: Optional[str] = None


class IndexedDocumentInfo(BaseModel):
    file: str
    chars: int
    grade: Optional[int] = None
    subject: Optional[str] = None


class StatusResponse(BaseModel):
    ok: bool
    pdf_dir: str
    index_path: str
    updatedAt: Optional[str] = None
    pdf_count: int
    documents: List[IndexedDocumentInfo]


# ---- PDF search ----

class SearchRequest(BaseModel):
    query: Optional[str] = Field(default=None, max_length=2000)


class SearchHit(BaseModel):
    file: str
    score: int
    snippet: str


class SearchResponse(BaseModel):
    ok: bool
    message: Optional[str] = None
    updatedAt: Optional[str] = None
    keywords: Optional[List[str]] = None
    results: Optional[List[SearchHit]] = None


# ---- Calculator ----

class CalculateRequest(BaseModel):
    expression: str = Field(..., max_length=500)
    degrees: bool = True


class CalculateResponse(BaseModel):
    ok: bool
    result: Optional[float] = None
    error: Optional[str] = None
