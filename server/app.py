"""FastAPI application -- routes for the homework helper."""

import logging
import math
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from server.__version__ import __version__
from server.config import Settings
from server.dependencies import get_runtime, get_settings
from server.runtime import Runtime
from server.schemas import (
    AnswerResponse,
    AskRequest,
    AskResponse,
    CalculateRequest,
    CalculateResponse,
    ReindexResponse,
    SearchRequest,
    SearchResponse,
    StatusResponse,
)
from server.services import answer_service, calculator, index_service, topics_service
from server.services.answer_service import InputError

logger = logging.getLogger("homework")
index_logger = logging.getLogger("homework.index")


def _utc_ts() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan: no heavy work. Index and topics load lazily on first request."""
    logger.info("[%s] Startup: begin (no index load)", _utc_ts())
    yield
    logger.info("[%s] Shutdown: complete", _utc_ts())


app = FastAPI(title="Homework Helper", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Homework Assistant API (NO AI) running ✅"


# ---- Health (no dependencies, always fast) ----

@app.get("/health")
def health():
    """Minimal health check. No deps, no index load. Always returns immediately."""
    return {"ok": True}


# ---- Status ----

@app.get("/status", response_model=StatusResponse)
def status(
    settings: Settings = Depends(get_settings),
    runtime: Runtime = Depends(get_runtime),
):
    """What is indexed right now, per PDF."""
    return index_service.get_index_status(
        runtime.get_index(),
        settings.pdf_dir,
        settings.index_path,
    )


# ---- Resources ----

@app.get("/resources")
def resources(settings: Settings = Depends(get_settings)):
    """Grade -> subject -> topic names, straight from data/resources.json."""
    return topics_service.load_resources(settings.resources_path)


# ---- CAPS lookup ----

@app.post("/ask", response_model=AskResponse, response_model_exclude_none=True)
def ask(body: AskRequest, runtime: Runtime = Depends(get_runtime)):
    """CAPS topic table only. Grade and subject are required."""
    try:
        return answer_service.ask_caps(
            body.question, body.grade, body.subject, runtime.get_topics(),
        )
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ---- PDF index ----

@app.post("/pdf/reindex", response_model=ReindexResponse)
def pdf_reindex(runtime: Runtime = Depends(get_runtime)):
    """Rebuild the index from the PDF directory. Synchronous."""
    try:
        index = runtime.reindex()
    except OSError as e:
        index_logger.exception("Reindex failed for %s", runtime.paths.pdf_dir)
        current = runtime.get_index()
        return {
            "ok": False,
            "message": f"Reindex failed: {e.strerror or e}",
            "updatedAt": current.updated_at,
            "pdfCount": len(current.documents),
        }
    return {"ok": True, "updatedAt": index.updated_at, "pdfCount": len(index.documents)}


@app.post("/pdf/search", response_model=SearchResponse, response_model_exclude_none=True)
def pdf_search(
    body: SearchRequest,
    settings: Settings = Depends(get_settings),
    runtime: Runtime = Depends(get_runtime),
):
    """Raw keyword search across every indexed PDF (no grade/subject filter)."""
    try:
        return answer_service.search_textbooks(
            body.query, index=runtime.get_index(), top_n=settings.top_n,
        )
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ---- Answer (CAPS, then textbooks) ----

@app.post("/answer", response_model=AnswerResponse)
def answer(
    body: AskRequest,
    settings: Settings = Depends(get_settings),
    runtime: Runtime = Depends(get_runtime),
):
    try:
        result = answer_service.answer_question(
            body.question,
            body.grade,
            body.subject,
            index=runtime.get_index(),
            topics=runtime.get_topics(),
            top_n=settings.top_n,
        )
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.to_dict()


# ---- Calculator ----

@app.post("/calculate", response_model=CalculateResponse, response_model_exclude_none=True)
def calculate(body: CalculateRequest):
    """Evaluate a calculator expression. Bad input is ok=false, not an HTTP error."""
    try:
        result = calculator.compute(body.expression, degrees=body.degrees)
    except calculator.CalculatorError as e:
        return {"ok": False, "error": str(e)}
    if not math.isfinite(result):
        return {"ok": False, "error": "Math error"}
    return {"ok": True, "result": result}
