"""Tests for /ask, /answer, /resources and /calculate endpoints."""

import json
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient
from server.app import app
from server.config import Settings
from server.dependencies import get_settings
from server.services.index_service import IndexedDocument, PdfIndex, save_index
from server.services.metadata_detect import DocumentMetadata, Subject

PHOTO = (
    "Photosynthesis is the process by which green plants convert light energy "
    "into chemical energy stored in glucose."
)

TOPICS = [
    {"grade": 9, "subject": "Natural Sciences", "keywords": ["mitosis"],
     "topic": "Cell Division: Mitosis", "explanation": "Mitosis makes two identical cells.",
     "video": "https://example.org/mitosis"},
]

RESOURCES = {"9": {"Natural Sciences": ["Cells", "Cell division: mitosis"]}}


def _settings(tmp: Path) -> Settings:
    """Temp settings with a one-book index, topic table and resources."""
    settings = Settings(
        pdf_dir=tmp / "pdfs",
        index_path=tmp / "pdf_index.json",
        topics_path=tmp / "topics.json",
        resources_path=tmp / "resources.json",
    )
    text = "Unit 2 Plants. " + PHOTO + " Plants release oxygen into the air during the day."
    save_index(
        PdfIndex(
            updated_at="2026-01-01T00:00:00.000Z",
            documents=(IndexedDocument(
                "Grade7_NST.pdf", text, len(text),
                DocumentMetadata(7, Subject.NATURAL_SCIENCES),
            ),),
        ),
        settings.index_path,
    )
    settings.topics_path.write_text(json.dumps(TOPICS), encoding="utf-8")
    settings.resources_path.write_text(json.dumps(RESOURCES), encoding="utf-8")
    return settings


def _client(settings: Settings) -> TestClient:
    app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


# ============================================================================
# /ask
# ============================================================================

def test_ask_missing_question_is_400():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            client = _client(_settings(Path(tmp)))
            resp = client.post("/ask", json={"grade": 9, "subject": "Natural Sciences"})
            assert resp.status_code == 400
            assert resp.json()["detail"] == "Question is required"
        finally:
            app.dependency_overrides.clear()


def test_ask_missing_grade_is_400():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            client = _client(_settings(Path(tmp)))
            resp = client.post("/ask", json={"question": "what is mitosis"})
            assert resp.status_code == 400
            assert resp.json()["detail"] == "Grade and subject are required"
        finally:
            app.dependency_overrides.clear()


def test_ask_hit_and_miss():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            client = _client(_settings(Path(tmp)))
            hit = client.post("/ask", json={
                "question": "What is mitosis?", "grade": "9", "subject": "Natural Sciences",
            }).json()
            assert hit["found"] is True
            assert hit["topic"] == "Cell Division: Mitosis"
            assert hit["video"] == "https://example.org/mitosis"

            miss = client.post("/ask", json={
                "question": "What is meiosis?", "grade": 9, "subject": "Natural Sciences",
            }).json()
            assert miss == {"found": False, "message": "No CAPS match found yet. Try 'Search Textbooks' below."}
        finally:
            app.dependency_overrides.clear()


# ============================================================================
# /answer
# ============================================================================

def test_answer_missing_question_is_400():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            client = _client(_settings(Path(tmp)))
            resp = client.post("/answer", json={"question": "", "grade": 7})
            assert resp.status_code == 400
        finally:
            app.dependency_overrides.clear()


def test_answer_uses_caps_first():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            client = _client(_settings(Path(tmp)))
            body = client.post("/answer", json={
                "question": "explain mitosis", "grade": 9, "subject": "Natural Sciences",
            }).json()
            assert body["ok"] is True
            assert body["found"] is True
            assert body["source"] == "caps"
            assert body["title"] == "Cell Division: Mitosis"
            assert body["video"] == "https://example.org/mitosis"
        finally:
            app.dependency_overrides.clear()


def test_answer_from_textbook():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            client = _client(_settings(Path(tmp)))
            resp = client.post("/answer", json={
                "question": "how do plants make glucose from light",
                "grade": "7",
                "subject": "Natural Sciences",
            })
            assert resp.status_code == 200
            body = resp.json()
            assert body["found"] is True
            assert body["source"] == "textbook"
            assert f"• {PHOTO}" in body["answer"].split("\n")
        finally:
            app.dependency_overrides.clear()


def test_answer_wrong_subject_is_friendly_miss():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            client = _client(_settings(Path(tmp)))
            resp = client.post("/answer", json={
                "question": "how do plants make glucose from light",
                "grade": 7,
                "subject": "Mathematics",
            })
            assert resp.status_code == 200
            body = resp.json()
            assert body["ok"] is True
            assert body["found"] is False
            assert "don't have a textbook loaded" in body["answer"]
        finally:
            app.dependency_overrides.clear()


# ============================================================================
# /resources
# ============================================================================

def test_resources():
    with tempfile.TemporaryDirectory() as tmp:
        try:
            client = _client(_settings(Path(tmp)))
            assert client.get("/resources").json() == RESOURCES
        finally:
            app.dependency_overrides.clear()


# ============================================================================
# /calculate
# ============================================================================

def test_calculate():
    client = TestClient(app)
    assert client.post("/calculate", json={"expression": "2+3*4"}).json() == {"ok": True, "result": 14.0}
    assert client.post("/calculate", json={"expression": "sin(30)"}).json()["result"] == 0.5
    rad = client.post("/calculate", json={"expression": "cos(0)", "degrees": False}).json()
    assert rad["result"] == 1.0


def test_calculate_errors_are_ok_false():
    client = TestClient(app)
    body = client.post("/calculate", json={"expression": "(1+2"}).json()
    assert body == {"ok": False, "error": "Mismatched parentheses"}
    assert client.post("/calculate", json={"expression": "1/0"}).json() == {"ok": False, "error": "Math error"}


def test_calculate_requires_expression():
    client = TestClient(app)
    assert client.post("/calculate", json={}).status_code == 422
