import io
import os

import PyPDF2
import pytest

from mentor.config import UPLOADS_DIR
from mentor.services import ai
from mentor.services.resume import build_resume_prompt, extract_text


@pytest.fixture
def captured_prompts(monkeypatch):
    prompts = []

    async def fake_generate_text(prompt, **kwargs):
        prompts.append(prompt)
        return "OVERALL SCORE: 72/100"

    monkeypatch.setattr(ai, "generate_text", fake_generate_text)
    return prompts


def _blank_pdf() -> bytes:
    writer = PyPDF2.PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def test_extract_text() -> None:
    assert extract_text(b"Jane Doe\nPython developer", ".txt") == "Jane Doe\nPython developer"
    assert extract_text(b"binary", ".docx") is None
    assert extract_text(_blank_pdf(), ".pdf").strip() == ""
    assert extract_text(b"not a pdf", ".pdf") is None


def test_prompt_mentions_word_documents_without_text() -> None:
    prompt = build_resume_prompt("cv.docx", None)
    assert "Word document" in prompt
    assert "Resume content" not in prompt


def test_analyze_txt_resume(client, auth_headers, captured_prompts) -> None:
    resp = client.post(
        "/api/resume/analyze",
        files={"file": ("my resume.txt", b"Jane Doe\nSkills: Python, FastAPI", "text/plain")},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["analysis"] == "OVERALL SCORE: 72/100"
    assert "Skills: Python, FastAPI" in captured_prompts[0]

    relative = data["file_url"].split("/uploads/", 1)[1]
    assert relative.startswith("resumes/")
    assert relative.endswith("-my_resume.txt")
    assert os.path.exists(os.path.join(UPLOADS_DIR, *relative.split("/")))


def test_analyze_rejects_other_types(client, auth_headers, captured_prompts) -> None:
    resp = client.post(
        "/api/resume/analyze",
        files={"file": ("photo.png", b"\x89PNG", "image/png")},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert captured_prompts == []


def test_analyze_rejects_large_files(client, auth_headers, captured_prompts) -> None:
    resp = client.post(
        "/api/resume/analyze",
        files={"file": ("cv.txt", b"a" * (10 * 1024 * 1024 + 1), "text/plain")},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_analyze_requires_auth(client) -> None:
    resp = client.post("/api/resume/analyze", files={"file": ("cv.txt", b"hi", "text/plain")})
    assert resp.status_code == 401
