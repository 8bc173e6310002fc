import io

import fitz
import pytest
from fastapi.testclient import TestClient


def _scores(tech=80, exp=70, analytic=60, comm=50):
    return {
        "technicalSkills": tech,
        "practicalExperience": exp,
        "analyticalThinking": analytic,
        "communicationEvidence": comm,
    }


@pytest.fixture
def model_output():
    """Factory for a screening payload shaped like the model's JSON output."""

    def make(ids=("1", "2"), top=None, **overrides):
        evaluations = []
        for i, rid in enumerate(ids):
            base = 85 - 10 * i
            evaluations.append(
                {
                    "resumeId": rid,
                    "scores": _scores(base, base - 5, base - 10, base - 15),
                    "totalScore": base - 4,
                    "strengths": ["Built Tableau dashboards for sales ops"],
                    "gaps": ["No statistical testing mentioned"],
                    "justification": "Resume cites 'automated weekly SQL reporting'.",
                }
            )
        payload = {
            "evaluations": evaluations,
            "topCandidates": list(ids) if top is None else top,
            "fairnessCheck": "Names, schools and graduation years were ignored.",
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def fake_post(monkeypatch):
    """Patch requests.post; returns a list that records every call."""

    def install(module, response=None, exc=None):
        calls = []

        def post(url, headers=None, json=None, timeout=None, **kwargs):
            calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
            if exc is not None:
                raise exc
            return response

        monkeypatch.setattr(module.requests, "post", post)
        return calls

    return install


@pytest.fixture
def make_pdf():
    def make(*pages):
        doc = fitz.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text)
        data = doc.tobytes()
        doc.close()
        return data

    return make


@pytest.fixture
def make_docx():
    import docx

    def make(paragraphs, table_rows=()):
        document = docx.Document()
        for p in paragraphs:
            document.add_paragraph(p)
        if table_rows:
            table = document.add_table(rows=len(table_rows), cols=len(table_rows[0]))
            for r, row in enumerate(table_rows):
                for c, value in enumerate(row):
                    table.cell(r, c).text = value
        buf = io.BytesIO()
        document.save(buf)
        return buf.getvalue()

    return make


@pytest.fixture
def client(tmp_path, monkeypatch):
    """FastAPI TestClient with an isolated data directory and no real API keys."""
    monkeypatch.setenv("BASE_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LLM_PROVIDER", "gemini")
    monkeypatch.setenv("GEMINI_API_KEY", "")
    monkeypatch.setenv("GROQ_API_KEY", "")

    from app import app

    with TestClient(app) as c:
        yield c
