"""Tests for the Job Match AI FastAPI app."""

import httpx
import pytest
from fastapi.testclient import TestClient

from jobmatch.main import create_app
from jobmatch.recommender import MOCK_RECOMMENDATIONS
from jobmatch.transcript import FAILURE_REPLY


@pytest.fixture
def client(settings, fake_gemini):
    app = create_app(settings, transport=fake_gemini.transport)
    with TestClient(app) as c:
        yield c


def test_health_ok(client) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "app": "Job Match AI", "environment": "development"}


def test_dashboard_serves_html(client) -> None:
    r = client.get("/dashboard")
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert "Job Match AI" in r.text
    assert "Career Assistant" in r.text


def test_dashboard_chat_keeps_server_pending_state(client) -> None:
    html = client.get("/dashboard").text
    chat_handler = html[html.index('chatForm.addEventListener("submit"'):]
    assert "finally" not in chat_handler
    assert "setChatPending(data.pending)" in chat_handler


def test_new_session_starts_with_greeting(client, settings) -> None:
    r = client.get("/api/chat")
    assert r.status_code == 200
    data = r.json()
    assert data["pending"] is False
    assert data["turns"] == [{"role": "assistant", "text": settings.assistant_greeting, "sources": []}]
    assert settings.session_cookie_name in r.cookies


def test_chat_round_trip_keeps_session(client, fake_gemini, gemini_response) -> None:
    fake_gemini.responder = lambda request: httpx.Response(
        200,
        json=gemini_response(
            "Look at backend roles.",
            attributions=[{"uri": "https://jobs.example.com/backend", "title": "Backend jobs"}],
        ),
    )

    r = client.post("/api/chat", json={"message": "What fits SQL?"})
    assert r.status_code == 200
    data = r.json()
    assert data["pending"] is False
    assert len(data["turns"]) == 3
    assert data["turns"][1] == {"role": "user", "text": "What fits SQL?", "sources": []}
    assert data["reply"]["sources"] == [{"uri": "https://jobs.example.com/backend", "title": "Backend jobs"}]
    assert data["reply"]["text"].endswith("[1] Backend jobs (jobs.example.com)")

    r = client.post("/api/chat", json={"message": "And Python?"})
    assert len(r.json()["turns"]) == 5


def test_blank_chat_message_is_rejected(client, fake_gemini) -> None:
    r = client.post("/api/chat", json={"message": "   "})
    assert r.status_code == 422
    assert r.json() == {"error": "Please enter a message."}
    assert len(client.get("/api/chat").json()["turns"]) == 1
    assert fake_gemini.requests == []


def test_rejected_first_request_still_hands_out_session_cookie(client, settings) -> None:
    client.cookies.clear()
    store = client.app.state.sessions

    r = client.post("/api/chat", json={"message": ""})
    assert r.status_code == 422
    assert settings.session_cookie_name in r.cookies
    assert len(store) == 1

    r = client.post("/api/chat", json={"message": "  "})
    assert r.status_code == 422
    assert len(store) == 1


def test_upstream_failure_becomes_apology(client, fake_gemini) -> None:
    fake_gemini.responder = lambda request: httpx.Response(429, json={})
    r = client.post("/api/chat", json={"message": "hello"})
    assert r.status_code == 200
    assert r.json()["reply"] == {"role": "assistant", "text": FAILURE_REPLY, "sources": []}


def test_recommendations_from_skills_text(client) -> None:
    assert client.get("/api/recommendations").json() == {"pending": False, "result": None, "error": None}

    r = client.post("/api/recommendations", data={"skills": "Python, SQL"})
    assert r.status_code == 200
    result = r.json()["result"]
    assert result["labels"] == MOCK_RECOMMENDATIONS
    assert "Python, SQL" in result["combined_skills_summary"]

    assert client.get("/api/recommendations").json()["result"] == result


def test_recommendations_require_some_input(client) -> None:
    r = client.post("/api/recommendations", data={"skills": ""})
    assert r.status_code == 422
    assert r.json() == {"error": "Please enter skills or select a file to begin the analysis."}


def test_empty_analysis_replaces_previous_result_with_error(client) -> None:
    assert client.post("/api/recommendations", data={"skills": "Python"}).status_code == 200

    r = client.post("/api/recommendations", data={"skills": ""})
    assert r.status_code == 422

    assert client.get("/api/recommendations").json() == {
        "pending": False,
        "result": None,
        "error": "Please enter skills or select a file to begin the analysis.",
    }


def test_recommendations_with_pdf_use_file_name_only(client) -> None:
    files = {"resume_file": ("jane_doe.pdf", b"%PDF-1.4 not really parsed", "application/pdf")}
    r = client.post("/api/recommendations", data={"skills": ""}, files=files)
    assert r.status_code == 200
    assert "jane_doe.pdf" in r.json()["result"]["combined_skills_summary"]


def test_recommendations_reject_non_pdf(client) -> None:
    files = {"resume_file": ("notes.txt", b"hello", "text/plain")}
    r = client.post("/api/recommendations", data={"skills": "Python"}, files=files)
    assert r.status_code == 422
    assert r.json() == {"error": "File must be a PDF"}


def test_sessions_are_isolated(client, settings) -> None:
    client.post("/api/chat", json={"message": "remember me"})
    assert len(client.get("/api/chat").json()["turns"]) == 3

    client.cookies.clear()
    assert len(client.get("/api/chat").json()["turns"]) == 1


def test_delete_session_starts_fresh(client) -> None:
    client.post("/api/chat", json={"message": "hi"})
    r = client.delete("/api/session")
    assert r.status_code == 200
    assert r.json() == {"closed": True}

    client.cookies.clear()
    assert len(client.get("/api/chat").json()["turns"]) == 1
