"""Shared fixtures: settings for tests and a fake completion API."""

import httpx
import pytest
import pytest_asyncio

from jobmatch.completion import CompletionClient
from jobmatch.config import Settings


def make_gemini_response(text=None, attributions=None) -> dict:
    candidate = {"content": {"role": "model", "parts": [{"text": text}] if text is not None else []}}
    if attributions is not None:
        candidate["groundingMetadata"] = {
            "groundingAttributions": [{"web": a} for a in attributions],
        }
    return {"candidates": [candidate]}


class FakeGemini:
    """Records outbound requests and answers them with `responder`."""

    def __init__(self):
        self.requests = []
        self.responder = lambda request: httpx.Response(200, json=make_gemini_response("Here is some advice."))

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        analysis_delay_seconds=0,
        log_json=False,
        request_timeout_seconds=5,
    )


@pytest.fixture
def gemini_response():
    return make_gemini_response


@pytest.fixture
def fake_gemini() -> FakeGemini:
    return FakeGemini()


@pytest_asyncio.fixture
async def completion_client(settings, fake_gemini):
    http = httpx.AsyncClient(transport=fake_gemini.transport)
    client = CompletionClient(settings, http)
    yield client
    await http.aclose()
