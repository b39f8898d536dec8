import logging
from typing import Any, Dict, Iterable, Optional

import httpx

from .config import Settings
from .errors import TransportError
from .transcript import Role, Turn

logger = logging.getLogger(__name__)

# The completion API names the assistant side "model"
_WIRE_ROLES = {Role.user: "user", Role.assistant: "model"}


def build_payload(turns: Iterable[Turn], system_instruction: str, enable_search: bool = True) -> Dict[str, Any]:
    """Translate the whole transcript into one generateContent request body.

    Every turn is sent, oldest first. There is no windowing, so the request
    grows with the conversation for as long as the session lives.
    """
    payload: Dict[str, Any] = {
        "contents": [
            {"role": _WIRE_ROLES[t.role], "parts": [{"text": t.text}]}
            for t in turns
        ],
        "systemInstruction": {"parts": [{"text": system_instruction}]},
    }
    if enable_search:
        payload["tools"] = [{"google_search": {}}]
    return payload


class CompletionClient:
    """Thin async client for the Gemini generateContent endpoint.

    One call is one POST: no retries, no streaming. Anything other than a
    2xx JSON object comes back as `TransportError`.
    """

    def __init__(self, settings: Settings, http: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=settings.request_timeout_seconds)

    async def generate(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        params = {"key": self.settings.gemini_api_key} if self.settings.gemini_api_key else None
        logger.debug(
            "POST generateContent model=%s contents=%d",
            self.settings.gemini_model,
            len(payload.get("contents", [])),
        )
        try:
            response = await self.http.post(
                self.settings.generate_content_url,
                params=params,
                json=payload,
                timeout=self.settings.request_timeout_seconds,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"completion request timed out after {self.settings.request_timeout_seconds}s") from e
        except httpx.HTTPError as e:
            raise TransportError(f"completion request failed: {e.__class__.__name__}") from e

        if not response.is_success:
            raise TransportError(f"API returned status {response.status_code}", status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError("API returned a body that is not JSON", status_code=response.status_code) from e
        if not isinstance(body, dict):
            raise TransportError("API returned JSON that is not an object", status_code=response.status_code)
        return body

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()


__all__ = ["build_payload", "CompletionClient"]
