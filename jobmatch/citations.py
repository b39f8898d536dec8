from typing import Any, List, Optional, Sequence
from urllib.parse import urlsplit

from .errors import MalformedResponseError
from .transcript import Citation, Role, Turn

FALLBACK_REPLY = "Sorry, I couldn't get a clear response."
SOURCES_HEADER = "**Sources:**"

_WEB_SCHEMES = ("http", "https")


def _hostname(uri: str) -> Optional[str]:
    try:
        return urlsplit(uri).hostname
    except ValueError:
        return None


def _is_web_link(uri: str) -> bool:
    """True for absolute http(s) URLs with a hostname; these are safe to render as links."""
    try:
        parts = urlsplit(uri)
        return parts.scheme.lower() in _WEB_SCHEMES and bool(parts.hostname)
    except ValueError:
        return False


def _first_candidate(response: dict) -> dict:
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        raise MalformedResponseError("response has no candidates")
    return candidates[0]


def _candidate_text(candidate: dict) -> str:
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        raise MalformedResponseError("candidate has no content parts")
    text = parts[0].get("text")
    if not isinstance(text, str) or not text:
        raise MalformedResponseError("first content part has no text")
    return text


def extract_citations(candidate: dict) -> List[Citation]:
    """Well-formed grounding attributions of a candidate, in API order.

    An attribution is kept only when its web uri and title are both
    non-empty strings and the uri is an http(s) URL with a hostname.
    """
    metadata = candidate.get("groundingMetadata")
    if not isinstance(metadata, dict):
        return []
    attributions = metadata.get("groundingAttributions")
    if not isinstance(attributions, list):
        return []

    citations = []
    for attribution in attributions:
        web = attribution.get("web") if isinstance(attribution, dict) else None
        if not isinstance(web, dict):
            continue
        uri, title = web.get("uri"), web.get("title")
        if not (isinstance(uri, str) and uri and isinstance(title, str) and title):
            continue
        if not _is_web_link(uri):
            continue
        citations.append(Citation(uri=uri, title=title))
    return citations


def format_citation_block(sources: Sequence[Citation]) -> str:
    """Numbered source list appended under a reply; empty when there are no sources."""
    if not sources:
        return ""
    lines = [f"[{i}] {s.title} ({_hostname(s.uri)})" for i, s in enumerate(sources, start=1)]
    return "\n\n" + SOURCES_HEADER + "\n" + "\n".join(lines)


def extract_reply(response: Any) -> Turn:
    """Build the assistant turn for a decoded generateContent response.

    A response of the wrong shape yields the fallback text with no sources.
    """
    try:
        if not isinstance(response, dict):
            raise MalformedResponseError("response is not an object")
        candidate = _first_candidate(response)
        text = _candidate_text(candidate)
    except MalformedResponseError:
        return Turn(role=Role.assistant, text=FALLBACK_REPLY)

    sources = extract_citations(candidate)
    return Turn(role=Role.assistant, text=text + format_citation_block(sources), sources=tuple(sources))


__all__ = ["FALLBACK_REPLY", "extract_citations", "format_citation_block", "extract_reply"]
