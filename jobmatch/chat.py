import asyncio
import logging
from typing import Callable, List, Optional, Tuple

from .citations import extract_reply
from .completion import CompletionClient, build_payload
from .config import Settings
from .errors import CompletionError, SessionClosedError
from .transcript import (
    ChatState,
    Turn,
    begin_exchange,
    complete_exchange,
    failure_turn,
    initial_state,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[ChatState], None]


class ChatSession:
    """Conversational assistant for one user session.

    Holds the transcript state and drives one completion request per user
    turn. Listeners registered with `subscribe` get every new state.
    """

    def __init__(self, settings: Settings, client: CompletionClient):
        self.settings = settings
        self.client = client
        self._state = initial_state(settings.assistant_greeting)
        self._listeners: List[StateListener] = []
        self._inflight: Optional[asyncio.Future] = None
        self._closed = False

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return self._state.turns

    @property
    def pending(self) -> bool:
        return self._state.pending

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: ChatState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("chat state listener failed")

    async def submit(self, message: str) -> Optional[Turn]:
        """Send one user message and wait for the assistant's reply.

        Blank messages are ignored and return None. Raises
        `ConversationBusyError` if a reply is still pending and
        `SessionClosedError` after `aclose`. Request failures do not
        propagate: they become the apology turn, which is returned.
        """
        text = (message or "").strip()
        if not text:
            return None
        if self._closed:
            raise SessionClosedError()

        self._set_state(begin_exchange(self._state, text))
        payload = build_payload(
            self._state.turns,
            self.settings.system_instruction,
            enable_search=self.settings.enable_search_grounding,
        )

        self._inflight = asyncio.ensure_future(self._request_reply(payload))
        try:
            reply = await self._inflight
        except asyncio.CancelledError:
            reply = failure_turn()
            self._set_state(complete_exchange(self._state, reply))
            if not self._closed:
                raise
            logger.info("chat request cancelled by session teardown")
            return reply
        finally:
            self._inflight = None

        self._set_state(complete_exchange(self._state, reply))
        return reply

    async def _request_reply(self, payload: dict) -> Turn:
        try:
            response = await self.client.generate(payload)
        except CompletionError as e:
            logger.warning("Completion API error: %s", e)
            return failure_turn()
        except Exception:
            logger.exception("Unexpected error during completion request")
            return failure_turn()
        return extract_reply(response)

    async def aclose(self) -> None:
        """Close the session and cancel any in-flight request."""
        self._closed = True
        inflight = self._inflight
        if inflight is not None and not inflight.done():
            inflight.cancel()

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["ChatSession", "StateListener"]
