"""Chat transcript as immutable data plus transition functions.

A `ChatState` is either idle (`pending=False`) or awaiting exactly one
reply (`pending=True`). Transitions never edit or drop earlier turns; they
return a new state whose `turns` extend the old ones by one.
"""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict

from .errors import ConversationBusyError

FAILURE_REPLY = "Sorry, I hit an error connecting to the intelligence engine. Please try again."


class Role(str, Enum):
    user = "user"
    assistant = "assistant"


class Citation(BaseModel):
    model_config = ConfigDict(frozen=True)

    uri: str
    title: str


class Turn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    text: str
    sources: Tuple[Citation, ...] = ()


class ChatState(BaseModel):
    model_config = ConfigDict(frozen=True)

    turns: Tuple[Turn, ...] = ()
    pending: bool = False


def initial_state(greeting: str) -> ChatState:
    """Fresh session state seeded with the assistant greeting."""
    return ChatState(turns=(Turn(role=Role.assistant, text=greeting),))


def failure_turn() -> Turn:
    return Turn(role=Role.assistant, text=FAILURE_REPLY)


def begin_exchange(state: ChatState, text: str) -> ChatState:
    """Idle -> AwaitingReply: append the user's turn."""
    if state.pending:
        raise ConversationBusyError()
    user_turn = Turn(role=Role.user, text=text)
    return ChatState(turns=state.turns + (user_turn,), pending=True)


def complete_exchange(state: ChatState, reply: Turn) -> ChatState:
    """AwaitingReply -> Idle: append the assistant's reply."""
    if not state.pending:
        raise RuntimeError("no exchange in progress")
    if reply.role is not Role.assistant:
        raise ValueError("reply must be an assistant turn")
    return ChatState(turns=state.turns + (reply,), pending=False)


def fail_exchange(state: ChatState) -> ChatState:
    """AwaitingReply -> Idle: append the fixed apology turn."""
    return complete_exchange(state, failure_turn())


__all__ = [
    "FAILURE_REPLY",
    "Role",
    "Citation",
    "Turn",
    "ChatState",
    "initial_state",
    "failure_turn",
    "begin_exchange",
    "complete_exchange",
    "fail_exchange",
]
