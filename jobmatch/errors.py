"""Error taxonomy shared by the chat and recommendation flows.

Every error is terminal for the single operation that raised it; none of
them leaves a transcript or recommendation state half-updated.
"""


class JobMatchError(Exception):
    """Base class for all Job Match AI errors."""

    status_code = 500


class ValidationError(JobMatchError):
    """Empty or unacceptable user input, reported before any async work starts."""

    status_code = 422


class ConversationBusyError(JobMatchError):
    """A chat message was submitted while a reply is still pending."""

    status_code = 409

    def __init__(self, message: str = "A reply is still pending. Please wait for it before sending another message."):
        super().__init__(message)


class AnalysisBusyError(JobMatchError):
    """An analysis was requested while another one is still running."""

    status_code = 409

    def __init__(self, message: str = "An analysis is already in progress."):
        super().__init__(message)


class SessionClosedError(JobMatchError):
    """The session has been torn down and accepts no further input."""

    status_code = 410

    def __init__(self, message: str = "This session has been closed."):
        super().__init__(message)


class CompletionError(JobMatchError):
    """Base class for failures talking to the completion API."""

    status_code = 502


class TransportError(CompletionError):
    """Non-2xx status, network failure, timeout, or a body that is not JSON."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.http_status = status_code


class MalformedResponseError(CompletionError):
    """The response parsed as JSON but did not have the expected shape."""


class SimulatedProcessingError(JobMatchError):
    """The mock analysis pipeline failed while simulating work."""

    def __init__(self, message: str = "An error occurred during the simulated analysis."):
        super().__init__(message)


__all__ = [
    "JobMatchError",
    "ValidationError",
    "ConversationBusyError",
    "AnalysisBusyError",
    "SessionClosedError",
    "CompletionError",
    "TransportError",
    "MalformedResponseError",
    "SimulatedProcessingError",
]
