import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from pydantic import BaseModel

from .errors import AnalysisBusyError, SimulatedProcessingError, ValidationError

logger = logging.getLogger(__name__)

# Roles spanning intern to senior architect level
MOCK_RECOMMENDATIONS = [
    "1. Software Development Intern (Python/Database)",
    "2. Junior Backend Developer (SQL/MongoDB)",
    "3. Mid-Level Python Software Engineer",
    "4. Data Engineer (Database & ETL Focus)",
    "5. Senior Backend Engineer (Distributed Systems)",
    "6. Database Architect (MongoDB/SQL Optimization)",
]

MOCK_SKILLS_FROM_RESUME = (
    "Python, SQL, MongoDB, Database Management, CRUD application logic, Teamwork, Communication."
)

EMPTY_INPUT_MESSAGE = "Please enter skills or select a file to begin the analysis."


@dataclass(frozen=True)
class FileHandle:
    """A user-selected resume file. Only the name is ever consumed."""

    name: str


class RecommendationResult(BaseModel):
    labels: List[str]
    combined_skills_summary: str


def summarize_inputs(skills_text: str, file: Optional[FileHandle]) -> str:
    """Describe which inputs fed the analysis: textbox, resume file, or both."""
    resume_part = MOCK_SKILLS_FROM_RESUME
    if file is not None:
        resume_part = f"[From Resume ({file.name}): {MOCK_SKILLS_FROM_RESUME}]"
    if skills_text:
        if file is None:
            resume_part = f"[From Resume: {MOCK_SKILLS_FROM_RESUME}]"
        return f"[From Textbox: {skills_text}] + {resume_part}"
    return resume_part


class RecommendationFlow:
    """Stand-in for a real resume analysis service.

    Waits a fixed delay and returns the same role list for every input.
    At most one analysis runs at a time.
    """

    def __init__(self, delay_seconds: float = 2.0, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self.pending = False
        self.result: Optional[RecommendationResult] = None
        self.error: Optional[str] = None

    async def analyze(self, skills_text: str, file: Optional[FileHandle] = None) -> RecommendationResult:
        text = (skills_text or "").strip()
        if not text and file is None:
            if not self.pending:
                self.result = None
                self.error = EMPTY_INPUT_MESSAGE
            raise ValidationError(EMPTY_INPUT_MESSAGE)
        if self.pending:
            raise AnalysisBusyError()

        self.pending = True
        self.result = None
        self.error = None
        try:
            await self._sleep(self.delay_seconds)
            result = RecommendationResult(
                labels=list(MOCK_RECOMMENDATIONS),
                combined_skills_summary=summarize_inputs(text, file),
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception("Processing error during simulated analysis")
            err = SimulatedProcessingError()
            self.error = str(err)
            raise err from e
        finally:
            self.pending = False

        self.result = result
        logger.info("analysis finished text=%s file=%s", bool(text), file.name if file else None)
        return result


__all__ = [
    "MOCK_RECOMMENDATIONS",
    "MOCK_SKILLS_FROM_RESUME",
    "EMPTY_INPUT_MESSAGE",
    "FileHandle",
    "RecommendationResult",
    "summarize_inputs",
    "RecommendationFlow",
]
