from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Job Match AI"
    environment: str = "development"
    host: str = "127.0.0.1"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Completion API (Gemini generateContent)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash-preview-09-2025"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    request_timeout_seconds: float = 30.0
    enable_search_grounding: bool = True

    # Assistant persona
    system_instruction: str = (
        "You are a helpful career guidance chatbot embedded in a Job Match AI application. "
        "You assist users with questions about their resume analysis, job roles, and career "
        "development. Be concise and use Google Search for up-to-date, real-time information."
    )
    assistant_greeting: str = (
        "Hello! I'm Job Match AI's assistant. Ask me anything about career paths, "
        "job roles, or resume tips."
    )

    # Mock recommendation flow
    analysis_delay_seconds: float = 2.0

    # Sessions
    session_cookie_name: str = "jobmatch_session"
    max_sessions: int = 1000

    cors_allow_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def generate_content_url(self) -> str:
        return f"{self.gemini_base_url.rstrip('/')}/models/{self.gemini_model}:generateContent"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
