import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, File, Form, Request, Response, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from jobmatch.completion import CompletionClient
from jobmatch.config import Settings, get_settings
from jobmatch.dashboard import render_dashboard
from jobmatch.errors import JobMatchError, ValidationError
from jobmatch.log import configure_logging, set_session_id
from jobmatch.recommender import FileHandle
from jobmatch.sessions import SessionStore, UserSession

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: str = ""


def _chat_snapshot(session: UserSession) -> dict:
    state = session.chat.state
    return {
        "turns": [t.model_dump(mode="json") for t in state.turns],
        "pending": state.pending,
    }


def _recommendation_snapshot(session: UserSession) -> dict:
    flow = session.recommendations
    return {
        "pending": flow.pending,
        "result": flow.result.model_dump() if flow.result is not None else None,
        "error": flow.error,
    }


def _set_session_cookie(response: Response, settings: Settings, session_id: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        session_id,
        httponly=True,
        samesite="lax",
    )


async def current_session(request: Request, response: Response) -> UserSession:
    """Resolve (or start) the caller's session from its cookie.

    A newly started session is remembered on `request.state` so error
    responses can hand out its cookie as well.
    """
    settings: Settings = request.app.state.settings
    store: SessionStore = request.app.state.sessions
    sid = request.cookies.get(settings.session_cookie_name)
    session = await store.get_or_create(sid)
    if session.session_id != sid:
        request.state.new_session_id = session.session_id
        _set_session_cookie(response, settings, session.session_id)
    set_session_id(session.session_id)
    return session


def create_app(settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """Build the application.

    `transport` is handed to the outbound httpx client, which lets tests
    stand in for the completion API.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level, json_logs=settings.log_json)
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; chat requests will likely be rejected")
        http = httpx.AsyncClient(transport=transport, timeout=settings.request_timeout_seconds)
        client = CompletionClient(settings, http)
        app.state.sessions = SessionStore(settings, client)
        logger.info("%s started environment=%s", settings.app_name, settings.environment)
        yield
        await app.state.sessions.aclose()
        await http.aclose()
        logger.info("%s stopped", settings.app_name)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings

    # Basic CORS configuration for local dev; tighten in production
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(JobMatchError)
    async def job_match_error_handler(request: Request, exc: JobMatchError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.__class__.__name__, request.method, request.url.path, exc)
        response = JSONResponse(status_code=exc.status_code, content={"error": str(exc)})
        new_session_id = getattr(request.state, "new_session_id", None)
        if new_session_id:
            _set_session_cookie(response, settings, new_session_id)
        return response

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        Simple health check endpoint.
        """
        return {"status": "ok", "app": settings.app_name, "environment": settings.environment}

    @app.get("/", tags=["root"])
    def root() -> dict:
        return {"message": f"{settings.app_name} API", "dashboard": "/dashboard"}

    @app.get("/api/chat", tags=["chat"])
    def get_chat(session: UserSession = Depends(current_session)) -> dict:
        """Current transcript and whether a reply is pending."""
        return _chat_snapshot(session)

    @app.post("/api/chat", tags=["chat"])
    async def post_chat(req: ChatRequest, session: UserSession = Depends(current_session)) -> dict:
        """Send a message to the career assistant and wait for its reply."""
        reply = await session.chat.submit(req.message)
        if reply is None:
            raise ValidationError("Please enter a message.")
        snapshot = _chat_snapshot(session)
        snapshot["reply"] = reply.model_dump(mode="json")
        return snapshot

    @app.get("/api/recommendations", tags=["recommendations"])
    def get_recommendations(session: UserSession = Depends(current_session)) -> dict:
        return _recommendation_snapshot(session)

    @app.post("/api/recommendations", tags=["recommendations"])
    async def post_recommendations(
        skills: str = Form(""),
        resume_file: Optional[UploadFile] = File(None),
        session: UserSession = Depends(current_session),
    ) -> dict:
        """Run the (simulated) career path analysis.

        The uploaded file is accepted but never read; only its name is used.
        """
        handle = None
        if resume_file is not None and resume_file.filename:
            if not resume_file.filename.lower().endswith(".pdf"):
                raise ValidationError("File must be a PDF")
            handle = FileHandle(name=resume_file.filename)
        await session.recommendations.analyze(skills, handle)
        return _recommendation_snapshot(session)

    @app.delete("/api/session", tags=["session"])
    async def delete_session(request: Request, response: Response) -> dict:
        """End the caller's session, cancelling any in-flight chat request."""
        store: SessionStore = request.app.state.sessions
        closed = await store.close(request.cookies.get(settings.session_cookie_name))
        response.delete_cookie(settings.session_cookie_name)
        return {"closed": closed}

    @app.get("/dashboard", response_class=HTMLResponse, tags=["dashboard"])
    def dashboard() -> str:
        """
        Single-page UI: skills/resume form, recommendations and the chat widget.
        """
        return render_dashboard(settings)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("jobmatch.main:app", host=settings.host, port=settings.port)


__all__ = ["app", "create_app", "run"]
