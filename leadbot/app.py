"""FastAPI application: HTTP + WebSocket endpoints for the chat widget.

Endpoints:

  GET    /health                          Health check
  POST   /api/sessions                    Start a conversation (welcome + property)
  GET    /api/sessions/{id}               Messages and flags for rendering
  POST   /api/sessions/{id}/messages      Send one visitor turn
  POST   /api/sessions/{id}/interest      "I am interested" shortcut
  DELETE /api/sessions/{id}               End a conversation
  WS     /api/sessions/{id}/stream        Live message / flag events
  GET    /api/admin/sessions              Active session summaries (admin)
  GET    /api/admin/sessions/{id}         One session in detail (admin)
  GET    /api/admin/leads                 Leads by status across sessions (admin)

Idle sessions are evicted by a sweep started in the app lifespan, and
before a create would otherwise be refused for capacity.

Input gating lives here, not in ChatSession: turns are refused with 409
while the session is loading or once the lead has been submitted.
"""

from __future__ import annotations

# Load .env into os.environ before settings are read elsewhere
from dotenv import load_dotenv
load_dotenv()

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Callable, Optional

# Configure root logger early so every leadbot.* logger has a handler
# when run via `uvicorn leadbot.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from leadbot.auth import require_admin_token
from leadbot.backends.http import HttpAssistantBackend, HttpLeadIntake, HttpPropertyCatalog
from leadbot.config import settings
from leadbot.session import (
    ChatSession,
    evict_idle_sessions,
    get_active_sessions,
    get_session,
    register_session,
    unregister_session,
)

log = logging.getLogger("leadbot.app")

_START_TIME = time.time()

SessionFactory = Callable[[Optional[str]], ChatSession]

LEAD_STATUSES = ("not_started", "collecting", "submitted", "failed")


class CreateSessionBody(BaseModel):
    language: Optional[str] = None


class MessageBody(BaseModel):
    text: str


def create_app(session_factory: SessionFactory | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``session_factory`` builds a ChatSession for a language; it defaults to
    sessions wired to the HTTP backends at ``settings.api_url``.
    """
    factory = session_factory or _create_session

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = asyncio.create_task(_sweep_idle_sessions())
        yield
        sweeper.cancel()
        await asyncio.gather(sweeper, return_exceptions=True)

    app = FastAPI(
        title="Property Lead Assistant",
        description="Conversational lead qualification for a property listing",
        version="0.1.0",
        lifespan=lifespan,
    )

    for warning in settings.validate_startup():
        log.warning(warning)

    def _require_session(session_id: str) -> ChatSession:
        session = get_session(session_id)
        if not session:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
        return session

    def _require_input(session: ChatSession) -> None:
        if session.lead_submitted:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Lead already submitted for this session.",
            )
        if session.is_loading:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Session is busy; wait for the current reply.",
            )

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({
            "status": "ok",
            "uptime": uptime,
            "sessions": len(get_active_sessions()),
        })

    # ── Visitor endpoints ──────────────────────────────────────

    @app.post("/api/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(body: CreateSessionBody | None = None) -> dict:
        if len(get_active_sessions()) >= settings.max_sessions:
            evict_idle_sessions(settings.session_idle_timeout)
        if len(get_active_sessions()) >= settings.max_sessions:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Too many active sessions.",
            )
        session = factory(body.language if body else None)
        register_session(session)
        session.start()
        await session.load_property()
        return session.snapshot()

    @app.get("/api/sessions/{session_id}")
    async def read_session(session_id: str) -> dict:
        return _require_session(session_id).snapshot()

    @app.post("/api/sessions/{session_id}/messages")
    async def send_message(session_id: str, body: MessageBody) -> dict:
        session = _require_session(session_id)
        _require_input(session)
        if not body.text.strip():
            raise HTTPException(
                status_code=422,
                detail="Message text is empty.",
            )
        await session.send_message(body.text)
        return session.snapshot()

    @app.post("/api/sessions/{session_id}/interest")
    async def confirm_interest(session_id: str) -> dict:
        session = _require_session(session_id)
        _require_input(session)
        await session.confirm_interest()
        return session.snapshot()

    @app.delete("/api/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def end_session(session_id: str) -> None:
        _require_session(session_id)
        unregister_session(session_id)

    @app.websocket("/api/sessions/{session_id}/stream")
    async def stream_session(websocket: WebSocket, session_id: str) -> None:
        """Push every message and flag change, starting with the history."""
        session = get_session(session_id)
        if not session:
            await websocket.close(code=4004, reason="Session not found")
            return

        await websocket.accept()
        queue = session.events.subscribe(replay=True)
        try:
            await relay_events(websocket, queue, session_id)
        finally:
            session.events.unsubscribe(queue)

    # ── Admin endpoints ────────────────────────────────────────

    @app.get("/api/admin/sessions", dependencies=[Depends(require_admin_token)])
    async def list_sessions() -> dict:
        sessions = get_active_sessions()
        return {
            "sessions": [s.to_dict() for s in sessions.values()],
            "count": len(sessions),
        }

    @app.get("/api/admin/sessions/{session_id}", dependencies=[Depends(require_admin_token)])
    async def inspect_session(session_id: str) -> dict:
        return _require_session(session_id).to_dict(detail=True)

    @app.get("/api/admin/leads", dependencies=[Depends(require_admin_token)])
    async def list_leads(lead_status: Optional[str] = None) -> dict:
        """Leads across active sessions, optionally filtered by status."""
        if lead_status is not None and lead_status not in LEAD_STATUSES:
            raise HTTPException(
                status_code=422,
                detail=f"lead_status must be one of: {', '.join(LEAD_STATUSES)}",
            )
        leads = [
            s.lead_summary() for s in get_active_sessions().values()
            if lead_status is None or s.lead_status == lead_status
        ]
        return {"leads": leads, "count": len(leads)}

    return app


# ── Helper functions ──────────────────────────────────────────────

async def relay_events(websocket: Any, queue: asyncio.Queue, session_id: str) -> None:
    """Forward queued session events to the socket until either side stops.

    Returns when the client disconnects or a send fails. Send failures are
    logged.
    """

    async def _send() -> None:
        while True:
            event = await queue.get()
            await websocket.send_json(event)

    async def _receive() -> None:
        # Nothing is expected from the client; receiving detects the close
        while True:
            await websocket.receive_text()

    tasks = {asyncio.create_task(_send()), asyncio.create_task(_receive())}
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    for task in done:
        exc = task.exception()
        if exc is not None and not isinstance(exc, WebSocketDisconnect):
            log.warning("Event stream for %s stopped: %s", session_id, exc)


async def _sweep_idle_sessions() -> None:
    """Periodically drop sessions whose visitors went away without a DELETE."""
    while True:
        await asyncio.sleep(settings.session_sweep_interval)
        evict_idle_sessions(settings.session_idle_timeout)


def _create_session(language: str | None = None) -> ChatSession:
    """Create a ChatSession wired to the configured HTTP backends."""
    return ChatSession(
        assistant=HttpAssistantBackend(),
        intake=HttpLeadIntake(),
        catalog=HttpPropertyCatalog(),
        language=language,
    )


# ── Module-level app instance for uvicorn ──────────────────────

app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "leadbot.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=log_config,
    )
