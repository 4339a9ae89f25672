"""
Core API backend for OpenClaw.

It exposes the following endpoints:
- **GET /api/health**                    - liveness probe listing loaded skills and tools.
- **POST /api/chat**                     - run the agent, streaming events as Server-Sent Events.
- **POST /api/integrations/telegram**    - start the Telegram poller.
- **DELETE /api/integrations/telegram**  - stop the Telegram poller.
- **GET /api/integrations/telegram**     - report the poller state.
"""

import logging
import threading
from contextlib import asynccontextmanager
from typing import (
    AsyncIterator,
    Optional,
)

from fastapi import (
    FastAPI,
    HTTPException,
    Request,
)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse

from openclaw.agent.provider import ProviderError
from openclaw.agent.runtime import AgentRuntime
from openclaw.api.models import (
    ChatRequest,
    HealthResponse,
    TelegramStartRequest,
    TelegramStatusResponse,
)
from openclaw.common import (
    AnsiColors,
    colored_print,
)
from openclaw.config import settings
from openclaw.core.events import (
    ErrorEvent,
    QueueSink,
)
from openclaw.core.schema import Message
from openclaw.integrations.telegram import (
    TelegramError,
    TelegramPoller,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------
def _runtime(request: Request) -> AgentRuntime:
    return request.app.state.runtime


def _poller(request: Request) -> TelegramPoller:
    return request.app.state.telegram


def _run_in_background(
    runtime: AgentRuntime, history: list[Message], sink: QueueSink, model: Optional[str]
) -> None:
    """Worker-thread body: run one request and always close the sink."""
    try:
        runtime.respond(history, sink, model=model)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.exception("Chat request failed before the agent loop finished")
        sink.emit(ErrorEvent(error=str(exc)))
    finally:
        sink.close()


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------
def create_app(runtime: Optional[AgentRuntime] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters
    ----------
    runtime:
        Pre-built agent runtime. When omitted it is built from ``settings`` at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if runtime is None:
            try:
                app.state.runtime = AgentRuntime.from_settings(settings)
            except ProviderError as exc:
                logger.error("Failed to initialise model provider: %s", exc)
                raise
        else:
            app.state.runtime = runtime
        app.state.telegram = TelegramPoller(app.state.runtime)
        if settings.TELEGRAM_BOT_TOKEN:
            app.state.telegram.start(settings.TELEGRAM_BOT_TOKEN)
        yield
        app.state.telegram.stop()
        app.state.runtime.close()

    app = FastAPI(
        title="OpenClaw API",
        version="0.1.0",
        description="Agentic tool-calling chat backend",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    @app.get("/api/health", response_model=HealthResponse, summary="Health check")
    async def health(request: Request) -> HealthResponse:
        """Return a liveness payload with the loaded skills and tools."""
        rt = _runtime(request)
        return HealthResponse(
            message="OpenClaw backend is running",
            skills=rt.skill_names(),
            tools=rt.registry.names(),
        )

    @app.post("/api/chat", summary="Chat with the agent (SSE)")
    async def chat(req: ChatRequest, request: Request) -> StreamingResponse:
        """Run the agent over *req.messages* and stream its events."""
        if not req.messages:
            raise HTTPException(status_code=400, detail="Messages array is required")

        history = [Message(role=m.role, content=m.content) for m in req.messages]
        sink = QueueSink()
        threading.Thread(
            target=_run_in_background,
            args=(_runtime(request), history, sink, req.model),
            name="agent-loop",
            daemon=True,
        ).start()

        return StreamingResponse(
            sink.iter_sse(),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    @app.get(
        "/api/integrations/telegram",
        response_model=TelegramStatusResponse,
        summary="Telegram poller state",
    )
    async def telegram_status(request: Request) -> TelegramStatusResponse:
        """Report whether the Telegram poller is running."""
        poller = _poller(request)
        return TelegramStatusResponse(state=poller.state.value, running=poller.running)

    @app.post(
        "/api/integrations/telegram",
        response_model=TelegramStatusResponse,
        summary="Start the Telegram poller",
    )
    def telegram_start(req: TelegramStartRequest, request: Request) -> TelegramStatusResponse:
        """Start polling with the given token, or the configured one."""
        poller = _poller(request)
        try:
            poller.start(req.token or settings.TELEGRAM_BOT_TOKEN or "")
        except TelegramError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return TelegramStatusResponse(state=poller.state.value, running=poller.running)

    @app.delete(
        "/api/integrations/telegram",
        response_model=TelegramStatusResponse,
        summary="Stop the Telegram poller",
    )
    def telegram_stop(request: Request) -> TelegramStatusResponse:
        """Stop polling."""
        poller = _poller(request)
        poller.stop()
        return TelegramStatusResponse(state=poller.state.value, running=poller.running)

    return app


app = create_app()


# ---------------------------------------------------------------------------
# Public helper to launch the API (imported by main.py)
# ---------------------------------------------------------------------------
def run_api(
    host: str = "0.0.0.0", port: int = 3001, reload: bool = False, log_level: str | None = None
) -> None:
    """Start a uvicorn server hosting *app*.

    Parameters
    ----------
    host, port:
        Bind address for the HTTP server.
    reload:
        If *True*, enable auto-reload.
    log_level:
        Logging level to use (default from settings if not provided).
    """

    # Lazy import - keeps uvicorn out of pkg-import time
    import uvicorn  # pylint: disable=import-outside-toplevel

    if log_level is None:
        log_level = settings.LOG_LEVEL

    logger.info(
        "Starting OpenClaw API at %s:%d (reload=%s, log_level=%s)", host, port, reload, log_level
    )
    colored_print(f"OpenClaw API is running at http://localhost:{port}.", AnsiColors.GREEN)
    colored_print(f"Visit http://localhost:{port}/docs for API documentation.", AnsiColors.BLUE)
    uvicorn.run(
        "openclaw.api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


if __name__ == "__main__":
    run_api(reload=True)
