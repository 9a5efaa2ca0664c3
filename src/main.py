"""Voice Relay - FastAPI Application Entry Point.

Room-scoped conversation relay: clients send recorded speech or typed text
over a WebSocket and receive the transcript plus a generated reply.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from src import __version__
from src.api.routes import health, rooms
from src.api.websocket import relay
from src.audio.asr import Transcriber, create_transcriber
from src.config.settings import Settings, get_settings
from src.llm import Responder, create_responder
from src.observability.logging import get_logger, init_logging
from src.observability.metrics import set_build_info
from src.orchestrator.session import SessionOrchestrator
from src.orchestrator.store import ConversationStore

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    store: ConversationStore | None = None,
    transcriber: Transcriber | None = None,
    responder: Responder | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Components not passed in are built from settings at startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager.

        Handles startup and shutdown of components.
        """
        init_logging(
            json_format=settings.environment == "production",
            level=settings.log_level,
        )
        logger.info(
            "voicerelay_starting",
            version=__version__,
            environment=settings.environment,
            port=settings.api_port,
            asr_engine=settings.asr_engine,
            llm_engine=settings.llm_engine,
        )

        try:
            app.state.store = store if store is not None else ConversationStore()
            health.set_component_health("store", True)

            app.state.transcriber = (
                transcriber if transcriber is not None else create_transcriber(settings.asr_engine)
            )
            health.set_component_health("asr", True)

            app.state.responder = (
                responder if responder is not None else create_responder(settings.llm_engine)
            )
            health.set_component_health("llm", True)

            app.state.orchestrator = SessionOrchestrator(
                store=app.state.store,
                transcriber=app.state.transcriber,
                responder=app.state.responder,
                fallback_reply=settings.fallback_reply,
            )

            set_build_info(__version__)
            health.set_ready(True)
            logger.info("voicerelay_ready", components=health.get_component_health())

        except Exception as e:
            logger.error("voicerelay_startup_failed", error=str(e))
            raise

        yield  # Application runs here

        logger.info("voicerelay_shutting_down", rooms=len(app.state.store))
        health.set_ready(False)

        await app.state.transcriber.close()
        await app.state.responder.close()
        for component in ("asr", "llm"):
            health.set_component_health(component, False)

        logger.info("voicerelay_shutdown_complete")

    app = FastAPI(
        title="Voice Relay",
        description="Room-scoped speech and text conversation relay",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(rooms.router)
    app.include_router(relay.router)

    if settings.metrics_enabled:
        app.add_api_route("/metrics", health.metrics, methods=["GET"], tags=["health"])

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower().replace("warn", "warning"),
        reload=settings.environment == "development",
    )
