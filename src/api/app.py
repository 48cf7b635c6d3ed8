"""
Main FastAPI application for the Advisor Assistant

This module creates and configures the FastAPI application with:
- CORS middleware for frontend integration
- Chat route
- Health check endpoint
- Completion-failure error mapping
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from src.agents.assistant import AdvisorAssistant
from src.api.models import HealthResponse
from src.api.routes import chat
from src.config.settings import settings
from src.store.memory import InMemoryRecordStore
from src.utils.errors import CompletionError
from src.utils.logger import setup_logger


setup_logger()

SERVICE_NAME = "advisor-assistant"
VERSION = "1.0.0"


def build_assistant() -> AdvisorAssistant:
    """Assistant over the in-memory store loaded from the seed file."""
    seed_path = settings.resolve_path(settings.seed_data_path)
    if seed_path.exists():
        store = InMemoryRecordStore.from_seed_file(seed_path)
    else:
        logger.warning(f"Seed file not found at {seed_path}; starting with an empty store")
        logger.warning("   Run: python scripts/seed_demo_data.py")
        store = InMemoryRecordStore()
    return AdvisorAssistant(store)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events

    Startup builds the assistant unless one was injected.
    """
    logger.info("🚀 FastAPI application starting...")
    if getattr(app.state, "assistant", None) is None:
        app.state.assistant = build_assistant()
    logger.info("📚 API docs available at http://localhost:8000/docs")

    yield

    logger.info("🛑 FastAPI application shutting down...")


async def completion_error_handler(request: Request, exc: CompletionError) -> JSONResponse:
    logger.error(f"Chat turn failed: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "error": "completion_failed",
            "kind": exc.kind,
            "message": "Failed to process chat message",
        },
    )


def create_app(assistant: Optional[AdvisorAssistant] = None) -> FastAPI:
    """Create the application; pass an assistant to skip building one at startup."""
    app = FastAPI(
        title="Advisor Assistant API",
        description="""
    Chat API for the financial-advisor assistant.

    Send a message with the context returned by the previous turn; the reply
    carries generated text, decoded cards and the updated context.

    ```bash
    curl -X POST http://localhost:8000/api/chat \\
         -H "Content-Type: application/json" \\
         -d '{"message": "What do I have today?"}'
    ```
    """,
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.assistant = assistant

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CompletionError, completion_error_handler)
    app.include_router(chat.router)

    @app.get("/", tags=["root"])
    async def root():
        """
        Root endpoint - API information
        """
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "chat": "/api/chat"
            }
        }

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check():
        """
        Health check endpoint

        Returns:
            HealthResponse with service status
        """
        return HealthResponse(status="healthy", service=SERVICE_NAME, version=VERSION)

    return app


app = create_app()
