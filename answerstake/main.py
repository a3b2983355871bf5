"""
AnswerStake Backend - FastAPI Application

Main entry point for the question escrow and answer reward API.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional

from answerstake.config import Settings, get_settings
from answerstake.database import LedgerStore, MemoryLedgerStore, get_ledger_store
from answerstake.errors import LedgerError
from answerstake.logging_config import StructuredLogger, setup_logging
from answerstake.routers import questions, answers, stakes
from answerstake.services.dispatcher import LedgerDispatcher

logger = StructuredLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[LedgerStore] = None,
) -> FastAPI:
    """Build the API around a ledger loaded from ``store``."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Startup
        ledger_store = store or get_ledger_store(settings)
        app.state.dispatcher = LedgerDispatcher.from_store(
            ledger_store,
            min_question_reward=settings.min_question_reward,
            answer_price=settings.answer_price,
            upvote_price=settings.upvote_price,
        )
        logger.info("AnswerStake API starting up", store=type(ledger_store).__name__)
        yield
        # Shutdown
        logger.info("AnswerStake API shutting down")

    app = FastAPI(
        title="AnswerStake API",
        description="""
        Escrowed question rewards, paid out to the people who answer.

        ## Features
        - Askers post questions backed by a deposit that becomes the reward
        - Anyone can answer for a fixed fee
        - Upvotes forward a micropayment straight to the answer author
        - The asker picks one correct answer and the full reward is released
        """,
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.kind, "detail": exc.detail},
        )

    # Register routers
    app.include_router(questions.router)
    app.include_router(answers.router)
    app.include_router(stakes.router)

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "AnswerStake API",
            "version": "1.0.0"
        }

    @app.get("/health")
    async def health_check(request: Request):
        """Detailed health check."""
        dispatcher: LedgerDispatcher = request.app.state.dispatcher
        failed = [
            r.name for r in dispatcher.read(lambda ledger: ledger.check_invariants())
            if not r.passed
        ]

        return {
            "status": "healthy" if not failed else "degraded",
            "supabase_configured": settings.supabase_configured,
            "durable_store": not isinstance(dispatcher.store, MemoryLedgerStore),
            "failed_invariants": failed,
            "min_question_reward": settings.min_question_reward,
        }

    return app


app = create_app()
