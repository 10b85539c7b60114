"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from satprep.database import init_db
from satprep.logging_setup import setup_console_logging
from satprep.routes import attempts, question_sets, sat, statistics, tests
from satprep.services.cleanup_service import schedule_maintenance
from satprep.services.sat_session_service import SatSessionRegistry


def create_app(run_maintenance: bool = True) -> FastAPI:
    """Build the application with its own SAT session registry."""
    registry = SatSessionRegistry()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db()
        if run_maintenance:
            schedule_maintenance(registry)
        yield

    app = FastAPI(title="SAT Prep API", lifespan=lifespan)
    app.state.sat_sessions = registry

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict[str, object]:
        """Liveness probe."""
        return {"status": "ok", "activeSessions": len(registry)}

    # Include routers
    app.include_router(question_sets.router)
    app.include_router(tests.router)
    app.include_router(attempts.router)
    app.include_router(sat.router)
    app.include_router(statistics.router)
    return app


setup_console_logging()

app = create_app()
