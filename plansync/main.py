"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from plansync.config import Settings, settings as default_settings
from plansync.container import Container, build_container
from plansync.logger import setup_logging
from plansync.routers import auth, objectives, schedule, status, sync, tasks
from plansync.routers import settings as settings_router


def create_app(
    container: Optional[Container] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create the local API application.

    Args:
        container: Pre-built component container (tests inject one)
        settings: Settings used to build the container when none is given
    """
    settings = settings or default_settings
    container = container or build_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan - startup and shutdown events."""
        # Startup
        setup_logging(settings.log_level)
        yield
        # Shutdown
        await container.close()

    app = FastAPI(
        title="Plan Sync API",
        description="Local API for the execution plan and its sync with the remote store",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.container = container

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth.router)
    app.include_router(objectives.router)
    app.include_router(tasks.router)
    app.include_router(schedule.router)
    app.include_router(status.router)
    app.include_router(settings_router.router)
    app.include_router(sync.router)

    @app.get("/")
    async def root():
        """Root endpoint - health check."""
        return {"status": "ok", "message": "Plan Sync API"}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "plansync.main:app",
        host=default_settings.api_host,
        port=default_settings.api_port,
        reload=default_settings.debug,
    )
