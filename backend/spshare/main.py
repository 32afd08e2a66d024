import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .api import api_router
from .core.config import settings
from .core.database import create_database_engine, init_db
from .core.exceptions import ShareError
from .core.storage import LocalStorage

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(engine: Optional[Engine] = None, storage: Optional[LocalStorage] = None) -> FastAPI:
    """Build the application. ``engine`` and ``storage`` default to ones built from settings."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up SP Share API...")
        if app.state.engine is None:
            app.state.engine = create_database_engine()
        if app.state.storage is None:
            app.state.storage = LocalStorage(settings.UPLOAD_DIR)
        app.state.storage.ensure_upload_dir()
        init_db(app.state.engine)
        yield
        logger.info("Shutting down SP Share API...")

    app = FastAPI(
        title="SP Share API",
        description="Photo and video sharing within moderated groups",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.storage = storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ShareError)
    async def share_error_handler(request: Request, exc: ShareError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(api_router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": "SP Share API", "version": "1.0.0"}

    @app.get("/health")
    async def health_check():
        """Health check endpoint with database status."""
        status = {"status": "healthy", "database": "unknown"}

        if app.state.engine is None:
            status["database"] = "not_available"
            status["status"] = "degraded"
            return status

        try:
            with app.state.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            status["database"] = "connected"
        except SQLAlchemyError as e:
            status["database"] = f"error: {e}"
            status["status"] = "degraded"

        return status

    return app


app = create_app()
