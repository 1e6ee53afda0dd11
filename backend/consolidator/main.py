from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .config import Settings, ensure_data_dir, load_settings
from .database import close_database, open_database
from .logging_setup import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database on startup, close it on shutdown."""
    settings: Settings = app.state.settings
    ensure_data_dir(settings)
    open_database(settings.database_path)
    yield
    close_database()
    logger.info("Database closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for the given settings (default: from the environment)."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Statement Consolidator",
        description="Import bank CSV exports into one categorized ledger",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    # CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],  # Vite dev server
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()
