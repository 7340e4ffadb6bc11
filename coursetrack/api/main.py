import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coursetrack.adapters.sqlite.migrator import SQLiteMigrator
from coursetrack.api.deps import get_settings
from coursetrack.app_shell.config import ConfigurationError, validate_ops_rules
from coursetrack.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules, validate and migrate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules)
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        applied = SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    except (ConfigurationError, RuntimeError, OSError, ValueError) as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)

    logger.info(
        "Rules loaded from %s; %d migration(s) applied to %s",
        settings.rules_path,
        len(applied),
        settings.db_path,
    )
    yield


app = FastAPI(
    title="Course Progress Tracker API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from coursetrack.api.routes import auth, progress  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(progress.router, prefix="/api/users", tags=["Progress"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "coursetrack"}
