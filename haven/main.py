"""FastAPI application: lifecycle, routes, scheduler."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from apscheduler.schedulers.background import BackgroundScheduler

from haven.config import settings
from haven.db import create_tables, init_db
from haven.errors import ConfigurationError, HavenError
from haven.utils.logging import setup_logging, get_logger
from haven.routes import (
    agents_router,
    ai_router,
    analyze_router,
    assets_router,
    canvas_router,
    opengraph_router,
    search_router,
    user_router,
)
from haven.routes.responses import haven_error_handler
from haven.services.lifecycle_service import run_scheduled_sweep

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: logging, DB tables, lifecycle scheduler. Shutdown: scheduler."""
    setup_logging()
    scheduler = BackgroundScheduler()
    try:
        init_db()
    except ConfigurationError as e:
        # Canvas and model routes still work without a database
        logger.warning("database_not_configured", error=e.message)
    else:
        try:
            await create_tables()
        except Exception as e:
            logger.warning("create_tables_failed", error=str(e))
    if settings.database_url and settings.lifecycle_sweep_hours > 0:
        scheduler.add_job(
            run_scheduled_sweep,
            "interval",
            hours=settings.lifecycle_sweep_hours,
            id="staging_lifecycle",
            replace_existing=True,
        )
    scheduler.start()
    yield
    scheduler.shutdown(wait=False)


app = FastAPI(
    title="Haven OS",
    description="Canvas workspace for content creation with Gemini agents and semantic search",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_exception_handler(HavenError, haven_error_handler)

app.include_router(canvas_router)
app.include_router(agents_router)
app.include_router(ai_router)
app.include_router(analyze_router)
app.include_router(search_router)
app.include_router(assets_router)
app.include_router(user_router)
app.include_router(opengraph_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
