"""
Gantt Scheduler - dependency-aware scheduling core for a Gantt chart editor.
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager

from gantt import __version__
from gantt.config import get_settings
from gantt.routes import schedule, layout, connectors
from gantt.exceptions import register_exception_handlers
from gantt.logging_config import setup_logging, get_logger

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Gantt Scheduler API...")
    yield
    logger.info("Shutting down Gantt Scheduler API...")


app = FastAPI(
    title=get_settings().app_name,
    description="Cascading date propagation, connector routing and row ordering for Gantt charts",
    version=__version__,
    lifespan=lifespan,
)

# Register custom exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(schedule.router, prefix="/schedule", tags=["Schedule"])
app.include_router(layout.router, prefix="/layout", tags=["Layout"])
app.include_router(connectors.router, prefix="/connectors", tags=["Connectors"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
