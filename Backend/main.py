from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator
from fastapi import FastAPI, Request, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from core.config import settings
from core.exceptions import MomentumError
from data_layer.mongodb.connection import get_mongodb_client
from data_layer.mongodb.lifecycle import mongodb_lifespan
from utils.logging_utils import configure_logging
from api.auth_routes import router as auth_router
from api.task_routes import router as task_router
from api.journal_routes import router as journal_router
from api.focus_routes import router as focus_router
from api.habit_routes import router as habit_router
from api.heatmap_routes import router as heatmap_router
import logging

configure_logging(settings.log_level, settings.log_format, settings.log_dir)

logger = logging.getLogger(__name__)
logger.info("Logging initialized with emoji-safe configuration")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[Any, None]:
    logger.info(f"🚀 Starting {settings.app_name} v{settings.app_version}")
    async with mongodb_lifespan(app):
        yield
    logger.info("Application shutdown complete")


# Create FastAPI app with lifespan
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Tasks, journal, focus sessions and habits with calendar heatmaps",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

health_router = APIRouter(tags=["Health"])


@health_router.get("/health")
def health_check():
    """Report whether MongoDB answers a ping."""
    client = get_mongodb_client()
    mongodb_ok = False
    if client is not None:
        try:
            client.admin.command("ping")
            mongodb_ok = True
        except Exception as e:
            logger.warning(f"⚠️ MongoDB health check failed: {e}")
    return {
        "status": "ok" if mongodb_ok else "degraded",
        "mongodb": mongodb_ok,
        "version": settings.app_version,
    }


app.include_router(health_router, prefix=settings.api_prefix)
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(task_router, prefix=settings.api_prefix)
app.include_router(journal_router, prefix=settings.api_prefix)
app.include_router(focus_router, prefix=settings.api_prefix)
app.include_router(habit_router, prefix=settings.api_prefix)
app.include_router(heatmap_router, prefix=settings.api_prefix)


@app.exception_handler(MomentumError)
async def momentum_exception_handler(request: Request, exc: MomentumError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_type}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled exceptions."""
    logger.exception(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting server with HTTP on {settings.api_host}:{settings.api_port}")
    uvicorn.run("main:app", host=settings.api_host,
                port=settings.api_port, reload=settings.debug)
