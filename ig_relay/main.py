from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from ig_relay import __version__
from ig_relay.api.endpoints import webhook, health
from ig_relay.config.settings import get_settings
from ig_relay.core.container import Container
from ig_relay.core.exceptions import BaseAppException
from ig_relay.core.logging import setup_logging, get_logger

# Load settings
settings = get_settings()

# Configure logging
setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app_startup", graph_api_version=settings.GRAPH_API_VERSION)
    yield
    if Container._instance is not None:
        await Container._instance.close()
    logger.info("app_shutdown")


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Relays Instagram messaging webhook events back through the Send API",
    version=__version__,
    lifespan=lifespan
)


@app.exception_handler(BaseAppException)
async def app_exception_handler(request: Request, exc: BaseAppException):
    logger.error(
        "application_error",
        path=request.url.path,
        error=exc.message,
        status_code=exc.status_code
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# Include routers
app.include_router(
    webhook.router,
    prefix="/webhook",
    tags=["webhook"]
)

app.include_router(
    health.router,
    tags=["health"]
)

if __name__ == "__main__":
    uvicorn.run(
        "ig_relay.main:app",
        host=settings.HOST,
        port=settings.PORT,
    )
