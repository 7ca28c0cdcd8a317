from fastapi import APIRouter, Depends
from ig_relay.api.deps import get_container
from ig_relay.core.container import Container
from ig_relay import __version__
import structlog

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/health")
async def health_check(container: Container = Depends(get_container)):
    """Health check endpoint for Docker and monitoring."""
    settings = container.settings
    health_status = {
        "status": "healthy",
        "service": "ig-relay",
        "version": __version__,
        "graph_api_version": settings.GRAPH_API_VERSION,
        # presence only, never the secrets themselves
        "configured": {
            "verify_token": bool(settings.VERIFY_TOKEN),
            "page_id": bool(settings.PAGE_ID),
            "page_access_token": bool(settings.PAGE_ACCESS_TOKEN),
        }
    }
    logger.info("health_check_passed", status=health_status)
    return health_status
