"""Health check endpoints."""

from fastapi import APIRouter, Depends

from phonomorph import __version__
from phonomorph.api.deps import get_container
from phonomorph.container import ApplicationContainer

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "phonomorph"}


@router.get("/health/detailed")
async def detailed_health(container: ApplicationContainer = Depends(get_container)):
    """Detailed health check with configuration info."""
    return {
        "status": "healthy",
        "service": "phonomorph",
        "version": __version__,
        "ledger": type(container.gateway).__name__,
        "config": container.settings.get_safe_dict(),
    }
