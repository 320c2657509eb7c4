# ABOUTME: System routes for liveness monitoring.
# ABOUTME: Exposes the health procedure and a plain /api/health alias.

from fastapi import APIRouter

from joydao_site.models import HealthResult

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health", response_model=HealthResult)
@router.get("/trpc/system.health", response_model=HealthResult)
async def health_check():
    """Health check endpoint for load balancer."""
    return HealthResult(ok=True)
