# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints: health, readiness, metrics.
Pure HTTP layer: no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response

from mealsignup.core.config import settings
from mealsignup.core.dependencies import get_commitment_repo
from mealsignup.core.logging import get_logger
from mealsignup.repositories.commitment_repository import CommitmentRepository

router = APIRouter(tags=["System"])
logger = get_logger(__name__)


@router.get("/health")
def health_check():
    """Liveness probe for Docker and orchestration."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/ready")
async def readiness_check(repo: CommitmentRepository = Depends(get_commitment_repo)):
    """Readiness probe: verifies the commitment store answers."""
    try:
        await repo.ping()
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Readiness check failed: %s", exc)
        raise HTTPException(
            status_code=503,
            detail={"error": "store_unavailable", "detail": f"Database unavailable: {exc}"},
        )
    return {"status": "ready", "service": settings.SERVICE_NAME, "database": "connected"}


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
