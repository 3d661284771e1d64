"""
Health check endpoint
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from marketplace_api.dependencies import ServiceDep
from marketplace_api.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(service: ServiceDep):
    """200 when the database answers, 503 otherwise"""
    if service.check_health():
        return HealthResponse(status="healthy")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=HealthResponse(status="unhealthy").model_dump(),
    )
