"""
Admin report routes
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Query

from marketplace_api.dependencies import ServiceDep
from marketplace_api.schemas import ClientSpendResponse, ProfessionEarningsResponse

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/best-profession", response_model=ProfessionEarningsResponse)
def best_profession(
    service: ServiceDep,
    start: date = Query(..., description="First day of the window (inclusive)"),
    end: date = Query(..., description="Last day of the window (inclusive)"),
):
    """The contractor profession that earned the most in the window"""
    return ProfessionEarningsResponse.model_validate(service.best_profession(start, end))


@router.get("/best-clients", response_model=List[ClientSpendResponse])
def best_clients(
    service: ServiceDep,
    start: date = Query(..., description="First day of the window (inclusive)"),
    end: date = Query(..., description="Last day of the window (inclusive)"),
    limit: Optional[int] = Query(None, ge=1, description="Number of clients"),
):
    """Clients who paid the most in the window, highest first"""
    return [
        ClientSpendResponse.model_validate(row)
        for row in service.best_clients(start, end, limit)
    ]
