"""
Balance API routes
"""
from fastapi import APIRouter

from marketplace_api.dependencies import ProfileDep, ServiceDep
from marketplace_api.schemas import DepositRequest, DepositResponse

router = APIRouter(prefix="/balances", tags=["balances"])


@router.post("/deposit/{user_id}", response_model=DepositResponse)
def deposit(
    request: DepositRequest,
    service: ServiceDep,
    profile: ProfileDep,
    user_id: int,
):
    """
    Deposit money into a client's balance.

    A single deposit may not exceed 25% (configurable) of the client's
    unpaid jobs total.
    """
    receipt = service.deposit(user_id, request.amount, profile.id)
    return DepositResponse(balance=receipt.new_balance)
