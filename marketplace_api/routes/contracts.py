"""
Contract API routes
"""
from typing import List

from fastapi import APIRouter

from marketplace_api.dependencies import ProfileDep, ServiceDep
from marketplace_api.schemas import ContractResponse
from marketplace_kernel.logging_config import LogContext

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.get("/{contract_id}", response_model=ContractResponse)
def get_contract(
    service: ServiceDep,
    profile: ProfileDep,
    contract_id: int,
):
    """Return a contract the requesting profile is a party to"""
    with LogContext.bind(contract_id=contract_id):
        contract = service.get_contract(contract_id, profile.id)
    return ContractResponse.model_validate(contract)


@router.get("", response_model=List[ContractResponse])
def list_contracts(service: ServiceDep, profile: ProfileDep):
    """List the requesting profile's non-terminated contracts"""
    return [
        ContractResponse.model_validate(c)
        for c in service.list_contracts(profile.id)
    ]
