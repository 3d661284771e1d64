"""
Job API routes
"""
from typing import List

from fastapi import APIRouter

from marketplace_api.dependencies import ProfileDep, ServiceDep
from marketplace_api.schemas import JobResponse, PaymentResponse

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/unpaid", response_model=List[JobResponse])
def list_unpaid_jobs(service: ServiceDep, profile: ProfileDep):
    """Unpaid jobs on the requester's active contracts"""
    return [
        JobResponse.model_validate(job)
        for job in service.list_unpaid_jobs(profile.id)
    ]


@router.post("/{job_id}/pay", response_model=PaymentResponse)
def pay_job(
    service: ServiceDep,
    profile: ProfileDep,
    job_id: int,
):
    """
    Pay for a job out of the requesting client's balance.

    The price moves from the client to the contractor in one transaction.
    """
    receipt = service.pay_job(job_id, profile.id)
    return PaymentResponse(job_id=receipt.job_id)
