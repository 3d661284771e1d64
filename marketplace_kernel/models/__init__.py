"""Domain models for the marketplace kernel."""

from marketplace_kernel.models.contract import Contract, ContractStatus
from marketplace_kernel.models.job import Job
from marketplace_kernel.models.profile import Profile, ProfileType

__all__ = [
    "Profile",
    "ProfileType",
    "Contract",
    "ContractStatus",
    "Job",
]
