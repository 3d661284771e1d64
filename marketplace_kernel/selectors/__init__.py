"""Read-only selectors -- the query side of the kernel."""

from marketplace_kernel.selectors.contract_selector import ContractSelector
from marketplace_kernel.selectors.job_selector import JobSelector
from marketplace_kernel.selectors.profile_selector import ProfileSelector
from marketplace_kernel.selectors.report_selector import ReportSelector

__all__ = [
    "ContractSelector",
    "JobSelector",
    "ProfileSelector",
    "ReportSelector",
]
