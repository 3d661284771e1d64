"""
Request-scoped dependencies: the service facade and the requesting profile.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from marketplace_kernel.domain.dtos import ProfileInfo
from marketplace_kernel.exceptions import AuthenticationRequiredError
from marketplace_services import MarketplaceService

PROFILE_HEADER = "profile_id"


def get_service(request: Request) -> MarketplaceService:
    return request.app.state.service


def current_profile(
    service: Annotated[MarketplaceService, Depends(get_service)],
    profile_id: Annotated[Optional[str], Header(convert_underscores=False)] = None,
) -> ProfileInfo:
    """
    Resolve the ``profile_id`` header to a profile.

    Raises:
        AuthenticationRequiredError: header missing, not an integer, or
            naming no profile.
    """
    if profile_id is None or not profile_id.strip():
        raise AuthenticationRequiredError(f"missing {PROFILE_HEADER} header")
    try:
        requester_id = int(profile_id)
    except ValueError:
        raise AuthenticationRequiredError(
            f"malformed {PROFILE_HEADER} header: {profile_id!r}"
        ) from None
    return service.resolve_profile(requester_id)


ServiceDep = Annotated[MarketplaceService, Depends(get_service)]
ProfileDep = Annotated[ProfileInfo, Depends(current_profile)]
