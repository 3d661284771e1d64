"""Read-only profile lookups."""

from sqlalchemy import select

from marketplace_kernel.domain.dtos import ProfileInfo
from marketplace_kernel.exceptions import ProfileNotFoundError
from marketplace_kernel.models.profile import Profile
from marketplace_kernel.selectors.base import BaseSelector


class ProfileSelector(BaseSelector[Profile]):
    """Selector for profiles."""

    def find(self, profile_id: int) -> ProfileInfo | None:
        """Return the profile, or None if it does not exist."""
        profile = self.session.execute(
            select(Profile)
            .where(Profile.id == profile_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return ProfileInfo.from_model(profile) if profile else None

    def get(self, profile_id: int) -> ProfileInfo:
        """
        Return the profile.

        Raises:
            ProfileNotFoundError: If no profile has this id.
        """
        profile = self.find(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return profile
