from typing import Callable, Optional
from uuid import uuid4

from cashbook.domain.enums import UserRole
from cashbook.domain.models import Principal, Profile
from cashbook.domain.timestamps import utcnow
from cashbook.logger import get_logger
from cashbook.repositories.base import ProfileNotFoundError, ProfileRepository
from cashbook.services.errors import persistence_guard

logger = get_logger(__name__)

class ProfileService:
    """
    Registers users and resolves a user ID into a Principal.

    Authentication itself happens elsewhere; this only maps a known
    identity to its role.
    """

    def __init__(
        self,
        repository: ProfileRepository,
        clock: Callable = utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ):
        self.repository = repository
        self._clock = clock
        self._new_id = id_factory

    def register(self, email: str, role: UserRole = UserRole.USER) -> Profile:
        """
        Create a profile.

        Raises:
            ValueError: If the email is malformed
            DuplicateProfileError: If the email is already registered
        """
        email = email.strip().lower()
        local, _, domain = email.partition("@")
        if not local or not domain:
            raise ValueError(f"Invalid email address: '{email}'")

        profile = Profile(id=self._new_id(), email=email, role=role, created_at=self._clock())
        with persistence_guard("create profile"):
            self.repository.save(profile)

        logger.info("Registered %s user %s", role.value, profile.id)
        return profile

    def resolve_principal(self, user_id: Optional[str]) -> Principal:
        """
        Raises:
            ProfileNotFoundError: If no profile has this ID
        """
        profile = None
        if user_id:
            with persistence_guard("fetch profile"):
                profile = self.repository.get_by_id(user_id)

        if profile is None:
            raise ProfileNotFoundError(f"Unauthorized: unknown user '{user_id}'")

        return profile.to_principal()
