"""User registration and role administration."""

import logging
import uuid
from datetime import UTC, datetime

from bistro_order_service.models.result_models import DeleteResult, RegistrationResult, UpdateResult
from bistro_order_service.models.user_models import Role, User, UserCreate
from bistro_order_service.observability import traced
from bistro_order_service.repositories.data_store import DataStore

logger = logging.getLogger(__name__)


class UserService:
    """Service for identities and the role authority.

    Registration is idempotent per email. The only role change is
    promotion to admin.
    """

    def __init__(self, store: DataStore) -> None:
        """Initialize the UserService.

        Args:
            store: Shared data-access handle
        """
        self.store = store

    @traced("register_user")
    async def register(self, data: UserCreate) -> RegistrationResult:
        """Register an identity unless its email is already known.

        Args:
            data: Registration payload

        Returns:
            RegistrationResult with ``inserted_id`` None when the email existed
        """
        user = User(
            id=uuid.uuid4().hex,
            email=data.email,
            name=data.name,
            photo_url=data.photo_url,
            role=Role.STANDARD,
            created_at=datetime.now(UTC),
        )
        result = self.store.users.insert_if_absent(user)

        if result.inserted_id is None:
            logger.info(f"Registration skipped, {data.email} already exists")
            return RegistrationResult(message="user already exists", inserted_id=None)

        logger.info(f"Registered user {user.id}")
        return RegistrationResult(message="user created", inserted_id=result.inserted_id)

    async def list_users(self) -> list[User]:
        return self.store.users.find_all()

    async def get_user(self, email: str) -> User | None:
        return self.store.users.find_by_email(email)

    async def is_admin(self, email: str) -> bool:
        """Whether the identity with this email holds the admin role.

        Unknown emails are not admins.
        """
        user = self.store.users.find_by_email(email)
        return user is not None and user.is_admin

    @traced("delete_user")
    async def delete_user(self, user_id: str) -> DeleteResult:
        result = self.store.users.delete_by_id(user_id)
        logger.info(f"Deleted user {user_id}: {result.deleted_count} record(s)")
        return result

    @traced("promote_user")
    async def promote_to_admin(self, user_id: str) -> UpdateResult:
        """Give the user the admin role. Promoting an admin again changes nothing."""
        result = self.store.users.set_role(user_id, Role.ADMIN)
        logger.info(
            f"Promoted user {user_id}: matched={result.matched_count} modified={result.modified_count}"
        )
        return result
