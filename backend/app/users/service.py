import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ..auth.passwords import PasswordHasher
from ..config import settings
from ..exceptions import BadRequestError, EmailInUse, ForbiddenError, NotFoundError
from . import policy
from .models import User as UserModel, UserRole
from .repository import UserRepository
from .schema import AdminEditUser, UserUpdate

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserService:
    """
    Applies the mutation rules for user records.

    Collaborators are passed in explicitly; one instance serves one request.
    Every operation is all-or-nothing: a rule violation raises before any field
    of the target record is touched.
    """

    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        inactive_after_days: int = settings.INACTIVE_AFTER_DAYS,
    ):
        self.repository = repository
        self.hasher = hasher
        self.inactive_after_days = inactive_after_days

    async def _load(self, user_id: str) -> UserModel:
        user = await self.repository.find_by_id(user_id)
        if user is None:
            raise NotFoundError()
        return user

    async def _persist(self, user: UserModel) -> UserModel:
        user.updated_at = _utcnow()
        return await self.repository.save(user)

    async def create_user(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.USER,
    ) -> UserModel:
        # friendlier error than the unique index; the index still decides under races
        if await self.repository.find_by_email(email):
            raise EmailInUse()

        db_user = UserModel(
            name=name,
            email=email,
            hashed_password=await self.hasher.hash(password),
            role=UserRole(role).value,
        )
        db_user = await self.repository.save(db_user)
        logger.info(f"Created user {db_user.id} ({db_user.email}) with role {db_user.role}")
        return db_user

    async def get_user(self, target_id: str, requester: UserModel) -> UserModel:
        if not policy.can_view_profile(requester, target_id):
            raise ForbiddenError()
        return await self._load(target_id)

    async def list_users(
        self,
        role: Optional[UserRole] = None,
        sort_by: str = "name",
        order: str = "asc",
    ) -> List[UserModel]:
        """Users filtered by exact role, ordered by `name` or `created_at`; ties fall back to id."""
        return await self.repository.query_filtered(
            role=UserRole(role).value if role is not None else None,
            sort_by=sort_by,
            order=order,
        )

    async def list_inactive(self, now: Optional[datetime] = None) -> List[UserModel]:
        """Users that never logged in or whose last login is older than the inactivity window."""
        threshold = (now or _utcnow()) - timedelta(days=self.inactive_after_days)
        return await self.repository.query_older_than_or_null(threshold)

    async def update_user(self, target_id: str, requester: UserModel, changes: UserUpdate) -> UserModel:
        """
        Partial self-service update (name, password, role).

        Checks run in this order and the first failure wins:
        target exists, requester may modify the target, current password proof
        when required, role change permission.
        """
        user = await self._load(target_id)

        if not policy.can_modify_profile(requester, target_id):
            raise ForbiddenError("You may only modify your own profile")

        update_data = changes.model_dump(exclude_none=True)

        if policy.requires_current_password(requester, target_id, "password" in update_data):
            current_password = update_data.get("current_password")
            if not current_password:
                raise BadRequestError("Current password is required to change the password")
            if not await self.hasher.verify(current_password, user.hashed_password):
                raise BadRequestError("Current password is incorrect")

        if "role" in update_data and not policy.can_change_role(requester):
            raise ForbiddenError("Only administrators can change user roles")

        # proof only, never stored
        update_data.pop("current_password", None)

        if "password" in update_data:
            user.hashed_password = await self.hasher.hash(update_data.pop("password"))
        if "role" in update_data:
            update_data["role"] = UserRole(update_data["role"]).value
        for field, value in update_data.items():
            setattr(user, field, value)

        user = await self._persist(user)
        logger.info(f"User {requester.id} updated user {user.id} (fields: {sorted(changes.model_fields_set)})")
        return user

    async def admin_edit_user(self, target_id: str, changes: AdminEditUser) -> UserModel:
        """
        Elevated edit of any field including email. The caller must already be an admin;
        no current password is asked for.
        """
        user = await self._load(target_id)

        if changes.email is not None and changes.email != user.email:
            if await self.repository.find_by_email(changes.email):
                raise BadRequestError("Email already in use")

        if changes.name is not None:
            user.name = changes.name
        if changes.email is not None:
            user.email = changes.email
        if changes.role is not None:
            user.role = UserRole(changes.role).value
        if changes.password is not None:
            user.hashed_password = await self.hasher.hash(changes.password)

        user = await self._persist(user)
        logger.info(f"Admin edit applied to user {user.id}")
        return user

    async def remove_user(self, target_id: str, requester: UserModel) -> None:
        if not policy.can_remove(requester):
            raise ForbiddenError("Only administrators can remove users")
        if policy.is_self(requester, target_id):
            raise BadRequestError("You cannot remove your own account")

        user = await self._load(target_id)
        await self.repository.delete(user)
        logger.info(f"User {requester.id} removed user {target_id}")

    async def record_login(self, user: UserModel) -> UserModel:
        user.last_login = _utcnow()
        return await self._persist(user)
