"""
Authorization rules governing who may read, modify and remove which user record.

Every role comparison of the user service goes through one of these predicates so
the rules can be audited in one place. `requester` is any object exposing `id`
and `role` (normally the authenticated User row).
"""
from .models import UserRole


def is_admin(requester) -> bool:
    return requester.role == UserRole.ADMIN.value


def is_self(requester, target_id: str) -> bool:
    return requester.id == target_id


def can_view_profile(requester, target_id: str) -> bool:
    return is_admin(requester) or is_self(requester, target_id)


def can_modify_profile(requester, target_id: str) -> bool:
    return is_admin(requester) or is_self(requester, target_id)


def requires_current_password(requester, target_id: str, changes_password: bool) -> bool:
    """
    Self-service password changes must prove knowledge of the current password.

    Only a non-admin editing their own record is asked for it. An admin editing
    their own record through the self-service update is NOT asked, which leaves
    an admin session able to set a bare password on its own account. This gap is
    pinned by a flagged test until the intended rule is decided.
    """
    return changes_password and not is_admin(requester) and is_self(requester, target_id)


def can_change_role(requester) -> bool:
    return is_admin(requester)


def can_change_email(requester) -> bool:
    # email changes only exist on the admin elevated edit path
    return is_admin(requester)


def can_remove(requester) -> bool:
    return is_admin(requester)
