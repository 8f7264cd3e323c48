"""
Role and store-scope checks.

Admins see and change everything. A user with role "user" is limited to the
store they are assigned to: reads outside it answer 404, writes answer 403.
"""
from typing import Optional

from medstore.core.audit import AuditLog
from medstore.core.exceptions import BusinessError
from medstore.models.user import User


def visible_store_id(user: User) -> Optional[int]:
    """Store filter for list queries. None means no filter (admin)."""
    if user.is_admin:
        return None
    return user.store_id


def can_see_store(user: User, store_id: int) -> bool:
    return user.is_admin or user.store_id == store_id


def ensure_admin(user: User, action: str, resource_type: str, resource_id: Optional[int] = None) -> None:
    if not user.is_admin:
        AuditLog.log_access_denied(action, resource_type, resource_id, user.id, "Admin role required")
        raise BusinessError.forbidden("Forbidden: Admins only", reason=f"user {user.id} {action} {resource_type}")


def ensure_store_readable(user: User, store_id: int, resource: str, resource_id: Optional[int] = None) -> None:
    """404 when a store user reads another store's record."""
    if not can_see_store(user, store_id):
        AuditLog.log_access_denied("read", resource.lower(), resource_id, user.id, "Different store")
        raise BusinessError.not_found(resource, reason=f"user {user.id} outside store {store_id}")


def ensure_store_writable(user: User, store_id: int, resource_type: str, resource_id: Optional[int] = None) -> None:
    """403 when a store user writes a record of another store."""
    if not can_see_store(user, store_id):
        AuditLog.log_access_denied("write", resource_type, resource_id, user.id, "Different store")
        raise BusinessError.forbidden(
            "Forbidden: you can only manage records of your own store",
            reason=f"user {user.id} outside store {store_id}",
        )
