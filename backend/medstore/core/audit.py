"""
Audit logging for authentication and data changes.

Every login attempt, every create/update/delete on stores, medicines,
billings and users, and every access-denied decision is written as one JSON
line to the "audit" logger so it can be shipped to centralized logging.

Passwords and tokens are never written.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from medstore.models.user import User

audit_logger = logging.getLogger("audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Central audit logging for security-relevant events."""

    @staticmethod
    def log_authentication(
        action: str,  # "login", "failed_login"
        email: str,
        ip_address: str,
        success: bool,
        reason: str = "",
    ):
        """
        Log authentication events.

        Usage:
            AuditLog.log_authentication("login", "clerk@store.com", "10.0.0.4", True)
            AuditLog.log_authentication("failed_login", "clerk@store.com", "10.0.0.4", False, reason="bad password")
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": f"auth.{action}",
            "email": email,
            "ip_address": ip_address,
            "success": success,
        }
        if reason and not success:
            log_entry["reason"] = reason

        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_action(
        action: str,  # "create", "update", "delete"
        resource_type: str,  # "store", "medicine", "billing", "user"
        resource_id: int,
        user: User,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a data change with who made it and what changed.

        Usage:
            AuditLog.log_action("delete", "medicine", 12, current_user, changes={"name": "Paracetamol"})
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": f"{resource_type}.{action}",
            "user_id": user.id,
            "user_email": user.email,
            "resource_id": resource_id,
        }
        if changes:
            log_entry["changes"] = changes

        audit_logger.info(json.dumps(log_entry, default=str))

    @staticmethod
    def log_access_denied(
        action: str,  # "read", "write", "delete"
        resource_type: str,
        resource_id: Optional[int],
        user_id: int,
        reason: str,
    ):
        """Log a refused request (wrong role or another store's data)."""
        log_entry = {
            "timestamp": _now(),
            "event_severity": "WARNING",
            "event_type": "access_denied",
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "user_id": user_id,
            "reason": reason,
        }

        audit_logger.warning(json.dumps(log_entry))
