# apps/core/logging.py

import logging

from .models import AuditLog

logger = logging.getLogger(__name__)


def log_admin_action(user, action: str, target_model: str, target_id, details: dict = None, success: bool = True):
    """
    Persists an admin action to the AuditLog table and mirrors it to the log.
    Failed actions are logged at WARNING level, successful ones at INFO.
    """
    details = details or {}
    actor = user if getattr(user, 'is_authenticated', False) else None

    entry = AuditLog.objects.create(
        user=actor,
        action=action,
        target_model=target_model,
        target_id=str(target_id) if target_id is not None else '',
        details=details,
        success=success,
    )

    username = actor.get_username() if actor else 'system'
    message = f"Admin action {action} on {target_model} ({target_id}) by {username}"
    if success:
        logger.info(message)
    else:
        logger.warning(f"{message} failed: {details}")
    return entry
