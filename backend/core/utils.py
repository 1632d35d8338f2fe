"""Utility functions for activity logging"""
import logging

from .models import ActivityLog

logger = logging.getLogger('backend.core')


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def log_activity(request=None, action=None, model_name=None, object_id=None,
                 changes=None, user=None, object_name=None):
    """
    Record an activity log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, status_change, remark_add, ...)
        model_name: Name of the model being acted upon
        object_id: ID of the object
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., lead name, task number)

    A failure here is logged and swallowed so the caller's write still succeeds.
    """
    try:
        actor = user
        if actor is None and request is not None and hasattr(request, 'user'):
            actor = request.user

        if not action or not model_name or object_id is None:
            logger.warning(
                f"Activity log skipped: missing required fields "
                f"(action={action}, model_name={model_name}, object_id={object_id})"
            )
            return None

        return ActivityLog.objects.create(
            user=actor if actor is not None and actor.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=(str(object_name)[:255] if object_name else None),
            changes=changes or {},
            ip_address=get_client_ip(request) if request else None,
        )
    except Exception as e:
        logger.error(f"Failed to create activity log: {str(e)}")
        return None
