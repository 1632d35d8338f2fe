"""Helpers for creating task notifications"""
import logging

from django.db import transaction

from .models import Notification

logger = logging.getLogger('backend.notifications')


def default_message(notification_type, task, triggered_by):
    """Message used when the caller does not supply one"""
    task_number = task.number or 'Task'
    user_name = getattr(triggered_by, 'name', None) or 'Someone'

    if notification_type == Notification.TYPE_COMMENT:
        return f"{user_name} commented on task {task_number}"
    if notification_type == Notification.TYPE_STATUS_CHANGE:
        return f"{user_name} changed status of task {task_number} to {task.status}"
    if notification_type == Notification.TYPE_ASSIGNMENT:
        return f"{user_name} assigned task {task_number} to you"
    if notification_type == Notification.TYPE_REASSIGNMENT:
        return f"{user_name} reassigned task {task_number} to you"
    return f"Activity on task {task_number}"


def create_notification(notification_type, task, triggered_by, targets, message=None, metadata=None):
    """
    Create one notification per distinct target user

    Args:
        notification_type: COMMENT, STATUS_CHANGE, ASSIGNMENT or REASSIGNMENT
        task: Task the activity happened on
        triggered_by: User who caused the activity (never notified)
        targets: User or iterable of users (None entries are ignored)
        message: Optional message; a default per type is used otherwise
        metadata: Optional dict stored with each notification

    Returns the created notifications. Failures are logged, never raised.
    """
    try:
        if targets is None:
            targets = []
        elif not isinstance(targets, (list, tuple, set)):
            targets = [targets]

        recipients = {}
        for user in targets:
            if user is None or user.pk == getattr(triggered_by, 'pk', None):
                continue
            recipients[user.pk] = user

        if not recipients:
            return []

        text = message or default_message(notification_type, task, triggered_by)
        with transaction.atomic():
            notifications = Notification.objects.bulk_create([
                Notification(
                    notification_type=notification_type,
                    task=task,
                    triggered_by=triggered_by,
                    target_user=user,
                    message=text,
                    metadata=metadata or {},
                )
                for user in recipients.values()
            ])
        logger.info(f"Created {len(notifications)} {notification_type} notification(s) for task {task.pk}")
        return notifications
    except Exception as e:
        logger.error(f"Error creating notification for task {getattr(task, 'pk', None)}: {str(e)}", exc_info=True)
        return []
