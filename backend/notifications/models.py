from django.conf import settings
from django.db import models


class Notification(models.Model):
    """In-app notice about activity on a task, addressed to one user"""
    TYPE_COMMENT = 'COMMENT'
    TYPE_STATUS_CHANGE = 'STATUS_CHANGE'
    TYPE_ASSIGNMENT = 'ASSIGNMENT'
    TYPE_REASSIGNMENT = 'REASSIGNMENT'
    TYPE_CHOICES = [
        (TYPE_COMMENT, 'Comment'),
        (TYPE_STATUS_CHANGE, 'Status Change'),
        (TYPE_ASSIGNMENT, 'Assignment'),
        (TYPE_REASSIGNMENT, 'Reassignment'),
    ]

    notification_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    task = models.ForeignKey('tasks.Task', on_delete=models.CASCADE, related_name='notifications')
    triggered_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    target_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    message = models.CharField(max_length=500)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['target_user', 'is_read', '-created_at'], name='idx_notif_target_read'),
        ]

    def __str__(self):
        return self.message
