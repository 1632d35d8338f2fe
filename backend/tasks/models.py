from django.conf import settings
from django.db import models
from django.utils import timezone
from backend.core.models import TimelineEntry


class Task(models.Model):
    """Work item an admin assigns to a manager"""
    STATUS_OPEN = 'OPEN'
    STATUS_IN_PROGRESS = 'IN_PROGRESS'
    STATUS_BLOCKED = 'BLOCKED'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CLOSED = 'CLOSED'
    STATUS_REASSIGNED = 'REASSIGNED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (STATUS_OPEN, 'Open'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_BLOCKED, 'Blocked'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CLOSED, 'Closed'),
        (STATUS_REASSIGNED, 'Reassigned'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]
    # Task numbers only need to be unique among tasks not in these states
    INACTIVE_STATUSES = (STATUS_CLOSED, STATUS_CANCELLED)

    number = models.CharField(max_length=100)
    description = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_OPEN)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_tasks'
    )
    project = models.ForeignKey(
        'projects.Project', on_delete=models.SET_NULL, null=True, blank=True, related_name='tasks'
    )
    lead = models.ForeignKey('leads.Lead', on_delete=models.SET_NULL, null=True, blank=True, related_name='tasks')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_tasks'
    )
    last_updated_at = models.DateTimeField(default=timezone.now)
    last_viewed_by_admin = models.DateTimeField(null=True, blank=True)
    last_comments_viewed_by_admin = models.DateTimeField(null=True, blank=True)
    last_viewed_by_manager = models.DateTimeField(null=True, blank=True)
    last_comments_viewed_by_manager = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tasks'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['assigned_to', 'status'], name='idx_task_assignee_status'),
            models.Index(fields=['number'], name='idx_task_number'),
        ]

    def __str__(self):
        return f"Task {self.number}"

    def save(self, *args, **kwargs):
        self.last_updated_at = timezone.now()
        super().save(*args, **kwargs)

    @classmethod
    def number_in_use(cls, number, exclude_pk=None):
        queryset = cls.objects.filter(number=number).exclude(status__in=cls.INACTIVE_STATUSES)
        if exclude_pk is not None:
            queryset = queryset.exclude(pk=exclude_pk)
        return queryset.exists()


class TaskComment(TimelineEntry):
    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name='comments')
    parent = models.ForeignKey('self', on_delete=models.CASCADE, null=True, blank=True, related_name='replies')

    class Meta(TimelineEntry.Meta):
        db_table = 'task_comments'
