from django.conf import settings
from django.db import models
from django.utils import timezone
from backend.core.models import TimelineEntry


class Lead(models.Model):
    """A prospective customer tracked through the sales-status pipeline"""
    STATUS_FRESH = 'fresh'
    STATUS_VISITED = 'visited'
    STATUS_CHOICES = [
        ('fresh', 'Fresh'),
        ('contacted', 'Contacted'),
        ('requirement', 'Requirement'),
        ('offer given', 'Offer Given'),
        ('hot', 'Hot'),
        ('closed', 'Closed'),
        ('success', 'Success'),
        ('visit planned', 'Visit Planned'),
        ('visited', 'Visited'),
    ]

    project = models.ForeignKey('projects.Project', on_delete=models.CASCADE, related_name='leads')
    name = models.CharField(max_length=255)
    contact_no = models.CharField(max_length=50)
    requirement = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_FRESH)
    referred_by = models.CharField(max_length=255, blank=True, default='')
    lead_source = models.CharField(max_length=255, blank=True, default='')
    last_updated_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'leads'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['project', '-created_at'], name='leads_project_created_idx'),
            models.Index(fields=['status'], name='leads_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.contact_no})"

    def record_status(self, status, user):
        return self.status_history.create(status=status, changed_by=user)

    def add_remark(self, text, user):
        return self.remarks.create(text=text, added_by=user)

    def touch(self):
        self.last_updated_at = timezone.now()


class LeadStatusChange(models.Model):
    """One row per status a lead has been moved into"""
    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name='status_history')
    status = models.CharField(max_length=20, choices=Lead.STATUS_CHOICES)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'lead_status_history'
        ordering = ['timestamp', 'id']
        indexes = [
            models.Index(fields=['status', 'timestamp'], name='lead_status_hist_ts_idx'),
        ]

    def __str__(self):
        return f"{self.lead_id} -> {self.status}"


class LeadRemark(TimelineEntry):
    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name='remarks')

    class Meta(TimelineEntry.Meta):
        db_table = 'lead_remarks'
