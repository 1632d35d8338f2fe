from django.conf import settings
from django.db import models
from backend.core.models import TimelineEntry


class Campaign(models.Model):
    """A batch of externally sourced leads handed to a manager"""
    STATUS_PENDING = 'pending'
    STATUS_PARTIAL = 'partially complete'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PARTIAL, 'Partially Complete'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    name = models.CharField(max_length=255)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='campaigns'
    )
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'campaigns'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.name

    @classmethod
    def status_for(cls, lead_count, pending_count):
        """A campaign stays pending while it is empty or any lead is still pending"""
        if lead_count == 0 or pending_count > 0:
            return cls.STATUS_PENDING
        return cls.STATUS_COMPLETED

    def sync_status(self, lead_count=None, pending_count=None):
        """Recompute the status and persist it when it changed"""
        if lead_count is None:
            lead_count = self.leads.count()
        if pending_count is None:
            pending_count = self.leads.filter(status=CampaignLead.STATUS_PENDING).count()

        status = self.status_for(lead_count, pending_count)
        if status != self.status:
            Campaign.objects.filter(pk=self.pk).update(status=status)
            self.status = status
        return status


class CampaignLead(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_CONTACTED = 'contacted'
    STATUS_NA = 'NA'
    STATUS_HOT = 'hot'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_CONTACTED, 'Contacted'),
        (STATUS_NA, 'Not Available'),
        (STATUS_HOT, 'Hot'),
    ]
    NOT_AVAILABLE = 'N/A'

    campaign = models.ForeignKey(Campaign, on_delete=models.CASCADE, related_name='leads')
    name = models.CharField(max_length=255, default=NOT_AVAILABLE)
    phone = models.CharField(max_length=100, default=NOT_AVAILABLE)
    email = models.CharField(max_length=255, default=NOT_AVAILABLE)
    website = models.CharField(max_length=500, default=NOT_AVAILABLE)
    instagram = models.CharField(max_length=500, default=NOT_AVAILABLE)
    facebook = models.CharField(max_length=500, default=NOT_AVAILABLE)
    address = models.CharField(max_length=500, default=NOT_AVAILABLE)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'campaign_leads'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['campaign', 'status'], name='idx_campaign_lead_status'),
        ]

    def __str__(self):
        return f"{self.name} ({self.campaign_id})"


class CampaignLeadRemark(TimelineEntry):
    lead = models.ForeignKey(CampaignLead, on_delete=models.CASCADE, related_name='remarks')

    class Meta(TimelineEntry.Meta):
        db_table = 'campaign_lead_remarks'
