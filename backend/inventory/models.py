from django.db import models
from backend.core.models import TimelineEntry


class InventoryItem(models.Model):
    """A rentable commercial unit on offer"""
    location = models.CharField(max_length=255)
    property_type = models.CharField(max_length=100)
    floor = models.CharField(max_length=50, blank=True, default='')
    size = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    size_unit = models.CharField(max_length=20, blank=True, default='')
    rent = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    advance = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    security = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    commission = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    reoffered_by = models.CharField(max_length=255, blank=True, default='')
    is_rented = models.BooleanField(default=False)
    rent_coming = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    agreement_years = models.DecimalField(max_digits=5, decimal_places=1, null=True, blank=True)
    tenant = models.CharField(max_length=255, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['property_type'], name='idx_inventory_type'),
            models.Index(fields=['is_rented'], name='idx_inventory_is_rented'),
        ]

    def __str__(self):
        return f"{self.property_type} at {self.location}"


class InventoryNote(TimelineEntry):
    item = models.ForeignKey(InventoryItem, on_delete=models.CASCADE, related_name='notes')

    class Meta(TimelineEntry.Meta):
        db_table = 'inventory_notes'
