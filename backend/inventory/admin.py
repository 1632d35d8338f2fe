from django.contrib import admin
from .models import InventoryItem, InventoryNote


class InventoryNoteInline(admin.TabularInline):
    model = InventoryNote
    extra = 0


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['location', 'property_type', 'floor', 'rent', 'is_rented', 'tenant', 'created_at']
    list_filter = ['property_type', 'is_rented']
    search_fields = ['location', 'property_type', 'floor', 'tenant', 'reoffered_by']
    inlines = [InventoryNoteInline]
