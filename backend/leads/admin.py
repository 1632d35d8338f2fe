from django.contrib import admin
from .models import Lead, LeadRemark, LeadStatusChange


class LeadRemarkInline(admin.TabularInline):
    model = LeadRemark
    extra = 0


class LeadStatusChangeInline(admin.TabularInline):
    model = LeadStatusChange
    extra = 0


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_no', 'project', 'status', 'last_updated_at', 'created_at']
    list_filter = ['status', 'project']
    search_fields = ['name', 'contact_no', 'requirement', 'referred_by', 'lead_source']
    inlines = [LeadStatusChangeInline, LeadRemarkInline]
