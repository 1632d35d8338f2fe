from django.contrib import admin
from .models import Campaign, CampaignLead, CampaignLeadRemark


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = ['name', 'assigned_to', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['name', 'assigned_to__email']


class CampaignLeadRemarkInline(admin.TabularInline):
    model = CampaignLeadRemark
    extra = 0


@admin.register(CampaignLead)
class CampaignLeadAdmin(admin.ModelAdmin):
    list_display = ['name', 'campaign', 'phone', 'email', 'status', 'created_at']
    list_filter = ['status', 'campaign']
    search_fields = ['name', 'phone', 'email', 'address']
    inlines = [CampaignLeadRemarkInline]
