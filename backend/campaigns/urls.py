from django.urls import path
from .views import (
    campaign_list_create, campaign_detail, campaign_leads_all,
    campaign_lead_update_status, campaign_lead_add_remark,
)

urlpatterns = [
    path('campaigns/', campaign_list_create, name='campaign-list-create'),
    path('campaigns/leads/all/', campaign_leads_all, name='campaign-leads-all'),
    path('campaigns/leads/<int:pk>/', campaign_lead_update_status, name='campaign-lead-update-status'),
    path('campaigns/leads/<int:pk>/remarks/', campaign_lead_add_remark, name='campaign-lead-add-remark'),
    path('campaigns/<int:pk>/', campaign_detail, name='campaign-detail'),
]
