from django.urls import path
from .views import lead_list_create, lead_detail, lead_add_remark

urlpatterns = [
    path('leads/', lead_list_create, name='lead-list-create'),
    path('leads/<int:pk>/', lead_detail, name='lead-detail'),
    path('leads/<int:pk>/remarks/', lead_add_remark, name='lead-add-remark'),
]
