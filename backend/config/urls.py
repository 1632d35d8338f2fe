"""
URL configuration for the RealProp backend.

Every app mounts its routes under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve
from backend.core.views import health

admin.site.site_header = "RealProp Admin Panel"
admin.site.site_title = "RealProp Admin Portal"
admin.site.index_title = "Welcome to RealProp Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', health, name='health'),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.projects.urls')),
    path('api/v1/', include('backend.leads.urls')),
    path('api/v1/', include('backend.dashboard.urls')),
    path('api/v1/', include('backend.inventory.urls')),
    path('api/v1/', include('backend.tasks.urls')),
    path('api/v1/', include('backend.notifications.urls')),
    path('api/v1/', include('backend.accounts.urls')),
    path('api/v1/', include('backend.campaigns.urls')),
    path('api/v1/', include('backend.prospecting.urls')),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
