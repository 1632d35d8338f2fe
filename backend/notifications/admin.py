from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['notification_type', 'task', 'target_user', 'triggered_by', 'is_read', 'created_at']
    list_filter = ['notification_type', 'is_read']
    search_fields = ['message', 'target_user__email']
    ordering = ['-created_at']
