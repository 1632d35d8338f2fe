from rest_framework import serializers
from backend.core.serializers import UserSummarySerializer
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source='notification_type', read_only=True)
    task = serializers.SerializerMethodField()
    triggered_by = UserSummarySerializer(read_only=True)
    read = serializers.BooleanField(source='is_read', read_only=True)

    class Meta:
        model = Notification
        fields = ['id', 'type', 'task', 'triggered_by', 'message', 'read', 'read_at', 'metadata', 'created_at']

    def get_task(self, obj):
        task = obj.task
        return {
            'id': task.id,
            'number': task.number,
            'description': task.description,
            'status': task.status,
        }
