from rest_framework import serializers
from backend.core.models import User
from backend.core.serializers import UserSummarySerializer
from .models import Project


class ProjectSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    manager = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = ['id', 'name', 'location', 'description', 'created_by', 'manager', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'description': {'required': False, 'allow_blank': True},
        }

    def get_manager(self, obj):
        """First manager assigned to the project, or None"""
        manager = next((user for user in obj.managers.all() if user.role == User.ROLE_MANAGER), None)
        if manager is None:
            return None
        return {'id': manager.id, 'name': manager.name, 'email': manager.email}

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        return value

    def validate_location(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Location is required')
        return value
