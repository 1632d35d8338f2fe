from rest_framework import serializers
from backend.core.serializers import UserSummarySerializer
from .models import Task, TaskComment
from .utils import build_comment_threads


class TaskCommentSerializer(serializers.ModelSerializer):
    added_by = UserSummarySerializer(read_only=True)
    parent_comment_id = serializers.IntegerField(source='parent_id', read_only=True)

    class Meta:
        model = TaskComment
        fields = ['id', 'text', 'added_by', 'parent_comment_id', 'timestamp']


class TaskSerializer(serializers.ModelSerializer):
    assigned_to = serializers.SerializerMethodField()
    project = serializers.SerializerMethodField()
    lead = serializers.SerializerMethodField()
    created_by = UserSummarySerializer(read_only=True)
    comments = TaskCommentSerializer(many=True, read_only=True)

    class Meta:
        model = Task
        fields = ['id', 'number', 'description', 'status', 'assigned_to', 'project', 'lead', 'created_by',
                  'comments', 'last_updated_at', 'last_viewed_by_admin', 'last_comments_viewed_by_admin',
                  'last_viewed_by_manager', 'last_comments_viewed_by_manager', 'created_at', 'updated_at']

    def get_assigned_to(self, obj):
        user = obj.assigned_to
        if user is None:
            return None
        return {'id': user.id, 'name': user.name, 'email': user.email, 'role': user.role}

    def get_project(self, obj):
        if obj.project is None:
            return None
        return {'id': obj.project.id, 'name': obj.project.name, 'location': obj.project.location}

    def get_lead(self, obj):
        if obj.lead is None:
            return None
        return {'id': obj.lead.id, 'name': obj.lead.name, 'contact_no': obj.lead.contact_no}


class TaskDetailSerializer(TaskSerializer):
    comment_threads = serializers.SerializerMethodField()

    class Meta(TaskSerializer.Meta):
        fields = TaskSerializer.Meta.fields + ['comment_threads']

    def get_comment_threads(self, obj):
        comments = TaskCommentSerializer(obj.comments.all(), many=True).data
        return build_comment_threads(comments)


class TaskWriteSerializer(serializers.Serializer):
    """Input for creating or editing a task; relations are checked by the views"""
    number = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True)
    assigned_to = serializers.IntegerField()
    project_id = serializers.IntegerField(required=False, allow_null=True)
    lead_id = serializers.IntegerField(required=False, allow_null=True)
