from rest_framework import serializers
from backend.core.serializers import UserSummarySerializer
from .models import AccountEntry


class AccountEntrySerializer(serializers.ModelSerializer):
    """
    Account entry as the finance screens use it.

    `project_id` is write-only input; the view resolves the project and
    passes it to save().
    """
    project_id = serializers.IntegerField(write_only=True)
    project = serializers.SerializerMethodField()
    type = serializers.ChoiceField(source='entry_type', choices=AccountEntry.TYPE_CHOICES)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    added_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = AccountEntry
        fields = ['id', 'project_id', 'project', 'date', 'amount', 'type', 'mode', 'category',
                  'description', 'added_by', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'mode': {'required': True},
            'description': {'required': False, 'allow_blank': True},
        }

    def get_project(self, obj):
        return {'id': obj.project_id, 'name': obj.project.name}

    def create(self, validated_data):
        validated_data.pop('project_id', None)
        return super().create(validated_data)

    def update(self, instance, validated_data):
        validated_data.pop('project_id', None)
        return super().update(instance, validated_data)
