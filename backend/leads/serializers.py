from rest_framework import serializers
from backend.core.serializers import UserSummarySerializer
from .models import Lead, LeadRemark, LeadStatusChange


class LeadRemarkSerializer(serializers.ModelSerializer):
    added_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = LeadRemark
        fields = ['id', 'text', 'added_by', 'timestamp']


class LeadStatusChangeSerializer(serializers.ModelSerializer):
    changed_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = LeadStatusChange
        fields = ['id', 'status', 'changed_by', 'timestamp']


class LeadSerializer(serializers.ModelSerializer):
    project_id = serializers.IntegerField()
    remark = serializers.CharField(write_only=True, required=False, allow_blank=True, trim_whitespace=True)
    remarks = LeadRemarkSerializer(many=True, read_only=True)
    status_history = LeadStatusChangeSerializer(many=True, read_only=True)

    class Meta:
        model = Lead
        fields = ['id', 'project_id', 'name', 'contact_no', 'requirement', 'status', 'referred_by',
                  'lead_source', 'remark', 'remarks', 'status_history', 'last_updated_at',
                  'created_at', 'updated_at']
        read_only_fields = ['last_updated_at', 'created_at', 'updated_at']
        extra_kwargs = {
            'requirement': {'required': False, 'allow_blank': True},
            'referred_by': {'required': False, 'allow_blank': True},
            'lead_source': {'required': False, 'allow_blank': True},
        }

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        return value

    def validate_contact_no(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Contact number is required')
        return value
