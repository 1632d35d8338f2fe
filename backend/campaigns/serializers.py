from rest_framework import serializers
from backend.core.serializers import UserSummarySerializer
from .models import Campaign, CampaignLead, CampaignLeadRemark

LEAD_TEXT_FIELDS = ('name', 'phone', 'email', 'website', 'instagram', 'facebook', 'address')


class CampaignSerializer(serializers.ModelSerializer):
    assigned_to = UserSummarySerializer(read_only=True)
    lead_count = serializers.SerializerMethodField()

    class Meta:
        model = Campaign
        fields = ['id', 'name', 'assigned_to', 'status', 'lead_count', 'created_at', 'updated_at']

    def get_lead_count(self, obj):
        # Annotated by the list view; counted otherwise
        count = getattr(obj, 'lead_count', None)
        return obj.leads.count() if count is None else count


class CampaignLeadRemarkSerializer(serializers.ModelSerializer):
    added_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = CampaignLeadRemark
        fields = ['id', 'text', 'added_by', 'timestamp']


class CampaignLeadSerializer(serializers.ModelSerializer):
    campaign = serializers.SerializerMethodField()
    remarks = CampaignLeadRemarkSerializer(many=True, read_only=True)

    class Meta:
        model = CampaignLead
        fields = ['id', 'campaign', 'name', 'phone', 'email', 'website', 'instagram', 'facebook',
                  'address', 'status', 'remarks', 'created_at', 'updated_at']

    def get_campaign(self, obj):
        campaign = obj.campaign
        assigned_to = campaign.assigned_to
        return {
            'id': campaign.id,
            'name': campaign.name,
            'assigned_to': (
                {'id': assigned_to.id, 'name': assigned_to.name, 'email': assigned_to.email}
                if assigned_to else None
            ),
        }


class CampaignLeadInputSerializer(serializers.Serializer):
    """One lead row of a new campaign; blank values become "N/A" """
    name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    website = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)
    instagram = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)
    facebook = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)

    def validate(self, attrs):
        return {field: attrs.get(field) or CampaignLead.NOT_AVAILABLE for field in LEAD_TEXT_FIELDS}


class CampaignCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, error_messages={'blank': 'Campaign name is required'})
    assigned_to = serializers.IntegerField()
    leads = CampaignLeadInputSerializer(many=True)

    def validate_leads(self, value):
        if not value:
            raise serializers.ValidationError('At least one lead is required')
        return value
