from collections.abc import Mapping
from rest_framework import serializers
from backend.core.serializers import UserSummarySerializer
from .models import InventoryItem, InventoryNote
from .utils import number_to_words

NUMERIC_FIELDS = ('size', 'rent', 'advance', 'security', 'commission', 'rent_coming', 'agreement_years')
OPTIONAL_TEXT_FIELDS = ('floor', 'size_unit', 'reoffered_by', 'tenant')


class InventoryNoteSerializer(serializers.ModelSerializer):
    added_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = InventoryNote
        fields = ['id', 'text', 'added_by', 'timestamp']


class InventoryItemSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source='property_type', max_length=100)
    notes = InventoryNoteSerializer(many=True, read_only=True)
    rent_in_words = serializers.SerializerMethodField()

    class Meta:
        model = InventoryItem
        fields = ['id', 'location', 'type', 'floor', 'size', 'size_unit', 'rent', 'rent_in_words',
                  'advance', 'security', 'commission', 'reoffered_by', 'is_rented', 'rent_coming',
                  'agreement_years', 'tenant', 'notes', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'floor': {'required': False, 'allow_blank': True},
            'size_unit': {'required': False, 'allow_blank': True},
            'reoffered_by': {'required': False, 'allow_blank': True},
            'tenant': {'required': False, 'allow_blank': True},
        }

    def to_internal_value(self, data):
        if not isinstance(data, Mapping):
            return super().to_internal_value(data)
        # Blank numeric inputs from forms mean "no value"
        data = data.dict() if hasattr(data, 'dict') else dict(data)
        for field in NUMERIC_FIELDS:
            value = data.get(field)
            if isinstance(value, str) and not value.strip():
                data[field] = None
        for field in OPTIONAL_TEXT_FIELDS:
            if field in data and data[field] is None:
                data[field] = ''
        return super().to_internal_value(data)

    def get_rent_in_words(self, obj):
        return number_to_words(obj.rent)
