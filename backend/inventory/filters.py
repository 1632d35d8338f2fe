import django_filters
from django.db.models import Q
from .models import InventoryItem


class InventoryItemFilter(django_filters.FilterSet):
    type = django_filters.CharFilter(field_name='property_type', lookup_expr='iexact')
    is_rented = django_filters.BooleanFilter(field_name='is_rented')
    search = django_filters.CharFilter(method='filter_search', label='Search')
    min_rent = django_filters.NumberFilter(field_name='rent', lookup_expr='gte')
    max_rent = django_filters.NumberFilter(field_name='rent', lookup_expr='lte')

    class Meta:
        model = InventoryItem
        fields = ['type', 'is_rented', 'search', 'min_rent', 'max_rent']

    def filter_search(self, queryset, name, value):
        search = value.strip()
        if not search:
            return queryset
        return queryset.filter(
            Q(location__icontains=search) |
            Q(property_type__icontains=search) |
            Q(floor__icontains=search) |
            Q(tenant__icontains=search) |
            Q(reoffered_by__icontains=search)
        )
