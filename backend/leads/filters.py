import django_filters
from django.db.models import Q
from .models import Lead


class LeadFilter(django_filters.FilterSet):
    """Server-side filters for the lead table"""
    status = django_filters.ChoiceFilter(choices=Lead.STATUS_CHOICES)
    search = django_filters.CharFilter(method='filter_search', label='Search')
    created_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    created_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = Lead
        fields = ['status', 'search', 'created_from', 'created_to']

    def filter_search(self, queryset, name, value):
        """Case-insensitive match across the lead's text fields and its remarks"""
        search = value.strip()
        if not search:
            return queryset
        return queryset.filter(
            Q(name__icontains=search) |
            Q(contact_no__icontains=search) |
            Q(requirement__icontains=search) |
            Q(referred_by__icontains=search) |
            Q(lead_source__icontains=search) |
            Q(remarks__text__icontains=search)
        ).distinct()
