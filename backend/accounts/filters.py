import django_filters
from .models import AccountEntry

VALID_TYPES = [choice[0] for choice in AccountEntry.TYPE_CHOICES]


class AccountEntryFilter(django_filters.FilterSet):
    project_id = django_filters.NumberFilter(field_name='project_id')
    type = django_filters.CharFilter(method='filter_type')
    start_date = django_filters.DateFilter(field_name='date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='date', lookup_expr='lte')

    class Meta:
        model = AccountEntry
        fields = ['project_id', 'type', 'start_date', 'end_date']

    def filter_type(self, queryset, name, value):
        # Unknown types are ignored rather than rejected
        if value not in VALID_TYPES:
            return queryset
        return queryset.filter(entry_type=value)
