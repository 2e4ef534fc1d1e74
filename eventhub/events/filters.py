import django_filters
from django.db.models import Q

from eventhub.events.models import Event


class EventFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(method="filter_category")
    start_date = django_filters.IsoDateTimeFilter(field_name="date", lookup_expr="gte")
    end_date = django_filters.IsoDateTimeFilter(field_name="date", lookup_expr="lte")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Event
        fields = ["category", "start_date", "end_date", "search"]

    def filter_category(self, queryset, name, value):
        return queryset.filter(category__iexact=value.strip().lower())

    def filter_search(self, queryset, name, value):
        term = value.strip()
        return queryset.filter(Q(title__icontains=term) | Q(description__icontains=term))
