import django_filters

from modules.orders.constants import OrderStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    """Admin order filters.  ``status=all`` is the same as no status filter."""

    status = django_filters.CharFilter(method="filter_status")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(field_name="total", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="total", lookup_expr="lte")

    class Meta:
        model = Order
        fields = [
            "status",
            "start_date",
            "end_date",
            "min_total",
            "max_total",
        ]

    def filter_status(self, queryset, name, value):
        if not value or value == "all":
            return queryset
        if value not in OrderStatus.values:
            return queryset.none()
        return queryset.filter(status=value)
