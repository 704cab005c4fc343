import django_filters

from modules.catalog.models import ApparelProduct


class ApparelProductFilter(django_filters.FilterSet):
    title = django_filters.CharFilter(field_name="title", lookup_expr="icontains")
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")

    class Meta:
        model = ApparelProduct
        fields = ["title", "status"]
