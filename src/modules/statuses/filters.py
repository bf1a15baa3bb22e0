import django_filters

from modules.statuses.models import Status


class StatusFilter(django_filters.FilterSet):
    is_active = django_filters.BooleanFilter(field_name="is_active")
    is_core = django_filters.BooleanFilter(field_name="is_core")
    is_paid = django_filters.BooleanFilter(field_name="is_paid")

    class Meta:
        model = Status
        fields = ["is_active", "is_core", "is_paid"]
