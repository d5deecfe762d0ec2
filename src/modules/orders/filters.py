from typing import Any, Dict

import django_filters
from django_filters.utils import translate_validation

from modules.orders.constants import OrderStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(field_name="total", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="total", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "start_date", "end_date", "min_total", "max_total"]

    def lookups(self) -> Dict[str, Any]:
        """Validated query parameters as ORM look-ups for the repository.

        Raises DRF's ``ValidationError`` for malformed parameters.
        """
        if not self.is_valid():
            raise translate_validation(self.errors)

        lookups: Dict[str, Any] = {}
        for name, value in self.form.cleaned_data.items():
            if value in (None, ""):
                continue
            declared = self.filters[name]
            lookups[f"{declared.field_name}__{declared.lookup_expr}"] = value
        return lookups
