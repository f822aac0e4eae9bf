# apps/common/filters.py

import django_filters
from django.db.models import Q


class ArenaFilterSet(django_filters.FilterSet):
    """
    Base de los listados:
      - keyword: icontains OR sobre `keyword_fields` (admite relaciones).
      - orderby: clave de `orderby_map`; si falta o no existe, `default_ordering`.
    """

    keyword = django_filters.CharFilter(method="filter_keyword")
    orderby = django_filters.CharFilter(method="filter_noop")

    keyword_fields = ()
    orderby_map = {"id_asc": ("id",), "id_desc": ("-id",)}
    default_ordering = ("-id",)

    def filter_keyword(self, queryset, name, value):
        value = (value or "").strip()
        if not value or not self.keyword_fields:
            return queryset
        condition = Q()
        for field in self.keyword_fields:
            condition |= Q(**{f"{field}__icontains": value})
        return queryset.filter(condition).distinct()

    def filter_noop(self, queryset, name, value):
        return queryset

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        key = self.form.cleaned_data.get("orderby") or ""
        return queryset.order_by(*self.orderby_map.get(key, self.default_ordering))
