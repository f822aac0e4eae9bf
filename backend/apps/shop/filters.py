# apps/shop/filters.py

import django_filters

from apps.common.filters import ArenaFilterSet
from apps.common.params import int_list_param
from apps.shop.models import Order, Product


class ProductFilter(ArenaFilterSet):
    """
    - sportId / brandId: listas "1,2,3".
    - minPrice / maxPrice: se intercambian si vienen invertidos.
    - sort: price-asc | price-desc (tiene prioridad sobre orderby).
    """

    keyword_fields = ("name",)
    sort_map = {"price-asc": ("price", "id"), "price-desc": ("-price", "-id")}

    sportId = django_filters.CharFilter(method="filter_id_list")
    brandId = django_filters.CharFilter(method="filter_id_list")
    minPrice = django_filters.NumberFilter(method="filter_noop")
    maxPrice = django_filters.NumberFilter(method="filter_noop")
    sort = django_filters.CharFilter(method="filter_noop")

    id_list_fields = {"sportId": "sport_id__in", "brandId": "brand_id__in"}

    class Meta:
        model = Product
        fields = []

    def filter_id_list(self, queryset, name, value):
        ids = int_list_param({name: value}, name)
        if not ids:
            return queryset
        return queryset.filter(**{self.id_list_fields[name]: ids})

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        data = self.form.cleaned_data

        low, high = data.get("minPrice"), data.get("maxPrice")
        if low is not None and high is not None and low > high:
            low, high = high, low
        if low is not None:
            queryset = queryset.filter(price__gte=low)
        if high is not None:
            queryset = queryset.filter(price__lte=high)

        sort = data.get("sort")
        if sort in self.sort_map:
            queryset = queryset.order_by(*self.sort_map[sort])
        return queryset


class AdminOrderFilter(ArenaFilterSet):
    keyword_fields = ("delivery__name", "payment__name", "invoice__name", "status__name", "invoice_number")
    orderby_map = {
        **ArenaFilterSet.orderby_map,
        "total_asc": ("total", "id"),
        "total_desc": ("-total", "-id"),
        "created_asc": ("created_at", "id"),
        "created_desc": ("-created_at", "-id"),
    }
    default_ordering = ("id",)

    memberId = django_filters.NumberFilter(field_name="member_id")
    statusId = django_filters.NumberFilter(field_name="status_id")

    class Meta:
        model = Order
        fields = []
