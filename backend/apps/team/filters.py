# apps/team/filters.py

import django_filters

from apps.common.filters import ArenaFilterSet
from apps.team.models import Team


class TeamFilter(ArenaFilterSet):
    """sortBy (newest, oldest, members_*, level_*) tiene prioridad sobre orderby."""

    keyword_fields = ("name",)
    sort_map = {
        "newest": ("-created_at", "-id"),
        "oldest": ("created_at", "id"),
        "members_desc": ("-member_count", "-id"),
        "members_asc": ("member_count", "id"),
        "level_desc": ("-level_id", "-id"),
        "level_asc": ("level_id", "id"),
    }

    sortBy = django_filters.CharFilter(method="filter_noop")
    levelId = django_filters.NumberFilter(field_name="level_id")
    sportId = django_filters.NumberFilter(field_name="court__sport_id")
    centerId = django_filters.NumberFilter(field_name="court__center_id")
    locationId = django_filters.NumberFilter(field_name="court__center__location_id")
    isFeatured = django_filters.BooleanFilter(field_name="is_featured")

    class Meta:
        model = Team
        fields = []

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        sort = self.form.cleaned_data.get("sortBy")
        if sort in self.sort_map:
            queryset = queryset.order_by(*self.sort_map[sort])
        return queryset
