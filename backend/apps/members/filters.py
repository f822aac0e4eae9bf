# apps/members/filters.py

from django.contrib.auth import get_user_model

from apps.common.filters import ArenaFilterSet


class MemberFilter(ArenaFilterSet):
    keyword_fields = ("name", "email", "account", "phone", "address")
    orderby_map = {
        **ArenaFilterSet.orderby_map,
        "birth_asc": ("birth", "id"),
        "birth_desc": ("-birth", "-id"),
        "phone_asc": ("phone", "id"),
        "phone_desc": ("-phone", "-id"),
    }

    class Meta:
        model = get_user_model()
        fields = ["role", "gender"]
