# apps/common/pagination.py

import math

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.common.exceptions import BadRequest


def _positive_int(raw, default):
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


class ArenaPagination(PageNumberPagination):
    """
    Paginación por página con el shape que consume el frontend:
    {success, page, perPage, totalRows, totalPages, rows}

    - perPage se acota a [1, PAGINATION_MAX_PER_PAGE].
    - Una página mayor a totalPages responde 400 con "redirect" a la última.
    """

    page_query_param = "page"
    page_size_query_param = "perPage"
    page_size_aliases = ()

    def get_max_page_size(self):
        return self.max_page_size or getattr(settings, "PAGINATION_MAX_PER_PAGE", 100)

    def get_page_size(self, request):
        default = self.page_size or settings.REST_FRAMEWORK.get("PAGE_SIZE", 10)
        raw = request.query_params.get(self.page_size_query_param)
        for alias in self.page_size_aliases:
            if raw is None:
                raw = request.query_params.get(alias)
        size = _positive_int(raw, default)
        return max(1, min(size, self.get_max_page_size()))

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        self.per_page = self.get_page_size(request)
        self.page_number = _positive_int(request.query_params.get(self.page_query_param), 1)
        self.total_rows = queryset.count()
        self.total_pages = math.ceil(self.total_rows / self.per_page) if self.total_rows else 0

        if self.total_rows and self.page_number > self.total_pages:
            raise BadRequest(
                "Page out of range.",
                redirect=f"?{self.page_query_param}={self.total_pages}",
            )

        offset = (self.page_number - 1) * self.per_page
        return list(queryset[offset:offset + self.per_page])

    def get_paginated_response(self, data):
        return Response({
            "success": True,
            "page": self.page_number,
            "perPage": self.per_page,
            "totalRows": self.total_rows,
            "totalPages": self.total_pages,
            "rows": data,
        })

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "page": {"type": "integer"},
                "perPage": {"type": "integer"},
                "totalRows": {"type": "integer"},
                "totalPages": {"type": "integer"},
                "rows": schema,
            },
        }


def pagination_class(per_page, max_per_page=None, aliases=()):
    """Builds an ArenaPagination subclass with a different default page size."""
    return type(
        f"ArenaPagination{per_page}",
        (ArenaPagination,),
        {"page_size": per_page, "max_page_size": max_per_page, "page_size_aliases": tuple(aliases)},
    )
