# apps/common/views.py

import psutil
import logging
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.permissions import IsAdminRole, is_admin
from apps.common.services.lookups import lookup_rows

logger = logging.getLogger(__name__)

# Lookups con datos personales: solo admin
ADMIN_ONLY_LOOKUPS = {"member"}


class LookupView(APIView):
    """
    GET /api/common/<name>/
    🔹 Listas id/nombre para selects (sport, center, court, time-slot, ...).
    - 404 si el recurso no existe o no hay filas.
    - Cache por LOOKUP_CACHE_SECONDS (clave = nombre + query params).
    """
    permission_classes = [AllowAny]

    def get(self, request, name):
        if name in ADMIN_ONLY_LOOKUPS and not is_admin(request.user):
            raise PermissionDenied("Admin permission required.")

        ttl = getattr(settings, "LOOKUP_CACHE_SECONDS", 0)
        cache_key = f"lookup:{name}:{request.GET.urlencode()}"
        rows = cache.get(cache_key) if ttl else None

        if rows is None:
            rows = lookup_rows(name, request.query_params)
            if rows is None:
                raise NotFound(f"Unknown lookup: {name}")
            if ttl:
                cache.set(cache_key, rows, ttl)

        if not rows:
            raise NotFound("No data found.")
        return Response({"success": True, "rows": rows})


def _level(percent):
    if percent >= 90:
        return "critical"
    if percent >= 80:
        return "warning"
    return "ok"


class ResourceMonitorView(APIView):
    """
    🔹 Recursos del servidor (memoria, disco, CPU). Solo admin.
    """
    permission_classes = [IsAdminRole]

    def get(self, request):
        memory = psutil.virtual_memory()
        disk = psutil.disk_usage('/')
        cpu = psutil.cpu_percent(interval=0.5)
        gb = 1024 ** 3

        data = {
            "timestamp": timezone.now().isoformat(),
            "memory": {
                "totalGb": round(memory.total / gb, 2),
                "usedGb": round(memory.used / gb, 2),
                "freeGb": round(memory.available / gb, 2),
                "percent": round(memory.percent, 1),
                "status": _level(memory.percent),
            },
            "disk": {
                "totalGb": round(disk.total / gb, 2),
                "usedGb": round(disk.used / gb, 2),
                "freeGb": round(disk.free / gb, 2),
                "percent": round(disk.percent, 1),
                "status": _level(disk.percent),
            },
            "cpu": {"percent": round(cpu, 1), "status": _level(cpu)},
        }
        data["alerts"] = [
            f"{key}: {data[key]['percent']:.1f}% ({data[key]['status']})"
            for key in ("memory", "disk", "cpu")
            if data[key]["status"] != "ok"
        ]

        logger.info(
            "[monitor] memory=%.1f%% disk=%.1f%% cpu=%.1f%%",
            memory.percent, disk.percent, cpu,
        )
        return Response({"success": True, **data})
