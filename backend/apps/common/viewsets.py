# apps/common/viewsets.py

import logging

from django.db import transaction
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.common.params import checked_items

logger = logging.getLogger(__name__)


class ArenaModelViewSet(viewsets.ModelViewSet):
    """
    ModelViewSet con el contrato de borrado del API:
      - GET/PUT /<id>/  -> {success, record}
      - POST /          -> {success, insertId, record} (201)
      - DELETE /<id>/    -> {success, deletedId, deletedName}
      - DELETE /multi/   -> body {checkedItems: [...]} -> {success, affectedRows, deleted}

    Las subclases personalizan el borrado real en `perform_destroy`, así el
    borrado masivo reutiliza la misma lógica (por ejemplo, liberar cupos).
    """

    lookup_value_regex = r"\d+"
    delete_name_field = "name"

    def get_delete_name(self, instance):
        return getattr(instance, self.delete_name_field, None) or str(instance)

    def get_bulk_queryset(self):
        return self.get_queryset()

    def record_response(self, data, code=status.HTTP_200_OK):
        body = {"success": True, "record": data}
        if code == status.HTTP_201_CREATED:
            body["insertId"] = data.get("id")
        return Response(body, status=code)

    def retrieve(self, request, *args, **kwargs):
        return self.record_response(self.get_serializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        response = super().create(request, *args, **kwargs)
        return self.record_response(response.data, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        response = super().update(request, *args, **kwargs)
        return self.record_response(response.data)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        summary = {"deletedId": instance.pk, "deletedName": self.get_delete_name(instance)}
        with transaction.atomic():
            self.perform_destroy(instance)
        logger.info("[%s.destroy] id=%s", self.basename, summary["deletedId"])
        return Response({"success": True, **summary}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["delete"], url_path="multi")
    def bulk_destroy(self, request, *args, **kwargs):
        ids = checked_items(request.data)
        deleted = []
        with transaction.atomic():
            for instance in self.get_bulk_queryset().filter(pk__in=ids).order_by("pk"):
                self.check_object_permissions(request, instance)
                deleted.append({"id": instance.pk, "name": self.get_delete_name(instance)})
                self.perform_destroy(instance)

        logger.info(
            "[%s.bulk_destroy] pedidos=%s borrados=%s", self.basename, len(ids), len(deleted)
        )
        return Response({
            "success": bool(deleted),
            "affectedRows": len(deleted),
            "deleted": deleted,
        }, status=status.HTTP_200_OK)
