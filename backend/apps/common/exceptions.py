# apps/common/exceptions.py

import logging

from django.core.exceptions import ObjectDoesNotExist
from django.db.models import ProtectedError, RestrictedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ArenaAPIException(exceptions.APIException):
    """APIException que admite payload extra en el cuerpo de la respuesta."""

    def __init__(self, detail=None, code=None, **extra):
        super().__init__(detail=detail, code=code)
        self.extra = extra


class Conflict(ArenaAPIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource conflict."
    default_code = "conflict"


class BadRequest(ArenaAPIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request."
    default_code = "bad_request"


class ServerError(ArenaAPIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error."
    default_code = "server_error"


def _flatten_issues(detail, path=None):
    """Convierte el detail anidado de DRF en [{"path": [...], "message": str}]."""
    path = path or []
    if isinstance(detail, dict):
        issues = []
        for key, value in detail.items():
            sub = path if key == "non_field_errors" else path + [key]
            issues.extend(_flatten_issues(value, sub))
        return issues
    if isinstance(detail, list):
        if all(not isinstance(item, (dict, list)) for item in detail):
            return [{"path": path, "message": str(item)} for item in detail]
        issues = []
        for index, item in enumerate(detail):
            issues.extend(_flatten_issues(item, path + [index]))
        return issues
    return [{"path": path, "message": str(detail)}]


def api_exception_handler(exc, context):
    """
    Handler global de DRF.

    Shape:
      - {"success": false, "message": str}
      - ValidationError agrega "issues": [{"path": [...], "message": str}]
      - ArenaAPIException agrega su payload extra (conflictIds, redirect, ...)
    """
    if isinstance(exc, ObjectDoesNotExist):
        exc = exceptions.NotFound()
    elif isinstance(exc, (ProtectedError, RestrictedError)):
        exc = Conflict("Resource is referenced by other records.")

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "[api][500] Unhandled error in %s: %s",
            view.__class__.__name__ if view else "unknown", exc,
        )
        return Response(
            {"success": False, "message": "Internal server error."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        issues = _flatten_issues(exc.detail)
        body = {
            "success": False,
            "message": issues[0]["message"] if issues else "Validation failed.",
            "issues": issues,
        }
    elif isinstance(exc, Http404):
        body = {"success": False, "message": "Not found."}
    else:
        detail = getattr(exc, "detail", None)
        body = {"success": False, "message": str(detail) if detail is not None else str(exc)}

    if isinstance(exc, ArenaAPIException):
        body.update(exc.extra)

    response.data = body
    return response
