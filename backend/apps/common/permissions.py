# apps/common/permissions.py

from rest_framework import permissions


def is_admin(user):
    return bool(user and user.is_authenticated and (user.role == "admin" or user.is_superuser))


class IsAdminRole(permissions.BasePermission):
    message = "Admin permission required."

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsAdminOrReadOnly(permissions.BasePermission):
    """
    - GET/HEAD/OPTIONS abiertos (catálogo público).
    - Escritura solo para role == "admin".
    """
    message = "Admin permission required."

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_admin(request.user)


class IsOwnerOrAdmin(permissions.BasePermission):
    """
    Acceso a objetos propios (obj.member == request.user) o a cualquiera si es admin.
    """

    def has_permission(self, request, view):
        return request.user.is_authenticated

    def has_object_permission(self, request, view, obj):
        if is_admin(request.user):
            return True
        owner_id = getattr(obj, "member_id", None)
        return owner_id is not None and owner_id == request.user.id
