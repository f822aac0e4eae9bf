# apps/course/views.py
import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.common.pagination import pagination_class
from apps.common.permissions import IsAdminOrReadOnly, IsAdminRole, IsOwnerOrAdmin, is_admin
from apps.common.viewsets import ArenaModelViewSet
from apps.course.filters import BookingFilter, LessonFilter
from apps.course.models import Booking, Lesson
from apps.course.serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingUpdateSerializer,
    LessonSerializer,
)
from apps.course.services.bookings import cancel_booking, create_booking

logger = logging.getLogger(__name__)


class LessonViewSet(ArenaModelViewSet):
    """
    Cursos.
    - Lectura pública (perPage 6); escritura admin.
    - keyword: título / cancha / deporte / coach.
    """
    queryset = Lesson.objects.select_related(
        "sport", "court", "court__center", "coach", "coach__member", "time_slot",
    )
    serializer_class = LessonSerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = LessonFilter
    pagination_class = pagination_class(6)
    delete_name_field = "title"


class BookingViewSet(ArenaModelViewSet):
    """
    Inscripciones.
    - list / update / multi: admin.
    - create: cualquier socio (solo para sí mismo salvo admin).
    - retrieve / destroy: dueño o admin. La baja libera el cupo.
    """
    queryset = Booking.objects.select_related(
        "member", "lesson", "lesson__coach__member", "lesson__time_slot", "status", "payment", "invoice",
    )
    serializer_class = BookingSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilter

    def get_permissions(self):
        if self.action in ("list", "update", "partial_update", "bulk_destroy"):
            return [IsAdminRole()]
        if self.action in ("retrieve", "destroy"):
            return [IsOwnerOrAdmin()]
        return super().get_permissions()

    def get_delete_name(self, instance):
        return instance.lesson.title

    def get_serializer_class(self):
        if self.action in ("update", "partial_update"):
            return BookingUpdateSerializer
        return BookingSerializer

    def create(self, request, *args, **kwargs):
        ser = BookingCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        member = request.user
        if is_admin(request.user) and data.get("member"):
            member = data["member"]

        booking = create_booking(
            member=member,
            lesson_id=data["lessonId"],
            payment=data["payment"],
            invoice=data["invoice"],
            status=data.get("status") if is_admin(request.user) else None,
            tax=data.get("tax"),
            carrier=data.get("carrier"),
        )
        booking = self.get_queryset().get(pk=booking.pk)
        return self.record_response(BookingSerializer(booking).data, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        ser = BookingUpdateSerializer(instance, data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        ser.save()
        instance = self.get_queryset().get(pk=instance.pk)
        return self.record_response(BookingSerializer(instance).data)

    def perform_destroy(self, instance):
        cancel_booking(instance)

    @action(detail=False, methods=["get"], url_path="member")
    def member(self, request):
        qs = self.get_queryset().filter(member=request.user).order_by("-created_at", "-id")
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(BookingSerializer(page, many=True).data)
