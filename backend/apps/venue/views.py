# apps/venue/views.py
import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Avg, Count, Prefetch
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.common.exceptions import Conflict
from apps.common.pagination import pagination_class
from apps.common.params import date_param, int_param
from apps.common.permissions import IsAdminOrReadOnly, IsAdminRole
from apps.common.viewsets import ArenaModelViewSet
from apps.venue.filters import (
    CenterFilter,
    CourtFilter,
    CourtTimeSlotFilter,
    ReservationFilter,
    TimeSlotFilter,
)
from apps.venue.models import (
    Center,
    CenterImage,
    Court,
    CourtTimeSlot,
    Reservation,
    ReservationCourtTimeSlot,
    TimeSlot,
)
from apps.venue.serializers import (
    BatchPriceSerializer,
    CenterRatingSerializer,
    CenterSerializer,
    CourtSerializer,
    CourtTimeSlotSerializer,
    MemberReservationSerializer,
    RatingInputSerializer,
    ReservationSerializer,
    ReservationWriteSerializer,
    TimeSlotSerializer,
)
from apps.venue.services import court_time_slots as slots_service
from apps.venue.services import ratings as ratings_service
from apps.venue.services.reservations import create_reservation, update_reservation

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 90
RatingPagination = pagination_class(10, max_per_page=50)


# ==========================
# Centros
# ==========================
class CenterViewSet(ArenaModelViewSet):
    """
    Catálogo de centros.
    - Lectura pública; escritura admin.
    - Calificaciones anidadas: rating / ratings / my-rating / rating-stats.
    """
    serializer_class = CenterSerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = CenterFilter

    def get_queryset(self):
        return (
            Center.objects
            .select_related("location")
            .prefetch_related("sports", Prefetch("images", queryset=CenterImage.objects.order_by("order", "id")))
            .annotate(average_rating=Avg("ratings__rating"), rating_count=Count("ratings", distinct=True))
        )

    def get_permissions(self):
        if self.action in ("rating", "my_rating"):
            return [IsAuthenticated()]
        return super().get_permissions()

    @action(detail=True, methods=["post", "delete"], url_path="rating")
    def rating(self, request, pk=None):
        if request.method == "DELETE":
            rating_id = ratings_service.delete_rating(pk, request.user)
            return Response({"success": True, "deletedId": rating_id})

        ser = RatingInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        rating, created = ratings_service.add_rating(
            pk, request.user, ser.validated_data["rating"], ser.validated_data.get("comment"),
        )
        return Response(
            {"success": True, "record": CenterRatingSerializer(rating).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @action(detail=True, methods=["get"], url_path="ratings")
    def ratings(self, request, pk=None):
        qs = ratings_service.center_ratings(pk)
        paginator = RatingPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(CenterRatingSerializer(page, many=True).data)

    @action(detail=True, methods=["get"], url_path="my-rating")
    def my_rating(self, request, pk=None):
        rating = ratings_service.member_rating(pk, request.user)
        return Response({"success": True, "record": CenterRatingSerializer(rating).data})

    @action(detail=True, methods=["get"], url_path="rating-stats")
    def rating_stats(self, request, pk=None):
        return Response({"success": True, **ratings_service.rating_stats(pk)})


# ==========================
# Canchas / franjas
# ==========================
class CourtViewSet(ArenaModelViewSet):
    queryset = Court.objects.select_related("center", "sport")
    serializer_class = CourtSerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = CourtFilter


class TimeSlotViewSet(ArenaModelViewSet):
    queryset = TimeSlot.objects.select_related("time_period")
    serializer_class = TimeSlotSerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = TimeSlotFilter
    delete_name_field = "label"

    def _save_unique(self, serializer):
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError:
            raise Conflict("A time slot with the same start and end already exists.")

    def perform_create(self, serializer):
        self._save_unique(serializer)

    def perform_update(self, serializer):
        self._save_unique(serializer)


class CourtTimeSlotViewSet(ArenaModelViewSet):
    """
    Precio por cancha × franja.
    - date / range: disponibilidad pública.
    - batch-set-price: upsert masivo (admin).
    """
    queryset = CourtTimeSlot.objects.select_related(
        "court", "court__center", "court__sport", "time_slot", "time_slot__time_period",
    )
    serializer_class = CourtTimeSlotSerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = CourtTimeSlotFilter

    def get_delete_name(self, instance):
        return str(instance)

    def _save_unique(self, serializer):
        data = serializer.validated_data
        court = data.get("court", getattr(serializer.instance, "court", None))
        time_slot = data.get("time_slot", getattr(serializer.instance, "time_slot", None))
        dup = CourtTimeSlot.objects.filter(court=court, time_slot=time_slot)
        if serializer.instance is not None:
            dup = dup.exclude(pk=serializer.instance.pk)
        if dup.exists():
            raise Conflict("This court already has a price for that time slot.")
        try:
            with transaction.atomic():
                serializer.save()
        except IntegrityError:
            raise Conflict("This court already has a price for that time slot.")

    def perform_create(self, serializer):
        self._save_unique(serializer)

    def perform_update(self, serializer):
        self._save_unique(serializer)

    @action(detail=False, methods=["get"], url_path="date")
    def by_date(self, request):
        params = request.query_params
        result = slots_service.availability_for_date(
            int_param(params, "centerId", required=True),
            int_param(params, "sportId", required=True),
            date_param(params, "date", required=True),
            exclude_reservation_id=int_param(params, "excludeReservationId"),
        )
        return Response({"success": True, **result})

    @action(detail=False, methods=["get"], url_path="range")
    def by_range(self, request):
        params = request.query_params
        days = int_param(params, "days", default=settings.AVAILABILITY_RANGE_DAYS)
        if days > MAX_RANGE_DAYS:
            raise ValidationError({"days": [f"Must be at most {MAX_RANGE_DAYS}."]})
        rows = slots_service.availability_range(
            int_param(params, "centerId", required=True),
            int_param(params, "sportId", required=True),
            start_date=date_param(params, "startDate"),
            days=days,
        )
        return Response({"success": True, "rows": rows})

    @action(detail=False, methods=["post"], url_path="batch-set-price")
    def batch_set_price(self, request):
        ser = BatchPriceSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        affected = slots_service.batch_set_price(
            price=data["price"],
            court_ids=data.get("courtIds"),
            center_id=data.get("centerId"),
            sport_id=data.get("sportId"),
            location_id=data.get("locationId"),
            time_slot_ids=data.get("timeSlotIds"),
            time_period_id=data.get("timePeriodId"),
        )
        return Response({"success": True, "affectedRows": affected})


# ==========================
# Reservas
# ==========================
class ReservationViewSet(ArenaModelViewSet):
    """
    CRUD admin de reservas + endpoints del socio (member / book).
    Alta y edición pasan por services.reservations (conflictos -> 409).
    """
    serializer_class = ReservationSerializer
    permission_classes = [IsAdminRole]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ReservationFilter

    def get_queryset(self):
        return (
            Reservation.objects
            .select_related("member", "status", "payment", "invoice")
            .prefetch_related(Prefetch(
                "slot_links",
                queryset=ReservationCourtTimeSlot.objects.select_related(
                    "court_time_slot__court__center",
                    "court_time_slot__court__sport",
                    "court_time_slot__time_slot",
                ).order_by("court_time_slot__time_slot__start_time", "id"),
            ))
        )

    def get_permissions(self):
        if self.action in ("member", "book"):
            return [IsAuthenticated()]
        return super().get_permissions()

    def get_delete_name(self, instance):
        return f"{instance.date:%Y-%m-%d} {instance.member.name or instance.member.email}"

    def _reservation_kwargs(self, data):
        return {
            "court_time_slot_ids": data["courtTimeSlotIds"],
            "date": data["date"],
            "payment": data["payment"],
            "invoice": data["invoice"],
            "status": data.get("status"),
            "tax": data.get("tax"),
            "carrier": data.get("carrier"),
        }

    def _detail(self, reservation, code=status.HTTP_200_OK):
        reservation = self.get_queryset().get(pk=reservation.pk)
        return self.record_response(ReservationSerializer(reservation).data, code)

    def create(self, request, *args, **kwargs):
        ser = ReservationWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        reservation = create_reservation(member=data["member"], **self._reservation_kwargs(data))
        return self._detail(reservation, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        ser = ReservationWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        reservation = update_reservation(instance, member=data["member"], **self._reservation_kwargs(data))
        return self._detail(reservation)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    @action(detail=False, methods=["get"], url_path="member")
    def member(self, request):
        qs = self.get_queryset().filter(member=request.user).order_by("-date", "-id")
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(ReservationSerializer(page, many=True).data)

    @action(detail=False, methods=["post"], url_path="book")
    def book(self, request):
        ser = MemberReservationSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        data.pop("status", None)
        reservation = create_reservation(member=request.user, **self._reservation_kwargs(data))
        return self._detail(reservation, status.HTTP_201_CREATED)
