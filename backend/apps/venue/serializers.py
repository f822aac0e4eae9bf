# apps/venue/serializers.py

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from apps.common.logging import LoggedModelSerializer
from apps.common.models import InvoiceType, Location, Payment, Sport, Status
from apps.common.validators import HourMinuteField, InvoiceDataMixin
from apps.venue.models import (
    Center,
    CenterImage,
    CenterRating,
    CenterSport,
    Court,
    CourtTimeSlot,
    Reservation,
    TimePeriod,
    TimeSlot,
)

logger = logging.getLogger(__name__)
Member = get_user_model()

LOCAL_DATETIME = "%Y-%m-%d %H:%M:%S"


# ------------------------------------------------------------------------------
# Centers
# ------------------------------------------------------------------------------
class CenterImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = CenterImage
        fields = ("id", "url", "order")


class CenterSerializer(LoggedModelSerializer):
    """
    Lectura: sports, images, averageRating (1 decimal) y ratingCount.
    Escritura: sportIds (min 1) e images (URLs; obligatorias al crear).
    """

    locationId = serializers.PrimaryKeyRelatedField(source="location", queryset=Location.objects.all())
    locationName = serializers.CharField(source="location.name", read_only=True)
    sports = serializers.SerializerMethodField()
    images = CenterImageSerializer(many=True, read_only=True)
    averageRating = serializers.SerializerMethodField()
    ratingCount = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    sportIds = serializers.PrimaryKeyRelatedField(
        queryset=Sport.objects.all(), many=True, write_only=True, allow_empty=False,
    )
    imageUrls = serializers.ListField(
        child=serializers.CharField(max_length=500), write_only=True, required=False,
    )
    keepExistingImages = serializers.BooleanField(write_only=True, required=False, default=True)

    class Meta:
        model = Center
        fields = (
            "id", "name", "locationId", "locationName", "address", "latitude", "longitude",
            "sports", "images", "averageRating", "ratingCount", "createdAt",
            "sportIds", "imageUrls", "keepExistingImages",
        )

    def get_sports(self, obj):
        return [{"id": s.id, "name": s.name} for s in obj.sports.all()]

    def get_averageRating(self, obj):
        avg = getattr(obj, "average_rating", None)
        return round(float(avg), 1) if avg is not None else 0

    def get_ratingCount(self, obj):
        return getattr(obj, "rating_count", 0) or 0

    def validate(self, attrs):
        if not self.instance and not attrs.get("imageUrls"):
            raise serializers.ValidationError({"imageUrls": "At least one image is required."})
        return attrs

    def _set_sports(self, center, sports):
        CenterSport.objects.filter(center=center).delete()
        CenterSport.objects.bulk_create([CenterSport(center=center, sport=s) for s in sports])

    def _add_images(self, center, urls, start=0):
        CenterImage.objects.bulk_create([
            CenterImage(center=center, url=url, order=start + i) for i, url in enumerate(urls)
        ])

    @transaction.atomic
    def create(self, validated_data):
        sports = validated_data.pop("sportIds")
        urls = validated_data.pop("imageUrls", [])
        validated_data.pop("keepExistingImages", None)
        center = super().create(validated_data)
        self._set_sports(center, sports)
        self._add_images(center, urls)
        return center

    @transaction.atomic
    def update(self, instance, validated_data):
        sports = validated_data.pop("sportIds", None)
        urls = validated_data.pop("imageUrls", None)
        keep = validated_data.pop("keepExistingImages", True)
        center = super().update(instance, validated_data)
        if sports is not None:
            self._set_sports(center, sports)
        if urls:
            if keep:
                last = center.images.order_by("-order").values_list("order", flat=True).first()
                self._add_images(center, urls, start=(last + 1) if last is not None else 0)
            else:
                center.images.all().delete()
                self._add_images(center, urls)
        return center


class CenterRatingSerializer(serializers.ModelSerializer):
    memberId = serializers.IntegerField(source="member_id", read_only=True)
    memberName = serializers.CharField(source="member.name", read_only=True)
    memberAvatar = serializers.CharField(source="member.avatar", read_only=True)
    centerId = serializers.IntegerField(source="center_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = CenterRating
        fields = ("id", "centerId", "memberId", "memberName", "memberAvatar", "rating", "comment", "createdAt", "updatedAt")


class RatingInputSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default="")


# ------------------------------------------------------------------------------
# Courts / time slots
# ------------------------------------------------------------------------------
class CourtSerializer(LoggedModelSerializer):
    centerId = serializers.PrimaryKeyRelatedField(source="center", queryset=Center.objects.all())
    centerName = serializers.CharField(source="center.name", read_only=True)
    sportId = serializers.PrimaryKeyRelatedField(source="sport", queryset=Sport.objects.all())
    sportName = serializers.CharField(source="sport.name", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = Court
        fields = ("id", "name", "centerId", "centerName", "sportId", "sportName", "createdAt")


class TimeSlotSerializer(LoggedModelSerializer):
    startTime = HourMinuteField(source="start_time")
    endTime = HourMinuteField(source="end_time")
    timePeriodId = serializers.PrimaryKeyRelatedField(source="time_period", queryset=TimePeriod.objects.all())
    timePeriodName = serializers.CharField(source="time_period.name", read_only=True)

    class Meta:
        model = TimeSlot
        fields = ("id", "startTime", "endTime", "label", "timePeriodId", "timePeriodName")
        read_only_fields = ["label"]
        validators = []

    def validate(self, attrs):
        start = attrs.get("start_time", getattr(self.instance, "start_time", None))
        end = attrs.get("end_time", getattr(self.instance, "end_time", None))
        if start and end and start >= end:
            raise serializers.ValidationError({"endTime": "End time must be after start time."})
        return attrs


class CourtTimeSlotSerializer(LoggedModelSerializer):
    courtId = serializers.PrimaryKeyRelatedField(source="court", queryset=Court.objects.all())
    courtName = serializers.CharField(source="court.name", read_only=True)
    centerId = serializers.IntegerField(source="court.center_id", read_only=True)
    centerName = serializers.CharField(source="court.center.name", read_only=True)
    sportName = serializers.CharField(source="court.sport.name", read_only=True)
    timeSlotId = serializers.PrimaryKeyRelatedField(source="time_slot", queryset=TimeSlot.objects.all())
    timeLabel = serializers.CharField(source="time_slot.label", read_only=True)
    timePeriodName = serializers.CharField(source="time_slot.time_period.name", read_only=True)
    price = serializers.IntegerField(min_value=1)

    class Meta:
        model = CourtTimeSlot
        fields = (
            "id", "courtId", "courtName", "centerId", "centerName", "sportName",
            "timeSlotId", "timeLabel", "timePeriodName", "price",
        )
        # el par duplicado se reporta como 409 en la vista
        validators = []


class BatchPriceSerializer(serializers.Serializer):
    price = serializers.IntegerField(min_value=1)
    courtIds = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, default=list)
    centerId = serializers.IntegerField(min_value=1, required=False)
    sportId = serializers.IntegerField(min_value=1, required=False)
    locationId = serializers.IntegerField(min_value=1, required=False)
    timeSlotIds = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, default=list)
    timePeriodId = serializers.IntegerField(min_value=1, required=False)


# ------------------------------------------------------------------------------
# Reservations
# ------------------------------------------------------------------------------
class ReservationSerializer(serializers.ModelSerializer):
    """Lectura aplanada: nombres de socio/estado/pago y los slots reservados."""

    memberId = serializers.IntegerField(source="member_id", read_only=True)
    memberName = serializers.CharField(source="member.name", read_only=True)
    statusId = serializers.IntegerField(source="status_id", read_only=True)
    statusName = serializers.CharField(source="status.name", read_only=True)
    paymentId = serializers.IntegerField(source="payment_id", read_only=True)
    paymentName = serializers.CharField(source="payment.name", read_only=True)
    invoiceId = serializers.IntegerField(source="invoice_id", read_only=True)
    invoiceName = serializers.CharField(source="invoice.name", read_only=True)
    invoiceNumber = serializers.CharField(source="invoice_number", read_only=True)
    courtTimeSlots = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = Reservation
        fields = (
            "id", "memberId", "memberName", "date", "price",
            "statusId", "statusName", "paymentId", "paymentName",
            "invoiceId", "invoiceName", "invoiceNumber", "tax", "carrier",
            "courtTimeSlots", "createdAt",
        )

    def get_courtTimeSlots(self, obj):
        rows = []
        for link in obj.slot_links.all():
            cts = link.court_time_slot
            rows.append({
                "id": cts.id,
                "courtId": cts.court_id,
                "courtName": cts.court.name,
                "centerName": cts.court.center.name,
                "sportName": cts.court.sport.name,
                "timeLabel": cts.time_slot.label,
                "price": cts.price,
                "date": link.date.isoformat(),
            })
        return rows


class ReservationWriteSerializer(InvoiceDataMixin, serializers.Serializer):
    memberId = serializers.PrimaryKeyRelatedField(source="member", queryset=Member.objects.all())
    courtTimeSlotIds = serializers.ListField(
        child=serializers.IntegerField(min_value=1), allow_empty=False,
    )
    date = serializers.DateField(input_formats=["%Y-%m-%d"])
    statusId = serializers.PrimaryKeyRelatedField(source="status", queryset=Status.objects.all(), required=False)
    paymentId = serializers.PrimaryKeyRelatedField(source="payment", queryset=Payment.objects.all())
    invoiceId = serializers.PrimaryKeyRelatedField(source="invoice", queryset=InvoiceType.objects.all())

    def validate_courtTimeSlotIds(self, value):
        return list(dict.fromkeys(value))


class MemberReservationSerializer(ReservationWriteSerializer):
    """Reserva hecha por el propio socio: memberId sale del token."""

    memberId = None
