# apps/course/serializers.py

from django.contrib.auth import get_user_model
from rest_framework import serializers

from apps.common.logging import LoggedModelSerializer
from apps.common.models import InvoiceType, Payment, Sport, Status
from apps.common.validators import InvoiceDataMixin
from apps.course.models import Booking, Coach, Lesson
from apps.venue.models import Court, TimeSlot

Member = get_user_model()

LOCAL_DATETIME = "%Y-%m-%d %H:%M:%S"


class LessonSerializer(LoggedModelSerializer):
    sportId = serializers.PrimaryKeyRelatedField(source="sport", queryset=Sport.objects.all())
    sportName = serializers.CharField(source="sport.name", read_only=True)
    courtId = serializers.PrimaryKeyRelatedField(source="court", queryset=Court.objects.all())
    courtName = serializers.CharField(source="court.name", read_only=True)
    centerName = serializers.CharField(source="court.center.name", read_only=True)
    coachId = serializers.PrimaryKeyRelatedField(source="coach", queryset=Coach.objects.all())
    coachName = serializers.CharField(source="coach.member.name", read_only=True)
    timeSlotId = serializers.PrimaryKeyRelatedField(source="time_slot", queryset=TimeSlot.objects.all())
    timeLabel = serializers.CharField(source="time_slot.label", read_only=True)
    dayOfWeek = serializers.IntegerField(source="day_of_week", min_value=1, max_value=7)
    startDate = serializers.DateField(source="start_date")
    endDate = serializers.DateField(source="end_date")
    price = serializers.IntegerField(min_value=1)
    maxCapacity = serializers.IntegerField(source="max_capacity", min_value=1, max_value=100)
    currentCount = serializers.IntegerField(source="current_count", min_value=0, required=False)
    imageUrl = serializers.CharField(source="image_url", max_length=500, required=False, allow_blank=True)
    isFull = serializers.BooleanField(source="is_full", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = Lesson
        fields = (
            "id", "title", "description",
            "sportId", "sportName", "courtId", "courtName", "centerName",
            "coachId", "coachName", "timeSlotId", "timeLabel", "dayOfWeek",
            "startDate", "endDate", "price", "maxCapacity", "currentCount",
            "imageUrl", "isFull", "createdAt",
        )

    def validate(self, attrs):
        def current(field):
            return attrs.get(field, getattr(self.instance, field, None))

        start, end = current("start_date"), current("end_date")
        if start and end and end <= start:
            raise serializers.ValidationError({"endDate": "End date must be after start date."})

        count, capacity = current("current_count") or 0, current("max_capacity")
        if capacity is not None and count > capacity:
            raise serializers.ValidationError({"currentCount": "Current count cannot exceed max capacity."})
        return attrs


class BookingSerializer(serializers.ModelSerializer):
    memberId = serializers.IntegerField(source="member_id", read_only=True)
    memberName = serializers.CharField(source="member.name", read_only=True)
    lessonId = serializers.IntegerField(source="lesson_id", read_only=True)
    lessonTitle = serializers.CharField(source="lesson.title", read_only=True)
    coachName = serializers.CharField(source="lesson.coach.member.name", read_only=True)
    timeLabel = serializers.CharField(source="lesson.time_slot.label", read_only=True)
    dayOfWeek = serializers.IntegerField(source="lesson.day_of_week", read_only=True)
    statusId = serializers.IntegerField(source="status_id", read_only=True)
    statusName = serializers.CharField(source="status.name", read_only=True)
    paymentId = serializers.IntegerField(source="payment_id", read_only=True)
    paymentName = serializers.CharField(source="payment.name", read_only=True)
    invoiceId = serializers.IntegerField(source="invoice_id", read_only=True)
    invoiceName = serializers.CharField(source="invoice.name", read_only=True)
    invoiceNumber = serializers.CharField(source="invoice_number", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = Booking
        fields = (
            "id", "memberId", "memberName", "lessonId", "lessonTitle", "coachName",
            "timeLabel", "dayOfWeek", "price",
            "statusId", "statusName", "paymentId", "paymentName",
            "invoiceId", "invoiceName", "invoiceNumber", "tax", "carrier", "createdAt",
        )


class BookingCreateSerializer(InvoiceDataMixin, serializers.Serializer):
    """lessonId se resuelve en el service (404 si no existe)."""

    lessonId = serializers.IntegerField(min_value=1)
    memberId = serializers.PrimaryKeyRelatedField(
        source="member", queryset=Member.objects.all(), required=False,
    )
    statusId = serializers.PrimaryKeyRelatedField(source="status", queryset=Status.objects.all(), required=False)
    paymentId = serializers.PrimaryKeyRelatedField(source="payment", queryset=Payment.objects.all())
    invoiceId = serializers.PrimaryKeyRelatedField(source="invoice", queryset=InvoiceType.objects.all())


class BookingUpdateSerializer(InvoiceDataMixin, serializers.ModelSerializer):
    statusId = serializers.PrimaryKeyRelatedField(source="status", queryset=Status.objects.all(), required=False)
    paymentId = serializers.PrimaryKeyRelatedField(source="payment", queryset=Payment.objects.all(), required=False)
    invoiceId = serializers.PrimaryKeyRelatedField(source="invoice", queryset=InvoiceType.objects.all(), required=False)

    class Meta:
        model = Booking
        fields = ("statusId", "paymentId", "invoiceId", "tax", "carrier")
