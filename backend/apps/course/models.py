# apps/course/models.py

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.common.models import InvoiceType, Payment, Sport, Status


class Coach(models.Model):
    member = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="coach")
    bio = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.member.name or self.member.email


class Lesson(models.Model):
    title = models.CharField(max_length=100)
    description = models.TextField(blank=True, default="")
    sport = models.ForeignKey(Sport, on_delete=models.PROTECT, related_name="lessons")
    court = models.ForeignKey("venue.Court", on_delete=models.PROTECT, related_name="lessons")
    coach = models.ForeignKey(Coach, on_delete=models.PROTECT, related_name="lessons")
    time_slot = models.ForeignKey("venue.TimeSlot", on_delete=models.PROTECT, related_name="lessons")
    day_of_week = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(7)])
    start_date = models.DateField()
    end_date = models.DateField()
    price = models.PositiveIntegerField()
    max_capacity = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(100)])
    current_count = models.PositiveSmallIntegerField(default=0)
    image_url = models.CharField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_full(self):
        return self.current_count >= self.max_capacity

    def __str__(self):
        return self.title


class Booking(models.Model):
    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings")
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name="bookings")
    price = models.PositiveIntegerField()
    status = models.ForeignKey(Status, on_delete=models.PROTECT, related_name="bookings")
    payment = models.ForeignKey(Payment, on_delete=models.PROTECT, related_name="bookings")
    invoice = models.ForeignKey(InvoiceType, on_delete=models.PROTECT, related_name="bookings")
    invoice_number = models.CharField(max_length=10, blank=True, default="", db_index=True)
    tax = models.CharField(max_length=8, blank=True, null=True)
    carrier = models.CharField(max_length=8, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        # un socio no puede inscribirse dos veces al mismo curso
        unique_together = ("member", "lesson")

    def __str__(self):
        return f"Booking #{self.pk} {self.lesson_id} by {self.member_id}"
