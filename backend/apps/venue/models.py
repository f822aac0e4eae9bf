# apps/venue/models.py

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.common.models import Location, Payment, InvoiceType, Sport, Status


class Center(models.Model):
    name = models.CharField(max_length=100)
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name="centers")
    address = models.CharField(max_length=255, blank=True, default="")
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    sports = models.ManyToManyField(Sport, through="CenterSport", related_name="centers")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name


class CenterSport(models.Model):
    center = models.ForeignKey(Center, on_delete=models.CASCADE, related_name="center_sports")
    sport = models.ForeignKey(Sport, on_delete=models.CASCADE, related_name="center_sports")

    class Meta:
        unique_together = ("center", "sport")


class CenterImage(models.Model):
    center = models.ForeignKey(Center, on_delete=models.CASCADE, related_name="images")
    url = models.CharField(max_length=500)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]


class CenterRating(models.Model):
    center = models.ForeignKey(Center, on_delete=models.CASCADE, related_name="ratings")
    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="center_ratings")
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("center", "member")
        indexes = [models.Index(fields=["center", "-created_at"], name="rating_center_created_idx")]


class Court(models.Model):
    name = models.CharField(max_length=100)
    center = models.ForeignKey(Center, on_delete=models.CASCADE, related_name="courts")
    sport = models.ForeignKey(Sport, on_delete=models.PROTECT, related_name="courts")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.center})"


class TimePeriod(models.Model):
    name = models.CharField(max_length=50, unique=True)

    def __str__(self):
        return self.name


class TimeSlot(models.Model):
    start_time = models.TimeField()
    end_time = models.TimeField()
    label = models.CharField(max_length=20, blank=True)
    time_period = models.ForeignKey(TimePeriod, on_delete=models.PROTECT, related_name="time_slots")

    class Meta:
        unique_together = ("start_time", "end_time")
        ordering = ["start_time"]

    def save(self, *args, **kwargs):
        self.label = f"{self.start_time:%H:%M}-{self.end_time:%H:%M}"
        super().save(*args, **kwargs)

    def __str__(self):
        return self.label


class CourtTimeSlot(models.Model):
    court = models.ForeignKey(Court, on_delete=models.CASCADE, related_name="court_time_slots")
    time_slot = models.ForeignKey(TimeSlot, on_delete=models.CASCADE, related_name="court_time_slots")
    price = models.PositiveIntegerField(default=0)

    class Meta:
        # batch-set-price hace upsert sobre este par
        unique_together = ("court", "time_slot")

    def __str__(self):
        return f"{self.court.name} {self.time_slot.label}"


class Reservation(models.Model):
    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reservations")
    date = models.DateField()
    price = models.PositiveIntegerField(default=0)
    status = models.ForeignKey(Status, on_delete=models.PROTECT, related_name="reservations")
    payment = models.ForeignKey(Payment, on_delete=models.PROTECT, related_name="reservations")
    invoice = models.ForeignKey(InvoiceType, on_delete=models.PROTECT, related_name="reservations")
    invoice_number = models.CharField(max_length=10, blank=True, default="", db_index=True)
    tax = models.CharField(max_length=8, blank=True, null=True)
    carrier = models.CharField(max_length=8, blank=True, null=True)
    court_time_slots = models.ManyToManyField(
        CourtTimeSlot, through="ReservationCourtTimeSlot", related_name="reservations"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=["member", "date"], name="reservation_member_date_idx")]

    def __str__(self):
        return f"Reservation #{self.pk} {self.date} by {self.member_id}"


class ReservationCourtTimeSlot(models.Model):
    reservation = models.ForeignKey(Reservation, on_delete=models.CASCADE, related_name="slot_links")
    court_time_slot = models.ForeignKey(CourtTimeSlot, on_delete=models.CASCADE, related_name="reservation_links")
    date = models.DateField()

    class Meta:
        # Un mismo slot de cancha no puede reservarse dos veces el mismo día
        constraints = [
            models.UniqueConstraint(fields=["court_time_slot", "date"], name="uniq_court_time_slot_date"),
        ]
        indexes = [models.Index(fields=["date"], name="reservation_slot_date_idx")]
