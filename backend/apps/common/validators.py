# apps/common/validators.py

import re

from rest_framework import serializers

PHONE_RE = re.compile(r"^09\d{8}$")
TAX_RE = re.compile(r"^\d{8}$")
CARRIER_RE = re.compile(r"^/[A-Z0-9.+-]{7}$")

GENDER_CHOICES = [("male", "Male"), ("female", "Female"), ("none", "None")]


def validate_phone(value):
    """Celular TW (09xxxxxxxx) o vacío."""
    if value and not PHONE_RE.match(value):
        raise serializers.ValidationError("Phone must match 09xxxxxxxx.")
    return value


def validate_tax(value):
    if value and not TAX_RE.match(value):
        raise serializers.ValidationError("Tax id must be 8 digits.")
    return value


def validate_carrier(value):
    if value and not CARRIER_RE.match(value):
        raise serializers.ValidationError("Mobile carrier must match /XXXXXXX.")
    return value


class HourMinuteField(serializers.TimeField):
    """TimeField que lee y escribe HH:mm."""

    def __init__(self, **kwargs):
        kwargs.setdefault("format", "%H:%M")
        kwargs.setdefault("input_formats", ["%H:%M"])
        super().__init__(**kwargs)


class InvoiceDataMixin(serializers.Serializer):
    """tax y carrier opcionales, con formato validado."""

    tax = serializers.CharField(required=False, allow_blank=True, allow_null=True, validators=[validate_tax])
    carrier = serializers.CharField(required=False, allow_blank=True, allow_null=True, validators=[validate_carrier])
