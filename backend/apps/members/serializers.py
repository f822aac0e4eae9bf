# apps/members/serializers.py
from rest_framework import serializers
from apps.common.logging import LoggedModelSerializer
from apps.common.validators import GENDER_CHOICES, validate_phone
from django.contrib.auth import get_user_model
import logging

logger = logging.getLogger(__name__)
Member = get_user_model()


class MemberSerializer(LoggedModelSerializer):
    """CRUD de socios desde el panel admin."""

    password = serializers.CharField(write_only=True, min_length=6, required=False)
    account = serializers.CharField(min_length=4, max_length=50)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[validate_phone])
    gender = serializers.ChoiceField(choices=GENDER_CHOICES, required=False)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Member
        fields = (
            "id", "account", "email", "password", "name", "phone",
            "gender", "birth", "address", "avatar", "role", "createdAt",
        )
        read_only_fields = ["id"]

    def validate_email(self, v):
        v = (v or "").strip().lower()
        qs = Member.objects.filter(email__iexact=v)
        if self.instance:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Email already registered.")
        return v

    def validate(self, attrs):
        if not self.instance and not attrs.get("password"):
            raise serializers.ValidationError({"password": "This field is required."})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        member = Member.objects.create_user(password=password, **validated_data)
        self._logger().info("create id=%s email=%s", member.pk, member.email)
        return member

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=["password"])
        return instance


class PublicMemberSerializer(serializers.ModelSerializer):
    """Datos que viajan en el JWT / respuestas de login."""

    class Meta:
        model = Member
        fields = ("id", "email", "name", "account", "avatar", "role")


class ProfileSerializer(LoggedModelSerializer):
    name = serializers.CharField(min_length=2, max_length=100)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[validate_phone])
    gender = serializers.ChoiceField(choices=GENDER_CHOICES, required=False)

    class Meta:
        model = Member
        fields = ("id", "email", "account", "name", "phone", "gender", "birth", "address", "avatar", "role")
        read_only_fields = ["id", "email", "account", "role"]


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    confirmPassword = serializers.CharField(write_only=True)
    name = serializers.CharField(min_length=2, max_length=100)
    account = serializers.CharField(min_length=4, max_length=50)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[validate_phone])
    gender = serializers.ChoiceField(choices=GENDER_CHOICES, required=False)
    birth = serializers.DateField(required=False, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True)

    def validate_email(self, v):
        v = v.strip().lower()
        if Member.objects.filter(email__iexact=v).exists():
            raise serializers.ValidationError("Email already registered.")
        return v

    def validate(self, attrs):
        if attrs["password"] != attrs["confirmPassword"]:
            raise serializers.ValidationError({"confirmPassword": "Passwords do not match."})
        return attrs

    def create(self, validated_data):
        validated_data.pop("confirmPassword")
        password = validated_data.pop("password")
        member = Member.objects.create_user(password=password, **validated_data)
        logger.info("[members.register] id=%s email=%s", member.pk, member.email)
        return member


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)


class FirebaseLoginSerializer(serializers.Serializer):
    idToken = serializers.CharField()
