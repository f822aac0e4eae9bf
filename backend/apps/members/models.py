# apps/members/models.py
"""
Modelo de usuario del sistema: el socio (Member).
Login por email; el rol ("member" | "admin") viaja como claim en el JWT.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models

from apps.common.validators import GENDER_CHOICES


class MemberManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("Email is required.")
        email = self.normalize_email(email).lower()
        member = self.model(email=email, **extra_fields)
        member.set_password(password)
        member.save(using=self._db)
        return member

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", Member.ROLE_ADMIN)
        return self._create_user(email, password, **extra_fields)


class Member(AbstractUser):
    ROLE_MEMBER = "member"
    ROLE_ADMIN = "admin"
    ROLES = [
        (ROLE_MEMBER, "Member"),
        (ROLE_ADMIN, "Admin"),
    ]

    email = models.EmailField(unique=True)
    username = models.CharField(max_length=150, blank=True, null=True, unique=False)
    account = models.CharField(max_length=50, blank=True, default="")
    name = models.CharField(max_length=100, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, default="none")
    birth = models.DateField(null=True, blank=True)
    address = models.CharField(max_length=255, blank=True, default="")
    avatar = models.CharField(max_length=500, blank=True, default="")
    role = models.CharField(max_length=20, choices=ROLES, default=ROLE_MEMBER)
    firebase_uid = models.CharField(max_length=128, blank=True, null=True, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = MemberManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        indexes = [
            models.Index(fields=["name"], name="member_name_idx"),
            models.Index(fields=["account"], name="member_account_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self.username:
            self.username = self.email
        super().save(*args, **kwargs)

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN or self.is_superuser

    def __str__(self):
        return f"{self.email} ({self.role})"
