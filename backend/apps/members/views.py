# apps/members/views.py
import logging

from django.contrib.auth import get_user_model
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.authentication import OptionalJWTAuthentication
from apps.common.pagination import pagination_class
from apps.common.permissions import IsAdminRole
from apps.common.viewsets import ArenaModelViewSet
from apps.members.filters import MemberFilter
from apps.members.serializers import (
    FirebaseLoginSerializer,
    LoginSerializer,
    MemberSerializer,
    ProfileSerializer,
    RegisterSerializer,
)
from apps.members.services.auth import (
    authenticate_member,
    issue_tokens,
    member_from_firebase_claims,
    verify_firebase_token,
)

logger = logging.getLogger(__name__)
Member = get_user_model()


# ==========================
# Auth
# ==========================
class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        ser = RegisterSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        member = ser.save()
        return Response({"success": True, **issue_tokens(member)}, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalJWTAuthentication]

    def post(self, request):
        ser = LoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        member = authenticate_member(ser.validated_data["email"], ser.validated_data["password"])
        logger.info("[auth.login] member_id=%s", member.id)
        return Response({"success": True, **issue_tokens(member)})


class FirebaseLoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = [OptionalJWTAuthentication]

    def post(self, request):
        ser = FirebaseLoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        claims = verify_firebase_token(ser.validated_data["idToken"])
        member = member_from_firebase_claims(claims)
        return Response({"success": True, **issue_tokens(member)})


class VerifyView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"success": True, "user": ProfileSerializer(request.user).data})


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"success": True, "record": ProfileSerializer(request.user).data})

    def put(self, request):
        ser = ProfileSerializer(request.user, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response({"success": True, "record": ser.data})


# ==========================
# Admin: socios
# ==========================
class MemberViewSet(ArenaModelViewSet):
    """
    CRUD de socios (solo admin).
    - keyword: name/email/account/phone/address
    - orderby: id_*, birth_*, phone_*
    """
    queryset = Member.objects.all()
    serializer_class = MemberSerializer
    permission_classes = [IsAdminRole]
    filter_backends = [DjangoFilterBackend]
    filterset_class = MemberFilter
    pagination_class = pagination_class(20)
    delete_name_field = "name"

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            raise ValidationError({"id": ["You cannot delete your own account."]})
        instance.delete()
