# apps/team/views.py
import logging

from django.db.models import Count, Prefetch
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.pagination import pagination_class
from apps.common.params import int_param
from apps.common.permissions import IsAdminRole
from apps.common.viewsets import ArenaModelViewSet
from apps.team.filters import TeamFilter
from apps.team.models import Level, Team, TeamMember, TeamMessage
from apps.team.serializers import (
    CalendarMarkInputSerializer,
    CalendarMarkSerializer,
    JoinRequestSerializer,
    JoinRequestStatusSerializer,
    LevelSerializer,
    MessageInputSerializer,
    MessageSerializer,
    TeamCreateSerializer,
    TeamDetailSerializer,
    TeamIdSerializer,
    TeamSerializer,
    TeamUpdateSerializer,
)
from apps.team.services import teams as team_service
from apps.venue.models import Center

logger = logging.getLogger(__name__)


class TeamViewSet(ArenaModelViewSet):
    """
    Equipos.
    - list / retrieve: públicos (limit o perPage, default 12).
    - ourteam / management / create: socio autenticado.
    - update: capitán. destroy: capitán o admin. multi: admin.
    """
    serializer_class = TeamSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = TeamFilter
    pagination_class = pagination_class(12, aliases=("limit",))

    def get_queryset(self):
        return (
            Team.objects
            .select_related("level", "court", "court__sport", "court__center", "court__center__location")
            .prefetch_related("schedules")
            .annotate(member_count=Count("memberships", distinct=True))
        )

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        if self.action == "bulk_destroy":
            return [IsAdminRole()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        return TeamDetailSerializer if self.action == "retrieve" else TeamSerializer

    def _detail_queryset(self):
        return self.get_queryset().prefetch_related(
            Prefetch("memberships", queryset=TeamMember.objects.select_related("member")),
            "calendar_marks",
            Prefetch("messages", queryset=TeamMessage.objects.select_related("member")),
        )

    def _detail(self, team, code=status.HTTP_200_OK):
        team = self._detail_queryset().get(pk=team.pk)
        return self.record_response(TeamDetailSerializer(team).data, code)

    def retrieve(self, request, *args, **kwargs):
        return self._detail(self.get_object())

    def create(self, request, *args, **kwargs):
        ser = TeamCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        team = team_service.create_team(
            request.user,
            name=data["name"],
            level=data["level"],
            center_id=data["centerId"],
            sport_id=data["sportId"],
            schedules=data["schedules"],
        )
        return self._detail(team, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        team = self.get_object()
        ser = TeamUpdateSerializer(team, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        team_service.update_team(team, request.user, ser.validated_data)
        return self._detail(team)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def perform_destroy(self, instance):
        team_service.check_can_delete(instance, self.request.user)
        instance.delete()

    @action(detail=False, methods=["get"], url_path="ourteam")
    def ourteam(self, request):
        qs = self.get_queryset().filter(memberships__member=request.user).order_by("-created_at", "-id")
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(TeamSerializer(page, many=True).data)

    @action(detail=True, methods=["get"], url_path="management")
    def management(self, request, pk=None):
        team = self.get_object()
        team_service.require_member(team, request.user)
        team = self._detail_queryset().get(pk=team.pk)

        captain = team_service.is_captain(team, request.user)
        payload = {"success": True, "record": TeamDetailSerializer(team).data, "isCaptain": captain}
        if captain:
            payload["pendingRequests"] = JoinRequestSerializer(
                team_service.pending_requests(team), many=True,
            ).data
        return Response(payload)


class LevelListView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response({"success": True, "rows": LevelSerializer(Level.objects.order_by("id"), many=True).data})


class TeamCentersView(APIView):
    """Centros que ofrecen el deporte (para el alta de equipos)."""
    permission_classes = [AllowAny]

    def get(self, request):
        sport_id = int_param(request.query_params, "sportId", required=True)
        rows = (
            Center.objects
            .filter(courts__sport_id=sport_id)
            .distinct()
            .order_by("name", "id")
            .values("id", "name", "address")
        )
        return Response({"success": True, "rows": list(rows)})


class JoinRequestView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        ser = TeamIdSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        join_request = team_service.request_join(ser.validated_data["teamId"], request.user)
        return Response(
            {"success": True, "record": JoinRequestSerializer(join_request).data},
            status=status.HTTP_201_CREATED,
        )


class JoinRequestDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, pk):
        ser = JoinRequestStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        join_request = team_service.respond_join_request(pk, request.user, ser.validated_data["status"])
        return Response({"success": True, "record": JoinRequestSerializer(join_request).data})


class TeamMemberKickView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, team_id, member_id):
        removed = team_service.kick_member(team_id, member_id, request.user)
        return Response({"success": True, "deletedId": removed})


class CalendarMarkView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        ser = CalendarMarkInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        mark, created = team_service.upsert_calendar_mark(data["teamId"], request.user, data["date"], data["note"])
        return Response(
            {"success": True, "record": CalendarMarkSerializer(mark).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class CalendarMarkDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, pk):
        return Response({"success": True, "deletedId": team_service.delete_calendar_mark(pk, request.user)})


class MessageView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        ser = MessageInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        message = team_service.post_message(
            ser.validated_data["teamId"], request.user, ser.validated_data["content"],
        )
        return Response({"success": True, "record": MessageSerializer(message).data}, status=status.HTTP_201_CREATED)
