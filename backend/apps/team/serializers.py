# apps/team/serializers.py

from rest_framework import serializers

from apps.common.logging import LoggedModelSerializer
from apps.common.validators import HourMinuteField
from apps.team.models import (
    Level,
    PracticeSchedule,
    Team,
    TeamCalendarMark,
    TeamJoinRequest,
    TeamMember,
    TeamMessage,
)

LOCAL_DATETIME = "%Y-%m-%d %H:%M:%S"


class LevelSerializer(serializers.ModelSerializer):
    class Meta:
        model = Level
        fields = ("id", "name")


class ScheduleSerializer(serializers.ModelSerializer):
    dayOfWeek = serializers.IntegerField(source="day_of_week", min_value=1, max_value=7)
    startTime = HourMinuteField(source="start_time")
    endTime = HourMinuteField(source="end_time")

    class Meta:
        model = PracticeSchedule
        fields = ("id", "dayOfWeek", "startTime", "endTime")

    def validate(self, attrs):
        if attrs["start_time"] >= attrs["end_time"]:
            raise serializers.ValidationError({"endTime": "End time must be after start time."})
        return attrs


class TeamMemberSerializer(serializers.ModelSerializer):
    memberId = serializers.IntegerField(source="member_id", read_only=True)
    name = serializers.CharField(source="member.name", read_only=True)
    avatar = serializers.CharField(source="member.avatar", read_only=True)
    isCaptain = serializers.BooleanField(source="is_captain", read_only=True)
    joinedAt = serializers.DateTimeField(source="joined_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = TeamMember
        fields = ("memberId", "name", "avatar", "isCaptain", "joinedAt")


class CalendarMarkSerializer(serializers.ModelSerializer):
    teamId = serializers.IntegerField(source="team_id", read_only=True)

    class Meta:
        model = TeamCalendarMark
        fields = ("id", "teamId", "date", "note")


class MessageSerializer(serializers.ModelSerializer):
    teamId = serializers.IntegerField(source="team_id", read_only=True)
    memberId = serializers.IntegerField(source="member_id", read_only=True)
    memberName = serializers.CharField(source="member.name", read_only=True)
    memberAvatar = serializers.CharField(source="member.avatar", read_only=True)
    orderIndex = serializers.IntegerField(source="order_index", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = TeamMessage
        fields = ("id", "teamId", "memberId", "memberName", "memberAvatar", "content", "orderIndex", "createdAt")


class JoinRequestSerializer(serializers.ModelSerializer):
    teamId = serializers.IntegerField(source="team_id", read_only=True)
    memberId = serializers.IntegerField(source="member_id", read_only=True)
    memberName = serializers.CharField(source="member.name", read_only=True)
    memberAvatar = serializers.CharField(source="member.avatar", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = TeamJoinRequest
        fields = ("id", "teamId", "memberId", "memberName", "memberAvatar", "status", "createdAt")


class TeamSerializer(serializers.ModelSerializer):
    """Fila del listado: nivel, deporte/centro (vía cancha), cantidad de miembros y horarios."""

    levelId = serializers.IntegerField(source="level_id", read_only=True)
    levelName = serializers.CharField(source="level.name", read_only=True)
    courtId = serializers.IntegerField(source="court_id", read_only=True)
    courtName = serializers.CharField(source="court.name", read_only=True)
    sportId = serializers.IntegerField(source="court.sport_id", read_only=True)
    sportName = serializers.CharField(source="court.sport.name", read_only=True)
    centerId = serializers.IntegerField(source="court.center_id", read_only=True)
    centerName = serializers.CharField(source="court.center.name", read_only=True)
    locationName = serializers.CharField(source="court.center.location.name", read_only=True)
    isFeatured = serializers.BooleanField(source="is_featured", read_only=True)
    coverImageUrl = serializers.CharField(source="cover_image_url", read_only=True)
    memberCount = serializers.SerializerMethodField()
    schedules = ScheduleSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", format=LOCAL_DATETIME, read_only=True)

    class Meta:
        model = Team
        fields = (
            "id", "name", "levelId", "levelName", "courtId", "courtName",
            "sportId", "sportName", "centerId", "centerName", "locationName",
            "isFeatured", "coverImageUrl", "memberCount", "schedules", "createdAt",
        )

    def get_memberCount(self, obj):
        count = getattr(obj, "member_count", None)
        return count if count is not None else obj.memberships.count()


class TeamDetailSerializer(TeamSerializer):
    members = TeamMemberSerializer(source="memberships", many=True, read_only=True)
    calendarMarks = CalendarMarkSerializer(source="calendar_marks", many=True, read_only=True)
    messages = MessageSerializer(many=True, read_only=True)

    class Meta(TeamSerializer.Meta):
        fields = TeamSerializer.Meta.fields + ("members", "calendarMarks", "messages")


# ------------------------------------------------------------------------------
# Entrada
# ------------------------------------------------------------------------------
class TeamCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    levelId = serializers.PrimaryKeyRelatedField(source="level", queryset=Level.objects.all())
    centerId = serializers.IntegerField(min_value=1)
    sportId = serializers.IntegerField(min_value=1)
    schedules = ScheduleSerializer(many=True, allow_empty=False)

    def validate_name(self, value):
        return value.strip()


class TeamUpdateSerializer(LoggedModelSerializer):
    levelId = serializers.PrimaryKeyRelatedField(source="level", queryset=Level.objects.all(), required=False)
    isFeatured = serializers.BooleanField(source="is_featured", required=False)

    class Meta:
        model = Team
        fields = ("name", "levelId", "isFeatured")
        # nombre duplicado -> 409 en el service
        extra_kwargs = {"name": {"required": False, "validators": []}}


class TeamIdSerializer(serializers.Serializer):
    teamId = serializers.IntegerField(min_value=1)


class JoinRequestStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[TeamJoinRequest.STATUS_APPROVED, TeamJoinRequest.STATUS_REJECTED])


class CalendarMarkInputSerializer(TeamIdSerializer):
    date = serializers.DateField()
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class MessageInputSerializer(TeamIdSerializer):
    content = serializers.CharField()
