# apps/team/services/teams.py
# ------------------------------------------------------------------------------
# Equipos: alta con capitán y horarios, solicitudes de ingreso, expulsión,
# calendario y mensajes. Los permisos de capitán/miembro se validan acá.
# ------------------------------------------------------------------------------
import logging

from django.db import IntegrityError, transaction
from django.db.models import Max
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from apps.common.exceptions import Conflict
from apps.common.models import Sport
from apps.common.permissions import is_admin
from apps.team.models import (
    PracticeSchedule,
    Team,
    TeamCalendarMark,
    TeamJoinRequest,
    TeamMember,
    TeamMessage,
)
from apps.venue.models import Court

logger = logging.getLogger(__name__)


def get_team_or_404(team_id):
    team = Team.objects.filter(pk=team_id).first()
    if team is None:
        raise NotFound("Team not found.")
    return team


def is_member(team, member):
    return TeamMember.objects.filter(team=team, member=member).exists()


def is_captain(team, member):
    return TeamMember.objects.filter(team=team, member=member, is_captain=True).exists()


def require_captain(team, member):
    if not is_captain(team, member):
        raise PermissionDenied("Only the team captain can do this.")


def require_member(team, member):
    if not is_member(team, member):
        raise PermissionDenied("Only team members can do this.")


def _raise_if_name_taken(name, exclude_id=None):
    qs = Team.objects.filter(name__iexact=name)
    if exclude_id:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise Conflict("A team with this name already exists.")


# ==========================
# Equipos
# ==========================
def create_team(member, *, name, level, center_id, sport_id, schedules):
    """
    Crea el equipo con `member` como capitán.

    Reglas:
      - El deporte debe existir (404); portada = "<iconKey>.jpg".
      - Se usa la primera cancha del centro para ese deporte (404 si no hay).
      - Nombre duplicado -> 409.
      - Equipo + capitán + horarios en una transacción.
    """
    sport = Sport.objects.filter(pk=sport_id).first()
    if sport is None:
        raise NotFound("Sport not found.")
    court = Court.objects.filter(center_id=center_id, sport=sport).order_by("id").first()
    if court is None:
        raise NotFound("No court found for this center and sport.")
    _raise_if_name_taken(name)

    try:
        with transaction.atomic():
            team = Team.objects.create(
                name=name,
                level=level,
                court=court,
                cover_image_url=f"{sport.icon_key or sport.id}.jpg",
            )
            TeamMember.objects.create(team=team, member=member, is_captain=True)
            PracticeSchedule.objects.bulk_create([
                PracticeSchedule(team=team, **s) for s in schedules
            ])
    except IntegrityError:
        raise Conflict("A team with this name already exists.")

    logger.info(
        "[teams.create] id=%s name=%s captain_id=%s court_id=%s schedules=%s",
        team.id, team.name, member.id, court.id, len(schedules),
    )
    return team


def update_team(team, member, data):
    """Solo el capitán. Actualiza name / level / is_featured."""
    require_captain(team, member)
    name = data.get("name")
    if name:
        _raise_if_name_taken(name, exclude_id=team.id)
    try:
        with transaction.atomic():
            for field in ("name", "level", "is_featured"):
                if field in data:
                    setattr(team, field, data[field])
            team.save()
    except IntegrityError:
        raise Conflict("A team with this name already exists.")
    logger.info("[teams.update] id=%s fields=%s", team.id, sorted(data))
    return team


def check_can_delete(team, member):
    if not (is_admin(member) or is_captain(team, member)):
        raise PermissionDenied("Only the team captain or an admin can delete the team.")


def pending_requests(team):
    return (
        TeamJoinRequest.objects
        .filter(team=team, status=TeamJoinRequest.STATUS_PENDING)
        .select_related("member")
        .order_by("created_at", "id")
    )


# ==========================
# Solicitudes de ingreso
# ==========================
def request_join(team_id, member):
    """
    Reglas:
      - Ya es miembro -> 400.
      - Solicitud pendiente -> 400.
      - Solicitud rechazada (o aprobada de un ex miembro) -> se reabre como PENDING.
    """
    team = get_team_or_404(team_id)
    if is_member(team, member):
        raise ValidationError({"teamId": ["You are already a member of this team."]})

    existing = TeamJoinRequest.objects.filter(team=team, member=member).first()
    if existing is not None:
        if existing.status == TeamJoinRequest.STATUS_PENDING:
            raise ValidationError({"teamId": ["You already have a pending request for this team."]})
        existing.status = TeamJoinRequest.STATUS_PENDING
        existing.save(update_fields=["status", "updated_at"])
        logger.info("[teams.join_request][reopen] id=%s team_id=%s member_id=%s", existing.id, team.id, member.id)
        return existing

    join_request = TeamJoinRequest.objects.create(team=team, member=member)
    logger.info("[teams.join_request] id=%s team_id=%s member_id=%s", join_request.id, team.id, member.id)
    return join_request


def respond_join_request(request_id, captain, status):
    """APPROVED agrega al socio (transaccional); REJECTED solo actualiza."""
    join_request = TeamJoinRequest.objects.select_related("team").filter(pk=request_id).first()
    if join_request is None:
        raise NotFound("Join request not found.")
    require_captain(join_request.team, captain)

    with transaction.atomic():
        join_request.status = status
        join_request.save(update_fields=["status", "updated_at"])
        if status == TeamJoinRequest.STATUS_APPROVED:
            TeamMember.objects.get_or_create(team=join_request.team, member_id=join_request.member_id)

    logger.info(
        "[teams.join_request.respond] id=%s team_id=%s status=%s by=%s",
        join_request.id, join_request.team_id, status, captain.id,
    )
    return join_request


# ==========================
# Miembros / calendario / mensajes
# ==========================
def kick_member(team_id, member_id, captain):
    team = get_team_or_404(team_id)
    require_captain(team, captain)
    if int(member_id) == captain.id:
        raise ValidationError({"memberId": ["The captain cannot remove themselves."]})

    membership = TeamMember.objects.filter(team=team, member_id=member_id).first()
    if membership is None:
        raise NotFound("Team member not found.")
    membership.delete()
    logger.info("[teams.kick] team_id=%s member_id=%s by=%s", team.id, member_id, captain.id)
    return int(member_id)


def upsert_calendar_mark(team_id, captain, date, note=""):
    team = get_team_or_404(team_id)
    require_captain(team, captain)
    mark, created = TeamCalendarMark.objects.update_or_create(team=team, date=date, defaults={"note": note})
    logger.info("[teams.calendar] team_id=%s date=%s created=%s", team.id, date, created)
    return mark, created


def delete_calendar_mark(mark_id, captain):
    mark = TeamCalendarMark.objects.select_related("team").filter(pk=mark_id).first()
    if mark is None:
        raise NotFound("Calendar mark not found.")
    require_captain(mark.team, captain)
    mark.delete()
    logger.info("[teams.calendar.delete] id=%s team_id=%s", mark_id, mark.team_id)
    return int(mark_id)


def post_message(team_id, member, content):
    """orderIndex = max + 1 dentro del equipo."""
    team = get_team_or_404(team_id)
    require_member(team, member)
    with transaction.atomic():
        # lock del equipo para serializar order_index
        Team.objects.select_for_update().filter(pk=team.pk).first()
        last = TeamMessage.objects.filter(team=team).aggregate(m=Max("order_index"))["m"]
        message = TeamMessage.objects.create(
            team=team, member=member, content=content,
            order_index=(last or 0) + 1,
        )
    logger.info("[teams.message] id=%s team_id=%s member_id=%s", message.id, team.id, member.id)
    return message
