import pytest

from apps.team.models import Team, TeamJoinRequest, TeamMember, TeamMessage

pytestmark = pytest.mark.django_db

SCHEDULE = [{"dayOfWeek": 3, "startTime": "19:00", "endTime": "21:00"}]


def _team_payload(venue, **extra):
    return {
        "name": "Night Owls",
        "levelId": 2,
        "centerId": venue["center"].id,
        "sportId": venue["sport"].id,
        "schedules": SCHEDULE,
        **extra,
    }


@pytest.fixture
def team(member_client, venue):
    res = member_client.post("/api/team/teams/", _team_payload(venue), format="json")
    assert res.status_code == 201
    return Team.objects.get(pk=res.json()["insertId"])


# ------------------------------------------------------------------------------
# Equipos
# ------------------------------------------------------------------------------
def test_create_team_sets_captain_and_cover(member_client, member, venue):
    res = member_client.post("/api/team/teams/", _team_payload(venue), format="json")
    assert res.status_code == 201
    record = res.json()["record"]
    assert record["coverImageUrl"] == "badminton.jpg"
    assert record["courtId"] == venue["courts"][0].id
    assert record["memberCount"] == 1
    assert record["members"][0]["memberId"] == member.id
    assert record["members"][0]["isCaptain"] is True
    assert record["schedules"][0]["startTime"] == "19:00"


def test_create_team_duplicate_name(member_client, other_client, venue, team):
    res = other_client.post("/api/team/teams/", _team_payload(venue, name="night owls"), format="json")
    assert res.status_code == 409


def test_create_team_without_court(member_client, venue):
    res = member_client.post("/api/team/teams/", _team_payload(venue, sportId=7), format="json")
    assert res.status_code == 404


@pytest.mark.parametrize(
    "override",
    [
        {"schedules": []},
        {"schedules": [{"dayOfWeek": 8, "startTime": "19:00", "endTime": "21:00"}]},
        {"schedules": [{"dayOfWeek": 1, "startTime": "21:00", "endTime": "19:00"}]},
        {"levelId": 99},
    ],
)
def test_create_team_validation(member_client, venue, override):
    res = member_client.post("/api/team/teams/", _team_payload(venue, **override), format="json")
    assert res.status_code == 400


def test_create_team_requires_login(api_client, venue):
    assert api_client.post("/api/team/teams/", _team_payload(venue), format="json").status_code == 401


def test_list_teams_public(api_client, member_client, other_client, other_member, venue, team):
    other_client.post("/api/team/teams/", _team_payload(venue, name="Early Birds", levelId=1), format="json")
    TeamMember.objects.create(team=team, member=other_member)

    body = api_client.get("/api/team/teams/", {"sortBy": "members_desc"}).json()
    assert body["perPage"] == 12
    assert [r["name"] for r in body["rows"]] == ["Night Owls", "Early Birds"]
    assert body["rows"][0]["memberCount"] == 2

    body = api_client.get("/api/team/teams/", {"limit": 1, "sortBy": "level_asc"}).json()
    assert body["perPage"] == 1
    assert body["totalPages"] == 2
    assert body["rows"][0]["name"] == "Early Birds"

    assert api_client.get("/api/team/teams/", {"sportId": 1}).json()["totalRows"] == 0


def test_team_detail_public(api_client, team):
    record = api_client.get(f"/api/team/teams/{team.id}/").json()["record"]
    assert record["name"] == "Night Owls"
    assert record["calendarMarks"] == []
    assert record["messages"] == []


def test_ourteam(member_client, other_client, team):
    assert member_client.get("/api/team/teams/ourteam/").json()["totalRows"] == 1
    assert other_client.get("/api/team/teams/ourteam/").json()["totalRows"] == 0


def test_update_only_captain(member_client, other_client, other_member, team):
    TeamMember.objects.create(team=team, member=other_member)
    url = f"/api/team/teams/{team.id}/"
    assert other_client.put(url, {"name": "Hijacked"}, format="json").status_code == 403

    res = member_client.put(url, {"name": "Night Hawks", "levelId": 3}, format="json")
    assert res.status_code == 200
    assert res.json()["record"]["name"] == "Night Hawks"
    assert res.json()["record"]["levelId"] == 3


def test_update_to_taken_name(member_client, other_client, venue, team):
    other_client.post("/api/team/teams/", _team_payload(venue, name="Early Birds"), format="json")
    res = member_client.put(f"/api/team/teams/{team.id}/", {"name": "Early Birds"}, format="json")
    assert res.status_code == 409


def test_delete_captain_or_admin(member_client, other_client, admin_client, venue, team):
    assert other_client.delete(f"/api/team/teams/{team.id}/").status_code == 403
    assert member_client.delete(f"/api/team/teams/{team.id}/").json()["deletedName"] == "Night Owls"

    res = other_client.post("/api/team/teams/", _team_payload(venue, name="Early Birds"), format="json")
    assert admin_client.delete(f"/api/team/teams/{res.json()['insertId']}/").status_code == 200
    assert not Team.objects.exists()


def test_levels_and_centers(api_client, venue):
    levels = api_client.get("/api/team/levels/").json()["rows"]
    assert [l["id"] for l in levels] == [1, 2, 3, 4]

    rows = api_client.get("/api/team/centers/", {"sportId": 2}).json()["rows"]
    assert rows == [{"id": venue["center"].id, "name": "Arena Center", "address": "No. 1 Road"}]
    assert api_client.get("/api/team/centers/", {"sportId": 7}).json()["rows"] == []
    assert api_client.get("/api/team/centers/").status_code == 400


# ------------------------------------------------------------------------------
# Solicitudes de ingreso
# ------------------------------------------------------------------------------
def test_join_request_flow(member_client, other_client, other_member, team):
    res = other_client.post("/api/team/join-requests/", {"teamId": team.id}, format="json")
    assert res.status_code == 201
    request_id = res.json()["record"]["id"]
    assert res.json()["record"]["status"] == "PENDING"

    assert other_client.post("/api/team/join-requests/", {"teamId": team.id}, format="json").status_code == 400

    management = member_client.get(f"/api/team/teams/{team.id}/management/").json()
    assert management["isCaptain"] is True
    assert [r["memberId"] for r in management["pendingRequests"]] == [other_member.id]

    url = f"/api/team/join-requests/{request_id}/"
    assert other_client.put(url, {"status": "APPROVED"}, format="json").status_code == 403
    assert member_client.put(url, {"status": "APPROVED"}, format="json").json()["record"]["status"] == "APPROVED"
    assert TeamMember.objects.filter(team=team, member=other_member, is_captain=False).exists()

    management = other_client.get(f"/api/team/teams/{team.id}/management/").json()
    assert management["isCaptain"] is False
    assert "pendingRequests" not in management


def test_join_request_rejected_can_reopen(member_client, other_client, team):
    request_id = other_client.post("/api/team/join-requests/", {"teamId": team.id}, format="json").json()["record"]["id"]
    member_client.put(f"/api/team/join-requests/{request_id}/", {"status": "REJECTED"}, format="json")

    res = other_client.post("/api/team/join-requests/", {"teamId": team.id}, format="json")
    assert res.status_code == 201
    assert res.json()["record"]["id"] == request_id
    assert TeamJoinRequest.objects.get(pk=request_id).status == TeamJoinRequest.STATUS_PENDING


def test_join_request_errors(member_client, other_client, team):
    assert member_client.post("/api/team/join-requests/", {"teamId": team.id}, format="json").status_code == 400
    assert other_client.post("/api/team/join-requests/", {"teamId": 999999}, format="json").status_code == 404
    res = member_client.put("/api/team/join-requests/999999/", {"status": "APPROVED"}, format="json")
    assert res.status_code == 404
    res = member_client.put("/api/team/join-requests/1/", {"status": "PENDING"}, format="json")
    assert res.status_code == 400


def test_management_requires_membership(other_client, team):
    assert other_client.get(f"/api/team/teams/{team.id}/management/").status_code == 403


# ------------------------------------------------------------------------------
# Miembros / calendario / mensajes
# ------------------------------------------------------------------------------
def test_kick_member(member_client, other_client, member, other_member, team):
    TeamMember.objects.create(team=team, member=other_member)

    assert other_client.delete(f"/api/team/members/{team.id}/{member.id}/").status_code == 403
    assert member_client.delete(f"/api/team/members/{team.id}/{member.id}/").status_code == 400
    assert member_client.delete(f"/api/team/members/{team.id}/999999/").status_code == 404

    res = member_client.delete(f"/api/team/members/{team.id}/{other_member.id}/")
    assert res.json() == {"success": True, "deletedId": other_member.id}
    assert not TeamMember.objects.filter(team=team, member=other_member).exists()


def test_calendar_marks_upsert(member_client, other_client, other_member, team):
    TeamMember.objects.create(team=team, member=other_member)
    payload = {"teamId": team.id, "date": "2026-11-20", "note": "Friendly match"}

    assert other_client.post("/api/team/calendar-marks/", payload, format="json").status_code == 403

    res = member_client.post("/api/team/calendar-marks/", payload, format="json")
    assert res.status_code == 201
    mark_id = res.json()["record"]["id"]

    res = member_client.post("/api/team/calendar-marks/", {**payload, "note": "Cancelled"}, format="json")
    assert res.status_code == 200
    assert res.json()["record"] == {"id": mark_id, "teamId": team.id, "date": "2026-11-20", "note": "Cancelled"}

    assert other_client.delete(f"/api/team/calendar-marks/{mark_id}/").status_code == 403
    assert member_client.delete(f"/api/team/calendar-marks/{mark_id}/").json()["deletedId"] == mark_id
    assert member_client.delete(f"/api/team/calendar-marks/{mark_id}/").status_code == 404


def test_messages_order_index(member_client, other_client, api_client, other_member, team):
    res = other_client.post("/api/team/messages/", {"teamId": team.id, "content": "hi"}, format="json")
    assert res.status_code == 403

    TeamMember.objects.create(team=team, member=other_member)
    first = member_client.post("/api/team/messages/", {"teamId": team.id, "content": "Welcome"}, format="json")
    second = other_client.post("/api/team/messages/", {"teamId": team.id, "content": "Thanks"}, format="json")
    assert first.json()["record"]["orderIndex"] == 1
    assert second.json()["record"]["orderIndex"] == 2
    assert second.json()["record"]["memberName"] == "Member Two"

    messages = api_client.get(f"/api/team/teams/{team.id}/").json()["record"]["messages"]
    assert [m["content"] for m in messages] == ["Welcome", "Thanks"]
    assert TeamMessage.objects.filter(team=team).count() == 2
