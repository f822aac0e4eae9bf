from datetime import date, timedelta

import pytest

from apps.common.models import InvoiceType, Payment
from apps.venue.models import CenterRating, CourtTimeSlot
from apps.venue.services.reservations import create_reservation

pytestmark = pytest.mark.django_db

DAY = date(2030, 5, 20)


# ------------------------------------------------------------------------------
# Centros
# ------------------------------------------------------------------------------
CENTER = {
    "name": "North Hall",
    "locationId": 2,
    "address": "No. 9 Street",
    "sportIds": [1, 2],
    "imageUrls": ["https://img.example.com/1.jpg", "https://img.example.com/2.jpg"],
}


def test_create_center(admin_client, reference_data):
    res = admin_client.post("/api/venue/centers/", CENTER, format="json")
    assert res.status_code == 201
    body = res.json()["record"]
    assert res.json()["insertId"] == body["id"]
    assert {s["id"] for s in body["sports"]} == {1, 2}
    assert [i["order"] for i in body["images"]] == [0, 1]


@pytest.mark.parametrize("missing", ["sportIds", "imageUrls"])
def test_create_center_requirements(admin_client, reference_data, missing):
    payload = {**CENTER, missing: []}
    assert admin_client.post("/api/venue/centers/", payload, format="json").status_code == 400


def test_update_center_images(admin_client, venue):
    center = venue["center"]
    res = admin_client.patch(
        f"/api/venue/centers/{center.id}/", {"imageUrls": ["https://img.example.com/new.jpg"]}, format="json",
    )
    assert [i["order"] for i in res.json()["record"]["images"]] == [0, 1]

    res = admin_client.patch(
        f"/api/venue/centers/{center.id}/",
        {"imageUrls": ["https://img.example.com/only.jpg"], "keepExistingImages": False},
        format="json",
    )
    assert [i["url"] for i in res.json()["record"]["images"]] == ["https://img.example.com/only.jpg"]


def test_center_writes_are_admin_only(member_client, api_client, venue):
    assert api_client.get("/api/venue/centers/").status_code == 200
    assert member_client.post("/api/venue/centers/", CENTER, format="json").status_code == 403


def test_center_filters(api_client, venue, member, other_member):
    center = venue["center"]
    CenterRating.objects.create(center=center, member=member, rating=5)
    CenterRating.objects.create(center=center, member=other_member, rating=4)

    rows = api_client.get("/api/venue/centers/", {"sportId": 2}).json()["rows"]
    assert [r["id"] for r in rows] == [center.id]
    assert rows[0]["averageRating"] == 4.5
    assert rows[0]["ratingCount"] == 2

    assert api_client.get("/api/venue/centers/", {"minRating": 4.6}).json()["totalRows"] == 0
    assert api_client.get("/api/venue/centers/", {"sportId": 7}).json()["totalRows"] == 0
    assert api_client.get("/api/venue/centers/", {"keyword": "台北"}).json()["totalRows"] == 1


# ------------------------------------------------------------------------------
# Calificaciones
# ------------------------------------------------------------------------------
def test_rating_upsert_and_stats(member_client, other_client, api_client, venue):
    center = venue["center"]
    url = f"/api/venue/centers/{center.id}"

    assert member_client.post(f"{url}/rating/", {"rating": 3}, format="json").status_code == 201
    res = member_client.post(f"{url}/rating/", {"rating": 5, "comment": "Great"}, format="json")
    assert res.status_code == 200
    assert res.json()["record"]["rating"] == 5
    other_client.post(f"{url}/rating/", {"rating": 4}, format="json")

    stats = api_client.get(f"{url}/rating-stats/").json()
    assert stats["totalCount"] == 2
    assert stats["averageRating"] == 4.5
    assert stats["distribution"] == {"1": 0, "2": 0, "3": 0, "4": 1, "5": 1}

    ratings = api_client.get(f"{url}/ratings/", {"perPage": 500}).json()
    assert ratings["perPage"] == 50
    assert ratings["totalRows"] == 2


def test_rating_errors(member_client, venue):
    center = venue["center"]
    assert member_client.post("/api/venue/centers/999999/rating/", {"rating": 3}, format="json").status_code == 404
    assert member_client.post(f"/api/venue/centers/{center.id}/rating/", {"rating": 6}, format="json").status_code == 400
    assert member_client.get(f"/api/venue/centers/{center.id}/my-rating/").status_code == 404
    assert member_client.delete(f"/api/venue/centers/{center.id}/rating/").status_code == 404


def test_my_rating_and_delete(member_client, venue):
    center = venue["center"]
    member_client.post(f"/api/venue/centers/{center.id}/rating/", {"rating": 2}, format="json")
    assert member_client.get(f"/api/venue/centers/{center.id}/my-rating/").json()["record"]["rating"] == 2
    assert member_client.delete(f"/api/venue/centers/{center.id}/rating/").status_code == 200
    assert not CenterRating.objects.filter(center=center).exists()


def test_rating_requires_login(api_client, venue):
    res = api_client.post(f"/api/venue/centers/{venue['center'].id}/rating/", {"rating": 3}, format="json")
    assert res.status_code == 401


# ------------------------------------------------------------------------------
# Franjas / slots
# ------------------------------------------------------------------------------
def test_time_slot_label_and_validation(admin_client, reference_data):
    res = admin_client.post(
        "/api/venue/time-slots/", {"startTime": "18:00", "endTime": "19:30", "timePeriodId": 3}, format="json",
    )
    assert res.status_code == 201
    assert res.json()["record"]["label"] == "18:00-19:30"

    res = admin_client.post(
        "/api/venue/time-slots/", {"startTime": "20:00", "endTime": "19:00", "timePeriodId": 3}, format="json",
    )
    assert res.status_code == 400


def test_duplicate_court_time_slot_is_409(admin_client, venue):
    court, slot = venue["courts"][0], venue["slots"][0]
    res = admin_client.post(
        "/api/venue/court-time-slots/", {"courtId": court.id, "timeSlotId": slot.id, "price": 100}, format="json",
    )
    assert res.status_code == 409


def test_court_time_slot_filters(api_client, venue):
    court = venue["courts"][1]
    res = api_client.get("/api/venue/court-time-slots/", {"courtId": court.id})
    assert res.json()["totalRows"] == 3
    res = api_client.get("/api/venue/court-time-slots/", {"centerId": venue["center"].id, "orderby": "price_desc"})
    assert res.json()["rows"][0]["price"] == 400


def _reserve(member, *cts):
    return create_reservation(
        member=member,
        court_time_slot_ids=[c.id for c in cts],
        date=DAY,
        payment=Payment.objects.get(pk=1),
        invoice=InvoiceType.objects.get(pk=1),
    )


def test_availability_for_date(api_client, venue, member):
    a8 = venue["cts"][("Court A", 8)]
    reservation = _reserve(member, a8)
    params = {"centerId": venue["center"].id, "sportId": venue["sport"].id, "date": DAY.isoformat()}

    body = api_client.get("/api/venue/court-time-slots/date/", params).json()
    assert (body["totalSlots"], body["availableSlots"], body["reservedSlots"]) == (6, 5, 1)
    row = next(r for r in body["rows"] if r["id"] == a8.id)
    assert row["isAvailable"] is False
    assert row["status"] == "reserved"

    body = api_client.get(
        "/api/venue/court-time-slots/date/", {**params, "excludeReservationId": reservation.id},
    ).json()
    assert body["reservedSlots"] == 0


def test_availability_requires_params(api_client, venue):
    res = api_client.get("/api/venue/court-time-slots/date/", {"centerId": venue["center"].id})
    assert res.status_code == 400


def test_availability_range(api_client, venue, member):
    _reserve(member, venue["cts"][("Court A", 8)], venue["cts"][("Court B", 9)])
    params = {
        "centerId": venue["center"].id,
        "sportId": venue["sport"].id,
        "startDate": (DAY - timedelta(days=1)).isoformat(),
        "days": 3,
    }
    rows = api_client.get("/api/venue/court-time-slots/range/", params).json()["rows"]
    assert [r["availableCount"] for r in rows] == [6, 4, 6]

    params["days"] = 91
    assert api_client.get("/api/venue/court-time-slots/range/", params).status_code == 400


def test_batch_set_price_by_center_and_period(admin_client, venue):
    res = admin_client.post(
        "/api/venue/court-time-slots/batch-set-price/",
        {"price": 999, "centerId": venue["center"].id, "timeSlotIds": [venue["slots"][0].id]},
        format="json",
    )
    assert res.status_code == 200
    assert res.json()["affectedRows"] == 2
    assert set(CourtTimeSlot.objects.filter(time_slot=venue["slots"][0]).values_list("price", flat=True)) == {999}
    assert CourtTimeSlot.objects.filter(price=999).count() == 2


def test_batch_set_price_creates_missing_pairs(admin_client, venue):
    from apps.venue.models import Court

    court = Court.objects.create(name="Court C", center=venue["center"], sport=venue["sport"])
    res = admin_client.post(
        "/api/venue/court-time-slots/batch-set-price/", {"price": 250, "courtIds": [court.id]}, format="json",
    )
    assert res.json()["affectedRows"] == 3
    assert CourtTimeSlot.objects.filter(court=court, price=250).count() == 3


def test_batch_set_price_combines_filters(admin_client, venue):
    court_a, court_b = venue["courts"]
    url = "/api/venue/court-time-slots/batch-set-price/"

    # canchas correctas pero de otro deporte: ningún filtro se ignora
    res = admin_client.post(url, {"price": 777, "courtIds": [court_a.id, court_b.id], "sportId": 1}, format="json")
    assert res.status_code == 404
    res = admin_client.post(
        url, {"price": 777, "courtIds": [court_a.id], "timeSlotIds": [venue["slots"][0].id], "timePeriodId": 3},
        format="json",
    )
    assert res.status_code == 404
    assert not CourtTimeSlot.objects.filter(price=777).exists()

    res = admin_client.post(
        url,
        {"price": 777, "courtIds": [court_a.id], "centerId": venue["center"].id, "timePeriodId": 1},
        format="json",
    )
    assert res.json()["affectedRows"] == 3
    assert set(CourtTimeSlot.objects.filter(price=777).values_list("court_id", flat=True)) == {court_a.id}


@pytest.mark.parametrize(
    "payload,code",
    [
        ({"price": 0, "centerId": 1}, 400),
        ({"price": 100, "courtIds": [999999]}, 404),
        ({"price": 100, "timePeriodId": 3}, 404),
    ],
)
def test_batch_set_price_errors(admin_client, venue, payload, code):
    res = admin_client.post("/api/venue/court-time-slots/batch-set-price/", payload, format="json")
    assert res.status_code == code


def test_batch_set_price_is_admin_only(member_client, venue):
    res = member_client.post("/api/venue/court-time-slots/batch-set-price/", {"price": 1}, format="json")
    assert res.status_code == 403


def test_generate_court_time_slots_command(venue):
    from django.core.management import call_command
    from apps.venue.models import Court

    Court.objects.create(name="Court C", center=venue["center"], sport=venue["sport"])
    call_command("generate_court_time_slots", "--price", "300")
    call_command("generate_court_time_slots", "--price", "300")
    assert CourtTimeSlot.objects.count() == 9
