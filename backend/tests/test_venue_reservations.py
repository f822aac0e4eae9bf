from datetime import date, timedelta

import pytest

from apps.common.exceptions import Conflict
from apps.venue.models import Reservation, ReservationCourtTimeSlot
from apps.venue.services.reservations import create_reservation, find_conflicts

pytestmark = pytest.mark.django_db

DAY = date(2030, 5, 20)


def _payload(member, cts_ids, day=DAY, **extra):
    return {
        "memberId": member.id,
        "courtTimeSlotIds": cts_ids,
        "date": day.isoformat(),
        "paymentId": 1,
        "invoiceId": 1,
        **extra,
    }


@pytest.fixture
def slots(venue):
    cts = venue["cts"]
    return cts[("Court A", 8)], cts[("Court A", 9)], cts[("Court B", 8)]


def test_create_reservation_sums_prices(admin_client, member, slots):
    a8, a9, _ = slots
    res = admin_client.post("/api/venue/reservations/", _payload(member, [a8.id, a9.id, a9.id]), format="json")
    assert res.status_code == 201
    record = res.json()["record"]
    assert record["price"] == a8.price + a9.price
    assert record["statusId"] == 1
    assert len(record["invoiceNumber"]) == 10
    assert sorted(s["id"] for s in record["courtTimeSlots"]) == sorted([a8.id, a9.id])
    assert {"courtName", "timeLabel", "centerName", "sportName", "price", "date"} <= set(record["courtTimeSlots"][0])


def test_conflict_returns_409_with_ids(admin_client, member, other_member, slots):
    a8, a9, b8 = slots
    assert admin_client.post("/api/venue/reservations/", _payload(member, [a8.id]), format="json").status_code == 201

    res = admin_client.post("/api/venue/reservations/", _payload(other_member, [a8.id, b8.id]), format="json")
    assert res.status_code == 409
    body = res.json()
    assert body["success"] is False
    assert body["conflictIds"] == [a8.id]
    assert Reservation.objects.count() == 1


def test_same_slot_other_day_is_fine(admin_client, member, slots):
    a8, _, _ = slots
    assert admin_client.post("/api/venue/reservations/", _payload(member, [a8.id]), format="json").status_code == 201
    res = admin_client.post(
        "/api/venue/reservations/", _payload(member, [a8.id], DAY + timedelta(days=1)), format="json",
    )
    assert res.status_code == 201


def test_unknown_slot_is_400(admin_client, member, slots):
    res = admin_client.post("/api/venue/reservations/", _payload(member, [999999]), format="json")
    assert res.status_code == 400


def test_empty_slots_is_400(admin_client, member, slots):
    res = admin_client.post("/api/venue/reservations/", _payload(member, []), format="json")
    assert res.status_code == 400


def test_integrity_error_becomes_conflict(member, slots, monkeypatch):
    """Si el pre-chequeo no ve el choque (carrera), el UniqueConstraint responde 409."""
    from apps.common.models import InvoiceType, Payment

    a8, _, _ = slots
    payment, invoice = Payment.objects.get(pk=1), InvoiceType.objects.get(pk=1)
    create_reservation(member=member, court_time_slot_ids=[a8.id], date=DAY, payment=payment, invoice=invoice)

    monkeypatch.setattr("apps.venue.services.reservations._raise_if_conflicts", lambda *a, **k: None)
    with pytest.raises(Conflict) as exc:
        create_reservation(member=member, court_time_slot_ids=[a8.id], date=DAY, payment=payment, invoice=invoice)
    assert exc.value.extra["conflictIds"] == [a8.id]
    assert ReservationCourtTimeSlot.objects.filter(court_time_slot=a8, date=DAY).count() == 1


def test_update_excludes_itself_and_recomputes(admin_client, member, slots):
    a8, a9, b8 = slots
    created = admin_client.post("/api/venue/reservations/", _payload(member, [a8.id]), format="json").json()["record"]

    res = admin_client.put(
        f"/api/venue/reservations/{created['id']}/", _payload(member, [a8.id, b8.id]), format="json",
    )
    assert res.status_code == 200
    assert res.json()["record"]["price"] == a8.price + b8.price
    assert find_conflicts([a8.id, b8.id], DAY) == sorted([a8.id, b8.id])
    assert ReservationCourtTimeSlot.objects.filter(reservation_id=created["id"]).count() == 2


def test_update_conflict_with_other_reservation(admin_client, member, other_member, slots):
    a8, a9, _ = slots
    first = admin_client.post("/api/venue/reservations/", _payload(member, [a8.id]), format="json").json()["record"]
    admin_client.post("/api/venue/reservations/", _payload(other_member, [a9.id]), format="json")

    res = admin_client.put(f"/api/venue/reservations/{first['id']}/", _payload(member, [a9.id]), format="json")
    assert res.status_code == 409
    assert res.json()["conflictIds"] == [a9.id]


def test_reservation_filters(admin_client, member, other_member, slots):
    a8, a9, _ = slots
    admin_client.post("/api/venue/reservations/", _payload(member, [a8.id]), format="json")
    admin_client.post("/api/venue/reservations/", _payload(other_member, [a9.id]), format="json")

    res = admin_client.get("/api/venue/reservations/", {"memberId": member.id})
    assert res.json()["totalRows"] == 1
    res = admin_client.get("/api/venue/reservations/", {"keyword": "Member Two"})
    assert [r["memberId"] for r in res.json()["rows"]] == [other_member.id]
    res = admin_client.get("/api/venue/reservations/", {"date": DAY.isoformat(), "centerId": a8.court.center_id})
    assert res.json()["totalRows"] == 2


def test_member_book_and_list(member_client, member, other_member, slots):
    a8, _, _ = slots
    res = member_client.post(
        "/api/venue/reservations/book/",
        {"courtTimeSlotIds": [a8.id], "date": DAY.isoformat(), "paymentId": 1, "invoiceId": 1, "memberId": other_member.id},
        format="json",
    )
    assert res.status_code == 201
    assert res.json()["record"]["memberId"] == member.id

    res = member_client.get("/api/venue/reservations/member/")
    assert res.status_code == 200
    assert res.json()["totalRows"] == 1


def test_reservation_admin_routes_forbidden_for_members(member_client):
    assert member_client.get("/api/venue/reservations/").status_code == 403


def test_bulk_delete_reservations_frees_slots(admin_client, member, slots):
    a8, a9, _ = slots
    ids = [
        admin_client.post("/api/venue/reservations/", _payload(member, [cts.id]), format="json").json()["record"]["id"]
        for cts in (a8, a9)
    ]
    res = admin_client.delete("/api/venue/reservations/multi/", {"checkedItems": ids}, format="json")
    assert res.json()["affectedRows"] == 2
    assert find_conflicts([a8.id, a9.id], DAY) == []
