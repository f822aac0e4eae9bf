from datetime import date

import pytest

from apps.course.models import Booking, Coach, Lesson
from apps.course.services.bookings import cancel_booking

pytestmark = pytest.mark.django_db


@pytest.fixture
def coach(django_user_model):
    user = django_user_model.objects.create_user(email="coach@example.com", password="secret123", name="Coach Lin")
    return Coach.objects.create(member=user, bio="Former pro")


@pytest.fixture
def lesson(venue, coach):
    return Lesson.objects.create(
        title="Badminton Basics",
        sport=venue["sport"],
        court=venue["courts"][0],
        coach=coach,
        time_slot=venue["slots"][0],
        day_of_week=3,
        start_date=date(2030, 6, 1),
        end_date=date(2030, 8, 31),
        price=3200,
        max_capacity=2,
    )


def _lesson_payload(venue, coach, **extra):
    return {
        "title": "Smash Clinic",
        "sportId": venue["sport"].id,
        "courtId": venue["courts"][0].id,
        "coachId": coach.id,
        "timeSlotId": venue["slots"][1].id,
        "dayOfWeek": 5,
        "startDate": "2030-06-01",
        "endDate": "2030-07-01",
        "price": 1500,
        "maxCapacity": 10,
        **extra,
    }


def _book(client, lesson, **extra):
    return client.post(
        "/api/course/bookings/", {"lessonId": lesson.id, "paymentId": 1, "invoiceId": 1, **extra}, format="json",
    )


# ------------------------------------------------------------------------------
# Cursos
# ------------------------------------------------------------------------------
def test_lessons_default_page_size(api_client, lesson):
    body = api_client.get("/api/course/lessons/").json()
    assert body["perPage"] == 6
    assert body["rows"][0]["coachName"] == "Coach Lin"


@pytest.mark.parametrize(
    "params,expected",
    [({"keyword": "coach lin"}, 1), ({"keyword": "Court A"}, 1), ({"keyword": "yoga"}, 0), ({"sportId": 1}, 0)],
)
def test_lesson_filters(api_client, lesson, params, expected):
    assert api_client.get("/api/course/lessons/", params).json()["totalRows"] == expected


def test_create_lesson(admin_client, venue, coach):
    res = admin_client.post("/api/course/lessons/", _lesson_payload(venue, coach), format="json")
    assert res.status_code == 201
    assert res.json()["record"]["currentCount"] == 0


@pytest.mark.parametrize(
    "extra",
    [
        {"endDate": "2030-06-01"},
        {"maxCapacity": 2, "currentCount": 3},
        {"maxCapacity": 101},
        {"dayOfWeek": 8},
    ],
)
def test_create_lesson_validation(admin_client, venue, coach, extra):
    res = admin_client.post("/api/course/lessons/", _lesson_payload(venue, coach, **extra), format="json")
    assert res.status_code == 400


def test_lesson_writes_admin_only(member_client, venue, coach):
    res = member_client.post("/api/course/lessons/", _lesson_payload(venue, coach), format="json")
    assert res.status_code == 403


def test_time_slot_in_use_cannot_be_deleted(admin_client, lesson):
    res = admin_client.delete(f"/api/venue/time-slots/{lesson.time_slot_id}/")
    assert res.status_code == 409


# ------------------------------------------------------------------------------
# Inscripciones
# ------------------------------------------------------------------------------
def test_booking_increments_count(member_client, member, lesson):
    res = _book(member_client, lesson)
    assert res.status_code == 201
    record = res.json()["record"]
    assert record["memberId"] == member.id
    assert record["price"] == 3200
    lesson.refresh_from_db()
    assert lesson.current_count == 1


def test_member_cannot_book_for_someone_else(member_client, member, other_member, lesson):
    res = _book(member_client, lesson, memberId=other_member.id)
    assert res.json()["record"]["memberId"] == member.id


def test_admin_books_for_member(admin_client, other_member, lesson):
    res = _book(admin_client, lesson, memberId=other_member.id)
    assert res.json()["record"]["memberId"] == other_member.id


def test_duplicate_booking_is_400(member_client, lesson):
    _book(member_client, lesson)
    res = _book(member_client, lesson)
    assert res.status_code == 400
    lesson.refresh_from_db()
    assert lesson.current_count == 1


def test_full_lesson_is_400(member_client, other_client, admin_client, lesson):
    _book(member_client, lesson)
    _book(other_client, lesson)
    res = _book(admin_client, lesson)
    assert res.status_code == 400
    assert res.json()["message"] == "This lesson is full."


def test_missing_lesson_is_404(member_client, lesson):
    res = member_client.post(
        "/api/course/bookings/", {"lessonId": 999999, "paymentId": 1, "invoiceId": 1}, format="json",
    )
    assert res.status_code == 404


def test_owner_can_view_and_cancel(member_client, other_client, lesson):
    booking_id = _book(member_client, lesson).json()["record"]["id"]

    assert other_client.get(f"/api/course/bookings/{booking_id}/").status_code == 403
    assert member_client.get(f"/api/course/bookings/{booking_id}/").status_code == 200

    res = member_client.delete(f"/api/course/bookings/{booking_id}/")
    assert res.status_code == 200
    assert res.json()["deletedName"] == "Badminton Basics"
    lesson.refresh_from_db()
    assert lesson.current_count == 0


def test_bulk_delete_decrements(admin_client, member_client, other_client, lesson):
    ids = [_book(c, lesson).json()["record"]["id"] for c in (member_client, other_client)]
    res = admin_client.delete("/api/course/bookings/multi/", {"checkedItems": ids}, format="json")
    assert res.json()["affectedRows"] == 2
    lesson.refresh_from_db()
    assert lesson.current_count == 0


def test_cancel_never_goes_below_zero(member, lesson):
    from apps.common.models import InvoiceType, Payment, Status

    booking = Booking.objects.create(
        member=member, lesson=lesson, price=1, status=Status.objects.get(pk=1),
        payment=Payment.objects.get(pk=1), invoice=InvoiceType.objects.get(pk=1),
    )
    cancel_booking(booking)
    lesson.refresh_from_db()
    assert lesson.current_count == 0


def test_booking_list_is_admin_only(member_client, admin_client, lesson):
    _book(member_client, lesson)
    assert member_client.get("/api/course/bookings/").status_code == 403
    assert admin_client.get("/api/course/bookings/", {"orderby": "price_desc"}).json()["totalRows"] == 1


def test_member_bookings(member_client, other_client, lesson):
    _book(member_client, lesson)
    _book(other_client, lesson)
    body = member_client.get("/api/course/bookings/member/").json()
    assert body["totalRows"] == 1
    assert body["rows"][0]["lessonTitle"] == "Badminton Basics"
