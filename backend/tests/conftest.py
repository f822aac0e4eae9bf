# backend/tests/conftest.py
from datetime import time

import pytest
from rest_framework.test import APIClient

from apps.common.management.commands.seed_reference_data import load_reference_data
from apps.members.services.auth import issue_tokens


@pytest.fixture
def reference_data(db):
    load_reference_data()


@pytest.fixture
def api_client():
    return APIClient()


def _client_for(member):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_tokens(member)['token']}")
    return client


@pytest.fixture
def member(django_user_model, db):
    return django_user_model.objects.create_user(
        email="member@example.com", password="secret123", name="Member One",
    )


@pytest.fixture
def other_member(django_user_model, db):
    return django_user_model.objects.create_user(
        email="other@example.com", password="secret123", name="Member Two",
    )


@pytest.fixture
def admin_member(django_user_model, db):
    return django_user_model.objects.create_user(
        email="admin@example.com", password="secret123", name="Admin", role="admin",
    )


@pytest.fixture
def member_client(member):
    return _client_for(member)


@pytest.fixture
def other_client(other_member):
    return _client_for(other_member)


@pytest.fixture
def admin_client(admin_member):
    return _client_for(admin_member)


@pytest.fixture
def venue(reference_data):
    """Centro con dos canchas de bádminton y tres franjas a 200/300/400."""
    from apps.common.models import Location, Sport
    from apps.venue.models import Center, CenterImage, CenterSport, Court, CourtTimeSlot, TimePeriod, TimeSlot

    sport = Sport.objects.get(pk=2)
    center = Center.objects.create(name="Arena Center", location=Location.objects.get(pk=1), address="No. 1 Road")
    CenterSport.objects.create(center=center, sport=sport)
    CenterImage.objects.create(center=center, url="https://img.example.com/a.jpg", order=0)
    courts = [Court.objects.create(name=f"Court {n}", center=center, sport=sport) for n in ("A", "B")]

    period = TimePeriod.objects.get(pk=1)
    slots = [
        TimeSlot.objects.create(start_time=time(h), end_time=time(h + 1), time_period=period)
        for h in (8, 9, 10)
    ]
    cts = {}
    for court in courts:
        for slot, price in zip(slots, (200, 300, 400)):
            cts[(court.name, slot.start_time.hour)] = CourtTimeSlot.objects.create(
                court=court, time_slot=slot, price=price,
            )
    return {"center": center, "sport": sport, "courts": courts, "slots": slots, "cts": cts}
