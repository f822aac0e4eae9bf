import pytest
from rest_framework.exceptions import AuthenticationFailed

from apps.members.services.auth import member_from_firebase_claims

pytestmark = pytest.mark.django_db

REGISTER = {
    "email": "New@Example.com",
    "password": "secret123",
    "confirmPassword": "secret123",
    "name": "Newbie",
    "account": "newbie",
}


def test_register_returns_tokens(api_client, django_user_model):
    res = api_client.post("/api/auth/register/", REGISTER, format="json")
    assert res.status_code == 201
    body = res.json()
    assert body["token"] and body["refresh"]
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["role"] == "member"
    assert django_user_model.objects.filter(email="new@example.com").exists()


@pytest.mark.parametrize(
    "override,path",
    [
        ({"confirmPassword": "other123"}, ["confirmPassword"]),
        ({"password": "123", "confirmPassword": "123"}, ["password"]),
        ({"account": "abc"}, ["account"]),
        ({"phone": "12345"}, ["phone"]),
    ],
)
def test_register_validation(api_client, override, path):
    res = api_client.post("/api/auth/register/", {**REGISTER, **override}, format="json")
    assert res.status_code == 400
    assert path in [issue["path"] for issue in res.json()["issues"]]


def test_register_duplicate_email(api_client, member):
    res = api_client.post("/api/auth/register/", {**REGISTER, "email": member.email}, format="json")
    assert res.status_code == 400


def test_login(api_client, member):
    res = api_client.post("/api/auth/login/", {"email": member.email, "password": "secret123"}, format="json")
    assert res.status_code == 200
    assert res.json()["user"]["id"] == member.id


def test_login_wrong_password(api_client, member):
    res = api_client.post("/api/auth/login/", {"email": member.email, "password": "wrong123"}, format="json")
    assert res.status_code == 400
    assert res.json()["issues"][0]["path"] == ["password"]


def test_verify_and_profile(member_client, member):
    res = member_client.get("/api/auth/verify/")
    assert res.status_code == 200
    assert res.json()["user"]["email"] == member.email

    res = member_client.put("/api/auth/profile/", {"name": "Renamed", "phone": "0912345678"}, format="json")
    assert res.status_code == 200
    assert res.json()["record"]["name"] == "Renamed"
    member.refresh_from_db()
    assert member.phone == "0912345678"


def test_verify_with_bad_token(api_client):
    api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
    assert api_client.get("/api/auth/verify/").status_code == 401


def test_firebase_login_creates_member(api_client, monkeypatch, django_user_model):
    claims = {"sub": "fb-uid-1", "email": "fire@example.com", "name": "Fire"}
    monkeypatch.setattr("apps.members.views.verify_firebase_token", lambda token: claims)

    res = api_client.post("/api/auth/firebase-login/", {"idToken": "x"}, format="json")
    assert res.status_code == 200
    created = django_user_model.objects.get(email="fire@example.com")
    assert created.firebase_uid == "fb-uid-1"
    assert not created.has_usable_password()


def test_firebase_login_invalid_token(api_client, monkeypatch):
    def reject(token):
        raise AuthenticationFailed("Invalid Firebase token.")

    monkeypatch.setattr("apps.members.views.verify_firebase_token", reject)
    res = api_client.post("/api/auth/firebase-login/", {"idToken": "x"}, format="json")
    assert res.status_code == 401


def test_firebase_claims_link_existing_email(member):
    linked = member_from_firebase_claims({"sub": "uid-9", "email": member.email.upper()})
    assert linked.pk == member.pk
    member.refresh_from_db()
    assert member.firebase_uid == "uid-9"
    # segunda vez entra por uid
    assert member_from_firebase_claims({"sub": "uid-9", "email": "changed@example.com"}).pk == member.pk
