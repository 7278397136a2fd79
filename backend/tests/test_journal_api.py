from datetime import datetime

from conftest import make_written_entry
from loveslices.models import User


def _register(client, name, email, password="supersecure"):
    response = client.post(
        "/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _pair(client):
    alice = _register(client, "Alice", "alice@example.com")
    bob = _register(client, "Bob", "bob@example.com")
    code = client.post("/users/me/invite-code", headers=alice).json()["invite_code"]
    accepted = client.post(
        "/users/me/accept-invitation", json={"invite_code": code}, headers=bob
    )
    assert accepted.status_code == 200
    return alice, bob


def test_register_and_login_flow(client):
    _register(client, "Student", "student@example.com")

    login = client.post(
        "/auth/login",
        json={"email": "student@example.com", "password": "supersecure"},
    )
    assert login.status_code == 200
    assert login.json()["access_token"]

    bad = client.post(
        "/auth/login",
        json={"email": "student@example.com", "password": "wrong-password"},
    )
    assert bad.status_code == 401


def test_refresh_issues_new_pair(client):
    response = client.post(
        "/auth/register",
        json={"name": "Sam", "email": "sam@example.com", "password": "supersecure"},
    )
    refresh = response.json()["refresh_token"]

    refreshed = client.post("/auth/refresh", json={"refresh_token": refresh})
    assert refreshed.status_code == 200

    # an access token is not accepted as a refresh token
    access = response.json()["access_token"]
    assert client.post("/auth/refresh", json={"refresh_token": access}).status_code == 401


def test_journal_requires_authentication(client):
    assert client.get("/journal").status_code == 401


def test_journal_rejects_malformed_token(client):
    headers = {"Authorization": "Bearer not-a-jwt"}
    assert client.get("/journal", headers=headers).status_code == 401


def test_profile_picture_is_normalised_on_profile(client, session_factory):
    headers = _register(client, "Alice", "alice@example.com")
    with session_factory() as db:
        user = db.query(User).filter(User.email == "alice@example.com").first()
        user.profile_picture = "alice.jpg"
        db.commit()

    profile = client.get("/users/me", headers=headers).json()
    assert profile["profile_picture"] == "/uploads/profile_pictures/alice.jpg"


def test_partnered_journal_flow(client, session_factory):
    alice, bob = _pair(client)
    with session_factory() as db:
        alice_user = db.query(User).filter(User.email == "alice@example.com").first()
        bob_user = db.query(User).filter(User.email == "bob@example.com").first()
        older = make_written_entry(
            db, alice_user, bob_user,
            theme="Trust Issues", content="Grateful Today",
            created_at=datetime(2024, 1, 1),
        )
        db.commit()
        loveslice_id = older.written_loveslice_id

    created = client.post(
        "/journal",
        json={
            "written_loveslice_id": loveslice_id,
            "theme": "Trust",
            "searchable_content": "Revisiting an old answer",
        },
        headers=bob,
    )
    assert created.status_code == 201
    assert created.json()["user1_id"] != created.json()["user2_id"]

    everything = client.get("/journal", headers=alice).json()
    assert [entry["theme"] for entry in everything] == ["Trust", "Trust Issues"]

    searched = client.get("/journal", params={"search": "grateful"}, headers=alice).json()
    assert [entry["theme"] for entry in searched] == ["Trust Issues"]
    responses = searched[0]["written_loveslice"]["responses"]
    assert len(responses) == 2
    assert "email" not in responses[0]["user"]

    by_theme = client.get("/journal", params={"theme": "Trust"}, headers=bob).json()
    assert [entry["theme"] for entry in by_theme] == ["Trust"]

    themes = client.get("/journal/themes", headers=bob).json()
    assert themes == ["Trust", "Trust Issues"]


def test_create_journal_entry_for_unknown_loveslice_is_not_found(client):
    headers = _register(client, "Solo", "solo@example.com")
    response = client.post(
        "/journal",
        json={"written_loveslice_id": 1, "theme": "Trust", "searchable_content": "x"},
        headers=headers,
    )
    assert response.status_code == 404


def test_create_journal_entry_with_both_references_is_unprocessable(client):
    headers = _register(client, "Solo", "solo@example.com")
    response = client.post(
        "/journal",
        json={
            "written_loveslice_id": 1,
            "spoken_loveslice_id": 2,
            "theme": "Trust",
            "searchable_content": "x",
        },
        headers=headers,
    )
    assert response.status_code == 422


def test_disconnect_partner_endpoint(client):
    alice, bob = _pair(client)

    response = client.post("/users/me/disconnect-partner", json={}, headers=alice)
    assert response.status_code == 200
    assert response.json()["partner_id"] is None
    assert client.get("/users/me", headers=bob).json()["partner_id"] is None

    again = client.post("/users/me/disconnect-partner", json={}, headers=alice)
    assert again.status_code == 400
