from loveslices.models import Question


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
    client.post("/users/me/accept-invitation", json={"invite_code": code}, headers=bob)
    return alice, bob


def _question(session_factory, content="Where should we travel next?", theme="Adventure"):
    with session_factory() as db:
        question = Question(content=content, theme=theme)
        db.add(question)
        db.commit()
        return question.id


def test_answer_pair_then_talk_flow(client, session_factory):
    alice, bob = _pair(client)
    question_id = _question(session_factory)

    first = client.post(
        "/responses", json={"question_id": question_id, "content": "Lisbon"}, headers=alice
    )
    assert first.status_code == 201
    assert first.json()["loveslice"] is None

    second = client.post(
        "/responses", json={"question_id": question_id, "content": "Kyoto"}, headers=bob
    )
    assert second.status_code == 201
    loveslice = second.json()["loveslice"]
    assert [r["content"] for r in loveslice["responses"]] == ["Lisbon", "Kyoto"]

    listed = client.get("/loveslices", headers=alice).json()
    assert [item["id"] for item in listed] == [loveslice["id"]]

    noted = client.patch(
        f"/loveslices/{loveslice['id']}/note", json={"note": "book flights"}, headers=bob
    )
    assert noted.json()["private_note"] == "book flights"

    started = client.post("/conversations", json={"loveslice_id": loveslice["id"]}, headers=alice)
    assert started.status_code == 201
    conversation_id = started.json()["id"]
    assert client.get(f"/conversations/{conversation_id}", headers=bob).status_code == 200

    ended = client.patch(
        f"/conversations/{conversation_id}/end",
        json={
            "outcome": "tried_and_listened",
            "create_spoken_loveslice": True,
            "theme": "Travel plans",
        },
        headers=alice,
    )
    assert ended.status_code == 200
    assert ended.json()["spoken_loveslice"]["outcome"] == "tried_and_listened"

    journal = client.get("/journal", headers=bob).json()
    assert [entry["theme"] for entry in journal] == ["Travel plans", "Adventure"]
    assert journal[0]["spoken_loveslice"]["theme"] == "Travel plans"
    assert journal[1]["written_loveslice"]["id"] == loveslice["id"]


def test_duplicate_answer_and_unknown_question(client, session_factory):
    headers = _register(client, "Solo", "solo@example.com")
    question_id = _question(session_factory)

    body = {"question_id": question_id, "content": "first"}
    assert client.post("/responses", json=body, headers=headers).status_code == 201
    assert client.post("/responses", json=body, headers=headers).status_code == 400
    missing = {"question_id": 999, "content": "x"}
    assert client.post("/responses", json=missing, headers=headers).status_code == 404


def test_outsider_cannot_open_a_couples_loveslice(client, session_factory):
    alice, bob = _pair(client)
    outsider = _register(client, "Carol", "carol@example.com")
    question_id = _question(session_factory)
    client.post("/responses", json={"question_id": question_id, "content": "a"}, headers=alice)
    loveslice = client.post(
        "/responses", json={"question_id": question_id, "content": "b"}, headers=bob
    ).json()["loveslice"]

    assert client.get(f"/loveslices/{loveslice['id']}", headers=outsider).status_code == 403
    assert client.get("/loveslices/999", headers=outsider).status_code == 404


def test_ending_a_conversation_twice_is_rejected(client):
    alice, _ = _pair(client)
    conversation_id = client.post("/conversations", json={}, headers=alice).json()["id"]
    body = {"outcome": "connected"}

    assert client.patch(f"/conversations/{conversation_id}/end", json=body, headers=alice).status_code == 200
    again = client.patch(f"/conversations/{conversation_id}/end", json=body, headers=alice)
    assert again.status_code == 400
