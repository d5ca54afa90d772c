"""Tests for the notes endpoints, including isolation between owners."""
import pytest

from tests.helpers import bearer, signup_and_verify


@pytest.fixture
def alice(client, mailer):
    return bearer(signup_and_verify(client, mailer, email="alice@example.com", name="Alice"))


@pytest.fixture
def bob(client, mailer):
    return bearer(signup_and_verify(client, mailer, email="bob@example.com", name="Bob"))


def create(client, headers, title="Groceries", content="milk, eggs"):
    res = client.post("/api/notes", json={"title": title, "content": content}, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["note"]


def test_notes_require_a_token(client):
    assert client.get("/api/notes").status_code == 401
    assert client.post("/api/notes", json={"title": "t", "content": "c"}).status_code == 401


def test_create_and_get(client, alice):
    res = client.post("/api/notes", json={"title": "  Groceries  ", "content": "milk"}, headers=alice)
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Note created successfully"
    note = body["note"]
    assert note["title"] == "Groceries"
    assert note["content"] == "milk"
    assert {"id", "createdAt", "updatedAt"} <= note.keys()

    res = client.get(f"/api/notes/{note['id']}", headers=alice)
    assert res.status_code == 200
    assert res.json()["note"] == note


def test_list_is_newest_first(client, alice):
    first = create(client, alice, title="first")
    second = create(client, alice, title="second")
    third = create(client, alice, title="third")

    res = client.get("/api/notes", headers=alice)
    assert res.status_code == 200
    assert [n["id"] for n in res.json()["notes"]] == [third["id"], second["id"], first["id"]]


def test_empty_list(client, alice):
    assert client.get("/api/notes", headers=alice).json() == {"notes": []}


def test_update(client, alice):
    note = create(client, alice)

    res = client.put(f"/api/notes/{note['id']}", json={"title": "Shopping", "content": "bread"}, headers=alice)
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Note updated successfully"
    assert body["note"]["title"] == "Shopping"
    assert body["note"]["content"] == "bread"
    assert body["note"]["createdAt"] == note["createdAt"]


def test_delete(client, alice):
    note = create(client, alice)

    res = client.delete(f"/api/notes/{note['id']}", headers=alice)
    assert res.status_code == 200
    assert res.json() == {"message": "Note deleted successfully"}
    assert client.get(f"/api/notes/{note['id']}", headers=alice).status_code == 404
    assert client.delete(f"/api/notes/{note['id']}", headers=alice).status_code == 404


def test_unknown_note(client, alice):
    res = client.get("/api/notes/does-not-exist", headers=alice)
    assert res.status_code == 404
    assert res.json() == {"error": "Note not found"}


@pytest.mark.parametrize(
    "payload, field, message",
    [
        ({"title": "   ", "content": "x"}, "title", "Title cannot be empty"),
        ({"title": "x" * 201, "content": "x"}, "title", "Title must not exceed 200 characters"),
        ({"title": "ok", "content": "  "}, "content", "Content cannot be empty"),
        ({"title": "ok", "content": "x" * 10_001}, "content", "Content must not exceed 10000 characters"),
        ({"content": "x"}, "title", "Title is required"),
    ],
)
def test_note_validation(client, alice, payload, field, message):
    res = client.post("/api/notes", json=payload, headers=alice)
    assert res.status_code == 400
    assert res.json() == {"error": message, "field": field}


class TestOwnership:
    def test_other_users_note_is_not_found(self, client, alice, bob):
        note = create(client, alice)

        assert client.get(f"/api/notes/{note['id']}", headers=bob).status_code == 404
        res = client.put(f"/api/notes/{note['id']}", json={"title": "mine", "content": "now"}, headers=bob)
        assert res.status_code == 404
        assert client.delete(f"/api/notes/{note['id']}", headers=bob).status_code == 404

        res = client.get(f"/api/notes/{note['id']}", headers=alice)
        assert res.json()["note"]["title"] == "Groceries"

    def test_lists_are_separate(self, client, alice, bob):
        create(client, alice, title="alice's")
        create(client, bob, title="bob's")

        assert [n["title"] for n in client.get("/api/notes", headers=alice).json()["notes"]] == ["alice's"]
        assert [n["title"] for n in client.get("/api/notes", headers=bob).json()["notes"]] == ["bob's"]
