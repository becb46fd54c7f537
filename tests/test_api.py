# tests/test_api.py
import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from api.main import app
from bookshelf.isbn import IsbnMetadata
from bookshelf.sa.database import get_db

@pytest.fixture
def client(database):
    """Test client whose requests use the test database"""
    def override_get_db():
        session = database.get_session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

def as_user(user_id):
    return {"X-User-Id": user_id}

def create_profile(client, user_id, full_name):
    response = client.post(
        "/profiles",
        json={"full_name": full_name, "email": f"{user_id}@example.com"},
        headers=as_user(user_id)
    )
    assert response.status_code == 201
    return response.json()

def add_book(client, user_id, **fields):
    payload = {"title": "The Hobbit", "author": "J.R.R. Tolkien", "genre": "Fantasy"}
    payload.update(fields)
    response = client.post("/books", json=payload, headers=as_user(user_id))
    assert response.status_code == 201
    return response.json()

@pytest.fixture
def users(client):
    create_profile(client, "alice", "Alice Lender")
    create_profile(client, "bob", "Bob Borrower")
    create_profile(client, "carol", "Carol Reader")

def test_root(client):
    assert client.get("/").json() == {"message": "Bookshelf API"}

def test_actor_header_required(client):
    assert client.get("/books").status_code == 422

def test_profiles(client):
    assert client.get("/profiles/me", headers=as_user("alice")).status_code == 404
    profile = create_profile(client, "alice", "Alice Lender")
    assert profile["user_id"] == "alice"

    duplicate = client.post(
        "/profiles", json={"full_name": "Again", "email": "a@example.com"}, headers=as_user("alice")
    )
    assert duplicate.status_code == 400

    updated = client.put("/profiles/me", json={"location": "Leeds"}, headers=as_user("alice"))
    assert updated.status_code == 200
    assert updated.json()["location"] == "Leeds"
    assert updated.json()["full_name"] == "Alice Lender"

def test_add_and_list_books(client, users):
    book = add_book(client, "alice", pages=310)
    assert book["status"] == "available"
    assert book["condition"] == "good"
    assert book["owner_id"] == "alice"

    mine = client.get("/books", params={"query": "tolk"}, headers=as_user("alice")).json()
    assert mine["total"] == 1
    assert client.get(f"/books/{book['id']}").json()["pages"] == 310

def test_cannot_add_borrowed_book(client, users):
    response = client.post(
        "/books",
        json={"title": "Dune", "author": "Frank Herbert", "status": "borrowed"},
        headers=as_user("alice")
    )
    assert response.status_code == 400

def test_book_validation(client, users):
    response = client.post("/books", json={"title": "", "author": "x"}, headers=as_user("alice"))
    assert response.status_code == 422

def test_browse_shows_other_users_books(client, users):
    add_book(client, "alice")
    add_book(client, "bob", title="Neuromancer", author="William Gibson")

    browse = client.get("/browse", headers=as_user("bob")).json()
    assert [b["title"] for b in browse["items"]] == ["The Hobbit"]
    assert browse["items"][0]["owner"]["full_name"] == "Alice Lender"

    empty = client.get("/browse", params={"query": "austen"}, headers=as_user("bob")).json()
    assert empty["total"] == 0
    assert empty["query"] == "austen"

def test_lending_flow(client, users):
    book = add_book(client, "alice")

    sent = client.post("/requests", json={"book_id": book["id"], "notes": "Please"}, headers=as_user("bob"))
    assert sent.status_code == 201
    request_id = sent.json()["id"]
    assert sent.json()["status"] == "pending"

    conflict = client.post("/requests", json={"book_id": book["id"]}, headers=as_user("carol"))
    assert conflict.status_code == 409
    assert conflict.json()["detail"]["kind"] == "conflict"

    forbidden = client.post(f"/requests/{request_id}/approve", headers=as_user("bob"))
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"]["kind"] == "forbidden"

    approved = client.post(f"/requests/{request_id}/approve", headers=as_user("alice"))
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["due_date"] is not None
    assert client.get(f"/books/{book['id']}").json()["status"] == "borrowed"

    again = client.post(f"/requests/{request_id}/approve", headers=as_user("alice"))
    assert again.status_code == 409
    assert again.json()["detail"]["kind"] == "invalid_state"

    listing = client.get("/requests", headers=as_user("bob")).json()["items"][0]
    assert listing["counterparty_role"] == "Lender"
    assert listing["counterparty_name"] == "Alice Lender"
    assert listing["can_return"] is True

    returned = client.post(f"/requests/{request_id}/return", headers=as_user("bob"))
    assert returned.status_code == 200
    assert returned.json()["status"] == "returned"
    assert client.get(f"/books/{book['id']}").json()["status"] == "available"

    notices = client.get("/notifications", headers=as_user("alice")).json()
    assert notices["unread"] == 2
    assert {n["type"] for n in notices["items"]} == {"borrow_request", "book_returned"}

def test_owner_cannot_request_own_book(client, users):
    book = add_book(client, "alice")
    response = client.post("/requests", json={"book_id": book["id"]}, headers=as_user("alice"))
    assert response.status_code == 400
    assert response.json()["detail"]["kind"] == "invalid_actor"

def test_reject_request(client, users):
    book = add_book(client, "alice")
    request_id = client.post("/requests", json={"book_id": book["id"]}, headers=as_user("bob")).json()["id"]

    rejected = client.post(f"/requests/{request_id}/reject", headers=as_user("alice"))
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"

    pending = client.get("/requests", params={"status": "pending"}, headers=as_user("bob")).json()
    assert pending["total"] == 0

def test_missing_request(client, users):
    response = client.post("/requests/missing/reject", headers=as_user("alice"))
    assert response.status_code == 404

def test_edit_and_delete_book(client, users):
    book = add_book(client, "alice")
    request_id = client.post("/requests", json={"book_id": book["id"]}, headers=as_user("bob")).json()["id"]

    blocked = client.patch(f"/books/{book['id']}", json={"status": "not_available"}, headers=as_user("alice"))
    assert blocked.status_code == 409
    assert client.delete(f"/books/{book['id']}", headers=as_user("alice")).status_code == 409

    edited = client.patch(f"/books/{book['id']}", json={"genre": "Classic"}, headers=as_user("alice"))
    assert edited.status_code == 200
    assert edited.json()["genre"] == "Classic"
    assert client.patch(f"/books/{book['id']}", json={"genre": "x"}, headers=as_user("bob")).status_code == 403

    client.post(f"/requests/{request_id}/reject", headers=as_user("alice"))
    assert client.delete(f"/books/{book['id']}", headers=as_user("alice")).status_code == 204
    assert client.get(f"/books/{book['id']}").status_code == 404

def test_notifications_read(client, users):
    book = add_book(client, "alice")
    client.post("/requests", json={"book_id": book["id"]}, headers=as_user("bob"))

    notice = client.get("/notifications", headers=as_user("alice")).json()["items"][0]
    assert client.post(f"/notifications/{notice['id']}/read", headers=as_user("bob")).status_code == 404
    marked = client.post(f"/notifications/{notice['id']}/read", headers=as_user("alice"))
    assert marked.json()["read"] is True

    assert client.post("/notifications/read-all", headers=as_user("alice")).json() == {"updated": 0}
    assert client.get("/notifications", params={"unread": True}, headers=as_user("alice")).json()["total"] == 0

def test_dashboard(client, users):
    add_book(client, "alice")
    book = add_book(client, "alice", title="Dune", author="Frank Herbert")
    client.post("/requests", json={"book_id": book["id"]}, headers=as_user("bob"))

    stats = client.get("/dashboard", headers=as_user("alice")).json()
    assert stats == {
        "total_books": 2,
        "available_books": 2,
        "borrowed_books": 0,
        "pending_requests": 1,
        "unread_notifications": 1,
    }

def test_reading_progress(client, users):
    book = add_book(client, "alice", pages=300)
    response = client.put(f"/reading/{book['id']}", json={"status": "reading", "pages_read": 50}, headers=as_user("bob"))
    assert response.status_code == 200
    assert response.json()["total_pages"] == 300
    assert response.json()["started_date"] is not None

    too_many = client.put(f"/reading/{book['id']}", json={"pages_read": 500}, headers=as_user("bob"))
    assert too_many.status_code == 400

    reading = client.get("/reading", params={"status": "reading"}, headers=as_user("bob")).json()
    assert reading["total"] == 1

def test_reading_progress_without_profile(client, users):
    book = add_book(client, "alice")
    response = client.put(f"/reading/{book['id']}", json={"status": "reading"}, headers=as_user("ghost"))
    assert response.status_code == 400
    assert "No profile" in response.json()["detail"]

def test_isbn_lookup(client):
    metadata = IsbnMetadata(isbn="9780261103344", title="The Hobbit", authors=["J.R.R. Tolkien"], pages=310)
    with patch("api.routes.books.lookup_isbn", return_value=metadata):
        response = client.get("/isbn/9780261103344")
    assert response.status_code == 200
    assert response.json()["authors"] == ["J.R.R. Tolkien"]

    with patch("api.routes.books.lookup_isbn", return_value=None):
        assert client.get("/isbn/9780261103344").status_code == 404
