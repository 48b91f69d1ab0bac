"""
Tests for admin moderation endpoints and the end-to-end swap flow.
"""
import pytest

from bookswap.models.swap import SwapRequest, SwapStatus


@pytest.fixture
def moderator(make_user):
    """Plain user whose email is on the ADMIN_EMAILS allow-list."""
    return make_user(name="Moderator", email="moderator@example.com")


def test_admin_routes_require_admin(client, make_user, make_book, headers):
    user = make_user()
    book = make_book(user, approved=False)

    assert client.get("/api/admin/books").status_code == 401
    response = client.get("/api/admin/books", headers=headers(user))
    assert response.status_code == 403
    assert response.json()["error"] == "Admin only"
    assert client.patch(f"/api/admin/books/{book.id}/approve", headers=headers(user)).status_code == 403
    assert client.delete(f"/api/admin/books/{book.id}", headers=headers(user)).status_code == 403


def test_allow_listed_email_is_admin(client, moderator, make_user, make_book, headers):
    owner = make_user()
    book = make_book(owner, approved=False)
    response = client.patch(f"/api/admin/books/{book.id}/approve", headers=headers(moderator))
    assert response.status_code == 200
    assert response.json()["book"]["approval"] == "approved"


def test_admin_list_filters(client, admin, make_user, make_book, headers):
    owner = make_user()
    approved = make_book(owner, title="A")
    pending = make_book(owner, title="P", approved=False)

    response = client.get("/api/admin/books?approval=pending", headers=headers(admin))
    assert [b["id"] for b in response.json()["books"]] == [pending.id]

    # ?status= is accepted as an alias for ?approval=
    response = client.get("/api/admin/books?status=approved", headers=headers(admin))
    assert [b["id"] for b in response.json()["books"]] == [approved.id]

    response = client.get("/api/admin/books", headers=headers(admin))
    assert [b["id"] for b in response.json()["books"]] == [pending.id, approved.id]

    response = client.get("/api/admin/books?approval=bogus", headers=headers(admin))
    assert response.status_code == 400


def test_approve_and_reject_are_idempotent(client, admin, make_user, make_book, headers):
    owner = make_user()
    book = make_book(owner, approved=False)

    for _ in range(2):
        response = client.patch(f"/api/admin/books/{book.id}/approve", headers=headers(admin))
        assert response.status_code == 200
        assert response.json()["book"]["approval"] == "approved"

    for _ in range(2):
        response = client.patch(f"/api/admin/books/{book.id}/reject", headers=headers(admin))
        assert response.status_code == 200
        assert response.json()["book"]["approval"] == "rejected"

    # Rejected books leave the public listing
    assert client.get("/api/books").json()["books"] == []


def test_moderate_missing_book(client, admin, headers):
    assert client.patch("/api/admin/books/404/approve", headers=headers(admin)).status_code == 404
    assert client.patch("/api/admin/books/404/reject", headers=headers(admin)).status_code == 404
    assert client.delete("/api/admin/books/404", headers=headers(admin)).status_code == 404


def test_admin_delete_rejects_pending_swaps(client, db, admin, make_user, make_book, headers):
    alice, bob = make_user(), make_user()
    x = make_book(alice)
    y = make_book(bob)
    swap_id = client.post(
        "/api/swaps/request",
        json={"book_id": x.id, "offered_book_id": y.id},
        headers=headers(bob),
    ).json()["swap"]["id"]

    response = client.delete(f"/api/admin/books/{x.id}", headers=headers(admin))
    assert response.status_code == 200

    swap = client.get(f"/api/swaps/{swap_id}", headers=headers(bob)).json()["swap"]
    assert swap["status"] == "rejected"
    assert swap["book"] is None
    assert swap["offered_book"]["id"] == y.id


def test_full_swap_scenario(client, admin, make_user, headers):
    """
    A lists X, admin approves it, B lists Y (approved), B offers Y for X,
    C also asks for X; A approves B's request.
    """
    a, b, c = make_user(name="A"), make_user(name="B"), make_user(name="C")

    x = client.post("/api/books", data={"title": "X", "author": "Ax"}, headers=headers(a)).json()["book"]
    assert (x["approval"], x["status"]) == ("pending", "available")
    # Pending books cannot be requested yet
    y = client.post("/api/books", data={"title": "Y", "author": "By"}, headers=headers(b)).json()["book"]
    z = client.post("/api/books", data={"title": "Z", "author": "Cz"}, headers=headers(c)).json()["book"]
    for book in (y, z):
        client.patch(f"/api/admin/books/{book['id']}/approve", headers=headers(admin))

    early = client.post(
        "/api/swaps/request",
        json={"book_id": x["id"], "offered_book_id": y["id"]},
        headers=headers(b),
    )
    assert early.status_code == 400
    assert early.json()["error"] == "Target book not swappable"

    response = client.patch(f"/api/admin/books/{x['id']}/approve", headers=headers(admin))
    assert response.json()["book"]["approval"] == "approved"

    response = client.post(
        "/api/swaps/request",
        json={"book_id": x["id"], "offered_book_id": y["id"], "message": "Trade?"},
        headers=headers(b),
    )
    assert response.status_code == 201
    b_request = response.json()["swap"]
    assert b_request["status"] == "pending"
    assert b_request["owner"]["id"] == a.id
    assert b_request["requester"]["id"] == b.id

    duplicate = client.post(
        "/api/swaps/request",
        json={"book_id": x["id"], "offered_book_id": y["id"]},
        headers=headers(b),
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "Request already pending"

    c_request = client.post(
        "/api/swaps/request",
        json={"book_id": x["id"], "offered_book_id": z["id"]},
        headers=headers(c),
    ).json()["swap"]

    incoming = client.get("/api/swaps/incoming", headers=headers(a)).json()["swaps"]
    assert [s["id"] for s in incoming] == [c_request["id"], b_request["id"]]

    # Requester cannot approve their own request
    assert client.post(f"/api/swaps/{b_request['id']}/approve", headers=headers(b)).status_code == 403

    response = client.post(f"/api/swaps/{b_request['id']}/approve", headers=headers(a))
    assert response.status_code == 200
    approved = response.json()["swap"]
    assert approved["status"] == "approved"
    assert approved["book"]["status"] == "swapped"
    assert approved["offered_book"]["status"] == "swapped"

    c_view = client.get(f"/api/swaps/{c_request['id']}", headers=headers(c)).json()["swap"]
    assert c_view["status"] == "rejected"

    again = client.patch(f"/api/swaps/{b_request['id']}", json={"action": "reject"}, headers=headers(a))
    assert again.status_code == 400
    assert again.json()["error"] == "Already resolved"

    mine = client.get("/api/swaps/mine", headers=headers(b)).json()["swaps"]
    assert [s["status"] for s in mine] == ["approved"]


def test_swap_routes_errors(client, db, make_user, make_book, headers):
    alice, bob = make_user(), make_user()
    x = make_book(alice)
    y = make_book(bob)
    swap_id = client.post(
        "/api/swaps/request",
        json={"book_id": x.id, "offered_book_id": y.id},
        headers=headers(bob),
    ).json()["swap"]["id"]

    response = client.post(f"/api/swaps/{swap_id}/accept", headers=headers(alice))
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid action"

    assert client.post("/api/swaps/999/approve", headers=headers(alice)).status_code == 404
    assert client.post("/api/swaps/request", json={"book_id": x.id}, headers=headers(bob)).status_code == 400
    assert client.get("/api/swaps/mine").status_code == 401

    response = client.patch(f"/api/swaps/{swap_id}", json={"action": "cancel"}, headers=headers(bob))
    assert response.status_code == 200
    assert response.json()["swap"]["status"] == "cancelled"
    assert db.query(SwapRequest).filter(SwapRequest.id == swap_id).one().status == SwapStatus.CANCELLED
