# tests/v1/test_messages.py
"""Tests for the legacy direct message inbox."""

from datetime import timedelta

from fastapi import status

from veilpost.db.time import utcnow
from veilpost.models import DirectMessage


def test_accept_messages_round_trip(client, test_user, auth_token) -> None:
    response = client.get("/api/v1/accept-messages", headers=auth_token)
    assert response.json()["isAcceptingMessages"] is True

    update = client.post(
        "/api/v1/accept-messages",
        json={"acceptMessages": False},
        headers=auth_token,
    )
    assert update.status_code == status.HTTP_200_OK
    assert update.json()["isAcceptingMessages"] is False

    response = client.get("/api/v1/accept-messages", headers=auth_token)
    assert response.json()["isAcceptingMessages"] is False


def test_accept_messages_requires_auth(client) -> None:
    assert client.get("/api/v1/accept-messages").status_code == status.HTTP_401_UNAUTHORIZED


def test_send_message_strips_markup(client, test_user, db_session) -> None:
    response = client.post(
        "/api/v1/send-message",
        json={"username": test_user.username, "content": "<b>Nice</b> <script>x</script>work"},
    )
    assert response.status_code == status.HTTP_200_OK
    message = db_session.query(DirectMessage).one()
    assert message.content == "Nice work"
    assert message.recipient_id == test_user.id


def test_send_message_only_markup_rejected(client, test_user) -> None:
    response = client.post(
        "/api/v1/send-message",
        json={"username": test_user.username, "content": "<img src=x>"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Message content cannot be empty"


def test_send_message_unknown_user(client) -> None:
    response = client.post("/api/v1/send-message", json={"username": "ghost", "content": "hi"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_send_message_not_accepting(client, make_user) -> None:
    closed = make_user("quiet", accepting=False)
    response = client.post("/api/v1/send-message", json={"username": closed.username, "content": "hi"})
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["message"] == "User is not accepting messages"


def test_get_messages_newest_first(client, test_user, auth_token, db_session) -> None:
    now = utcnow()
    db_session.add_all(
        [
            DirectMessage(recipient_id=test_user.id, content="old", created_at=now - timedelta(days=1)),
            DirectMessage(recipient_id=test_user.id, content="new", created_at=now),
        ]
    )
    db_session.commit()

    response = client.get("/api/v1/get-messages", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert [m["content"] for m in response.json()["messages"]] == ["new", "old"]


def test_delete_message(client, test_user, other_user, auth_token, db_session) -> None:
    mine = DirectMessage(recipient_id=test_user.id, content="mine")
    theirs = DirectMessage(recipient_id=other_user.id, content="theirs")
    db_session.add_all([mine, theirs])
    db_session.commit()

    response = client.delete(f"/api/v1/delete-message/{mine.id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK

    response = client.delete(f"/api/v1/delete-message/{theirs.id}", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND

    db_session.expire_all()
    assert [m.content for m in db_session.query(DirectMessage)] == ["theirs"]
