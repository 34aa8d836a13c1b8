# tests/v1/test_posts.py
"""Tests for post endpoints."""

from datetime import UTC, datetime, timedelta

from fastapi import status

from veilpost.models import Post, Reply


def test_create_post_success(client, test_user, auth_token) -> None:
    """A post is created accepting replies with no replies yet."""
    response = client.post("/api/v1/posts", json={"content": "  Rate my talk  "}, headers=auth_token)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Post created successfully"
    assert data["post"]["content"] == "Rate my talk"
    assert data["post"]["username"] == test_user.username
    assert data["post"]["isAcceptingMessages"] is True
    assert data["post"]["replies"] == []


def test_create_post_requires_auth(client) -> None:
    response = client.post("/api/v1/posts", json={"content": "hello"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"success": False, "message": "Not authenticated"}


def test_create_post_invalid_token(client) -> None:
    response = client.post(
        "/api/v1/posts",
        json={"content": "hello"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["success"] is False


def test_create_post_length_bound(client, test_user, auth_token) -> None:
    """500 characters is accepted, 501 is rejected."""
    ok = client.post("/api/v1/posts", json={"content": "x" * 500}, headers=auth_token)
    assert ok.status_code == status.HTTP_201_CREATED

    too_long = client.post("/api/v1/posts", json={"content": "x" * 501}, headers=auth_token)
    assert too_long.status_code == status.HTTP_400_BAD_REQUEST
    assert too_long.json() == {
        "success": False,
        "message": "Post cannot exceed 500 characters",
    }


def test_create_post_blank_content(client, test_user, auth_token) -> None:
    response = client.post("/api/v1/posts", json={"content": "   "}, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Post content is required"


def test_create_post_missing_body_field(client, test_user, auth_token) -> None:
    response = client.post("/api/v1/posts", json={}, headers=auth_token)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["success"] is False


def test_create_post_rate_limited(client, test_user, auth_token, rate_limiter) -> None:
    limit = rate_limiter.buckets["post"].limit
    for i in range(limit):
        response = client.post("/api/v1/posts", json={"content": f"post {i}"}, headers=auth_token)
        assert response.status_code == status.HTTP_201_CREATED

    response = client.post("/api/v1/posts", json={"content": "one too many"}, headers=auth_token)
    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert response.json()["success"] is False


def test_create_then_detail_round_trip(client, test_user, auth_token) -> None:
    created = client.post("/api/v1/posts", json={"content": "Feedback please"}, headers=auth_token)
    post_id = created.json()["post"]["id"]

    response = client.get(f"/api/v1/posts/{post_id}/details", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    post = response.json()["post"]
    assert post["content"] == "Feedback please"
    assert post["isAcceptingMessages"] is True
    assert post["replies"] == []


def test_list_my_posts_newest_first(client, test_user, other_user, auth_token, make_post) -> None:
    base = datetime(2026, 1, 1, tzinfo=UTC)
    make_post(test_user, "oldest", created_at=base)
    make_post(test_user, "newest", created_at=base + timedelta(hours=2))
    make_post(test_user, "middle", created_at=base + timedelta(hours=1))
    make_post(other_user, "not mine", created_at=base + timedelta(hours=3))

    response = client.get("/api/v1/posts", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    contents = [post["content"] for post in response.json()["posts"]]
    assert contents == ["newest", "middle", "oldest"]


def test_list_my_posts_includes_replies(client, test_post, auth_token) -> None:
    response = client.get("/api/v1/posts", headers=auth_token)
    posts = response.json()["posts"]
    assert [reply["content"] for reply in posts[0]["replies"]] == ["Great work", "Speak up more"]


def test_list_my_posts_requires_auth(client) -> None:
    assert client.get("/api/v1/posts").status_code == status.HTTP_401_UNAUTHORIZED


def test_detail_owner_sees_replies(client, test_post, auth_token) -> None:
    response = client.get(f"/api/v1/posts/{test_post.id}/details", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    replies = response.json()["post"]["replies"]
    assert [reply["content"] for reply in replies] == ["Great work", "Speak up more"]
    assert all("id" in reply and "createdAt" in reply for reply in replies)


def test_detail_hides_replies_from_others(client, test_post, other_auth_token) -> None:
    anonymous = client.get(f"/api/v1/posts/{test_post.id}/details")
    assert anonymous.status_code == status.HTTP_200_OK
    assert anonymous.json()["post"]["replies"] is None
    assert anonymous.json()["post"]["content"] == test_post.content

    stranger = client.get(f"/api/v1/posts/{test_post.id}/details", headers=other_auth_token)
    assert stranger.json()["post"]["replies"] is None


def test_detail_not_found(client) -> None:
    response = client.get("/api/v1/posts/99999/details")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"success": False, "message": "Post not found"}


def test_toggle_messages_by_owner(client, test_post, auth_token, db_session) -> None:
    response = client.patch(
        f"/api/v1/posts/{test_post.id}/toggle-messages",
        json={"isAcceptingMessages": False},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["isAcceptingMessages"] is False
    assert data["message"] == "Post is now not accepting messages"
    db_session.refresh(test_post)
    assert test_post.is_accepting_messages is False


def test_toggle_messages_by_non_owner(client, test_post, other_auth_token, db_session) -> None:
    response = client.patch(
        f"/api/v1/posts/{test_post.id}/toggle-messages",
        json={"isAcceptingMessages": False},
        headers=other_auth_token,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN
    db_session.refresh(test_post)
    assert test_post.is_accepting_messages is True


def test_toggle_messages_missing_post(client, test_user, auth_token) -> None:
    response = client.patch(
        "/api/v1/posts/99999/toggle-messages",
        json={"isAcceptingMessages": True},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_toggle_messages_requires_auth(client, test_post) -> None:
    response = client.patch(
        f"/api/v1/posts/{test_post.id}/toggle-messages",
        json={"isAcceptingMessages": False},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_delete_own_post_removes_replies(client, test_post, auth_token, db_session) -> None:
    post_id = test_post.id
    response = client.delete(f"/api/v1/posts/{post_id}", headers=auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is True

    db_session.expire_all()
    assert db_session.get(Post, post_id) is None
    assert db_session.query(Reply).filter(Reply.post_id == post_id).count() == 0


def test_delete_other_post(client, test_post, other_auth_token, db_session) -> None:
    response = client.delete(f"/api/v1/posts/{test_post.id}", headers=other_auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    db_session.expire_all()
    assert db_session.get(Post, test_post.id) is not None


def test_delete_nonexistent_post(client, test_user, auth_token) -> None:
    response = client.delete("/api/v1/posts/99999", headers=auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
