# =============================================================================
# REELSOCIAL BACKEND - COMMENT API TESTS
# =============================================================================
# File: tests/test_comments_api.py
# Description: Comment CRUD and ownership
# =============================================================================

import pytest
from httpx import AsyncClient


@pytest.fixture
def post_with_author(client: AsyncClient, signup, auth_headers):
    """Sign up ``noa`` and publish one post; returns (login body, post id)."""

    async def _make():
        noa = await signup("noa")
        response = await client.post(
            "/post", json={"content": "Whiplash"}, headers=auth_headers(noa["accessToken"])
        )
        return noa, response.json()["_id"]

    return _make


class TestComments:
    """Test suite for comment endpoints."""

    async def test_add_comment(self, client: AsyncClient, post_with_author, auth_headers):
        noa, post_id = await post_with_author()

        response = await client.post(
            "/add-comment",
            json={"postId": post_id, "content": "Loved the drums"},
            headers=auth_headers(noa["accessToken"]),
        )

        assert response.status_code == 201
        comment = response.json()
        assert comment["postId"] == post_id
        assert comment["sender"] == "noa"
        assert comment["senderId"] == noa["_id"]

    async def test_comment_on_missing_post(self, client: AsyncClient, signup, auth_headers):
        noa = await signup("noa")

        response = await client.post(
            "/add-comment",
            json={"postId": "missing", "content": "hello?"},
            headers=auth_headers(noa["accessToken"]),
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "POST_NOT_FOUND"

    async def test_list_comments_of_missing_post(self, client: AsyncClient):
        response = await client.get("/comments/missing")

        assert response.status_code == 404

    async def test_list_comments_oldest_first(
        self, client: AsyncClient, post_with_author, auth_headers
    ):
        noa, post_id = await post_with_author()
        headers = auth_headers(noa["accessToken"])
        for content in ("one", "two"):
            await client.post("/add-comment", json={"postId": post_id, "content": content}, headers=headers)

        response = await client.get(f"/comments/{post_id}")

        assert [c["content"] for c in response.json()] == ["one", "two"]
        assert len((await client.get("/comments")).json()) == 2

    async def test_comment_requires_auth(self, client: AsyncClient, post_with_author):
        _, post_id = await post_with_author()

        response = await client.post("/add-comment", json={"postId": post_id, "content": "anon"})

        assert response.status_code == 401

    async def test_edit_and_delete_own_comment(
        self, client: AsyncClient, post_with_author, auth_headers
    ):
        noa, post_id = await post_with_author()
        headers = auth_headers(noa["accessToken"])
        comment_id = (
            await client.post("/add-comment", json={"postId": post_id, "content": "typo"}, headers=headers)
        ).json()["_id"]

        response = await client.put(f"/comment/{comment_id}", json={"content": "fixed"}, headers=headers)
        assert response.json()["content"] == "fixed"

        response = await client.delete(f"/comment/{comment_id}", headers=headers)
        assert response.status_code == 200
        assert (await client.get(f"/comment/{comment_id}")).status_code == 404

    async def test_foreign_comment_is_read_only(
        self, client: AsyncClient, post_with_author, signup, auth_headers
    ):
        noa, post_id = await post_with_author()
        idan = await signup("idan")
        comment_id = (
            await client.post(
                "/add-comment",
                json={"postId": post_id, "content": "noa's comment"},
                headers=auth_headers(noa["accessToken"]),
            )
        ).json()["_id"]
        idan_headers = auth_headers(idan["accessToken"])

        edit = await client.put(f"/comment/{comment_id}", json={"content": "x"}, headers=idan_headers)
        delete = await client.delete(f"/comment/{comment_id}", headers=idan_headers)

        assert edit.status_code == 403
        assert delete.status_code == 403

    async def test_missing_comment(self, client: AsyncClient):
        response = await client.get("/comment/missing")

        assert response.status_code == 404
        assert response.json()["error_code"] == "COMMENT_NOT_FOUND"
