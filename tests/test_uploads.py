# =============================================================================
# REELSOCIAL BACKEND - UPLOAD TESTS
# =============================================================================
# File: tests/test_uploads.py
# Description: Image uploads, multipart posts and profile pictures
# =============================================================================

import re

import pytest
from httpx import AsyncClient

from reelsocial.context import AppContext


PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 128


class TestUpload:
    """Test suite for POST /api/upload."""

    async def test_upload_and_serve(
        self, client: AsyncClient, api_context: AppContext, signup, auth_headers
    ):
        data = await signup("noa")

        response = await client.post(
            "/api/upload",
            files={"file": ("my poster.png", PNG, "image/png")},
            headers=auth_headers(data["accessToken"]),
        )

        assert response.status_code == 200
        body = response.json()
        assert re.fullmatch(r"\d+-my_poster\.png", body["fileName"])
        assert body["url"] == f"/images/{body['fileName']}"
        assert (api_context.storage.directory / body["fileName"]).read_bytes() == PNG

        served = await client.get(body["url"])
        assert served.status_code == 200
        assert served.content == PNG

    @pytest.mark.parametrize(
        "filename, content, content_type",
        [
            ("notes.txt", b"hello", "text/plain"),
            ("empty.png", b"", "image/png"),
            ("huge.jpg", b"\xff" * (64 * 1024 + 1), "image/jpeg"),
        ],
    )
    async def test_upload_rejected(
        self, client: AsyncClient, signup, auth_headers, filename, content, content_type
    ):
        data = await signup("noa")

        response = await client.post(
            "/api/upload",
            files={"file": (filename, content, content_type)},
            headers=auth_headers(data["accessToken"]),
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "UPLOAD_ERROR"

    async def test_upload_requires_auth(self, client: AsyncClient):
        response = await client.post(
            "/api/upload", files={"file": ("a.png", PNG, "image/png")}
        )

        assert response.status_code == 401


class TestMultipartPosts:
    """Test suite for /api/post and /api/updatePost."""

    async def test_create_post_with_image(self, client: AsyncClient, signup, auth_headers):
        data = await signup("noa")

        response = await client.post(
            "/api/post",
            data={"title": "Coco", "content": "Cried twice"},
            files={"file": ("coco.jpg", PNG, "image/jpeg")},
            headers=auth_headers(data["accessToken"]),
        )

        assert response.status_code == 201
        post = response.json()
        assert post["sender"] == "noa"
        assert post["imageUrl"].endswith("-coco.jpg")
        assert post["profilePic"] == "../../images/noProfilePic.png"

    async def test_update_post_replaces_image(self, client: AsyncClient, signup, auth_headers):
        data = await signup("noa")
        headers = auth_headers(data["accessToken"])
        post = (
            await client.post(
                "/api/post",
                data={"content": "first cut"},
                files={"file": ("old.png", PNG, "image/png")},
                headers=headers,
            )
        ).json()

        response = await client.put(
            f"/api/updatePost/{post['_id']}",
            data={"content": "director's cut"},
            files={"file": ("new.png", PNG, "image/png")},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["content"] == "director's cut"
        assert response.json()["imageUrl"].endswith("-new.png")

    async def test_update_post_keeps_image_without_file(
        self, client: AsyncClient, signup, auth_headers
    ):
        data = await signup("noa")
        headers = auth_headers(data["accessToken"])
        post = (
            await client.post(
                "/api/post",
                data={"content": "x"},
                files={"file": ("keep.png", PNG, "image/png")},
                headers=headers,
            )
        ).json()

        response = await client.put(
            f"/api/updatePost/{post['_id']}", data={"title": "Renamed"}, headers=headers
        )

        assert response.json()["title"] == "Renamed"
        assert response.json()["imageUrl"] == post["imageUrl"]

    async def test_rejected_post_leaves_no_image(
        self, client: AsyncClient, api_context: AppContext, signup, auth_headers
    ):
        data = await signup("noa")
        headers = auth_headers(data["accessToken"])
        await client.delete(f"/user/{data['_id']}", headers=headers)

        response = await client.post(
            "/api/post",
            data={"content": "ghost post"},
            files={"file": ("ghost.png", PNG, "image/png")},
            headers=headers,
        )

        assert response.status_code == 404
        assert list(api_context.storage.directory.iterdir()) == []

    async def test_rejected_update_leaves_no_image(
        self, client: AsyncClient, api_context: AppContext, signup, auth_headers
    ):
        noa = await signup("noa")
        idan = await signup("idan")
        post = (
            await client.post(
                "/post", json={"content": "noa's"}, headers=auth_headers(noa["accessToken"])
            )
        ).json()

        response = await client.put(
            f"/api/updatePost/{post['_id']}",
            data={"content": "hijacked"},
            files={"file": ("evil.png", PNG, "image/png")},
            headers=auth_headers(idan["accessToken"]),
        )

        assert response.status_code == 403
        assert list(api_context.storage.directory.iterdir()) == []


class TestProfilePicture:
    """Test suite for PUT /user/{id}/picture."""

    async def test_picture_is_copied_to_posts(self, client: AsyncClient, signup, auth_headers):
        data = await signup("noa")
        headers = auth_headers(data["accessToken"])
        await client.post("/post", json={"content": "x"}, headers=headers)

        response = await client.put(
            f"/user/{data['_id']}/picture",
            files={"file": ("me.png", PNG, "image/png")},
            headers=headers,
        )

        assert response.status_code == 200
        picture = response.json()["profilePic"]
        assert picture.endswith("-me.png")
        posts = (await client.get("/post", params={"sender": "noa"})).json()
        assert [p["profilePic"] for p in posts] == [picture]

    async def test_picture_of_other_user_forbidden(
        self, client: AsyncClient, api_context: AppContext, signup, auth_headers
    ):
        noa = await signup("noa")
        idan = await signup("idan")

        response = await client.put(
            f"/user/{idan['_id']}/picture",
            files={"file": ("me.png", PNG, "image/png")},
            headers=auth_headers(noa["accessToken"]),
        )

        assert response.status_code == 403
        assert list(api_context.storage.directory.iterdir()) == []
