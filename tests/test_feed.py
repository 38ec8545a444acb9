"""
Tests for the /feed REST endpoints and image uploads.
"""

import os

import pytest

from app.db import crud
from app.services.feed import PostPipeline
from tests.helpers import create_post, png_file


def _image_on_disk(images_dir, image_url):
    return os.path.exists(os.path.join(images_dir, os.path.basename(image_url)))


class TestCreatePost:
    def test_requires_authentication(self, client, images_dir):
        response = create_post(client, headers={})
        assert response.status_code == 401
        assert response.json()["message"] == "Not authenticated!"
        assert not os.listdir(images_dir)

    def test_requires_image(self, client, alice):
        response = client.post("/feed/post", data={"title": "First post", "content": "Hello there"}, headers=alice)
        assert response.status_code == 422
        assert response.json()["message"] == "No image provided."

    def test_disallowed_mime_type_is_dropped(self, client, alice, images_dir):
        response = client.post(
            "/feed/post",
            data={"title": "First post", "content": "Hello there"},
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=alice,
        )
        assert response.status_code == 422
        assert not os.listdir(images_dir)

    def test_short_fields_report_all_errors(self, client, alice, images_dir):
        response = create_post(client, alice, title="Hi", content="Yo")
        assert response.status_code == 422
        messages = [e["message"] for e in response.json()["data"]]
        assert "Title should have a minimum length of 5" in messages
        assert "Content should have a minimum length of 5" in messages
        # the upload from a rejected request is cleaned up
        assert not os.listdir(images_dir)

    def test_create_success(self, client, alice, images_dir, db_session):
        response = create_post(client, alice)
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Post created successfully!"
        assert data["post"]["title"] == "First post"
        assert data["post"]["imageUrl"].startswith("images/")
        assert data["creator"]["name"] == "Alice"
        assert "hashedPassword" not in str(data)
        assert _image_on_disk(images_dir, data["post"]["imageUrl"])

        user = crud.get_user_by_email(db_session, "alice@test.com")
        assert user.post_ids == [data["post"]["id"]]

    def test_unexpected_failure_removes_upload(self, client, alice, images_dir, monkeypatch):
        def broken_create(self, auth, data):
            raise RuntimeError("database went away")

        monkeypatch.setattr(PostPipeline, "create_post", broken_create)
        with pytest.raises(RuntimeError):
            create_post(client, alice)
        assert not os.listdir(images_dir)

    def test_image_is_served(self, client, alice):
        image_url = create_post(client, alice).json()["post"]["imageUrl"]
        response = client.get(f"/{image_url}")
        assert response.status_code == 200


class TestReadPosts:
    def test_pagination_newest_first(self, client, alice):
        ids = [create_post(client, alice, title=f"Post number {i}").json()["post"]["id"] for i in range(3)]

        page1 = client.get("/feed/posts", params={"page": 1}).json()
        assert page1["totalItems"] == 3
        assert [p["id"] for p in page1["posts"]] == [ids[2], ids[1]]

        page2 = client.get("/feed/posts", params={"page": 2}).json()
        assert page2["totalItems"] == 3
        assert [p["id"] for p in page2["posts"]] == [ids[0]]

    def test_two_creates_by_same_user(self, client, alice, db_session):
        first = create_post(client, alice, title="Older post").json()["post"]["id"]
        second = create_post(client, alice, title="Newer post").json()["post"]["id"]

        user = crud.get_user_by_email(db_session, "alice@test.com")
        assert set(user.post_ids) == {first, second}

        posts = client.get("/feed/posts").json()["posts"]
        assert [p["id"] for p in posts] == [second, first]

    def test_page_below_one_is_first_page(self, client, alice):
        create_post(client, alice)
        assert len(client.get("/feed/posts", params={"page": 0}).json()["posts"]) == 1

    def test_oversized_page_is_empty(self, client, alice):
        create_post(client, alice)
        response = client.get("/feed/posts", params={"page": "10000000000000000000"})
        assert response.status_code == 200
        assert response.json()["posts"] == []
        assert response.json()["totalItems"] == 1

    def test_non_numeric_page_is_first_page(self, client, alice):
        create_post(client, alice)
        response = client.get("/feed/posts", params={"page": "abc"})
        assert response.status_code == 200
        assert len(response.json()["posts"]) == 1

    def test_get_single_post(self, client, alice):
        post_id = create_post(client, alice).json()["post"]["id"]
        response = client.get(f"/feed/post/{post_id}")
        assert response.status_code == 200
        assert response.json()["post"]["creator"]["name"] == "Alice"

    def test_get_missing_post(self, client):
        response = client.get("/feed/post/999")
        assert response.status_code == 404
        assert response.json()["message"] == "Could not find post."


class TestUpdatePost:
    def test_only_creator_may_update(self, client, alice, bob):
        post = create_post(client, alice).json()["post"]
        response = client.put(
            f"/feed/post/{post['id']}",
            data={"title": "Hijacked title", "content": "Hijacked body", "image": post["imageUrl"]},
            headers=bob,
        )
        assert response.status_code == 403
        assert client.get(f"/feed/post/{post['id']}").json()["post"]["title"] == "First post"

    def test_update_keeping_image(self, client, alice, images_dir):
        post = create_post(client, alice).json()["post"]
        response = client.put(
            f"/feed/post/{post['id']}",
            data={"title": "Edited title", "content": "Edited body", "image": post["imageUrl"]},
            headers=alice,
        )
        assert response.status_code == 200
        updated = response.json()["post"]
        assert updated["title"] == "Edited title"
        assert updated["imageUrl"] == post["imageUrl"]
        assert _image_on_disk(images_dir, post["imageUrl"])

    def test_update_replacing_image_deletes_old_file(self, client, alice, images_dir):
        post = create_post(client, alice).json()["post"]
        response = client.put(
            f"/feed/post/{post['id']}",
            data={"title": "Edited title", "content": "Edited body"},
            files=png_file("new.png"),
            headers=alice,
        )
        assert response.status_code == 200
        new_url = response.json()["post"]["imageUrl"]
        assert new_url != post["imageUrl"]
        assert _image_on_disk(images_dir, new_url)
        assert not _image_on_disk(images_dir, post["imageUrl"])

    def test_update_without_image(self, client, alice):
        post_id = create_post(client, alice).json()["post"]["id"]
        response = client.put(
            f"/feed/post/{post_id}",
            data={"title": "Edited title", "content": "Edited body"},
            headers=alice,
        )
        assert response.status_code == 422
        assert response.json()["message"] == "No file picked!"

    def test_update_missing_post(self, client, alice):
        response = client.put(
            "/feed/post/999",
            data={"title": "Edited title", "content": "Edited body", "image": "images/x.png"},
            headers=alice,
        )
        assert response.status_code == 404

    def test_validation_runs_before_lookup(self, client, alice):
        response = client.put(
            "/feed/post/999",
            data={"title": "Hi", "content": "Edited body", "image": "images/x.png"},
            headers=alice,
        )
        assert response.status_code == 422


class TestDeletePost:
    def test_only_creator_may_delete(self, client, alice, bob):
        post_id = create_post(client, alice).json()["post"]["id"]
        assert client.delete(f"/feed/post/{post_id}", headers=bob).status_code == 403
        assert client.delete(f"/feed/post/{post_id}").status_code == 401
        assert client.get(f"/feed/post/{post_id}").status_code == 200

    def test_delete_removes_post_reference_and_image(self, client, alice, images_dir, db_session):
        post = create_post(client, alice).json()["post"]
        keep = create_post(client, alice, title="Second post").json()["post"]

        response = client.delete(f"/feed/post/{post['id']}", headers=alice)
        assert response.status_code == 200
        assert response.json()["message"] == "Post deleted successfully!"

        assert client.get(f"/feed/post/{post['id']}").status_code == 404
        assert not _image_on_disk(images_dir, post["imageUrl"])
        user = crud.get_user_by_email(db_session, "alice@test.com")
        assert user.post_ids == [keep["id"]]

    def test_delete_missing_post(self, client, alice):
        assert client.delete("/feed/post/999", headers=alice).status_code == 404


class TestStatus:
    def test_default_status(self, client, alice):
        response = client.get("/feed/status", headers=alice)
        assert response.status_code == 200
        assert response.json() == {"status": "I am new!"}

    def test_update_status(self, client, alice):
        response = client.put("/feed/status", json={"status": "Busy"}, headers=alice)
        assert response.status_code == 200
        assert client.get("/feed/status", headers=alice).json() == {"status": "Busy"}

    def test_status_requires_authentication(self, client):
        assert client.get("/feed/status").status_code == 401


class TestPostImageUpload:
    def test_upload_returns_path(self, client, alice, images_dir):
        response = client.put("/post-image", files=png_file(), headers=alice)
        assert response.status_code == 201
        path = response.json()["filePath"]
        assert _image_on_disk(images_dir, path)

    def test_upload_replaces_old_path(self, client, alice, images_dir):
        old = client.put("/post-image", files=png_file("old.png"), headers=alice).json()["filePath"]
        new = client.put("/post-image", files=png_file("new.png"), data={"oldPath": old}, headers=alice).json()["filePath"]
        assert _image_on_disk(images_dir, new)
        assert not _image_on_disk(images_dir, old)

    def test_no_file(self, client, alice):
        response = client.put("/post-image", headers=alice)
        assert response.status_code == 200
        assert response.json()["message"] == "No file provided!"

    def test_requires_authentication(self, client):
        assert client.put("/post-image", files=png_file()).status_code == 401
