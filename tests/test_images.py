"""
Tests for the image store.
"""

import io
import os

from app.services.images import ImageStore


class Upload:
    def __init__(self, filename, content_type, data=b"data"):
        self.filename = filename
        self.content_type = content_type
        self.file = io.BytesIO(data)


def test_store_allowed_types(image_store):
    for content_type in ("image/png", "image/jpg", "image/jpeg"):
        path = image_store.store(Upload("pic.png", content_type))
        assert path.startswith("images/")
        assert os.path.exists(image_store.resolve(path))


def test_store_rejects_other_types(image_store):
    assert image_store.store(Upload("doc.pdf", "application/pdf")) is None
    assert os.listdir(image_store.directory) == []


def test_store_sanitizes_filename(image_store):
    path = image_store.store(Upload("../../etc/pass wd.png", "image/png"))
    assert "/" not in path[len("images/"):]
    assert os.path.dirname(image_store.resolve(path)) == image_store.directory


def test_store_nothing(image_store):
    assert image_store.store(None) is None


def test_delete_removes_file(image_store):
    path = image_store.store(Upload("pic.png", "image/png"))
    image_store.delete(path)
    assert not os.path.exists(image_store.resolve(path))


def test_delete_missing_file_is_silent(image_store):
    image_store.delete("images/does-not-exist.png")
    image_store.delete(None)


def test_delete_outside_images_is_refused(tmp_path):
    outside = tmp_path / "keep.txt"
    outside.write_text("x")
    store = ImageStore(str(tmp_path / "images"))
    store.delete("../keep.txt")
    assert outside.exists()


def test_windows_separators(image_store):
    path = image_store.store(Upload("pic.png", "image/png"))
    image_store.delete(path.replace("/", "\\"))
    assert not os.path.exists(image_store.resolve(path))
