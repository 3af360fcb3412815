"""Tests for image storage and path sandboxing."""

import pytest

from tests.conftest import PNG_BYTES
from app.core.errors import NotFoundError
from app.services.images import ImageStore, suffix_for


def test_store_then_resolve_returns_same_bytes(images):
    ref = images.store(PNG_BYTES, prefix="upload", suffix=".png")
    assert ref.startswith("uploads/upload_")
    assert ref.endswith(".png")
    assert images.resolve(ref) == PNG_BYTES


def test_store_names_are_unique(images):
    refs = {images.store(b"x", prefix="generated", suffix=".png") for _ in range(50)}
    assert len(refs) == 50


def test_store_creates_directory(tmp_path):
    store = ImageStore(tmp_path / "nested" / "uploads")
    ref = store.store(b"data")
    assert (tmp_path / "nested" / "uploads" / ImageStore.filename(ref)).read_bytes() == b"data"


def test_resolve_missing_raises_not_found(images):
    with pytest.raises(NotFoundError):
        images.resolve("uploads/nope.png")


@pytest.mark.parametrize("filename", ["../secret.txt", "..", ".", "", "sub/file.png", "..\\secret.txt"])
def test_path_for_rejects_traversal(images, upload_dir, filename):
    upload_dir.mkdir(parents=True)
    (upload_dir.parent / "secret.txt").write_text("top secret")
    with pytest.raises(NotFoundError):
        images.path_for(filename)


def test_path_for_finds_stored_file(images):
    ref = images.store(PNG_BYTES, suffix=".png")
    path = images.path_for(ImageStore.filename(ref))
    assert path.read_bytes() == PNG_BYTES


def test_url_for_uses_filename_only(images):
    assert images.url_for("uploads/generated_1_ab.png") == "/api/images/generated_1_ab.png"
    assert images.url_for("generated_1_ab.png") == "/api/images/generated_1_ab.png"


def test_mime_type_for(images):
    assert images.mime_type_for("uploads/a.png") == "image/png"
    assert images.mime_type_for("uploads/a.jpg") == "image/jpeg"
    assert images.mime_type_for("uploads/no_extension") == "image/jpeg"


def test_suffix_for():
    assert suffix_for("image/png") == ".png"
    assert suffix_for("image/jpg") == ".jpg"
    assert suffix_for(None) == ".jpg"
