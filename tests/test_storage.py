import pytest

import imgdrop.storage as storage
from imgdrop.errors import BadRequest, InternalError, UnsupportedMediaType
from imgdrop.storage import file_extension, new_storage_name, save_image, sniff_image_type

JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 64
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
GIF87 = b"GIF87a" + b"\x00" * 64
GIF89 = b"GIF89a" + b"\x00" * 64


@pytest.mark.parametrize(
    "content,expected",
    [(JPEG, "image/jpeg"), (PNG, "image/png"), (GIF87, "image/gif"), (GIF89, "image/gif")],
)
def test_sniff_known_images(content, expected):
    assert sniff_image_type(content) == expected


@pytest.mark.parametrize(
    "content",
    [
        b"",
        b"\xff\xd8",
        b"GIF88a" + b"\x00" * 10,
        b"RIFF\x00\x00\x00\x00WEBPVP8 ",
        b"%PDF-1.7\n",
        b"<svg xmlns='http://www.w3.org/2000/svg'/>",
        b"MZ\x90\x00",
    ],
)
def test_sniff_rejects_everything_else(content):
    assert sniff_image_type(content) is None


@pytest.mark.parametrize("name", ["x.png", "x.jpg", "x.gif", "x.exe"])
def test_disguised_payload_rejected_regardless_of_extension(tmp_path, name):
    with pytest.raises(UnsupportedMediaType):
        save_image(name, b"#!/bin/sh\necho pwned\n", tmp_path)
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize(
    "filename,ext",
    [
        ("photo.png", ".png"),
        ("archive.tar.JPG", ".JPG"),
        ("../../etc/x.gif", ".gif"),
        ("C:\\Users\\me\\pic.jpeg", ".jpeg"),
    ],
)
def test_file_extension(filename, ext):
    assert file_extension(filename) == ext


@pytest.mark.parametrize("filename", [None, "", "photo", "photo.", "dir.png/photo", "x.p g", "x.png\x00"])
def test_file_extension_missing_or_invalid(filename):
    with pytest.raises(BadRequest):
        file_extension(filename)


def test_image_without_extension_is_rejected(tmp_path):
    with pytest.raises(BadRequest):
        save_image("photo", PNG, tmp_path)
    assert list(tmp_path.iterdir()) == []


def test_storage_names_are_distinct():
    names = {new_storage_name(".png") for _ in range(10_000)}
    assert len(names) == 10_000
    assert all(n.endswith(".png") and len(n) == 36 + 4 for n in names)


def test_save_image_writes_under_generated_name(tmp_path):
    target = tmp_path / "nested" / "uploads"
    asset = save_image("holiday.gif", GIF89, target)
    assert asset.content_type == "image/gif"
    assert asset.original_filename == "holiday.gif"
    assert asset.storage_name.endswith(".gif")
    assert asset.storage_name != "holiday.gif"
    assert asset.path == target / asset.storage_name
    assert asset.path.read_bytes() == GIF89
    assert asset.size == len(GIF89)


def test_save_image_directory_failure(tmp_path):
    blocker = tmp_path / "uploads"
    blocker.write_bytes(b"")
    with pytest.raises(InternalError) as e:
        save_image("a.png", PNG, blocker)
    assert e.value.status_code == 500
    assert e.value.message == "Unable to create upload directory."


def test_save_image_write_failure_leaves_nothing(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "new_storage_name", lambda ext: f"taken{ext}")
    (tmp_path / "taken.png").write_bytes(b"existing")
    with pytest.raises(InternalError) as e:
        save_image("a.png", PNG, tmp_path)
    assert e.value.message == "Unable to save the file."
    assert (tmp_path / "taken.png").read_bytes() == b"existing"
    assert [p.name for p in tmp_path.iterdir()] == ["taken.png"]
