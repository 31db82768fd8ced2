import pytest

from core.config import settings
from tests.helpers import make_image_bytes
from utils.image_tools import validate_upload


@pytest.mark.parametrize(
    "fmt,mime",
    [("PNG", "image/png"), ("JPEG", "image/jpeg"), ("GIF", "image/gif"), ("WEBP", "image/webp")],
)
def test_accepts_allowed_formats(fmt, mime):
    assert validate_upload(make_image_bytes(fmt), mime) == mime


def test_mime_parameters_are_ignored():
    assert validate_upload(make_image_bytes("PNG"), "Image/PNG; charset=binary") == "image/png"


def test_rejects_empty_file():
    with pytest.raises(ValueError):
        validate_upload(b"", "image/png")


def test_rejects_oversize_file():
    data = b"\x00" * (settings.MAX_UPLOAD_SIZE + 1)
    with pytest.raises(ValueError) as exc:
        validate_upload(data, "image/png")
    assert str(exc.value) == "photo size must not exceed 10MB"


def test_rejects_unknown_mime():
    with pytest.raises(ValueError) as exc:
        validate_upload(make_image_bytes("PNG"), "application/pdf")
    assert "invalid image format" in str(exc.value)


def test_rejects_bytes_that_are_not_an_image():
    with pytest.raises(ValueError) as exc:
        validate_upload(b"definitely not an image", "image/png")
    assert str(exc.value) == "file is not a valid image"


def test_rejects_image_of_other_format():
    with pytest.raises(ValueError):
        validate_upload(make_image_bytes("BMP"), "image/png")
