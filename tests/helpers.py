from io import BytesIO

from PIL import Image

MIME_BY_FORMAT = {"PNG": "image/png", "JPEG": "image/jpeg", "GIF": "image/gif", "WEBP": "image/webp"}


def make_image_bytes(fmt: str = "PNG", size=(32, 32)) -> bytes:
    img = Image.new("RGB", size, color=(123, 222, 64))
    buf = BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
