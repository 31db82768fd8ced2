from io import BytesIO

from PIL import Image, UnidentifiedImageError

from core.config import settings

# Разрешённые MIME-типы и соответствующие форматы Pillow
ALLOWED_MIME_TYPES = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/webp": "WEBP",
}


def validate_upload(data: bytes, content_type: str) -> str:
    """
    Проверяет загружаемое фото перед сохранением:
    - размер не больше MAX_UPLOAD_SIZE;
    - заявленный MIME-тип из списка jpeg/png/gif/webp;
    - содержимое действительно открывается Pillow как изображение
      одного из этих форматов.

    Возвращает нормализованный MIME-тип.
    Бросает ValueError с сообщением для клиента.
    Ничего не ресайзит и не перекодирует.
    """
    if not data:
        raise ValueError("photo file is empty")

    if len(data) > settings.MAX_UPLOAD_SIZE:
        limit_mb = settings.MAX_UPLOAD_SIZE // (1024 * 1024)
        raise ValueError(f"photo size must not exceed {limit_mb}MB")

    mime_type = (content_type or "").split(";")[0].strip().lower()
    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValueError("invalid image format. allowed: jpeg, png, gif, webp")

    try:
        with Image.open(BytesIO(data)) as img:
            detected = (img.format or "").upper()
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        raise ValueError("file is not a valid image")

    if detected not in ALLOWED_MIME_TYPES.values():
        raise ValueError("invalid image format. allowed: jpeg, png, gif, webp")

    return mime_type
