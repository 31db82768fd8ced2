import logging
import uuid
from pathlib import Path

from core.config import settings

logger = logging.getLogger("uvicorn.error")


class LocalStorage:
    """
    Хранение загруженных файлов в локальной папке.
    Файлы раздаются статикой по префиксу /uploads.
    """

    def __init__(self, base_dir: Path, url_prefix: str = "/uploads"):
        self.base_dir = base_dir
        self.url_prefix = url_prefix.rstrip("/")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def save(self, data: bytes, original_filename: str) -> dict:
        """
        Пишет байты на диск под случайным именем с исходным расширением.
        Возвращает dict с path, url и size.
        """
        ext = Path(original_filename or "").suffix.lower()
        file_name = f"{uuid.uuid4()}{ext}"
        destination = self.base_dir / file_name

        self.base_dir.mkdir(parents=True, exist_ok=True)
        try:
            with destination.open("wb") as buffer:
                buffer.write(data)
        except OSError:
            # недописанный файл не оставляем
            destination.unlink(missing_ok=True)
            raise

        return {
            "path": destination.as_posix(),
            "url": f"{self.url_prefix}/{file_name}",
            "size": len(data),
        }

    def remove(self, file_path: str) -> bool:
        """
        Удаляет файл. Отсутствие файла не ошибка, прочие сбои только логируются.
        """
        try:
            Path(file_path).unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.warning("Не удалось удалить файл %s: %s", file_path, exc)
            return False
        return True


storage = LocalStorage(Path(settings.UPLOAD_DIR))
