"""
Хранилище контента на плоских файлах.

Один домен (personal-info, skills, experience, projects, contact-config, resume) —
один JSON-файл в DATA_DIR. Чтение = load, запись = полная перезапись файла (store).
Запись атомарная: временный файл в той же папке + os.replace, поэтому
параллельный load видит либо старый, либо новый файл целиком.
Транзакций между доменами нет — каждая запись независима.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from app.core.config import settings
from app.schemas.content import ContentDomain

logger = logging.getLogger(__name__)


class ContentStoreError(Exception):
    """Ошибка чтения/записи файла домена (права, диск, битый JSON)."""


class ContentNotFoundError(ContentStoreError):
    """Домен ещё ни разу не записывался."""

    def __init__(self, domain: ContentDomain):
        super().__init__(f"Content '{domain.value}' has not been initialized")
        self.domain = domain


def atomic_write_bytes(path: Path, content: bytes) -> None:
    """Записать файл целиком: tmp в той же папке, fsync, os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def atomic_write_text(path: Path, text: str) -> None:
    atomic_write_bytes(path, text.encode("utf-8"))


class FlatFileContentStore:
    """Папка с JSON-файлами, по одному на домен."""

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)

    def path_for(self, domain: ContentDomain) -> Path:
        return self.data_dir / domain.file_name

    def load(self, domain: ContentDomain) -> Any:
        """Прочитать домен. ContentNotFoundError — если файла ещё нет."""
        path = self.path_for(domain)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ContentNotFoundError(domain) from None
        except OSError as exc:
            raise ContentStoreError(f"Failed to read {path}: {exc}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ContentStoreError(f"Invalid JSON in {path}: {exc}") from exc

    def store(self, domain: ContentDomain, value: Any) -> None:
        """Заменить домен целиком. Значение уже провалидировано выше (wizard)."""
        path = self.path_for(domain)
        text = json.dumps(value, ensure_ascii=False, indent=2) + "\n"
        try:
            atomic_write_text(path, text)
        except OSError as exc:
            raise ContentStoreError(f"Failed to write {path}: {exc}") from exc
        logger.info("Content '%s' written to %s", domain.value, path)

    def is_writable(self) -> bool:
        """Папка данных существует (или может быть создана) и доступна на запись."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return os.access(self.data_dir, os.W_OK)


# Хранилище создаётся при старте приложения (main.py lifespan), здесь только ссылка
_store: FlatFileContentStore | None = None


def open_content_store() -> None:
    """Открыть хранилище из settings.DATA_DIR. Вызывается в lifespan при старте."""
    global _store  # noqa: PLW0603
    _store = FlatFileContentStore(settings.data_path())
    _store.data_dir.mkdir(parents=True, exist_ok=True)


def close_content_store() -> None:
    """Отпустить ссылку. Вызывается в lifespan при остановке."""
    global _store
    _store = None


def get_content_store() -> FlatFileContentStore:
    """Dependency: хранилище контента. Вызывать после open_content_store()."""
    if _store is None:
        raise RuntimeError("Content store not opened. Call open_content_store() first.")
    return _store
