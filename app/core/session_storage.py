"""
Key/value хранилище строк — аналог localStorage браузера для клиентской части.

Ключи: снимок store ("portfolio-storage"), флаги wizard (completed, last step,
одноразовые подсказки). Значения — строки; что в них лежит, решает владелец ключа.
"""
import json
import logging
from pathlib import Path

from app.core.content_store import atomic_write_text

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Хранилище в памяти (тесты, одноразовые сессии)."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._items: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def keys(self) -> list[str]:
        return list(self._items)

    def _flush(self) -> None:
        pass


class JsonFileStorage(MemoryStorage):
    """Хранилище в JSON-файле: переживает перезапуск процесса."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(self._read())

    def _read(self) -> dict[str, str]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Session storage %s unreadable, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Session storage %s is not an object, starting empty", self.path)
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _flush(self) -> None:
        atomic_write_text(self.path, json.dumps(self._items, ensure_ascii=False, indent=2))
