"""
Патчинг файла окружения (.env.local) для секретов интеграций.

Если файла нет — создаётся из шаблона с комментариями. Существующий ключ
заменяется на месте, новый дописывается в конец (python-dotenv set_key).
"""
import logging
from pathlib import Path

from dotenv import dotenv_values, set_key

from app.core.config import settings

logger = logging.getLogger(__name__)

ENV_TEMPLATE = """# Portfolio Configuration

# GitHub Integration (Optional)
# Personal Access Token (classic) with the public_repo scope enables the GitHub stats section.
GITHUB_TOKEN=

# Analytics (Optional)
ANALYTICS_ID=
"""


class EnvFileError(Exception):
    """Не удалось прочитать или записать файл окружения."""


class EnvFile:
    def __init__(self, path: Path | str):
        self.path = Path(path)

    def read(self) -> dict[str, str]:
        """Непустые значения из файла. Нет файла — пустой dict."""
        if not self.path.exists():
            return {}
        return {k: v for k, v in dotenv_values(self.path).items() if v}

    def update(self, values: dict[str, str]) -> None:
        """Слить значения в файл: создать из шаблона, заменить или дописать ключи.

        Значения пишутся без кавычек, поэтому пробелы и переводы строк запрещены (ValueError).
        """
        for key, value in values.items():
            if any(ch.isspace() or not ch.isprintable() for ch in value):
                raise ValueError(f"Value for {key} must be a single token without whitespace")
        try:
            if not self.path.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(ENV_TEMPLATE, encoding="utf-8")
            for key, value in values.items():
                set_key(self.path, key, value, quote_mode="never")
        except OSError as exc:
            raise EnvFileError(f"Failed to update {self.path}: {exc}") from exc
        logger.info("Updated %s: %s", self.path, ", ".join(values))

    def github_token(self) -> str | None:
        """Токен из файла, иначе из окружения процесса."""
        return self.read().get("GITHUB_TOKEN") or settings.GITHUB_TOKEN or None


def get_env_file() -> EnvFile:
    """Dependency: файл окружения из settings.ENV_FILE_PATH."""
    return EnvFile(settings.ENV_FILE_PATH)
