"""
Конфигурация приложения из переменных окружения.

Один класс Settings (pydantic-settings), все настройки читаются из .env.
В коде используем только settings.*, не os.getenv.
"""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Окно rate limit в секундах по суффиксу RATE_LIMIT
_RATE_WINDOWS = {
    "second": 1, "sec": 1, "s": 1,
    "minute": 60, "min": 60, "m": 60,
    "hour": 3600, "h": 3600,
}


class Settings(BaseSettings):
    """Настройки из env."""

    # Плоские файлы контента: один JSON на домен
    DATA_DIR: str = "data"

    # Публичная папка для ассетов (резюме: resume.pdf / resume.docx ...)
    PUBLIC_DIR: str = "public"

    # Файл окружения, который патчит /api/update-env (GitHub токен)
    ENV_FILE_PATH: str = ".env.local"
    GITHUB_TOKEN: str = ""

    # Лимит размера резюме
    MAX_RESUME_SIZE: int = 5 * 1024 * 1024  # 5 МБ

    # CORS: список origin через запятую в .env
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Rate limit для записи: запросов с одного IP за окно (например, "100/minute")
    RATE_LIMIT: str = "100/minute"

    # Логирование
    LOG_LEVEL: str = "INFO"

    # Адрес uvicorn при запуске через run() / portfolio-content
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Куда ходит клиентская библиотека (store / wizard)
    API_BASE_URL: str = "http://localhost:8000"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def cors_list(self) -> list[str]:
        """CORS origins как список для CORSMiddleware."""
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]

    def data_path(self) -> Path:
        return Path(self.DATA_DIR)

    def public_path(self) -> Path:
        return Path(self.PUBLIC_DIR)

    def rate_limit_parsed(self) -> tuple[int, int]:
        """RATE_LIMIT -> (max_requests, window_seconds). "100/minute" -> (100, 60); непонятное -> (100, 60)."""
        count, _, window = self.RATE_LIMIT.strip().lower().replace(" ", "").partition("/")
        if not window or not count.isdigit():
            return 100, 60
        return int(count), _RATE_WINDOWS.get(window, 60)


# Глобальный экземпляр — импортируй: from app.core.config import settings
settings = Settings()
