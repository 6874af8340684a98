"""
Асинхронный HTTP-клиент к API контента (httpx).

read() никогда не бросает: любая ошибка (сеть, 5xx, неожиданный JSON) -> дефолт домена.
write() тоже не бросает, а возвращает WriteResult — решение об откате принимает вызывающий.
Таймаута по умолчанию нет: зависшая запись держит сохранение, отмены не предусмотрено.
"""
import logging
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.content import DOMAIN_MODELS, ContentDomain, ContentModel, ResumeMeta, default_content
from app.schemas.upload import UploadedResume

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Ответ API с success=false (для операций вне чтения/записи контента)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class WriteResult:
    domain: ContentDomain
    success: bool
    error: str | None = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or f"HTTP {response.status_code}")
    return f"HTTP {response.status_code}"


class PortfolioApiClient:
    """Клиент к /api/*. Используй как async context manager или закрывай через aclose()."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            transport=transport,
            timeout=httpx.Timeout(timeout),
        )

    async def __aenter__(self) -> "PortfolioApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ==================== Контент ====================

    async def read(self, domain: ContentDomain) -> ContentModel:
        """Текущее значение домена или его дефолт."""
        try:
            response = await self._client.get(f"/api/data/{domain.value}")
            response.raise_for_status()
            return DOMAIN_MODELS[domain].model_validate(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            logger.warning("Reading %s failed, using default: %s", domain.value, exc)
            return default_content(domain)

    async def write(self, domain: ContentDomain, payload: ContentModel) -> WriteResult:
        """Перезаписать домен. Результат вместо исключения."""
        try:
            response = await self._client.post(f"/api/data/{domain.value}", json=payload.to_wire())
        except httpx.HTTPError as exc:
            logger.warning("Writing %s failed: %s", domain.value, exc)
            return WriteResult(domain, False, str(exc) or exc.__class__.__name__)
        if response.is_success:
            return WriteResult(domain, True)
        message = _error_message(response)
        logger.warning("Writing %s rejected (%s): %s", domain.value, response.status_code, message)
        return WriteResult(domain, False, message)

    # ==================== Резюме ====================

    async def upload_resume(self, file_name: str, content: bytes, content_type: str) -> ResumeMeta:
        """Загрузить файл резюме. ApiError при отказе сервера."""
        try:
            response = await self._client.post(
                "/api/upload-resume",
                files={"resume": (file_name, content, content_type)},
            )
        except httpx.HTTPError as exc:
            raise ApiError(f"Failed to upload resume: {exc}") from exc
        if not response.is_success:
            raise ApiError(_error_message(response), response.status_code)
        uploaded = UploadedResume.model_validate(response.json()["data"])
        return ResumeMeta(
            file_name=uploaded.file_name,
            original_name=uploaded.original_name,
            size=uploaded.size,
        )

    async def delete_resume(self, file_name: str) -> None:
        """Удалить файл резюме. ApiError при отказе (в т.ч. 404)."""
        try:
            response = await self._client.delete("/api/upload-resume", params={"fileName": file_name})
        except httpx.HTTPError as exc:
            raise ApiError(f"Failed to delete resume: {exc}") from exc
        if not response.is_success:
            raise ApiError(_error_message(response), response.status_code)

    # ==================== GitHub ====================

    async def update_github_token(self, token: str) -> None:
        try:
            response = await self._client.post("/api/update-env", json={"GITHUB_TOKEN": token})
        except httpx.HTTPError as exc:
            raise ApiError(f"Failed to update token: {exc}") from exc
        if not response.is_success:
            raise ApiError(_error_message(response), response.status_code)

    async def github_enabled(self) -> bool:
        try:
            response = await self._client.get("/api/github-enabled")
            response.raise_for_status()
            return bool(response.json().get("enabled"))
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("GitHub status check failed: %s", exc)
            return False
