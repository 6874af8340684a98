"""
Pytest конфигурация.
Временные папки для контента/ассетов/.env, in-process API и фейковый клиент для store.
"""
import os

# Лимит записи поднимаем до импорта app: тесты делают много POST с одного "IP"
os.environ.setdefault("RATE_LIMIT", "100000/minute")

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.content_store import FlatFileContentStore, get_content_store
from app.core.env_file import EnvFile, get_env_file
from app.core.session_storage import MemoryStorage
from app.core.storage import ResumeAssetStorage, get_asset_storage
from app.main import app
from app.schemas.content import ContentDomain, ContentModel, default_content
from app.services.api_client import PortfolioApiClient, WriteResult


@pytest.fixture
def anyio_backend():
    return "asyncio"


# ==================== Хранилища ====================


@pytest.fixture
def content_store(tmp_path) -> FlatFileContentStore:
    return FlatFileContentStore(tmp_path / "data")


@pytest.fixture
def asset_storage(tmp_path) -> ResumeAssetStorage:
    return ResumeAssetStorage(tmp_path / "public")


@pytest.fixture
def env_file(tmp_path) -> EnvFile:
    return EnvFile(tmp_path / ".env.local")


@pytest.fixture
def session_storage() -> MemoryStorage:
    return MemoryStorage()


# ==================== API ====================


@pytest.fixture
def api_app(content_store, asset_storage, env_file):
    """Приложение с зависимостями на временные папки."""
    app.dependency_overrides[get_content_store] = lambda: content_store
    app.dependency_overrides[get_asset_storage] = lambda: asset_storage
    app.dependency_overrides[get_env_file] = lambda: env_file
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_app) -> TestClient:
    return TestClient(api_app)


@pytest.fixture
async def api_client(api_app):
    """Клиентская библиотека поверх in-process приложения."""
    transport = httpx.ASGITransport(app=api_app)
    async with PortfolioApiClient("http://testserver", transport=transport) as api:
        yield api


# ==================== Фейковый клиент ====================


class FakeApiClient:
    """Клиент без HTTP: домены в dict, записи и чтения считаются."""

    def __init__(self, content: dict[ContentDomain, ContentModel] | None = None):
        self.content = {domain: default_content(domain) for domain in ContentDomain}
        self.content.update(content or {})
        self.reads: list[ContentDomain] = []
        self.writes: list[ContentDomain] = []
        self.failing_reads: set[ContentDomain] = set()
        self.failing_writes: set[ContentDomain] = set()

    async def read(self, domain: ContentDomain) -> ContentModel:
        self.reads.append(domain)
        if domain in self.failing_reads:
            raise RuntimeError(f"{domain.value} unavailable")
        return self.content[domain]

    async def write(self, domain: ContentDomain, payload: ContentModel) -> WriteResult:
        self.writes.append(domain)
        if domain in self.failing_writes:
            return WriteResult(domain, False, "disk full")
        self.content[domain] = type(payload).model_validate(payload.to_wire())
        return WriteResult(domain, True)


@pytest.fixture
def fake_client() -> FakeApiClient:
    return FakeApiClient()
