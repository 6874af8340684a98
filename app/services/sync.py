"""
Синхронизация данных wizard со store и файлами на сервере.

save(data):
1. оптимистично кладёт данные в store одним переходом (UI сразу видит новое);
2. параллельно пишет все домены через API (asyncio.gather, падение одного не мешает другим);
3. если все записи прошли — перечитывает store с сервера (файлы авторитетны);
4. если нет — возвращает ошибку, а оптимистичное состояние оставляет: пользователь
   может повторить сохранение, правки не теряются.

Перекрывающиеся save() выполняются по очереди (asyncio.Lock), чтобы перечитывание
одного сохранения не обгоняло записи следующего.
"""
import asyncio
import logging
from dataclasses import dataclass, field

from app.schemas.content import ContentDomain, OnboardingData, split_by_domain
from app.services.api_client import PortfolioApiClient, WriteResult
from app.services.portfolio_store import PortfolioStore

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    success: bool
    message: str
    failed_domains: list[ContentDomain] = field(default_factory=list)
    first_completion: bool = False


def store_changes(data: OnboardingData) -> dict:
    """Агрегат wizard -> ключи store (contact_form в store называется contact_config)."""
    return {
        "personal_info": data.personal_info,
        "resume": data.resume,
        "skills": data.skills,
        "work_experience": data.work_experience,
        "education": data.education,
        "projects": data.projects,
        "contact_config": data.contact_form,
    }


class PortfolioSynchronizer:
    def __init__(self, store: PortfolioStore, client: PortfolioApiClient):
        self.store = store
        self.client = client
        self._lock = asyncio.Lock()

    async def _write_all(self, data: OnboardingData) -> list[WriteResult]:
        payloads = split_by_domain(data)
        results = await asyncio.gather(
            *(self.client.write(domain, payload) for domain, payload in payloads.items()),
            return_exceptions=True,
        )
        checked: list[WriteResult] = []
        for domain, result in zip(payloads, results):
            if isinstance(result, BaseException):
                logger.error("Write of %s raised: %s", domain.value, result)
                result = WriteResult(domain, False, str(result))
            checked.append(result)
        return checked

    async def save(self, data: OnboardingData) -> SaveResult:
        """Оптимистично обновить store, записать все домены, перечитать store при успехе."""
        async with self._lock:
            self.store.update_all_data(**store_changes(data))

            results = await self._write_all(data)
            failed = [r for r in results if not r.success]
            if failed:
                details = "; ".join(f"{r.domain.value}: {r.error}" for r in failed)
                logger.error("Save failed for %d domain(s): %s", len(failed), details)
                return SaveResult(
                    success=False,
                    message=f"Failed to save {', '.join(r.domain.value for r in failed)}",
                    failed_domains=[r.domain for r in failed],
                )

            await self.store.reload_from_files()
            logger.info("Portfolio saved: %d domain(s) written", len(results))
            return SaveResult(success=True, message="Portfolio data saved")
