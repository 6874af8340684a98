"""
Реактивный клиентский store портфолио.

Держит по одному значению на домен в неизменяемом снимке PortfolioState.
Каждое изменение — замена снимка целиком, поэтому update_all_data() атомарен:
подписчик никогда не увидит состояние, где обновлена только часть доменов.
Подписка на ключ (subscribe("skills", ...)) срабатывает, только если изменился этот ключ.

Жизненный цикл: PortfolioStore.create() (гидратация из снимка в storage) ->
load_initial_data() -> ... -> close() (снимок обратно в storage).
is_loaded в снимок не попадает и после перезапуска всегда False.
Источник истины — файлы на сервере; store только кэш, который можно перечитать (reload_from_files).
"""
import asyncio
import copy
import logging
from collections.abc import Callable
from typing import Any

from pydantic import ConfigDict, Field, ValidationError

from app.core.session_storage import MemoryStorage
from app.schemas.content import (
    DOMAIN_MODELS,
    ContactConfig,
    ContentDomain,
    ContentModel,
    Education,
    PersonalInfo,
    Project,
    ResumeMeta,
    WorkExperience,
    default_content,
)
from app.services.api_client import PortfolioApiClient

logger = logging.getLogger(__name__)

SNAPSHOT_KEY = "portfolio-storage"


def _default(domain: ContentDomain, attr: str):
    return lambda: getattr(default_content(domain), attr)


class PortfolioState(ContentModel):
    """Снимок store. frozen: меняется только заменой целиком."""

    model_config = ConfigDict(frozen=True)

    personal_info: PersonalInfo = Field(default_factory=_default(ContentDomain.PERSONAL_INFO, "personal_info"))
    resume: ResumeMeta = Field(default_factory=_default(ContentDomain.RESUME, "resume"))
    skills: tuple[str, ...] = ()
    work_experience: tuple[WorkExperience, ...] = ()
    education: tuple[Education, ...] = ()
    projects: tuple[Project, ...] = ()
    contact_config: ContactConfig = Field(default_factory=_default(ContentDomain.CONTACT_CONFIG, "contact_config"))
    is_loaded: bool = False


STATE_KEYS: tuple[str, ...] = tuple(PortfolioState.model_fields)

Listener = Callable[[Any, Any], None]


class PortfolioStore:
    def __init__(self, client: PortfolioApiClient, storage: MemoryStorage | None = None):
        self._client = client
        self._storage = storage
        self._state = PortfolioState()
        self._listeners: list[tuple[str | None, Listener]] = []
        self._closed = False

    @classmethod
    def create(cls, client: PortfolioApiClient, storage: MemoryStorage | None = None) -> "PortfolioStore":
        """Создать store и поднять снимок из storage (если есть)."""
        store = cls(client, storage)
        store.hydrate()
        return store

    # ==================== Снимок ====================

    def hydrate(self) -> None:
        """Прочитать снимок из storage. Битый снимок — остаёмся на дефолтах."""
        if self._storage is None:
            return
        raw = self._storage.get(SNAPSHOT_KEY)
        if not raw:
            return
        try:
            state = PortfolioState.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Ignoring invalid store snapshot: %s", exc)
            return
        self._transition(state)

    def persist(self) -> None:
        """Записать снимок в storage (без is_loaded)."""
        if self._storage is None:
            return
        self._storage.set(
            SNAPSHOT_KEY,
            self._state.model_dump_json(by_alias=True, exclude={"is_loaded"}),
        )

    def close(self) -> None:
        """Сохранить снимок и отписать всех."""
        if self._closed:
            return
        self.persist()
        self._listeners.clear()
        self._closed = True

    # ==================== Чтение ====================

    @property
    def state(self) -> PortfolioState:
        return self._state

    def select(self, key: str) -> Any:
        if key not in STATE_KEYS:
            raise KeyError(f"Unknown store key: {key}")
        return getattr(self._state, key)

    @property
    def personal_info(self) -> PersonalInfo:
        return self._state.personal_info

    @property
    def resume(self) -> ResumeMeta:
        return self._state.resume

    @property
    def skills(self) -> tuple[str, ...]:
        return self._state.skills

    @property
    def work_experience(self) -> tuple[WorkExperience, ...]:
        return self._state.work_experience

    @property
    def education(self) -> tuple[Education, ...]:
        return self._state.education

    @property
    def projects(self) -> tuple[Project, ...]:
        return self._state.projects

    @property
    def contact_config(self) -> ContactConfig:
        return self._state.contact_config

    @property
    def is_loaded(self) -> bool:
        return self._state.is_loaded

    def subscribe(self, key: str | None, listener: Listener) -> Callable[[], None]:
        """Подписка на ключ (или на весь снимок при key=None). listener(new, old).

        Возвращает функцию отписки.
        """
        if key is not None and key not in STATE_KEYS:
            raise KeyError(f"Unknown store key: {key}")
        entry = (key, listener)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    # ==================== Запись ====================

    def _transition(self, new_state: PortfolioState) -> None:
        old_state, self._state = self._state, new_state
        if new_state == old_state:
            return
        for key, listener in list(self._listeners):
            if key is None:
                listener(new_state, old_state)
                continue
            new_value, old_value = getattr(new_state, key), getattr(old_state, key)
            if new_value != old_value:
                listener(new_value, old_value)

    def _set(self, **changes: Any) -> None:
        unknown = set(changes) - set(STATE_KEYS)
        if unknown:
            raise KeyError(f"Unknown store keys: {', '.join(sorted(unknown))}")
        # Свои копии: вложенные списки (tags, features) не делим с вызывающим.
        # Списки верхнего уровня pydantic превратит в кортежи
        changes = copy.deepcopy(changes)
        self._transition(PortfolioState.model_validate({**dict(self._state), **changes}))

    def set_personal_info(self, info: PersonalInfo) -> None:
        self._set(personal_info=info)

    def set_resume(self, resume: ResumeMeta) -> None:
        self._set(resume=resume)

    def set_skills(self, skills: list[str]) -> None:
        self._set(skills=skills)

    def set_work_experience(self, experience: list[WorkExperience]) -> None:
        self._set(work_experience=experience)

    def set_education(self, education: list[Education]) -> None:
        self._set(education=education)

    def set_projects(self, projects: list[Project]) -> None:
        self._set(projects=projects)

    def set_contact_config(self, config: ContactConfig) -> None:
        self._set(contact_config=config)

    def set_is_loaded(self, loaded: bool) -> None:
        self._set(is_loaded=loaded)

    def update_all_data(self, **changes: Any) -> None:
        """Заменить несколько доменов одним переходом состояния."""
        self._set(**changes)

    # ==================== Загрузка ====================

    async def load_initial_data(self) -> None:
        """Перечитать файлы, если store ещё не загружен. Повторный вызов — no-op."""
        if self._state.is_loaded:
            return
        await self.reload_from_files()

    async def reload_from_files(self) -> None:
        """Перечитать все домены с сервера. is_loaded=False на время загрузки.

        Неудачный домен -> его дефолт, остальные не блокируются. В конце is_loaded=True.
        """
        self.set_is_loaded(False)
        domains = list(DOMAIN_MODELS)
        results = await asyncio.gather(
            *(self._client.read(domain) for domain in domains),
            return_exceptions=True,
        )
        content: dict[ContentDomain, ContentModel] = {}
        for domain, result in zip(domains, results):
            if isinstance(result, BaseException):
                logger.warning("Reload of %s failed, using default: %s", domain.value, result)
                result = default_content(domain)
            content[domain] = result

        experience = content[ContentDomain.EXPERIENCE]
        self.update_all_data(
            personal_info=content[ContentDomain.PERSONAL_INFO].personal_info,
            resume=content[ContentDomain.RESUME].resume,
            skills=content[ContentDomain.SKILLS].skills,
            work_experience=experience.work_experience,
            education=experience.education,
            projects=content[ContentDomain.PROJECTS].projects,
            contact_config=content[ContentDomain.CONTACT_CONFIG].contact_config,
            is_loaded=True,
        )
        logger.info("Portfolio data loaded into store")
