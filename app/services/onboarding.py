"""
Wizard онбординга: упорядоченные шаги, валидация текущего шага, переходы и жизненный цикл.

Состояние: current_step, is_open (модалка), is_completed (терминальный флаг), data (форма).
- next(): только если поля текущего шага валидны; на последнем шаге — complete().
- prev(): всегда, не ниже 0.
- jump_to_step(i): всегда, без валидации промежуточных шагов.
- request_close(): если данные изменены относительно дефолтов — ждёт подтверждения
  (confirm_close / cancel_close), иначе закрывает сразу.
- complete(): полное сохранение через PortfolioSynchronizer, completed=True.
- reset(): сбросить флаги и шаг, вернуть форму к дефолтам и открыть wizard на шаге 0.
Номер шага и флаги хранятся в session storage и переживают перезапуск.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from app.core.session_storage import MemoryStorage
from app.schemas.content import (
    ContentDomain,
    DeploymentConfig,
    OnboardingData,
    ResumeMeta,
    blank_onboarding_data,
)
from app.schemas.forms import FieldError, ValidationResult, validate_fields
from app.services.api_client import ApiError, PortfolioApiClient
from app.services.sync import PortfolioSynchronizer, SaveResult

logger = logging.getLogger(__name__)

COMPLETED_KEY = "portfolio-onboarding-completed"
LAST_STEP_KEY = "onboarding-last-step"
COMPLETED_BEFORE_KEY = "onboarding-completed-before"
STEP_JUMP_NOTICE_KEY = "onboarding-step-jump-toast-seen"

# Плейсхолдеры из дефолтного контента не считаются "своими" данными
_PLACEHOLDER_NAMES = {"", "Your Name"}
_PLACEHOLDER_EMAILS = {"", "your.email@example.com"}


@dataclass(frozen=True)
class WizardStep:
    title: str
    fields: tuple[str, ...] = ()


DEFAULT_STEPS: tuple[WizardStep, ...] = (
    WizardStep("Personal Information", ("personalInfo",)),
    WizardStep("Resume Upload", ("resume",)),
    WizardStep("Skills", ("skills",)),
    WizardStep("Experience", ("workExperience", "education")),
    WizardStep("Projects", ("projects",)),
    WizardStep("GitHub Integration"),
    WizardStep("Form Setup", ("contactForm", "deployment")),
    WizardStep("Theme & Colors"),
)


def is_data_customized(data: OnboardingData) -> bool:
    """Отличаются ли данные от дефолтов: своё имя+email или непустой контент."""
    info = data.personal_info
    has_custom_info = info.name not in _PLACEHOLDER_NAMES and info.email not in _PLACEHOLDER_EMAILS
    has_custom_content = bool(data.skills or data.work_experience or data.projects)
    return has_custom_info or has_custom_content


class OnboardingWizard:
    def __init__(
        self,
        synchronizer: PortfolioSynchronizer,
        storage: MemoryStorage,
        steps: tuple[WizardStep, ...] = DEFAULT_STEPS,
    ):
        if not steps:
            raise ValueError("Wizard needs at least one step")
        self.synchronizer = synchronizer
        self.storage = storage
        self.steps = tuple(steps)

        self.current_step = 0
        self.is_open = False
        self.is_completed = storage.get(COMPLETED_KEY) == "true"
        self.is_loading = False
        self.is_saving = False
        self.confirm_close_pending = False
        self.data: OnboardingData = blank_onboarding_data()
        self.errors: list[FieldError] = []

    @property
    def client(self) -> PortfolioApiClient:
        return self.synchronizer.client

    @property
    def step(self) -> WizardStep:
        return self.steps[self.current_step]

    @property
    def is_first_step(self) -> bool:
        return self.current_step == 0

    @property
    def is_last_step(self) -> bool:
        return self.current_step == len(self.steps) - 1

    @property
    def progress(self) -> float:
        return (self.current_step + 1) / len(self.steps)

    # ==================== Старт и данные ====================

    async def start(self, auto_open: bool = True) -> None:
        """Подтянуть сохранённые данные; при первом запуске открыть wizard."""
        await self.load_existing_data()
        if auto_open and not self.is_completed:
            self.open()
        # Уже настроенный контент считаем пройденным онбордингом
        if is_data_customized(self.data) and not self.is_completed:
            self.storage.set(COMPLETED_KEY, "true")
            self.is_completed = True

    async def load_existing_data(self) -> None:
        """Заполнить форму тем, что сейчас лежит в файлах."""
        self.is_loading = True
        try:
            domains = (
                ContentDomain.PERSONAL_INFO,
                ContentDomain.RESUME,
                ContentDomain.SKILLS,
                ContentDomain.EXPERIENCE,
                ContentDomain.PROJECTS,
                ContentDomain.CONTACT_CONFIG,
            )
            info, resume, skills, experience, projects, contact = await asyncio.gather(
                *(self.client.read(domain) for domain in domains)
            )
            self.data = OnboardingData(
                personal_info=info.personal_info,
                resume=resume.resume,
                skills=skills.skills,
                work_experience=experience.work_experience,
                education=experience.education,
                projects=projects.projects,
                contact_form=contact.contact_config,
                deployment=DeploymentConfig(),
            )
            logger.info(
                "Existing data loaded for onboarding pre-fill: %s, %d skills, %d jobs, %d projects",
                self.data.personal_info.name,
                len(self.data.skills),
                len(self.data.work_experience),
                len(self.data.projects),
            )
        finally:
            self.is_loading = False

    def update(self, **changes: Any) -> None:
        """Заменить поля формы (snake_case или camelCase). Проверяется только форма данных."""
        current = self.data.model_dump(by_alias=True)
        aliases = {name: info.alias or name for name, info in OnboardingData.model_fields.items()}
        for key, value in changes.items():
            current[aliases.get(key, key)] = value
        self.data = OnboardingData.model_validate(current)

    def is_data_customized(self) -> bool:
        return is_data_customized(self.data)

    # ==================== Валидация и переходы ====================

    def validate_current_step(self) -> ValidationResult:
        result = validate_fields(self.data, self.step.fields)
        self.errors = result.errors
        return result

    async def next(self) -> bool:
        """Вперёд, если текущий шаг валиден. На последнем шаге — complete()."""
        if self.is_last_step:
            result = await self.complete()
            return result.success
        if not self.validate_current_step().valid:
            return False
        self._set_step(self.current_step + 1)
        return True

    def prev(self) -> None:
        """Назад без валидации, не ниже нулевого шага."""
        self.errors = []
        self._set_step(max(0, self.current_step - 1))

    def jump_to_step(self, index: int) -> bool:
        """Перейти на любой шаг. True — переход первый, стоит показать подсказку."""
        if not 0 <= index < len(self.steps):
            raise IndexError(f"Step {index} out of range 0..{len(self.steps) - 1}")
        if index == self.current_step:
            return False
        self.errors = []
        self._set_step(index)
        if self.storage.get(STEP_JUMP_NOTICE_KEY):
            return False
        self.storage.set(STEP_JUMP_NOTICE_KEY, "true")
        return True

    def _set_step(self, index: int) -> None:
        self.current_step = index
        self.storage.set(LAST_STEP_KEY, str(index))

    # ==================== Модалка ====================

    def open(self) -> None:
        """Открыть wizard и вернуться на сохранённый шаг (если он в диапазоне)."""
        self.is_open = True
        saved = self.storage.get(LAST_STEP_KEY)
        if saved is not None:
            try:
                step = int(saved)
            except ValueError:
                logger.warning("Ignoring invalid saved step: %r", saved)
                return
            if 0 <= step < len(self.steps):
                self.current_step = step

    def request_close(self) -> bool:
        """Закрыть. Если есть изменённые данные — нужен confirm_close(), вернёт False."""
        if self.is_data_customized():
            self.confirm_close_pending = True
            return False
        self._close()
        return True

    async def confirm_close(self, save: bool = False) -> SaveResult | None:
        """Подтвердить закрытие: save=True — сначала сохранить; при ошибке wizard остаётся открыт."""
        result = None
        if save:
            result = await self.save_progress()
            if not result.success:
                return result
        self._close()
        return result

    def cancel_close(self) -> None:
        self.confirm_close_pending = False

    def _close(self) -> None:
        self.confirm_close_pending = False
        self.storage.set(LAST_STEP_KEY, str(self.current_step))
        self.is_open = False

    # ==================== Сохранение и завершение ====================

    async def save_progress(self) -> SaveResult:
        """Сохранить текущую форму без завершения онбординга."""
        self.is_saving = True
        try:
            return await self.synchronizer.save(self.data)
        finally:
            self.is_saving = False

    async def complete(self) -> SaveResult:
        """Сохранить всё и отметить онбординг пройденным (только при успешном сохранении)."""
        validation = self.validate_current_step()
        if not validation.valid:
            return SaveResult(success=False, message="Please fix the highlighted fields")

        result = await self.save_progress()
        if not result.success:
            return result

        self.storage.set(COMPLETED_KEY, "true")
        self.is_completed = True
        self._close()
        if self.storage.get(COMPLETED_BEFORE_KEY) is None:
            self.storage.set(COMPLETED_BEFORE_KEY, "true")
            result.first_completion = True
        return result

    def reset(self) -> None:
        """Начать онбординг заново. Файлы на сервере не трогаются."""
        self.storage.remove(COMPLETED_KEY)
        self.storage.remove(LAST_STEP_KEY)
        self.is_completed = False
        self.current_step = 0
        self.data = blank_onboarding_data()
        self.errors = []
        self.confirm_close_pending = False
        self.is_open = True

    # ==================== Резюме ====================

    async def upload_resume(self, file_name: str, content: bytes, content_type: str) -> str | None:
        """Загрузить резюме и записать метаданные в форму. Вернёт текст ошибки или None.

        При ошибке форма не меняется.
        """
        try:
            meta = await self.client.upload_resume(file_name, content, content_type)
        except ApiError as exc:
            logger.warning("Resume upload rejected: %s", exc)
            return str(exc)
        self.data = self.data.model_copy(update={"resume": meta})
        return None

    async def remove_resume(self) -> str | None:
        """Удалить файл резюме и очистить метаданные в форме."""
        if self.data.resume.is_empty:
            return None
        try:
            await self.client.delete_resume(self.data.resume.file_name)
        except ApiError as exc:
            # Файла уже нет — метаданные всё равно чистим
            if exc.status_code != 404:
                logger.warning("Resume delete failed: %s", exc)
                return str(exc)
        self.data = self.data.model_copy(update={"resume": ResumeMeta()})
        return None

    # ==================== Итог ====================

    def generate_setup_summary(self) -> dict:
        """Краткая сводка по настроенному портфолио и что делать дальше."""
        data = self.data
        info = data.personal_info
        return {
            "personalInfo": {
                "name": info.name,
                "role": info.role,
                "email": info.email,
                "socialLinks": {
                    "github": info.github,
                    "linkedin": info.linkedin,
                    "twitter": info.twitter,
                    "website": info.website,
                },
            },
            "content": {
                "skills": len(data.skills),
                "workExperience": len(data.work_experience),
                "education": len(data.education),
                "projects": len(data.projects),
                "resume": not data.resume.is_empty,
            },
            "configuration": {
                "contactForm": data.contact_form.service,
                "deployment": data.deployment.platform,
            },
            "nextSteps": [
                "Configure contact form endpoint if needed",
                "Set up deployment platform",
                "Customize theme colors",
                "Test and deploy your portfolio",
            ],
        }

