"""
Схемы контента портфолио: форма сущностей, домены хранения и таблица значений по умолчанию.

Здесь только форма данных (типы, enum-ы). Правила заполнения (обязательные поля,
длины, URL) — в app.schemas.forms, их проверяет wizard перед сохранением.
На проводе и в файлах ключи в camelCase (personalInfo, githubUrl), в Python — snake_case.
"""
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer, model_validator
from pydantic.alias_generators import to_camel

ExperienceColor = Literal["primary", "accent"]
ContactService = Literal["formspree", "netlify", "custom", "none"]
DeploymentPlatform = Literal["vercel", "netlify", "other", "none"]


class ContentModel(BaseModel):
    """База для всех схем контента: camelCase алиасы, можно заполнять по имени поля.

    frozen: экземпляр не меняется на месте, только заменяется (model_copy / model_validate).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict:
        """JSON-совместимый dict с camelCase ключами (тело запроса / содержимое файла)."""
        return self.model_dump(mode="json", by_alias=True)


class PersonalInfo(ContentModel):
    name: str = ""
    role: str = ""
    bio: str = ""
    email: str = ""
    location: str = ""
    github: str = ""
    linkedin: str = ""
    twitter: str = ""
    website: str = ""

    @field_validator("location", "twitter", "website", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ResumeMeta(ContentModel):
    """Загруженное резюме. Пустые поля и size=0 — резюме нет."""

    file_name: str = ""
    original_name: str = ""
    size: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return not self.file_name


class WorkExperience(ContentModel):
    title: str
    company: str
    period: str  # произвольный текст, "2021 — now"
    description: str = ""
    color: ExperienceColor = "primary"


class Education(ContentModel):
    degree: str
    school: str
    period: str
    description: str = ""


# Эти ключи проекта сохраняются всегда, остальные — только если не пустые
_PROJECT_REQUIRED_KEYS = {"title", "description", "tags"}


class Project(ContentModel):
    title: str
    description: str
    tags: list[str] = Field(default_factory=list)
    long_description: str | None = None
    highlight: str | None = None
    features: list[str] | None = None
    challenges: list[str] | None = None
    technologies: list[str] | None = None
    github_url: str | None = None
    live_url: str | None = None
    duration: str | None = None
    team_size: str | None = None
    role: str | None = None

    @model_serializer(mode="wrap")
    def _collapse_empty(self, handler) -> dict:
        # Пустые строки/списки не храним: features=[] -> ключа нет
        data = handler(self)
        return {
            key: value
            for key, value in data.items()
            if key in _PROJECT_REQUIRED_KEYS or value not in (None, "", [])
        }


class ContactConfig(ContentModel):
    """Куда отправляет контактная форма. service=none всегда без endpoint."""

    service: ContactService = "none"
    endpoint: str = ""

    @field_validator("endpoint", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="before")
    @classmethod
    def _clear_endpoint_for_none(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("service", "none") == "none":
            return {**data, "endpoint": ""}
        return data


class DeploymentConfig(ContentModel):
    """Только для wizard, на сайт не влияет и не сохраняется."""

    platform: DeploymentPlatform = "none"
    custom_domain: str = ""

    @field_validator("custom_domain", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class OnboardingData(ContentModel):
    """Всё, что редактирует wizard: единица валидации и сохранения."""

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    resume: ResumeMeta = Field(default_factory=ResumeMeta)
    skills: list[str] = Field(default_factory=list)
    work_experience: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    contact_form: ContactConfig = Field(default_factory=ContactConfig)
    deployment: DeploymentConfig = Field(default_factory=DeploymentConfig)


# ==================== Домены хранения ====================


class ContentDomain(str, Enum):
    """Независимо сохраняемая часть контента. Значение — сегмент URL и имя файла."""

    PERSONAL_INFO = "personal-info"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    PROJECTS = "projects"
    CONTACT_CONFIG = "contact-config"
    RESUME = "resume"

    @property
    def file_name(self) -> str:
        return f"{self.value}.json"


class PersonalInfoContent(ContentModel):
    personal_info: PersonalInfo


class SkillsContent(ContentModel):
    skills: list[str]


class ExperienceContent(ContentModel):
    work_experience: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)


class ProjectsContent(ContentModel):
    projects: list[Project]


class ContactConfigContent(ContentModel):
    contact_config: ContactConfig


class ResumeContent(ContentModel):
    resume: ResumeMeta


DOMAIN_MODELS: dict[ContentDomain, type[ContentModel]] = {
    ContentDomain.PERSONAL_INFO: PersonalInfoContent,
    ContentDomain.SKILLS: SkillsContent,
    ContentDomain.EXPERIENCE: ExperienceContent,
    ContentDomain.PROJECTS: ProjectsContent,
    ContentDomain.CONTACT_CONFIG: ContactConfigContent,
    ContentDomain.RESUME: ResumeContent,
}


# ==================== Значения по умолчанию ====================
# Единственный источник дефолтов: чтения, store и wizard берут их отсюда.

DEFAULT_PERSONAL_INFO = {
    "name": "Your Name",
    "role": "Your Role",
    "bio": "A short bio about yourself.",
    "email": "your.email@example.com",
    "location": "",
    "github": "https://github.com/yourusername",
    "linkedin": "https://linkedin.com/in/yourusername",
    "twitter": "",
    "website": "",
}

_CONTENT_DEFAULTS: dict[ContentDomain, dict] = {
    ContentDomain.PERSONAL_INFO: {"personalInfo": DEFAULT_PERSONAL_INFO},
    ContentDomain.SKILLS: {"skills": []},
    ContentDomain.EXPERIENCE: {"workExperience": [], "education": []},
    ContentDomain.PROJECTS: {"projects": []},
    ContentDomain.CONTACT_CONFIG: {"contactConfig": {"service": "none", "endpoint": ""}},
    ContentDomain.RESUME: {"resume": {"fileName": "", "originalName": "", "size": 0}},
}


def default_content(domain: ContentDomain) -> ContentModel:
    """Документированный дефолт домена (новый экземпляр на каждый вызов)."""
    return DOMAIN_MODELS[domain].model_validate(_CONTENT_DEFAULTS[domain])


def blank_onboarding_data() -> OnboardingData:
    """Пустая форма wizard: все поля пустые, contact/deployment = none."""
    return OnboardingData()


def split_by_domain(data: OnboardingData) -> dict[ContentDomain, ContentModel]:
    """Разложить агрегат wizard на тела записи по доменам (deployment не сохраняется)."""
    return {
        ContentDomain.PERSONAL_INFO: PersonalInfoContent(personal_info=data.personal_info),
        ContentDomain.RESUME: ResumeContent(resume=data.resume),
        ContentDomain.SKILLS: SkillsContent(skills=list(data.skills)),
        ContentDomain.EXPERIENCE: ExperienceContent(
            work_experience=list(data.work_experience),
            education=list(data.education),
        ),
        ContentDomain.PROJECTS: ProjectsContent(projects=list(data.projects)),
        ContentDomain.CONTACT_CONFIG: ContactConfigContent(contact_config=data.contact_form),
    }


# ==================== Ответы чтения ====================
# Домен в корне ответа рядом с success: { "success": true, "skills": [...] }


class PersonalInfoRead(PersonalInfoContent):
    success: bool = True


class SkillsRead(SkillsContent):
    success: bool = True


class ExperienceRead(ExperienceContent):
    success: bool = True


class ProjectsRead(ProjectsContent):
    success: bool = True


class ContactConfigRead(ContactConfigContent):
    success: bool = True


class ResumeRead(ResumeContent):
    success: bool = True
