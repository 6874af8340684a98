"""
Правила валидации формы wizard.

Каждая сущность из app.schemas.content получает "Form"-наследника с ограничениями:
обязательные поля, максимальная длина, формат URL/email.
validate_fields() проверяет только перечисленные поля агрегата — wizard вызывает
её для полей текущего шага, а не для всего OnboardingData.
"""
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any

from pydantic import AfterValidator, AnyHttpUrl, BaseModel, Field, TypeAdapter, ValidationError, model_validator
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email
from pydantic_core import PydanticCustomError

from app.schemas.content import (
    ContactConfig,
    DeploymentConfig,
    Education,
    OnboardingData,
    PersonalInfo,
    Project,
    ResumeMeta,
    WorkExperience,
    blank_onboarding_data,
)

MAX_SKILLS = 50
MAX_TAGS = 20
MAX_LIST_ITEMS = 20

_url_adapter = TypeAdapter(AnyHttpUrl)


def _check_url(value: str, label: str, hosts: tuple[str, ...] = ()) -> str:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise ValueError(f"Please enter a valid {label} URL") from None
    if hosts and not any(host in value for host in hosts):
        raise ValueError(f"Please enter a valid {label} URL")
    return value


def required(label: str, max_length: int) -> AfterValidator:
    def check(value: str) -> str:
        if not value.strip():
            raise ValueError(f"{label} is required")
        if len(value) > max_length:
            raise ValueError(f"{label} must be less than {max_length} characters")
        return value

    return AfterValidator(check)


def optional(label: str, max_length: int) -> AfterValidator:
    def check(value: str | None) -> str | None:
        if value and len(value) > max_length:
            raise ValueError(f"{label} must be less than {max_length} characters")
        return value

    return AfterValidator(check)


def required_url(label: str, *hosts: str) -> AfterValidator:
    def check(value: str) -> str:
        if not value.strip():
            raise ValueError(f"{label} URL is required")
        return _check_url(value, label, hosts)

    return AfterValidator(check)


def optional_url(label: str, *hosts: str) -> AfterValidator:
    """Пустая строка = "не задано" и валидна; непустая должна быть абсолютным URL."""

    def check(value: str | None) -> str | None:
        if not value:
            return value
        return _check_url(value, label, hosts)

    return AfterValidator(check)


def email_address() -> AfterValidator:
    def check(value: str) -> str:
        try:
            validate_email(value)
        except PydanticCustomError:
            raise ValueError("Please enter a valid email address") from None
        return value

    return AfterValidator(check)


class PersonalInfoForm(PersonalInfo):
    name: Annotated[str, required("Name", 100)] = ""
    role: Annotated[str, required("Role", 100)] = ""
    bio: Annotated[str, required("Bio", 500)] = ""
    email: Annotated[str, email_address()] = ""
    location: Annotated[str, optional("Location", 100)] = ""
    github: Annotated[str, required_url("GitHub", "github.com")] = ""
    linkedin: Annotated[str, required_url("LinkedIn", "linkedin.com")] = ""
    twitter: Annotated[str, optional_url("Twitter/X", "twitter.com", "x.com")] = ""
    website: Annotated[str, optional_url("website")] = ""


class WorkExperienceForm(WorkExperience):
    title: Annotated[str, required("Job title", 100)]
    company: Annotated[str, required("Company", 100)]
    period: Annotated[str, required("Period", 50)]
    description: Annotated[str, optional("Description", 500)] = ""


class EducationForm(Education):
    degree: Annotated[str, required("Degree", 100)]
    school: Annotated[str, required("School", 100)]
    period: Annotated[str, required("Period", 50)]
    description: Annotated[str, optional("Description", 500)] = ""


ListItems = Annotated[list[str], Field(max_length=MAX_LIST_ITEMS)]


class ProjectForm(Project):
    title: Annotated[str, required("Project title", 100)]
    description: Annotated[str, required("Description", 300)]
    tags: Annotated[list[str], Field(min_length=1, max_length=MAX_TAGS)]
    long_description: Annotated[str | None, optional("Long description", 1000)] = None
    highlight: Annotated[str | None, optional("Highlight", 50)] = None
    features: ListItems | None = None
    challenges: ListItems | None = None
    technologies: ListItems | None = None
    github_url: Annotated[str | None, optional_url("GitHub")] = None
    live_url: Annotated[str | None, optional_url("live")] = None
    duration: Annotated[str | None, optional("Duration", 50)] = None
    team_size: Annotated[str | None, optional("Team size", 50)] = None
    role: Annotated[str | None, optional("Role", 100)] = None


# Сервисы, которым нужен URL для отправки формы
SERVICES_WITH_ENDPOINT = ("formspree", "custom")


class ContactConfigForm(ContactConfig):
    @model_validator(mode="after")
    def _endpoint_for_service(self) -> "ContactConfigForm":
        if self.service in SERVICES_WITH_ENDPOINT:
            if not self.endpoint:
                raise ValueError(f"Endpoint is required for {self.service}")
            _check_url(self.endpoint, "endpoint")
        elif self.endpoint and self.service != "none":
            _check_url(self.endpoint, "endpoint")
        return self


SkillLabel = Annotated[str, required("Skill", 50)]

# Поле агрегата (camelCase, как в форме) -> как его проверять
FIELD_ADAPTERS: dict[str, TypeAdapter] = {
    "personalInfo": TypeAdapter(PersonalInfoForm),
    "resume": TypeAdapter(ResumeMeta),
    "skills": TypeAdapter(Annotated[list[SkillLabel], Field(max_length=MAX_SKILLS)]),
    "workExperience": TypeAdapter(list[WorkExperienceForm]),
    "education": TypeAdapter(list[EducationForm]),
    "projects": TypeAdapter(list[ProjectForm]),
    "contactForm": TypeAdapter(ContactConfigForm),
    "deployment": TypeAdapter(DeploymentConfig),
}

ALL_FIELDS: tuple[str, ...] = tuple(FIELD_ADAPTERS)


@dataclass(frozen=True)
class FieldError:
    field: str  # "personalInfo.github", "projects.0.tags"
    message: str


@dataclass
class ValidationResult:
    valid: bool
    errors: list[FieldError] = field(default_factory=list)

    def messages_for(self, prefix: str) -> list[str]:
        """Сообщения для поля и всех вложенных в него."""
        return [
            e.message
            for e in self.errors
            if e.field == prefix or e.field.startswith(prefix + ".")
        ]


def _error_message(error: dict) -> str:
    ctx_error = (error.get("ctx") or {}).get("error")
    if isinstance(ctx_error, Exception):
        return str(ctx_error)
    return error.get("msg", "Invalid value")


def _field_errors(name: str, exc: ValidationError) -> list[FieldError]:
    return [
        FieldError(
            field=".".join([name, *(str(p) for p in err.get("loc", ()))]),
            message=_error_message(err),
        )
        for err in exc.errors()
    ]


def _normalize(field_name: str) -> str:
    camel = field_name if field_name in FIELD_ADAPTERS else to_camel(field_name)
    if camel not in FIELD_ADAPTERS:
        raise KeyError(f"Unknown onboarding field: {field_name}")
    return camel


def _as_mapping(data: OnboardingData | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    # Ключи верхнего уровня могут быть snake_case; вложенные понимает populate_by_name
    return {(k if k in FIELD_ADAPTERS else to_camel(k)): v for k, v in data.items()}


def validate_fields(
    data: OnboardingData | Mapping[str, Any],
    fields: Iterable[str],
) -> ValidationResult:
    """Проверить только перечисленные поля агрегата.

    Имена полей — как в форме (personalInfo, contactForm) или snake_case.
    Отсутствующее поле проверяется в значении из пустой формы.
    """
    values = _as_mapping(data)
    blank = blank_onboarding_data().model_dump(mode="json", by_alias=True)
    errors: list[FieldError] = []
    for name in dict.fromkeys(_normalize(f) for f in fields):
        value = values.get(name, blank[name])
        try:
            FIELD_ADAPTERS[name].validate_python(value)
        except ValidationError as exc:
            errors.extend(_field_errors(name, exc))
    return ValidationResult(valid=not errors, errors=errors)


def validate_onboarding(data: OnboardingData | Mapping[str, Any]) -> ValidationResult:
    """Проверить весь агрегат."""
    return validate_fields(data, ALL_FIELDS)
