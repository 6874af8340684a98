"""
Эндпоинты контента: по одному GET и POST на домен.

GET отдаёт сохранённое значение, а если домен ещё не записывался (или файл
не читается) — документированный дефолт. Ошибку наружу GET не отдаёт.
POST принимает полное значение домена и перезаписывает файл целиком.
Правила заполнения здесь не проверяются (это делает wizard), только форма тела.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from app.core.content_store import (
    ContentNotFoundError,
    ContentStoreError,
    FlatFileContentStore,
    get_content_store,
)
from app.schemas.common import ErrorResponse, SuccessResponse
from app.schemas.content import (
    DOMAIN_MODELS,
    ContactConfigContent,
    ContactConfigRead,
    ContentDomain,
    ContentModel,
    ExperienceContent,
    ExperienceRead,
    PersonalInfoContent,
    PersonalInfoRead,
    ProjectsContent,
    ProjectsRead,
    ResumeContent,
    ResumeRead,
    SkillsContent,
    SkillsRead,
    default_content,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/data", tags=["content"])

WRITE_RESPONSES = {500: {"model": ErrorResponse}, 422: {"model": ErrorResponse}}


def read_domain(store: FlatFileContentStore, domain: ContentDomain) -> ContentModel:
    """Прочитать домен или вернуть дефолт. Никогда не бросает."""
    try:
        raw = store.load(domain)
    except ContentNotFoundError:
        logger.info("Content '%s' not initialized, returning default", domain.value)
        return default_content(domain)
    except ContentStoreError as exc:
        logger.warning("Content '%s' unreadable, returning default: %s", domain.value, exc)
        return default_content(domain)
    try:
        return DOMAIN_MODELS[domain].model_validate(raw)
    except ValidationError as exc:
        logger.warning("Content '%s' has unexpected shape, returning default: %s", domain.value, exc)
        return default_content(domain)


def write_domain(
    store: FlatFileContentStore,
    domain: ContentDomain,
    body: ContentModel,
) -> SuccessResponse[None]:
    """Перезаписать домен целиком. Ошибка диска -> 500 storage_error."""
    try:
        store.store(domain, body.to_wire())
    except ContentStoreError as exc:
        logger.exception("Error updating %s", domain.value)
        raise HTTPException(
            500,
            detail={"error": "storage_error", "message": f"Failed to update {domain.value}: {exc}"},
        ) from exc
    return SuccessResponse(message=f"{domain.value} updated successfully")


# ==================== Personal info ====================


@router.get("/personal-info", response_model=PersonalInfoRead)
def get_personal_info(store: FlatFileContentStore = Depends(get_content_store)):
    content = read_domain(store, ContentDomain.PERSONAL_INFO)
    return PersonalInfoRead(personal_info=content.personal_info)


@router.post("/personal-info", response_model=SuccessResponse[None], responses=WRITE_RESPONSES)
def update_personal_info(
    body: PersonalInfoContent,
    store: FlatFileContentStore = Depends(get_content_store),
):
    return write_domain(store, ContentDomain.PERSONAL_INFO, body)


# ==================== Skills ====================


@router.get("/skills", response_model=SkillsRead)
def get_skills(store: FlatFileContentStore = Depends(get_content_store)):
    content = read_domain(store, ContentDomain.SKILLS)
    return SkillsRead(skills=content.skills)


@router.post("/skills", response_model=SuccessResponse[None], responses=WRITE_RESPONSES)
def update_skills(
    body: SkillsContent,
    store: FlatFileContentStore = Depends(get_content_store),
):
    return write_domain(store, ContentDomain.SKILLS, body)


# ==================== Experience (work + education) ====================


@router.get("/experience", response_model=ExperienceRead)
def get_experience(store: FlatFileContentStore = Depends(get_content_store)):
    content = read_domain(store, ContentDomain.EXPERIENCE)
    return ExperienceRead(work_experience=content.work_experience, education=content.education)


@router.post("/experience", response_model=SuccessResponse[None], responses=WRITE_RESPONSES)
def update_experience(
    body: ExperienceContent,
    store: FlatFileContentStore = Depends(get_content_store),
):
    return write_domain(store, ContentDomain.EXPERIENCE, body)


# ==================== Projects ====================


@router.get("/projects", response_model=ProjectsRead)
def get_projects(store: FlatFileContentStore = Depends(get_content_store)):
    content = read_domain(store, ContentDomain.PROJECTS)
    return ProjectsRead(projects=content.projects)


@router.post("/projects", response_model=SuccessResponse[None], responses=WRITE_RESPONSES)
def update_projects(
    body: ProjectsContent,
    store: FlatFileContentStore = Depends(get_content_store),
):
    return write_domain(store, ContentDomain.PROJECTS, body)


# ==================== Contact config ====================


@router.get("/contact-config", response_model=ContactConfigRead)
def get_contact_config(store: FlatFileContentStore = Depends(get_content_store)):
    content = read_domain(store, ContentDomain.CONTACT_CONFIG)
    return ContactConfigRead(contact_config=content.contact_config)


@router.post("/contact-config", response_model=SuccessResponse[None], responses=WRITE_RESPONSES)
def update_contact_config(
    body: ContactConfigContent,
    store: FlatFileContentStore = Depends(get_content_store),
):
    return write_domain(store, ContentDomain.CONTACT_CONFIG, body)


# ==================== Resume metadata ====================


@router.get("/resume", response_model=ResumeRead)
def get_resume(store: FlatFileContentStore = Depends(get_content_store)):
    content = read_domain(store, ContentDomain.RESUME)
    return ResumeRead(resume=content.resume)


@router.post("/resume", response_model=SuccessResponse[None], responses=WRITE_RESPONSES)
def update_resume(
    body: ResumeContent,
    store: FlatFileContentStore = Depends(get_content_store),
):
    return write_domain(store, ContentDomain.RESUME, body)
