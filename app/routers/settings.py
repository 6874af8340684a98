"""
Настройки интеграций: GitHub токен в .env.local и признак включённой интеграции.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from app.core.env_file import EnvFile, EnvFileError, get_env_file
from app.schemas.common import ErrorResponse, SuccessResponse
from app.schemas.settings import EnvUpdate, GitHubStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["settings"])


@router.post(
    "/update-env",
    response_model=SuccessResponse[None],
    responses={500: {"model": ErrorResponse}},
)
def update_env(data: EnvUpdate, env_file: EnvFile = Depends(get_env_file)):
    """Записать GITHUB_TOKEN в файл окружения."""
    try:
        env_file.update({"GITHUB_TOKEN": data.github_token})
    except ValueError as exc:
        raise HTTPException(422, detail={"error": "validation_error", "message": str(exc)}) from exc
    except EnvFileError as exc:
        logger.exception("Error updating environment file")
        raise HTTPException(
            500, detail={"error": "env_write_failed", "message": "Failed to update environment file"}
        ) from exc
    return SuccessResponse(message="Environment updated")


@router.get("/github-enabled", response_model=GitHubStatus)
def github_enabled(env_file: EnvFile = Depends(get_env_file)):
    """Включена ли GitHub-интеграция (есть ли токен)."""
    return GitHubStatus(enabled=bool(env_file.github_token()))
