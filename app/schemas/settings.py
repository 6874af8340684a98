"""
Схемы для настроек интеграций (GitHub токен).
"""
from pydantic import BaseModel, ConfigDict, Field


class EnvUpdate(BaseModel):
    """Тело /api/update-env. Ключ в верхнем регистре, как в .env."""

    model_config = ConfigDict(populate_by_name=True)

    # Одна строка без пробелов и управляющих символов: значение пишется в .env без кавычек
    github_token: str = Field(alias="GITHUB_TOKEN", pattern=r"^[^\s\x00-\x1f\x7f]*$")


class GitHubStatus(BaseModel):
    enabled: bool
