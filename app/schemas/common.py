"""
Структура ответов API: единый формат для успеха и ошибок.

Успех: { "success": true, "data": <payload>, "message": "<text>" }
Ошибка: { "success": false, "error": "<code>", "message": "<text>" }
Чтение контента отдаёт домен прямо в корне: { "success": true, "personalInfo": {...} }
"""
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class SuccessResponse(BaseModel, Generic[T]):
    """Успешный ответ: success=true, data — полезная нагрузка."""

    success: bool = True
    data: T | None = Field(default=None, description="Тело ответа")
    message: str | None = Field(default=None, description="Что сделано")


class ErrorResponse(BaseModel):
    """Ответ с ошибкой: success=false, error и message."""

    success: bool = False
    error: str = Field(..., description="Код ошибки (например, storage_error, validation_error)")
    message: str = Field(..., description="Человекочитаемое сообщение")
