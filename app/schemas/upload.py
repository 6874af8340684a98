"""
Схемы для загрузки резюме.
"""
from app.schemas.content import ContentModel


class UploadedResume(ContentModel):
    """Что сохранено в публичной папке."""

    file_name: str
    file_path: str  # публичный путь для браузера: /resume.pdf
    original_name: str
    size: int
    type: str
