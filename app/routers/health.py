"""
Health check: жив ли сервис, доступна ли папка с контентом.

Эндпоинт для оркестраторов (Docker, k8s) и мониторинга.
"""
from fastapi import APIRouter, Depends

from app.core.content_store import FlatFileContentStore, get_content_store
from app.schemas.common import SuccessResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=SuccessResponse[dict])
def health(store: FlatFileContentStore = Depends(get_content_store)):
    """Проверка живости сервиса и записи в DATA_DIR."""
    storage = "writable" if store.is_writable() else "read-only"
    return SuccessResponse(data={"status": "ok", "storage": storage})
