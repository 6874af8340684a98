"""
Загрузка резюме в публичную папку.

POST принимает один файл (PDF/DOC/DOCX, до MAX_RESUME_SIZE) и сохраняет как resume.<ext>.
Метаданные (ResumeMeta) здесь не пишутся — их сохраняет wizard через /api/data/resume,
так что неудачная загрузка не трогает сохранённый контент.
"""
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from app.core.config import settings
from app.core.content_store import ContentStoreError
from app.core.storage import (
    RESUME_CONTENT_TYPES,
    AssetNotFoundError,
    ResumeAssetStorage,
    get_asset_storage,
)
from app.schemas.common import ErrorResponse, SuccessResponse
from app.schemas.upload import UploadedResume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload-resume", tags=["uploads"])


@router.post(
    "",
    response_model=SuccessResponse[UploadedResume],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_resume(
    resume: UploadFile | None = File(default=None),
    storage: ResumeAssetStorage = Depends(get_asset_storage),
):
    """Сохранить резюме, заменив предыдущее."""
    if resume is None:
        raise HTTPException(400, detail={"error": "missing_file", "message": "No resume file provided"})

    if resume.content_type not in RESUME_CONTENT_TYPES:
        raise HTTPException(
            400,
            detail={
                "error": "invalid_file_type",
                "message": "Invalid file type. Only PDF, DOC, and DOCX files are allowed.",
            },
        )

    content = await resume.read()
    if len(content) > settings.MAX_RESUME_SIZE:
        max_mb = settings.MAX_RESUME_SIZE // (1024 * 1024)
        raise HTTPException(
            400,
            detail={"error": "file_too_large", "message": f"File too large. Maximum size is {max_mb}MB."},
        )

    original_name = resume.filename or "resume"
    extension = Path(original_name).suffix.lower() or RESUME_CONTENT_TYPES[resume.content_type]
    if extension not in RESUME_CONTENT_TYPES.values():
        extension = RESUME_CONTENT_TYPES[resume.content_type]

    try:
        file_name = storage.save_resume(content, extension)
    except ContentStoreError as exc:
        logger.exception("Error uploading resume")
        raise HTTPException(
            500, detail={"error": "storage_error", "message": "Failed to upload resume"}
        ) from exc

    return SuccessResponse(
        message="Resume uploaded successfully",
        data=UploadedResume(
            file_name=file_name,
            file_path=f"/{file_name}",
            original_name=original_name,
            size=len(content),
            type=resume.content_type,
        ),
    )


@router.delete(
    "",
    response_model=SuccessResponse[None],
    responses={404: {"model": ErrorResponse}},
)
def delete_resume(
    file_name: str = Query(..., alias="fileName", min_length=1),
    storage: ResumeAssetStorage = Depends(get_asset_storage),
):
    """Удалить файл резюме по имени. 404 если файла нет."""
    try:
        storage.delete(file_name)
    except AssetNotFoundError:
        raise HTTPException(404, detail={"error": "not_found", "message": "File not found"})
    except ContentStoreError as exc:
        logger.exception("Error deleting resume")
        raise HTTPException(
            500, detail={"error": "storage_error", "message": "Failed to delete resume"}
        ) from exc
    return SuccessResponse(message="Resume deleted successfully")
