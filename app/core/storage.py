"""
Публичные ассеты: файл резюме в PUBLIC_DIR.

Резюме всегда хранится как resume.<ext>; после успешной записи нового удаляются
резюме с другими расширениями (resume.pdf / resume.doc / resume.docx).
"""
import logging
from pathlib import Path

from app.core.config import settings
from app.core.content_store import ContentStoreError, atomic_write_bytes

logger = logging.getLogger(__name__)

RESUME_EXTENSIONS = (".pdf", ".doc", ".docx")
RESUME_CONTENT_TYPES = {
    "application/pdf": ".pdf",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
}


class AssetNotFoundError(ContentStoreError):
    """Файла в публичной папке нет."""


class ResumeAssetStorage:
    def __init__(self, public_dir: Path | str):
        self.public_dir = Path(public_dir)

    def _resolve(self, file_name: str) -> Path:
        # Только имя файла внутри public, без подпапок и ".."
        if not file_name or Path(file_name).name != file_name or file_name in (".", ".."):
            raise AssetNotFoundError(f"Invalid file name: {file_name!r}")
        return self.public_dir / file_name

    def save_resume(self, content: bytes, extension: str) -> str:
        """Сохранить резюме как resume.<ext>, затем убрать резюме с другими расширениями.

        Новый файл пишется атомарно; если запись не удалась, старое резюме остаётся на месте.
        """
        extension = extension.lower()
        if extension not in RESUME_EXTENSIONS:
            raise ValueError(f"Unsupported resume extension: {extension}")
        file_name = f"resume{extension}"
        try:
            atomic_write_bytes(self.public_dir / file_name, content)
        except OSError as exc:
            raise ContentStoreError(f"Failed to store {file_name}: {exc}") from exc
        logger.info("Resume stored: %s (%d bytes)", file_name, len(content))

        for ext in RESUME_EXTENSIONS:
            stale = self.public_dir / f"resume{ext}"
            if ext == extension or not stale.exists():
                continue
            try:
                stale.unlink()
                logger.info("Removed previous resume file: %s", stale.name)
            except OSError as exc:
                logger.warning("Failed to remove previous resume %s: %s", stale.name, exc)
        return file_name

    def delete(self, file_name: str) -> None:
        path = self._resolve(file_name)
        if not path.is_file():
            raise AssetNotFoundError(f"File not found: {file_name}")
        try:
            path.unlink()
        except OSError as exc:
            raise ContentStoreError(f"Failed to delete {file_name}: {exc}") from exc
        logger.info("Resume deleted: %s", file_name)

    def exists(self, file_name: str) -> bool:
        try:
            return self._resolve(file_name).is_file()
        except AssetNotFoundError:
            return False


def get_asset_storage() -> ResumeAssetStorage:
    """Dependency: публичная папка из settings.PUBLIC_DIR."""
    return ResumeAssetStorage(settings.public_path())
