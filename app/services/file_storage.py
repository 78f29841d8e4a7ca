"""
File storage for lesson materials.

Stores files on local disk under UPLOAD_BASE_DIR/{lesson_id}/{hash}{ext} and
serves them under MATERIALS_URL_PREFIX. Names are content-addressed, so
re-uploading the same file reuses its URL.
"""
import hashlib
from pathlib import Path

from fastapi import UploadFile

from app.config import settings


def save_lesson_material(lesson_id: int, upload_file: UploadFile, file_content: bytes) -> str:
    """
    Save an uploaded material to disk.

    Args:
        lesson_id: Lesson ID for directory structure
        upload_file: FastAPI UploadFile with filename metadata
        file_content: Raw bytes already read from the upload

    Returns:
        Relative path of the stored file
    """
    rel_dir = Path(str(lesson_id))
    full_dir = Path(settings.upload_base_dir) / rel_dir
    full_dir.mkdir(parents=True, exist_ok=True)

    file_hash = hashlib.sha256(file_content).hexdigest()[:16]
    extension = Path(upload_file.filename or "").suffix.lower()
    filename = f"{file_hash}{extension}"
    (full_dir / filename).write_bytes(file_content)

    return (rel_dir / filename).as_posix()


def public_url(relative_path: str) -> str:
    return f"{settings.materials_url_prefix.rstrip('/')}/{relative_path}"
