"""
Local file storage for uploaded documents.
"""
import logging
import mimetypes
import os
import uuid
from pathlib import Path
from typing import Optional, Tuple

from wewinbid.config import settings
from wewinbid.core.helpers import utcnow
from wewinbid.utils import ensure_directory_exists

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".pdf", ".docx", ".doc", ".xlsx", ".xls", ".png", ".jpg", ".jpeg", ".txt"}


def max_file_size() -> int:
    return settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024


def validate_file(filename: str, file_size: int) -> Tuple[bool, Optional[str]]:
    """
    Validate an upload.

    Returns:
        Tuple[bool, Optional[str]]: (is_valid, error_message)
    """
    if file_size == 0:
        return False, "File is empty"
    if file_size > max_file_size():
        return False, f"File size exceeds maximum limit of {settings.MAX_UPLOAD_SIZE_MB}MB"
    file_ext = Path(filename).suffix.lower()
    if file_ext not in ALLOWED_EXTENSIONS:
        return False, f"File type not allowed. Supported: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
    return True, None


def generate_storage_name(filename: str) -> str:
    return f"DOC_{utcnow().strftime('%Y%m%d')}_{uuid.uuid4().hex[:8].upper()}{Path(filename).suffix.lower()}"


def save_file(content: bytes, filename: str, company_id: uuid.UUID) -> str:
    """Write the file under the company's directory and return its path."""
    company_dir = ensure_directory_exists(os.path.join(settings.UPLOAD_BASE_DIR, str(company_id)))
    file_path = os.path.join(company_dir, generate_storage_name(filename))
    with open(file_path, "wb") as f:
        f.write(content)
    logger.info(f"File saved: {file_path}")
    return file_path


def delete_file(file_path: Optional[str]) -> bool:
    if not file_path:
        return False
    try:
        if os.path.exists(file_path):
            os.remove(file_path)
            logger.info(f"File deleted: {file_path}")
            return True
        return False
    except OSError as e:
        logger.error(f"Failed to delete file {file_path}: {e}")
        return False


def guess_mime_type(filename: str) -> str:
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or "application/octet-stream"
