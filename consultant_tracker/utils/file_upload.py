"""
File Upload Utility - store consultant resumes.

Supported formats:
- PDF (.pdf)
- Word (.doc, .docx)

Max file size: 5MB
"""

import uuid
from pathlib import Path
from typing import Optional, Tuple

from fastapi import HTTPException, UploadFile

from consultant_tracker.core.config import get_settings
from consultant_tracker.core.logging_config import app_logger as logger

settings = get_settings()

MAX_FILE_SIZE_MB = settings.max_upload_mb
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
ALLOWED_EXTENSIONS = {'.pdf', '.doc', '.docx'}
UPLOAD_URL_PREFIX = "/uploads"


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def validate_resume(filename: Optional[str], content: bytes) -> str:
    """Check name and size; returns the extension."""
    if not filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Only PDF, DOC, and DOCX files are allowed"
        )

    if len(content) > MAX_FILE_SIZE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {MAX_FILE_SIZE_MB}MB"
        )
    return ext


async def save_resume(file: UploadFile, upload_dir: Optional[str] = None) -> Tuple[str, str]:
    """
    Validate and store an uploaded resume.

    Returns:
        Tuple of (public url, original filename)

    Raises:
        HTTPException on validation errors
    """
    content = await file.read()
    ext = validate_resume(file.filename, content)

    target_dir = Path(upload_dir or settings.upload_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    stored_name = f"{uuid.uuid4().hex}{ext}"
    (target_dir / stored_name).write_bytes(content)
    logger.info(f"[Uploads] Stored resume {file.filename} as {stored_name}")

    return f"{UPLOAD_URL_PREFIX}/{stored_name}", file.filename
