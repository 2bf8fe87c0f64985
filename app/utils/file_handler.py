"""File upload handler for DevForum local storage"""
import uuid
import logging
from pathlib import Path
from typing import Optional, Tuple, Set
from fastapi import UploadFile
from app.config import settings
from app.core.exceptions import NotFoundException, ValidationException

# Setup logging
logger = logging.getLogger(__name__)

# ============================================
# FILE TYPE DEFINITIONS WITH MIME VALIDATION
# ============================================

# Magic bytes signatures for file type validation
MAGIC_BYTES = {
    # JPEG: FFD8FF
    "jpeg": [b"\xff\xd8\xff"],
    # PNG: 89504E47
    "png": [b"\x89PNG\r\n\x1a\n"],
    # GIF: GIF87a or GIF89a
    "gif": [b"GIF87a", b"GIF89a"],
    # WEBP: RIFF....WEBP, checked separately
    "webp": [b"RIFF"],
}

# Extension to magic type mapping
EXTENSION_TO_TYPE = {
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".png": "png",
    ".gif": "gif",
    ".webp": "webp",
}

ALLOWED_IMAGE_EXTENSIONS: Set[str] = {".jpg", ".jpeg", ".png", ".gif", ".webp"}

# Upload paths mapping (relative to UPLOAD_DIR)
UPLOAD_PATHS = {
    "avatar": "avatars",
    "post_screenshot": "posts",
    "comment_image": "comments",
}

# Upload type to allowed extensions mapping
UPLOAD_TYPE_ALLOWED_EXTENSIONS = {
    "avatar": {".jpg", ".jpeg", ".png", ".gif", ".webp"},
    "post_screenshot": ALLOWED_IMAGE_EXTENSIONS,
    "comment_image": ALLOWED_IMAGE_EXTENSIONS,
}

# Content types used when serving stored files
CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"
CACHE_CONTROL = "public, max-age=31536000, immutable"


# ============================================
# SECURITY VALIDATION FUNCTIONS
# ============================================

def validate_magic_bytes(file_content: bytes, expected_type: str) -> bool:
    """
    Validate file content by checking magic bytes (file signature).

    Args:
        file_content: First few bytes of the file
        expected_type: Expected file type (jpeg, png, gif, webp)

    Returns:
        True if magic bytes match expected type
    """
    if expected_type not in MAGIC_BYTES:
        return False

    if expected_type == "webp":
        return file_content[:4] == b"RIFF" and file_content[8:12] == b"WEBP"

    return any(file_content.startswith(signature) for signature in MAGIC_BYTES[expected_type])


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent path traversal.

    Returns:
        Sanitized filename (only alphanumeric, dash, underscore, and dot)
    """
    if not filename:
        return "unnamed"

    basename = Path(filename).name

    safe_chars = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_.")
    sanitized = "".join(c if c in safe_chars else "_" for c in basename)

    # No hidden files
    while sanitized.startswith("."):
        sanitized = sanitized[1:]

    return sanitized if sanitized else "unnamed"


def get_file_extension(filename: str) -> str:
    """Safely get file extension in lowercase."""
    if not filename:
        return ""
    return Path(filename).suffix.lower()


def has_upload(upload_file: Optional[UploadFile]) -> bool:
    """True when a multipart field actually carried a file."""
    return upload_file is not None and bool(getattr(upload_file, "filename", None))


# ============================================
# MAIN VALIDATION FUNCTION
# ============================================

def validate_upload_file(
    upload_file: UploadFile,
    upload_type: str,
    max_size_bytes: Optional[int] = None
) -> Tuple[bytes, str]:
    """
    Validate an uploaded image: extension, size, emptiness and magic bytes.

    Returns:
        Tuple of (file_content, file_extension)

    Raises:
        ValidationException: If validation fails
    """
    if not has_upload(upload_file):
        raise ValidationException("Invalid or missing file")

    allowed_extensions = UPLOAD_TYPE_ALLOWED_EXTENSIONS.get(upload_type)
    if not allowed_extensions:
        raise ValidationException(f"Invalid upload type: {upload_type}")

    original_filename = sanitize_filename(upload_file.filename)
    file_ext = get_file_extension(original_filename)

    if file_ext not in allowed_extensions:
        raise ValidationException(
            f"File type not allowed. Accepted formats: {', '.join(sorted(allowed_extensions))}"
        )

    upload_file.file.seek(0)
    file_content = upload_file.file.read()
    upload_file.file.seek(0)

    max_size = max_size_bytes or settings.MAX_UPLOAD_SIZE
    if len(file_content) > max_size:
        size_mb = max_size / (1024 * 1024)
        raise ValidationException(f"File too large. Maximum: {size_mb:.1f}MB")

    if len(file_content) == 0:
        raise ValidationException("Empty files are not allowed")

    expected_type = EXTENSION_TO_TYPE.get(file_ext)
    if expected_type and not validate_magic_bytes(file_content, expected_type):
        logger.warning(
            f"Magic bytes mismatch - filename: {original_filename}, "
            f"expected_type: {expected_type}"
        )
        raise ValidationException("File content does not match its extension")

    logger.info(f"File validated successfully: type={upload_type}, size={len(file_content)} bytes")

    return file_content, file_ext


# ============================================
# FILE STORAGE FUNCTIONS
# ============================================

def save_upload_file(upload_file: UploadFile, upload_type: str) -> str:
    """
    Save uploaded image to local storage.

    Returns:
        str: Relative URL path (e.g., /uploads/posts/uuid.png)
    """
    if upload_type not in UPLOAD_PATHS:
        raise ValidationException(f"Invalid upload type: {upload_type}")

    file_content, file_ext = validate_upload_file(upload_file, upload_type)

    unique_filename = f"{uuid.uuid4()}{file_ext}"
    subfolder = UPLOAD_PATHS[upload_type]
    upload_path = Path(settings.UPLOAD_DIR) / subfolder
    upload_path.mkdir(parents=True, exist_ok=True)

    file_path = upload_path / unique_filename
    with open(file_path, "wb") as f:
        f.write(file_content)

    logger.info(f"File saved: {file_path}")
    return f"/uploads/{subfolder}/{unique_filename}"


def resolve_upload_path(relative_path: str) -> Optional[Path]:
    """
    Map a path below /uploads to a file inside UPLOAD_DIR.

    Returns None for anything that escapes the upload directory.
    """
    if not relative_path:
        return None

    clean_path = relative_path.lstrip("/")
    if clean_path.startswith("uploads/"):
        clean_path = clean_path[len("uploads/"):]

    upload_dir_resolved = Path(settings.UPLOAD_DIR).resolve()
    resolved_path = (upload_dir_resolved / clean_path).resolve()

    if resolved_path != upload_dir_resolved and upload_dir_resolved not in resolved_path.parents:
        logger.warning(f"Path traversal blocked: {relative_path} -> {resolved_path}")
        return None
    return resolved_path


def get_stored_file(relative_path: str) -> Tuple[Path, str]:
    """
    Locate a stored file for serving.

    Returns:
        Tuple of (absolute path, content type)

    Raises:
        NotFoundException: traversal attempt or missing file
    """
    resolved_path = resolve_upload_path(relative_path)
    if resolved_path is None or not resolved_path.is_file():
        raise NotFoundException("File not found")
    content_type = CONTENT_TYPES.get(resolved_path.suffix.lower(), DEFAULT_CONTENT_TYPE)
    return resolved_path, content_type


def delete_file(file_path: Optional[str]) -> bool:
    """
    Delete a locally stored upload. External URLs are left alone.

    Returns:
        True if file was deleted, False otherwise
    """
    if not file_path or not file_path.startswith("/uploads/"):
        return False

    resolved_path = resolve_upload_path(file_path)
    if resolved_path is None:
        return False

    try:
        if resolved_path.is_file():
            resolved_path.unlink()
            logger.info(f"File deleted: {resolved_path}")
            return True
    except OSError as e:
        logger.error(f"Error deleting file {file_path}: {e}")
    return False
