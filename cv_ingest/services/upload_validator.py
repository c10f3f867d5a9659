"""Caller-side upload checks (size, extension, MIME). The pipeline itself never enforces these."""

from pathlib import PurePath
from typing import Dict, Optional, Sequence, Tuple

from cv_ingest.config import ALLOWED_EXTENSIONS, EXTENSION_MIME_TYPES, MAX_FILE_SIZE_BYTES
from cv_ingest.exceptions import UnsupportedUpload

GENERIC_MIME_TYPES = ("", "application/octet-stream", "binary/octet-stream")


def validate_upload(
    content: bytes,
    file_name: str,
    declared_mime_type: str = "",
    max_size_bytes: Optional[int] = None,
    allowed_extensions: Optional[Sequence[str]] = None,
    mime_types: Optional[Dict[str, Tuple[str, ...]]] = None,
) -> str:
    """
    Check an upload before handing it to parse_document.
    Raises UnsupportedUpload for an empty or oversized file, a disallowed extension,
    or a declared MIME type that contradicts the extension. Generic MIME types are accepted.
    Returns the normalized extension (e.g. '.pdf').
    """
    max_size = MAX_FILE_SIZE_BYTES if max_size_bytes is None else max_size_bytes
    allowed = tuple(e.lower() for e in (allowed_extensions or ALLOWED_EXTENSIONS))
    mime_map = mime_types if mime_types is not None else EXTENSION_MIME_TYPES

    if not content:
        raise UnsupportedUpload("File is empty", file_name=file_name)
    if len(content) > max_size:
        raise UnsupportedUpload(
            f"File size {len(content)} bytes exceeds the {max_size} byte limit", file_name=file_name
        )

    ext = PurePath(file_name or "").suffix.lower()
    if ext not in allowed:
        raise UnsupportedUpload(
            f"File type '{ext or '(none)'}' not allowed; expected one of {', '.join(allowed)}",
            file_name=file_name,
        )

    mime = (declared_mime_type or "").split(";")[0].strip().lower()
    expected = mime_map.get(ext)
    if expected and mime not in GENERIC_MIME_TYPES and mime not in expected:
        raise UnsupportedUpload(f"MIME type '{mime}' does not match extension '{ext}'", file_name=file_name)
    return ext
