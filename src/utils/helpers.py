"""Helper functions for common operations."""

import os
import uuid
from typing import Optional


def generate_storage_key(namespace: str, filename: str) -> str:
    """
    Generate a collision-resistant storage key.
    Format: namespace/uuid4-filename
    """
    # Drop any client supplied directory components
    filename = os.path.basename(filename or "") or "unnamed"
    return f"{namespace}/{uuid.uuid4()}-{filename}"


def format_file_size(size_bytes: float) -> str:
    """Format file size in human-readable format."""
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} PB"


def error_message(exc: BaseException) -> str:
    """Human readable message for an exception (HTTPException detail or str)."""
    detail: Optional[object] = getattr(exc, "detail", None)
    if detail:
        return str(detail)
    return str(exc) or exc.__class__.__name__
