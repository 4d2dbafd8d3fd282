"""Request input helpers: title sanitization and upload conversion."""

import re
from typing import List, Optional
from fastapi import UploadFile
from ..schemas.upload import UploadItem
from ..utils.constants import DEFAULT_CONTENT_TYPE, TITLE_ALLOWED_PATTERN, TITLE_MAX_LENGTH

_TITLE_STRIP = re.compile(TITLE_ALLOWED_PATTERN)


def sanitize_title(title: Optional[str]) -> Optional[str]:
    """
    Keep only letters, digits, hyphen, underscore, period and space.
    Returns None when nothing usable is left.
    """
    if title is None:
        return None
    cleaned = _TITLE_STRIP.sub("", title.strip()).strip()[:TITLE_MAX_LENGTH]
    return cleaned or None


def sanitize_titles(titles: Optional[List[str]]) -> Optional[List[Optional[str]]]:
    """Sanitize a parallel titles list, keeping its length."""
    if not titles:
        return None
    return [sanitize_title(title) for title in titles]


async def to_upload_item(file: UploadFile, title: Optional[str] = None) -> UploadItem:
    """Read an uploaded file into an UploadItem."""
    content = await file.read()
    return UploadItem(
        content=content,
        filename=file.filename or "unnamed",
        content_type=file.content_type or DEFAULT_CONTENT_TYPE,
        size=len(content),
        title=title,
    )
