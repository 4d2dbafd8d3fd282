"""Configuration module for application settings."""

from .settings import settings, Settings
from .storage import get_storage_client, get_bucket_name, get_endpoint_url

__all__ = [
    "settings",
    "Settings",
    "get_storage_client",
    "get_bucket_name",
    "get_endpoint_url",
]
