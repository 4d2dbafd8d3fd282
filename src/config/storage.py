"""Storage configuration for multi-provider support (S3, Oracle, Wasabi)."""

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from typing import Optional
from .settings import Settings, settings as default_settings


def get_storage_client(settings: Optional[Settings] = None) -> BaseClient:
    """
    Get storage client based on configured provider.
    Returns boto3 client configured for the selected storage provider.
    """
    settings = settings or default_settings
    provider = settings.storage_provider.lower()

    if provider == "s3":
        return boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
            config=Config(signature_version="s3v4"),
        )

    elif provider == "oracle":
        # Oracle Cloud Storage uses S3-compatible API
        return boto3.client(
            "s3",
            aws_access_key_id=settings.oracle_access_key,
            aws_secret_access_key=settings.oracle_secret_key,
            endpoint_url=get_endpoint_url(settings),
            region_name=settings.aws_region,
            config=Config(signature_version="s3v4"),
        )

    elif provider == "wasabi":
        return boto3.client(
            "s3",
            aws_access_key_id=settings.wasabi_access_key,
            aws_secret_access_key=settings.wasabi_secret_key,
            endpoint_url=get_endpoint_url(settings),
            region_name=settings.aws_region,
            config=Config(signature_version="s3v4"),
        )

    else:
        raise ValueError(f"Unsupported storage provider: {provider}")


def get_bucket_name(settings: Optional[Settings] = None) -> str:
    """Get bucket name for the configured storage provider."""
    settings = settings or default_settings
    provider = settings.storage_provider.lower()

    if provider == "s3":
        return settings.s3_bucket_name
    elif provider == "oracle":
        return settings.oracle_bucket_name
    elif provider == "wasabi":
        return settings.wasabi_bucket_name
    else:
        raise ValueError(f"Unsupported storage provider: {provider}")


def get_endpoint_url(settings: Optional[Settings] = None) -> Optional[str]:
    """Get custom endpoint URL, or None when talking to AWS itself."""
    settings = settings or default_settings
    provider = settings.storage_provider.lower()

    if provider == "oracle":
        return (
            f"https://{settings.oracle_namespace}.compat.objectstorage."
            f"{settings.aws_region}.oraclecloud.com"
        )
    elif provider == "wasabi":
        return settings.wasabi_endpoint
    return None
