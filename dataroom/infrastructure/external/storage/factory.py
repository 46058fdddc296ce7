"""Pick the storage backend named by STORAGE_BACKEND."""

from dataroom.application.interfaces.services import IStorageService
from dataroom.core.config import Settings, get_settings


def create_storage_service(settings: Settings | None = None) -> IStorageService:
    """Local filesystem or S3 storage, configured from settings.

    The S3 backend imports boto3 lazily; it ships in the ``storage`` extra.

    Raises:
        ValueError: Unknown backend, or boto3 missing for the s3 backend.
    """
    s = settings or get_settings()
    backend = s.storage_backend.lower()
    if backend == "local":
        from dataroom.infrastructure.external.storage.local_storage import (
            LocalStorageService,
        )

        return LocalStorageService(storage_root=s.storage_root, base_url=s.storage_base_url)
    if backend == "s3":
        try:
            from dataroom.infrastructure.external.storage.s3_storage import (
                S3StorageService,
            )
        except ImportError as e:
            raise ValueError(
                "STORAGE_BACKEND=s3 needs boto3: pip install 'dataroom[storage]'"
            ) from e
        secret = s.s3_secret_key.get_secret_value() if s.s3_secret_key else None
        return S3StorageService(
            bucket=s.s3_bucket or "",
            region=s.s3_region,
            endpoint_url=s.s3_endpoint_url,
            access_key=s.s3_access_key,
            secret_key=secret,
        )
    raise ValueError(f"Unknown storage backend: {backend}")
