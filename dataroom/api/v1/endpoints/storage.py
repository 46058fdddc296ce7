"""Download endpoint for local storage links (S3 links point at the bucket instead)."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from dataroom.api.v1.dependencies import get_storage_service
from dataroom.application.interfaces.services import IStorageService
from dataroom.domain.exceptions import ResourceNotFoundException
from dataroom.infrastructure.external.storage import LocalStorageService

router = APIRouter()


def _content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "ignore").decode().replace('"', "") or "download"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/download/{token}")
async def download(
    token: str,
    storage: Annotated[IStorageService, Depends(get_storage_service)],
):
    """Stream the object a download token was issued for. Unknown or expired tokens are 404."""
    if not isinstance(storage, LocalStorageService):
        raise ResourceNotFoundException("download", token)
    grant = storage.validate_download_token(token)
    if grant is None:
        raise ResourceNotFoundException("download", token)
    metadata = await storage.get_metadata(grant.storage_ref)
    filename = grant.filename or grant.storage_ref.rsplit("/", 1)[-1]
    return StreamingResponse(
        storage.download(grant.storage_ref),
        media_type=metadata["content_type"],
        headers={
            "Content-Disposition": _content_disposition(filename),
            "Content-Length": str(metadata["size"]),
        },
    )
