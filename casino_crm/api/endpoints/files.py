"""
Signed file delivery for the local storage backend.

The token in the path is the capability: no session is required. S3-backed
deployments hand out presigned bucket URLs instead and never hit this route.
"""
import logging
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from casino_crm.api import deps
from casino_crm.core.errors import NotFoundError, Unauthorized
from casino_crm.services.storage import LocalStorage, Storage, StorageError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{token}", include_in_schema=False)
def serve_file(token: str, storage: Storage = Depends(deps.get_storage)):
    if not isinstance(storage, LocalStorage):
        raise NotFoundError("File links are served by the object store")

    try:
        claims = storage.read_token(token)
        path = storage.local_path(claims["key"])
    except StorageError as e:
        raise Unauthorized(str(e)) from e

    if not path.exists():
        logger.warning("Signed link for missing blob %s", claims["key"])
        raise NotFoundError("File not found")

    download = claims.get("download")
    if download:
        return FileResponse(path, filename=download)
    return FileResponse(path, content_disposition_type="inline", filename=path.name)
