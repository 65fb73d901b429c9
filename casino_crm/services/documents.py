"""
Document file lifecycle.

Each write touches two systems, the object store and the database, with no
shared transaction. The steps run as short sagas:

* create: upload blob -> insert row; if the insert fails the new blob is
  removed again.
* update with a file: upload new blob -> patch row (new blob removed on
  failure) -> remove the previous blob.
* delete: remove blob -> delete row; a failed blob removal does not stop
  the row delete.

Blob removal is idempotent (missing keys are ignored), and a failed removal
is logged with its key so orphans can be cleaned up by hand.
"""
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from sqlmodel import Session

from casino_crm.core.config import settings
from casino_crm.core.errors import CRMError, NotFoundError, UpstreamError, ValidationError
from casino_crm.models import Document, DocumentStatus
from casino_crm.services import records, validators
from casino_crm.services.storage import Storage, StorageError

logger = logging.getLogger(__name__)

METADATA_FIELDS = ("type", "valid_until", "id_number", "status", "notes")
NOT_FOUND = "Document not found"
NO_FILE = "No file associated with this document"


@dataclass
class Upload:
    """An uploaded file, detached from the web framework's upload object."""
    filename: str
    data: bytes
    content_type: Optional[str] = None


def now_ms() -> int:
    return int(time.time() * 1000)


def storage_key(client_id: str, filename: str, timestamp_ms: int) -> str:
    """
    ``{client_id}/{client_id}_{timestamp_ms}.{ext}``

    Two uploads for the same client within one millisecond get the same key;
    the second upload then fails instead of overwriting the first.
    """
    ext = filename.rsplit(".", 1)[-1] if filename and "." in filename else "bin"
    return f"{client_id}/{client_id}_{timestamp_ms}.{ext}"


def _upload(storage: Storage, key: str, upload: Upload) -> None:
    try:
        storage.upload(key, upload.data, content_type=upload.content_type)
    except StorageError as e:
        logger.error("Upload of %s failed: %s", key, e)
        raise UpstreamError(f"File upload failed: {e}") from e


def remove_blob(storage: Storage, key: str, *, reason: str) -> bool:
    """Best-effort blob removal. Returns False (and logs) on failure."""
    try:
        storage.remove([key])
    except StorageError as e:
        logger.error("Could not remove blob %s (%s): %s", key, reason, e)
        return False
    logger.info("Removed blob %s (%s)", key, reason)
    return True


def _blank_to_none(value: Any) -> Any:
    return None if value == "" else value


def get_document(db: Session, document_id: str) -> Document:
    return records.documents.get(db, document_id, not_found_message=NOT_FOUND)


def create_document(
    db: Session,
    storage: Storage,
    upload: Optional[Upload],
    client_id: Optional[str],
    fields: Mapping[str, Any],
    timestamp_ms: Optional[int] = None,
) -> Document:
    doc_type = fields.get("type")
    status = fields.get("status") or DocumentStatus.VALID.value
    validators.validate_document_create(db, upload, client_id, doc_type, status)

    key = storage_key(client_id, upload.filename, timestamp_ms or now_ms())
    _upload(storage, key, upload)

    document = Document(
        client_id=client_id,
        type=doc_type,
        status=status,
        valid_until=_blank_to_none(fields.get("valid_until")),
        id_number=_blank_to_none(fields.get("id_number")),
        notes=_blank_to_none(fields.get("notes")),
        file_path=key,
    )
    try:
        return records.documents.insert(db, document)
    except CRMError:
        remove_blob(storage, key, reason="compensating failed document insert")
        raise


def update_document(
    db: Session,
    storage: Storage,
    document_id: str,
    upload: Optional[Upload],
    fields: Mapping[str, Optional[str]],
    timestamp_ms: Optional[int] = None,
) -> Document:
    """
    Patch metadata and optionally replace the file.

    ``fields`` holds only the form fields that were sent; an empty string
    clears the field.
    """
    document = get_document(db, document_id)

    changes: Dict[str, Any] = {}
    for name in METADATA_FIELDS:
        if name in fields and fields[name] is not None:
            changes[name] = _blank_to_none(fields[name])
    if "type" in changes and changes["type"] is None:
        raise ValidationError("Document type cannot be empty")
    if "status" in changes and changes["status"] is None:
        raise ValidationError("Document status cannot be empty")
    validators.validate_document_type(changes.get("type"))
    validators.validate_document_status(changes.get("status"))

    previous_key = document.file_path
    new_key = None
    if upload is not None:
        new_key = storage_key(document.client_id, upload.filename, timestamp_ms or now_ms())
        _upload(storage, new_key, upload)
        changes["file_path"] = new_key
        changes["upload_date"] = datetime.utcnow().isoformat()

    try:
        document = records.documents.update(db, document, changes)
    except CRMError:
        if new_key:
            remove_blob(storage, new_key, reason="compensating failed document update")
        raise

    if new_key and previous_key and previous_key != new_key:
        remove_blob(storage, previous_key, reason="replaced by new upload")
    return document


def delete_document(db: Session, storage: Storage, document_id: str) -> None:
    document = get_document(db, document_id)
    if document.file_path:
        remove_blob(storage, document.file_path, reason="document deleted")
    records.documents.delete(db, document)


def signed_url(db: Session, storage: Storage, document_id: str, *, download: bool) -> Dict[str, Any]:
    """
    Time-limited link to the document's file.

    Inline links live INLINE_URL_EXPIRY_SECONDS (1 hour); download links
    live DOWNLOAD_URL_EXPIRY_SECONDS (5 minutes) and carry the document type
    as the download filename.
    """
    document = get_document(db, document_id)
    if not document.file_path:
        raise NotFoundError(NO_FILE)

    if download:
        expires_in = settings.DOWNLOAD_URL_EXPIRY_SECONDS
        filename = document.type or "document"
        ext = document.file_path.rsplit(".", 1)[-1] if "." in document.file_path else None
        if ext:
            filename = f"{filename}.{ext}"
    else:
        expires_in = settings.INLINE_URL_EXPIRY_SECONDS
        filename = None

    try:
        url = storage.create_signed_url(document.file_path, expires_in, download=filename)
    except StorageError as e:
        logger.error("Signing URL for %s failed: %s", document.file_path, e)
        raise UpstreamError(str(e)) from e
    return {"url": url, "expires_in": expires_in}
