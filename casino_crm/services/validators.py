"""
Entity validators run before inserts and updates.

The duplicate-email check is a point lookup and can race with a concurrent
create; the unique constraint on ``client.email_address`` catches the loser
at commit time and the record store reports it as the same ConflictError.
"""
from typing import Any, Dict, Mapping, Optional

from sqlmodel import Session

from casino_crm.core.errors import ConflictError, ReferenceNotFoundError, ValidationError
from casino_crm.models import DocumentStatus, DocumentType
from casino_crm.services import records

NAME_REQUIRED = "First name and last name are required"
EMAIL_TAKEN = "A client with this email already exists"


def _missing(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return value is None


def _check_email(db: Session, email: Optional[str], exclude_id: Optional[str] = None) -> None:
    if email and records.clients.exists(db, exclude_id=exclude_id, email_address=email):
        raise ConflictError(EMAIL_TAKEN)


def validate_client_create(db: Session, data: Mapping[str, Any]) -> None:
    if _missing(data.get("firstname")) or _missing(data.get("lastname")):
        raise ValidationError(NAME_REQUIRED)
    _check_email(db, data.get("email_address"))


def validate_client_update(db: Session, client_id: str, changes: Mapping[str, Any]) -> None:
    """Names may be omitted from a patch but not blanked."""
    for name in ("firstname", "lastname"):
        if name in changes and _missing(changes[name]):
            raise ValidationError(NAME_REQUIRED)
    _check_email(db, changes.get("email_address"), exclude_id=client_id)


def validate_agent_create(data: Dict[str, Any]) -> Dict[str, Any]:
    if _missing(data.get("firstname")) or _missing(data.get("lastname")):
        raise ValidationError(NAME_REQUIRED)
    if data.get("is_active") is None:
        data["is_active"] = True
    return data


def validate_agent_update(changes: Mapping[str, Any]) -> None:
    for name in ("firstname", "lastname"):
        if name in changes and _missing(changes[name]):
            raise ValidationError(NAME_REQUIRED)


def validate_document_type(value: Optional[str]) -> None:
    if value is not None and value not in {t.value for t in DocumentType}:
        raise ValidationError(f"Unknown document type '{value}'")


def validate_document_status(value: Optional[str]) -> None:
    if value is not None and value not in {s.value for s in DocumentStatus}:
        raise ValidationError(f"Unknown document status '{value}'")


def validate_document_create(
    db: Session, file: Any, client_id: Optional[str], doc_type: Optional[str],
    status: Optional[str] = None,
) -> None:
    if not file or _missing(client_id) or _missing(doc_type):
        raise ValidationError("File, client_id, and type are required")
    validate_document_type(doc_type)
    validate_document_status(status)
    if not records.clients.exists(db, id=client_id):
        raise ReferenceNotFoundError("Client not found")
