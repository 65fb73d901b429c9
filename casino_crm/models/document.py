"""
Document Model Module

Documents are identity papers and contracts uploaded for a client. The row
holds metadata only; the file itself lives in the object store under
``file_path``.
"""
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
import uuid

from datetime import datetime

from casino_crm.models.client import Client


class DocumentType(str, Enum):
    ID = "ID"
    PASSPORT = "Passport"
    DRIVER_LICENSE = "Driver License"
    PROOF_OF_ADDRESS = "Proof of Address"
    CONTRACT = "Contract"
    OTHER = "Other"


class DocumentStatus(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    PENDING = "pending"


class Document(SQLModel, table=True):
    """
    Document metadata row.

    Attributes:
        id: Unique identifier (UUID)
        client_id: Owning client (required)
        type: One of the DocumentType values, stored as its string value
        status: One of the DocumentStatus values, stored as its string value
        id_number: Number printed on the document
        valid_until: Expiry date (YYYY-MM-DD)
        notes: Free text
        file_path: Object-store key of the uploaded file
        upload_date: ISO timestamp of the latest file upload
    """
    __tablename__ = "document"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    client_id: str = Field(foreign_key="client.id", index=True, nullable=False)

    # Stored as plain strings; equality filters compare them verbatim
    type: str = Field(nullable=False)
    status: str = Field(default=DocumentStatus.VALID.value)

    id_number: Optional[str] = None
    valid_until: Optional[str] = None
    notes: Optional[str] = None

    file_path: Optional[str] = None

    upload_date: Optional[str] = Field(default_factory=lambda: datetime.utcnow().isoformat())
    created_at: Optional[str] = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.utcnow().isoformat())

    client: Optional[Client] = Relationship()
