from pydantic import BaseModel
from typing import Optional


class ClientSummary(BaseModel):
    """Client as embedded in a document row."""
    id: Optional[str] = None
    firstname: str
    lastname: str

    class Config:
        from_attributes = True


class DocumentRead(BaseModel):
    id: str
    client_id: str
    type: str
    status: str
    id_number: Optional[str] = None
    valid_until: Optional[str] = None
    notes: Optional[str] = None
    file_path: Optional[str] = None
    upload_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class DocumentWithClient(DocumentRead):
    client: Optional[ClientSummary] = None


class SignedUrl(BaseModel):
    url: str
    expires_in: int
