from pydantic import BaseModel, field_validator
from typing import List, Optional

from casino_crm.schemas.agent import AgentSummary
from casino_crm.schemas.document import DocumentRead


# Shared properties
class ClientBase(BaseModel):
    prefix: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email_address: Optional[str] = None
    phone_number: Optional[str] = None
    contact_number_whatsapp: Optional[str] = None
    email_internal_address: Optional[str] = None
    email_internal_address_password: Optional[str] = None
    forward_email_address_clicker: Optional[str] = None
    location_sms_receive: Optional[str] = None
    socials: Optional[str] = None
    street: Optional[str] = None
    zipcode: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    employed: Optional[bool] = None
    job_title: Optional[str] = None
    average_salary: Optional[float] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    agent_id: Optional[str] = None
    client_responsive: Optional[bool] = None


class ClientInput(ClientBase):
    """Client form body. The form sends "" for every field left empty."""

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


# Properties to receive via API on creation
class ClientCreate(ClientInput):
    pass


# Properties to receive via API on update
class ClientUpdate(ClientInput):
    pass


class ClientRead(ClientBase):
    id: str
    firstname: str
    lastname: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    agent: Optional[AgentSummary] = None

    class Config:
        from_attributes = True


class ContactMomentRead(BaseModel):
    id: int
    date: Optional[str] = None
    notes: Optional[str] = None
    user_id: Optional[str] = None

    class Config:
        from_attributes = True


class CasinoRead(BaseModel):
    id: int
    casino_name: str
    website: Optional[str] = None

    class Config:
        from_attributes = True


class CasinoAccountRead(BaseModel):
    id: int
    client_id: str
    casino_id: int
    username: Optional[str] = None
    status: Optional[str] = None
    casino: Optional[CasinoRead] = None

    class Config:
        from_attributes = True


class BankRead(BaseModel):
    id: int
    name: str
    website: Optional[str] = None

    class Config:
        from_attributes = True


class BankAccountRead(BaseModel):
    id: int
    client_id: str
    bank_id: int
    iban: Optional[str] = None
    status: Optional[str] = None
    bank: Optional[BankRead] = None

    class Config:
        from_attributes = True


class ClientDetail(ClientRead):
    """A client with every related record shown in its detail view."""
    contact_moments: List[ContactMomentRead] = []
    documents: List[DocumentRead] = []
    casino_accounts: List[CasinoAccountRead] = []
    bank_accounts: List[BankAccountRead] = []
