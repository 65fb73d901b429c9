"""
Client Model Module

This module defines the Client model and the read-only records hanging off a
client in its detail view: contact moments, casino accounts and bank accounts.
"""
from typing import Optional, TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
import uuid

from datetime import datetime

if TYPE_CHECKING:
    from casino_crm.models.agent import Agent


class Client(SQLModel, table=True):
    """
    Client model representing a person serviced by the business.

    Attributes:
        id: Unique identifier (UUID)
        prefix, firstname, lastname: Identity (first and last name required)
        email_address: Primary email, unique across clients (exact match)
        phone_number, contact_number_whatsapp, socials: Contact channels
        email_internal_address, email_internal_address_password: Mailbox the
            business operates on behalf of the client
        forward_email_address_clicker, location_sms_receive: Routing details
        street, zipcode, city, country: Postal address
        employed, job_title, average_salary, start_date, end_date: Employment
        agent_id: Weak reference to the assigned Agent
        client_responsive: Whether the client answers contact attempts
    """
    __tablename__ = "client"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Identity
    prefix: Optional[str] = None
    firstname: str = Field(nullable=False)
    lastname: str = Field(nullable=False, index=True)

    # Contact - email_address carries a unique constraint so concurrent
    # creates cannot both commit the same address
    email_address: Optional[str] = Field(default=None, unique=True, index=True)
    phone_number: Optional[str] = None
    contact_number_whatsapp: Optional[str] = None
    email_internal_address: Optional[str] = None
    email_internal_address_password: Optional[str] = None
    forward_email_address_clicker: Optional[str] = None
    location_sms_receive: Optional[str] = None
    socials: Optional[str] = None

    # Address
    street: Optional[str] = None
    zipcode: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None

    # Employment - dates stored as ISO strings (YYYY-MM-DD)
    employed: Optional[bool] = None
    job_title: Optional[str] = None
    average_salary: Optional[float] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    agent_id: Optional[str] = Field(default=None, foreign_key="agent.id", ondelete="SET NULL")
    client_responsive: Optional[bool] = None

    created_at: Optional[str] = Field(default_factory=lambda: datetime.utcnow().isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.utcnow().isoformat())

    agent: Optional["Agent"] = Relationship()


class ContactMoment(SQLModel, table=True):
    """A logged contact attempt with a client."""
    __tablename__ = "client_contact_moment"

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: str = Field(foreign_key="client.id", index=True)
    date: Optional[str] = None
    notes: Optional[str] = None
    user_id: Optional[str] = None


class Casino(SQLModel, table=True):
    __tablename__ = "casino"

    id: Optional[int] = Field(default=None, primary_key=True)
    casino_name: str
    website: Optional[str] = None


class CasinoClient(SQLModel, table=True):
    """An account a client holds at a casino."""
    __tablename__ = "casino_client"

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: str = Field(foreign_key="client.id", index=True)
    casino_id: int = Field(foreign_key="casino.id")
    username: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = Field(default_factory=lambda: datetime.utcnow().isoformat())

    casino: Optional[Casino] = Relationship()


class Bank(SQLModel, table=True):
    __tablename__ = "bank"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    website: Optional[str] = None


class BankClient(SQLModel, table=True):
    """A bank account held by a client."""
    __tablename__ = "bank_client"

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: str = Field(foreign_key="client.id", index=True)
    bank_id: int = Field(foreign_key="bank.id")
    iban: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = Field(default_factory=lambda: datetime.utcnow().isoformat())

    bank: Optional[Bank] = Relationship()
