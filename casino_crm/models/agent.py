"""
Agent Model Module

Agents are the staff members clients are assigned to. Clients reference an
agent by id only; removing an agent leaves its clients unassigned.
"""
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from datetime import datetime


class Agent(SQLModel, table=True):
    """
    Agent model.

    Attributes:
        id: Unique identifier (UUID) automatically generated for each agent
        firstname: Given name (required)
        lastname: Family name (required)
        email: Contact email
        phone_number: Contact phone
        is_active: Inactive agents are hidden from the default agent listing
        created_at: ISO timestamp of when the agent record was created
    """
    __tablename__ = "agent"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    firstname: str = Field(nullable=False)
    lastname: str = Field(nullable=False, index=True)

    email: Optional[str] = None
    phone_number: Optional[str] = None

    is_active: bool = Field(default=True)

    created_at: Optional[str] = Field(default_factory=lambda: datetime.utcnow().isoformat())
