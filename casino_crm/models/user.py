"""
User Model Module

Login accounts for the session layer. Every CRM endpoint requires a signed-in
user; there is no per-record ownership.
"""
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid
from datetime import datetime


class User(SQLModel, table=True):
    """
    User model representing an account that can sign in to the CRM.

    Attributes:
        id: Unique identifier (UUID) automatically generated for each user
        email: Login email (required, unique, indexed)
        password: Hashed password (bcrypt)
        full_name: Display name
        is_active: Disabled accounts cannot obtain or use a session
        created_at: ISO timestamp when the account was created
    """
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)

    # Authentication fields
    email: str = Field(unique=True, index=True, nullable=False)
    password: Optional[str] = None  # Hashed password (bcrypt)

    full_name: Optional[str] = None
    is_active: bool = Field(default=True)

    created_at: Optional[str] = Field(default_factory=lambda: datetime.utcnow().isoformat())
