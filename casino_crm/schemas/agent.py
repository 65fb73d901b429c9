from pydantic import BaseModel
from typing import Optional


# Shared properties
class AgentBase(BaseModel):
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    is_active: Optional[bool] = None


# Properties to receive via API on creation; required names are checked by
# the agent validator so a missing name yields a 400 with a flat message
class AgentCreate(AgentBase):
    pass


class AgentUpdate(AgentBase):
    pass


class AgentSummary(BaseModel):
    """Agent as embedded in a client row."""
    id: Optional[str] = None
    firstname: str
    lastname: str
    is_active: Optional[bool] = None

    class Config:
        from_attributes = True


class AgentRead(AgentBase):
    id: str
    firstname: str
    lastname: str
    is_active: bool
    created_at: Optional[str] = None

    class Config:
        from_attributes = True
