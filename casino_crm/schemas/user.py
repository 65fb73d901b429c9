from pydantic import BaseModel, EmailStr
from typing import Optional


# Properties to return to client
class UserRead(BaseModel):
    id: str
    email: EmailStr
    full_name: Optional[str] = None
    is_active: bool = True
    created_at: Optional[str] = None

    class Config:
        from_attributes = True
