from .user import User
from .agent import Agent
from .client import Client, ContactMoment, Casino, CasinoClient, Bank, BankClient
from .document import Document, DocumentType, DocumentStatus

__all__ = [
    "User",
    "Agent",
    "Client", "ContactMoment",
    "Casino", "CasinoClient",
    "Bank", "BankClient",
    "Document", "DocumentType", "DocumentStatus",
]
