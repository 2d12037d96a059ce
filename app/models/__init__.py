from app.models.base import Base
from app.models.auth import AuthUser, AuthSession
from app.models.crm_user import CrmUser
from app.models.lead import Lead
from app.models.product import Product
from app.models.quote import Quote
from app.models.estimate import Estimate
from app.models.chat_session import ChatSession
from app.models.file import LeadFile
from app.models.note import Note

# Import event listeners to register them
from app.models import listeners  # noqa: F401

__all__ = [
    "Base",
    "AuthUser",
    "AuthSession",
    "CrmUser",
    "Lead",
    "Product",
    "Quote",
    "Estimate",
    "ChatSession",
    "LeadFile",
    "Note",
]
