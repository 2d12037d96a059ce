"""Repository layer – all database access goes through here.

Repositories encapsulate SQLAlchemy queries so that the service layer
only contains business logic.
"""

from app.repositories.lead_repository import LeadRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.quote_repository import QuoteRepository
from app.repositories.estimate_repository import EstimateRepository
from app.repositories.chat_session_repository import ChatSessionRepository
from app.repositories.file_repository import FileRepository
from app.repositories.crm_user_repository import CrmUserRepository
from app.repositories.auth_repository import AuthRepository
from app.repositories.note_repository import NoteRepository
from app.repositories.dashboard_repository import DashboardRepository

__all__ = [
    "LeadRepository",
    "ProductRepository",
    "QuoteRepository",
    "EstimateRepository",
    "ChatSessionRepository",
    "FileRepository",
    "CrmUserRepository",
    "AuthRepository",
    "NoteRepository",
    "DashboardRepository",
]
