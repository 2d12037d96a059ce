"""Intake conversation engines: the quote funnel and the chat assistant."""

from app.intake.chat_assistant import ChatAssistant, ChatStep
from app.intake.language import detect_language, ui_language
from app.intake.quote_funnel import FunnelStep, QuoteFunnel, UploadedFile
from app.intake.ticket_client import HttpTicketClient, LocalTicketClient

__all__ = [
    "ChatAssistant",
    "ChatStep",
    "detect_language",
    "ui_language",
    "FunnelStep",
    "QuoteFunnel",
    "UploadedFile",
    "HttpTicketClient",
    "LocalTicketClient",
]
