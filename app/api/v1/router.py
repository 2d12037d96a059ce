from fastapi import APIRouter

from app.api.v1.endpoints import (
    chat_sessions,
    crm_users,
    dashboard,
    estimates,
    files,
    health,
    intake,
    leads,
    notes,
    products,
    quotes,
    tickets,
)

router = APIRouter(prefix="/api/v1")

router.include_router(leads.router)
router.include_router(quotes.router)
router.include_router(estimates.router)
router.include_router(dashboard.router)
router.include_router(chat_sessions.router)
router.include_router(files.router)
router.include_router(crm_users.router)
router.include_router(notes.router)
router.include_router(tickets.router)
router.include_router(intake.router)
router.include_router(products.router)
router.include_router(health.router)
