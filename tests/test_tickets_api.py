import re

import pytest

from app.models import Lead
from app.schemas.ticket import TicketCreate, TicketDetails
from app.services.ticket_service import build_ticket_notes

TICKET = {
    "name": "Pedro Gómez",
    "email": " Pedro@Example.com ",
    "phone": "+1 305 555 0101",
    "service": "sign",
    "details": {
        "question1": "Letrero luminoso",
        "question2": "3x1 metros",
        "question3": "Para el próximo mes",
    },
    "language": "es",
}


class TestTicketNotes:
    def test_lists_answers_and_ticket(self):
        ticket = TicketCreate(
            service="logo",
            details=TicketDetails(question1="Moderno", question3="Azul"),
        )

        notes = build_ticket_notes(ticket, "EG00001234")

        assert notes.splitlines() == [
            "Servicio: logo",
            "Pregunta 1: Moderno",
            "Pregunta 3: Azul",
            "Ticket: EG00001234",
        ]


class TestCreateTicket:
    @pytest.mark.asyncio
    async def test_records_chat_lead_and_session(self, client):
        response = await client.post("/api/v1/tickets", json=TICKET)

        assert response.status_code == 201
        data = response.json()
        assert re.fullmatch(r"EG\d{8}", data["ticketNumber"])
        assert data["lead"]["source"] == "chat"
        assert data["lead"]["status"] == "new"
        assert data["lead"]["email"] == "pedro@example.com"
        assert data["lead"]["ticketNumber"] == data["ticketNumber"]
        assert "Pregunta 2: 3x1 metros" in data["lead"]["notes"]
        assert data["chatSession"]["leadId"] == data["lead"]["id"]
        assert data["chatSession"]["contextCaptured"]["service"] == "sign"

    @pytest.mark.asyncio
    async def test_keeps_supplied_ticket_number(self, client):
        response = await client.post(
            "/api/v1/tickets", json={**TICKET, "ticketNumber": "EG12345678"}
        )

        assert response.json()["ticketNumber"] == "EG12345678"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "override, code",
        [
            ({"name": None}, "MISSING_REQUIRED_FIELDS"),
            ({"email": None}, "MISSING_REQUIRED_FIELDS"),
            ({"email": "pedro"}, "INVALID_EMAIL"),
        ],
    )
    async def test_validation(self, client, row_count, override, code):
        response = await client.post("/api/v1/tickets", json={**TICKET, **override})

        assert response.status_code == 400
        assert response.json()["code"] == code
        assert await row_count(Lead) == 0


class TestListTickets:
    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        response = await client.get("/api/v1/tickets")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_aggregates_everything_per_lead(
        self, client, auth_headers, product, new_lead
    ):
        ticket = (await client.post("/api/v1/tickets", json=TICKET)).json()
        lead_id = ticket["lead"]["id"]
        await client.post(
            "/api/v1/quotes",
            json={"leadId": lead_id, "productId": product.id, "estimatedPrice": 700},
            headers=auth_headers,
        )
        await client.post(
            "/api/v1/files",
            data={"leadId": str(lead_id)},
            files={"file": ("boceto.png", b"\x89PNG\r\n", "image/png")},
        )
        await new_lead(name="Sin nada", email="nada@example.com")

        response = await client.get("/api/v1/tickets", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert "generatedAt" in data
        by_id = {t["id"]: t for t in data["tickets"]}
        full = by_id[lead_id]
        assert len(full["chatSessions"]) == 1
        assert full["quotes"][0]["productName"] == "Letrero exterior"
        assert full["quotes"][0]["productCategory"] == "signs"
        assert full["files"][0]["filename"] == "boceto.png"
        empty = next(t for t in data["tickets"] if t["id"] != lead_id)
        assert empty["chatSessions"] == [] and empty["quotes"] == [] and empty["files"] == []
