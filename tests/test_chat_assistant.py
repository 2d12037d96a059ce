import json

import httpx
import pytest

from app.core.exceptions import InvalidInputError
from app.intake.chat_assistant import (
    QUESTIONS,
    SIGN,
    WEBSITE,
    ChatAssistant,
    ChatStep,
    classify_service,
)
from app.intake.language import detect_language, ui_language
from app.intake.ticket_client import HttpTicketClient
from app.models import ChatSession, Lead
from app.schemas.intake import ChatState
from app.schemas.ticket import TicketCreate, TicketDetails


class FakeTicketClient:
    def __init__(self, confirmed: bool = True):
        self.confirmed = confirmed
        self.tickets = []

    async def submit(self, ticket: TicketCreate) -> bool:
        self.tickets.append(ticket)
        return self.confirmed


async def converse(assistant, messages, state=None):
    response = None
    for message in messages:
        response = await assistant.handle(state, message)
        state = response.state
    return response


CONVERSATION = [
    "Hello, I need a sign for my shop",
    "Outdoor",
    "Large",
    "With LED",
    "John Smith",
    "john@example.com",
    "+1 305 555 0100",
]


class TestLanguageDetection:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("", "es"),
            ("Hola, necesito un letrero", "es"),
            ("Hello, I want a website please", "en"),
            ("Olá, preciso de um site, obrigado", "pt"),
        ],
    )
    def test_detect_language(self, text, expected):
        assert detect_language(text) == expected

    def test_portuguese_is_persisted_as_spanish(self):
        assert ui_language("pt") == "es"
        assert ui_language("en") == "en"


class TestServiceClassification:
    @pytest.mark.parametrize(
        "text, question_set",
        [
            ("Quiero un letrero", SIGN),
            ("1", SIGN),
            ("A new logo", "logo"),
            ("2", "logo"),
            ("página web", WEBSITE),
            ("3", WEBSITE),
        ],
    )
    def test_known_services(self, text, question_set):
        assert classify_service(text, "es")[1] == question_set

    def test_unknown_service_keeps_visitor_words(self):
        assert classify_service("  Tarjetas de visita ", "es") == (
            "Tarjetas de visita",
            WEBSITE,
        )


class TestConversation:
    @pytest.mark.asyncio
    async def test_first_turn_asks_first_question(self):
        assistant = ChatAssistant(FakeTicketClient())

        response = await assistant.handle(None, "Hola, quiero un letrero")

        assert response.state.step == ChatStep.ASK_QUESTION_1.value
        assert response.state.language == "es"
        assert response.state.service == "letrero"
        assert QUESTIONS[SIGN]["es"][0] in response.reply

    @pytest.mark.asyncio
    async def test_full_conversation_submits_ticket(self):
        client = FakeTicketClient()
        assistant = ChatAssistant(client)

        response = await converse(assistant, CONVERSATION)

        assert response.state.step == ChatStep.OPEN_ENDED.value
        assert response.reply.startswith("Ticket created. Ticket number: #EG")
        assert response.ticket_number == response.state.ticket_number
        [ticket] = client.tickets
        assert ticket.name == "John Smith"
        assert ticket.email == "john@example.com"
        assert ticket.service == "sign"
        assert ticket.language == "en"
        assert ticket.details == TicketDetails(
            question1="Outdoor", question2="Large", question3="With LED"
        )

    @pytest.mark.asyncio
    async def test_unconfirmed_ticket_is_pending(self):
        client = FakeTicketClient(confirmed=False)
        assistant = ChatAssistant(client)

        response = await converse(assistant, CONVERSATION)

        assert response.state.step == ChatStep.OPEN_ENDED.value
        assert "confirmation is pending" in response.reply
        assert response.state.ticket_number in response.reply

    @pytest.mark.asyncio
    async def test_open_ended_after_ticket(self):
        client = FakeTicketClient()
        assistant = ChatAssistant(client)
        response = await converse(assistant, CONVERSATION)

        after = await assistant.handle(response.state, "thanks!")

        assert after.reply == "Is there anything else I can help you with?"
        assert len(client.tickets) == 1

    @pytest.mark.asyncio
    async def test_empty_message(self):
        with pytest.raises(InvalidInputError) as exc:
            await ChatAssistant(FakeTicketClient()).handle(None, "   ")
        assert exc.value.code == "INVALID_MESSAGE"

    @pytest.mark.asyncio
    async def test_unknown_step(self):
        with pytest.raises(InvalidInputError) as exc:
            await ChatAssistant(FakeTicketClient()).handle(
                ChatState(step="ask_shoe_size"), "42"
            )
        assert exc.value.code == "INVALID_STATE"


class TestHttpTicketClient:
    @pytest.fixture
    def ticket(self):
        return TicketCreate(
            name="Ana",
            email="ana@example.com",
            service="logo",
            ticket_number="EG00000001",
            language="es",
        )

    @pytest.mark.asyncio
    async def test_posts_camel_case_json(self, ticket):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"ok": True})

        client = HttpTicketClient(
            "http://tickets.test/api", transport=httpx.MockTransport(handler)
        )

        assert await client.submit(ticket) is True
        assert seen["body"]["ticketNumber"] == "EG00000001"

    @pytest.mark.asyncio
    async def test_server_error_is_not_confirmed(self, ticket):
        client = HttpTicketClient(
            "http://tickets.test/api",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        assert await client.submit(ticket) is False

    @pytest.mark.asyncio
    async def test_network_error_is_not_confirmed(self, ticket):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = HttpTicketClient(
            "http://tickets.test/api", transport=httpx.MockTransport(handler)
        )

        assert await client.submit(ticket) is False


class TestChatEndpoint:
    @pytest.mark.asyncio
    async def test_conversation_records_ticket_locally(self, client, row_count):
        state = None
        for message in CONVERSATION:
            response = await client.post(
                "/api/v1/intake/chat", json={"state": state, "message": message}
            )
            assert response.status_code == 200, response.text
            state = response.json()["state"]

        data = response.json()
        assert data["reply"].startswith("Ticket created.")
        assert await row_count(Lead) == 1
        assert await row_count(ChatSession) == 1

    @pytest.mark.asyncio
    async def test_invalid_email_leaves_ticket_pending(self, client, row_count):
        messages = list(CONVERSATION)
        messages[5] = "not-an-email"
        state = None
        for message in messages:
            response = await client.post(
                "/api/v1/intake/chat", json={"state": state, "message": message}
            )
            state = response.json()["state"]

        assert response.status_code == 200
        assert "confirmation is pending" in response.json()["reply"]
        assert await row_count(Lead) == 0

    @pytest.mark.asyncio
    async def test_empty_message_rejected(self, client):
        response = await client.post("/api/v1/intake/chat", json={"message": ""})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_MESSAGE"
