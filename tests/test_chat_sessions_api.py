import pytest

from app.models import ChatSession

GREETING = [
    {"role": "assistant", "content": "¡Hola! ¿En qué servicio estás interesado?"},
    {"role": "user", "content": "Un letrero"},
]


class TestCreateChatSession:
    @pytest.mark.asyncio
    async def test_public_create_without_lead(self, client):
        """Transcripts can be stored before any lead exists."""
        response = await client.post(
            "/api/v1/chat-sessions",
            json={"messages": GREETING, "contextCaptured": {"service": "sign"}},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "active"
        assert data["leadId"] is None
        assert data["messages"] == GREETING
        assert data["contextCaptured"] == {"service": "sign"}

    @pytest.mark.asyncio
    async def test_unknown_lead(self, client, row_count):
        response = await client.post(
            "/api/v1/chat-sessions", json={"leadId": 777, "messages": GREETING}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "LEAD_NOT_FOUND"
        assert await row_count(ChatSession) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "messages, code",
        [
            (None, "INVALID_MESSAGES"),
            ([], "INVALID_MESSAGES"),
            ([{"role": "user"}], "INVALID_MESSAGE_STRUCTURE"),
        ],
    )
    async def test_invalid_messages(self, client, messages, code):
        response = await client.post(
            "/api/v1/chat-sessions", json={"messages": messages}
        )

        assert response.status_code == 400
        assert response.json()["code"] == code


class TestUpdateChatSession:
    @pytest.fixture
    def create_session(self, client):
        async def _create(**extra):
            response = await client.post(
                "/api/v1/chat-sessions", json={"messages": GREETING, **extra}
            )
            assert response.status_code == 201
            return response.json()

        return _create

    @pytest.mark.asyncio
    async def test_messages_are_appended(self, client, auth_headers, create_session):
        chat = await create_session()
        reply = [{"role": "assistant", "content": "¿Qué tamaño necesitas?"}]

        response = await client.patch(
            "/api/v1/chat-sessions",
            params={"id": chat["id"]},
            json={"messages": reply},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["messages"] == GREETING + reply

        stored = await client.get(
            f"/api/v1/chat-sessions/{chat['id']}", headers=auth_headers
        )
        assert stored.json()["messages"] == GREETING + reply

    @pytest.mark.asyncio
    async def test_close_session(self, client, auth_headers, create_session):
        chat = await create_session()

        response = await client.patch(
            "/api/v1/chat-sessions",
            params={"id": chat["id"]},
            json={"status": "closed"},
            headers=auth_headers,
        )

        assert response.json()["status"] == "closed"
        assert response.json()["messages"] == GREETING

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload, code",
        [
            ({}, "NO_UPDATE_FIELDS"),
            ({"status": "archived"}, "INVALID_STATUS"),
            ({"messages": "hola"}, "INVALID_MESSAGES"),
        ],
    )
    async def test_invalid_updates(
        self, client, auth_headers, create_session, payload, code
    ):
        chat = await create_session()

        response = await client.patch(
            "/api/v1/chat-sessions",
            params={"id": chat["id"]},
            json=payload,
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == code

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client, create_session):
        chat = await create_session()

        response = await client.patch(
            "/api/v1/chat-sessions",
            params={"id": chat["id"]},
            json={"status": "closed"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_session(self, client, auth_headers):
        response = await client.patch(
            "/api/v1/chat-sessions",
            params={"id": 999},
            json={"status": "closed"},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["code"] == "CHAT_SESSION_NOT_FOUND"


class TestListChatSessions:
    @pytest.mark.asyncio
    async def test_filter_by_lead(self, client, auth_headers, new_lead):
        lead = await new_lead(name="Luis", email="luis@example.com")
        await client.post(
            "/api/v1/chat-sessions", json={"leadId": lead["id"], "messages": GREETING}
        )
        await client.post("/api/v1/chat-sessions", json={"messages": GREETING})

        everything = await client.get("/api/v1/chat-sessions", headers=auth_headers)
        for_lead = await client.get(
            "/api/v1/chat-sessions",
            params={"leadId": lead["id"]},
            headers=auth_headers,
        )

        assert everything.json()["total"] == 2
        sessions = for_lead.json()["sessions"]
        assert len(sessions) == 1
        assert sessions[0]["lead"] == {"name": "Luis", "email": "luis@example.com"}
