import math
from datetime import datetime

import pytest
from httpx import AsyncClient

from app.models import ChatSession, Lead, LeadFile, Quote


def parse_timestamp(value: str) -> datetime:
    """UTC timestamp from the API, compared without tzinfo."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return parsed.replace(tzinfo=None)


VALID_LEAD = {"name": "A", "email": "a@b.com", "source": "contact"}


class TestCreateLead:
    """Public lead creation through ``POST /api/v1/leads``."""

    @pytest.mark.asyncio
    async def test_create_lead_success(self, client: AsyncClient):
        """A valid contact-form lead is stored with status ``new``."""
        response = await client.post(
            "/api/v1/leads",
            json={
                "name": "Jane Doe",
                "email": "jane@example.com",
                "source": "contact",
                "phone": "+17865551234",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "new"
        assert data["source"] == "contact"
        assert data["phone"] == "+17865551234"
        assert data["assignedTo"] is None
        assert "createdAt" in data and "updatedAt" in data

    @pytest.mark.asyncio
    async def test_blank_name_rejected_without_insert(self, client, row_count):
        response = await client.post(
            "/api/v1/leads",
            json={"name": "  ", "email": "a@b.com", "source": "contact"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_NAME"
        assert await row_count(Lead) == 0

    @pytest.mark.asyncio
    async def test_email_is_normalized(self, client, auth_headers):
        """Surrounding whitespace is trimmed and the address lower-cased."""
        created = await client.post(
            "/api/v1/leads",
            json={"name": "Foo", "email": "  Foo@Bar.COM  ", "source": "contact"},
        )
        assert created.status_code == 201
        assert created.json()["email"] == "foo@bar.com"

        fetched = await client.get(
            f"/api/v1/leads/{created.json()['id']}", headers=auth_headers
        )
        assert fetched.json()["email"] == "foo@bar.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload, code",
        [
            ({"email": "a@b.com", "source": "contact"}, "MISSING_REQUIRED_FIELDS"),
            ({"name": "A", "source": "contact"}, "MISSING_REQUIRED_FIELDS"),
            ({"name": "A", "email": "not-an-email", "source": "contact"}, "INVALID_EMAIL"),
            ({"name": "A", "email": "a@b.com", "source": "fax"}, "INVALID_SOURCE"),
            (dict(VALID_LEAD, phone="1" * 51), "INVALID_PHONE"),
            (dict(VALID_LEAD, name="x" * 256), "INVALID_NAME"),
        ],
    )
    async def test_invalid_payloads(self, client, row_count, payload, code):
        response = await client.post("/api/v1/leads", json=payload)

        assert response.status_code == 400
        assert response.json()["code"] == code
        assert await row_count(Lead) == 0

    @pytest.mark.asyncio
    async def test_status_in_body_is_ignored(self, client):
        """New leads always start as ``new``."""
        response = await client.post(
            "/api/v1/leads",
            json={
                "name": "A",
                "email": "a@b.com",
                "source": "wizard",
                "status": "won",
            },
        )
        assert response.json()["status"] == "new"


class TestListLeads:
    """Filtering and pagination of ``GET /api/v1/leads``."""

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.get("/api/v1/leads")

        assert response.status_code == 401
        assert response.json() == {
            "error": "Authentication required",
            "code": "UNAUTHORIZED",
        }

    @pytest.mark.asyncio
    async def test_expired_or_unknown_token_is_unauthorized(self, client):
        response = await client.get(
            "/api/v1/leads", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_session_cookie_is_accepted(self, client, auth_headers):
        token = auth_headers["Authorization"].split(" ", 1)[1]
        client.cookies.set("session_token", token)
        response = await client.get("/api/v1/leads")
        assert response.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [1, 3, 7, 100])
    async def test_pagination_invariant(self, client, auth_headers, new_lead, limit):
        for i in range(7):
            await new_lead(name=f"Lead {i}", email=f"lead{i}@example.com")

        response = await client.get(
            "/api/v1/leads", params={"limit": limit}, headers=auth_headers
        )
        data = response.json()

        assert response.status_code == 200
        assert len(data["leads"]) <= limit
        assert data["total"] == 7
        assert data["totalPages"] == math.ceil(7 / limit)

    @pytest.mark.asyncio
    async def test_page_past_end_is_empty(self, client, auth_headers, new_lead):
        await new_lead()

        response = await client.get(
            "/api/v1/leads", params={"page": 5, "limit": 10}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["leads"] == []
        assert data["page"] == 5
        assert data["totalPages"] == 1

    @pytest.mark.asyncio
    async def test_limit_is_clamped(self, client, auth_headers, new_lead):
        await new_lead()

        response = await client.get(
            "/api/v1/leads", params={"limit": 1000, "page": 0}, headers=auth_headers
        )

        data = response.json()
        assert data["page"] == 1
        assert data["totalPages"] == 1

    @pytest.mark.asyncio
    async def test_newest_first_and_filters(self, client, auth_headers, new_lead):
        first = await new_lead(name="Carlos Ruiz", email="carlos@example.com")
        second = await new_lead(name="Maria Lopez", email="maria@example.com")
        await client.patch(
            f"/api/v1/leads/{first['id']}",
            json={"status": "contacted"},
            headers=auth_headers,
        )

        listing = await client.get("/api/v1/leads", headers=auth_headers)
        assert [lead["id"] for lead in listing.json()["leads"]] == [
            second["id"],
            first["id"],
        ]

        by_status = await client.get(
            "/api/v1/leads", params={"status": "contacted"}, headers=auth_headers
        )
        assert [lead["id"] for lead in by_status.json()["leads"]] == [first["id"]]

        by_search = await client.get(
            "/api/v1/leads", params={"search": "MARIA"}, headers=auth_headers
        )
        assert [lead["id"] for lead in by_search.json()["leads"]] == [second["id"]]


class TestUpdateLead:
    """Partial updates through ``PATCH /api/v1/leads``."""

    @pytest.mark.asyncio
    async def test_status_update_is_idempotent(self, client, auth_headers, new_lead):
        lead = await new_lead()

        for _ in range(2):
            response = await client.patch(
                f"/api/v1/leads/{lead['id']}",
                json={"status": "qualified"},
                headers=auth_headers,
            )
            assert response.status_code == 200
            assert response.json()["status"] == "qualified"

    @pytest.mark.asyncio
    async def test_every_write_stamps_updated_at(self, client, auth_headers, new_lead):
        lead = await new_lead()
        stamps = [parse_timestamp(lead["updatedAt"])]

        for _ in range(2):
            response = await client.patch(
                f"/api/v1/leads/{lead['id']}",
                json={"status": "contacted"},
                headers=auth_headers,
            )
            assert response.status_code == 200
            stamps.append(parse_timestamp(response.json()["updatedAt"]))

        assert stamps[0] < stamps[1] < stamps[2]

    @pytest.mark.asyncio
    async def test_ticket_number_width(self, client, auth_headers, new_lead):
        lead = await new_lead()
        url = f"/api/v1/leads/{lead['id']}"

        accepted = await client.patch(
            url, json={"ticketNumber": "T" * 100}, headers=auth_headers
        )
        rejected = await client.patch(
            url, json={"ticketNumber": "T" * 101}, headers=auth_headers
        )

        assert accepted.status_code == 200
        assert rejected.status_code == 400
        assert rejected.json()["code"] == "INVALID_TICKET_NUMBER"

    @pytest.mark.asyncio
    async def test_query_string_form(self, client, auth_headers, new_lead):
        lead = await new_lead()

        response = await client.patch(
            "/api/v1/leads",
            params={"id": lead["id"]},
            json={"notes": "Called twice"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["notes"] == "Called twice"

    @pytest.mark.asyncio
    async def test_absent_fields_untouched_null_clears(
        self, client, auth_headers, new_lead
    ):
        lead = await new_lead(phone="+1555", notes="keep me")

        response = await client.patch(
            f"/api/v1/leads/{lead['id']}",
            json={"phone": None},
            headers=auth_headers,
        )

        data = response.json()
        assert data["phone"] is None
        assert data["notes"] == "keep me"
        assert data["name"] == lead["name"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload, code",
        [
            ({"status": "archived"}, "INVALID_STATUS"),
            ({"name": "   "}, "INVALID_NAME"),
            ({"name": None}, "INVALID_NAME"),
            ({"email": "bad"}, "INVALID_EMAIL"),
            ({"assignedTo": 0}, "INVALID_ASSIGNED_TO"),
            ({"assignedTo": 9999}, "USER_NOT_FOUND"),
        ],
    )
    async def test_invalid_updates_write_nothing(
        self, client, auth_headers, new_lead, payload, code
    ):
        lead = await new_lead()

        response = await client.patch(
            f"/api/v1/leads/{lead['id']}", json=payload, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == code
        fetched = await client.get(
            f"/api/v1/leads/{lead['id']}", headers=auth_headers
        )
        assert fetched.json()["status"] == "new"
        assert fetched.json()["name"] == lead["name"]

    @pytest.mark.asyncio
    async def test_invalid_id(self, client, auth_headers):
        response = await client.patch(
            "/api/v1/leads/abc", json={"status": "won"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"

    @pytest.mark.asyncio
    async def test_unknown_lead(self, client, auth_headers):
        response = await client.patch(
            "/api/v1/leads/424242", json={"status": "won"}, headers=auth_headers
        )
        assert response.status_code == 404
        assert response.json()["code"] == "LEAD_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_assign_and_read_back(self, client, admin_headers, new_lead):
        lead = await new_lead()
        me = await client.get("/api/v1/crm-users/me", headers=admin_headers)

        await client.patch(
            f"/api/v1/leads/{lead['id']}",
            json={"assignedTo": me.json()["id"]},
            headers=admin_headers,
        )
        detail = await client.get(f"/api/v1/leads/{lead['id']}", headers=admin_headers)

        assert detail.json()["assignedTo"] == me.json()["id"]
        assert detail.json()["assignedUser"] == {
            "id": me.json()["id"],
            "name": "Adam Admin",
            "email": "admin@example.com",
        }


class TestDeleteLead:
    """Admin-only removal with restrict-by-default dependents."""

    @pytest.mark.asyncio
    async def test_agent_is_forbidden(self, client, auth_headers, new_lead):
        lead = await new_lead()

        response = await client.delete(
            "/api/v1/leads", params={"id": lead["id"]}, headers=auth_headers
        )

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_admin_deletes_lead(self, client, admin_headers, new_lead, row_count):
        lead = await new_lead()

        response = await client.delete(
            "/api/v1/leads", params={"id": lead["id"]}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["lead"]["id"] == lead["id"]
        assert await row_count(Lead) == 0

    @pytest.mark.asyncio
    async def test_dependents_block_then_cascade(
        self, client, admin_headers, new_lead, product, row_count
    ):
        lead = await new_lead()
        quote = await client.post(
            "/api/v1/quotes",
            json={"leadId": lead["id"], "productId": product.id, "estimatedPrice": 500},
            headers=admin_headers,
        )
        assert quote.status_code == 201
        await client.post(
            "/api/v1/chat-sessions",
            json={
                "leadId": lead["id"],
                "messages": [{"role": "user", "content": "hola"}],
            },
        )
        await client.post(
            "/api/v1/files",
            data={"leadId": str(lead["id"])},
            files={"file": ("logo.png", b"\x89PNG", "image/png")},
        )

        refused = await client.delete(
            "/api/v1/leads", params={"id": lead["id"]}, headers=admin_headers
        )
        assert refused.status_code == 409
        assert refused.json()["code"] == "LEAD_HAS_DEPENDENTS"
        assert await row_count(Lead) == 1

        cascaded = await client.delete(
            "/api/v1/leads",
            params={"id": lead["id"], "cascade": "true"},
            headers=admin_headers,
        )
        assert cascaded.status_code == 200
        assert cascaded.json()["removed"] == {"quotes": 1, "files": 1, "chatSessions": 1}
        assert await row_count(Lead) == 0
        assert await row_count(Quote) == 0
        assert await row_count(LeadFile) == 0
        # Transcripts survive, detached from the lead
        assert await row_count(ChatSession) == 1
