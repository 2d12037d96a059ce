import pytest
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_dashboard_service, require_identity
from app.core.exceptions import ConflictError, LeadPipelineError, NotFoundError
from app.main import app, validation_error_code
from app.services.auth_service import Identity


class TestValidationErrorCodes:
    """Request validation failures are rendered as ``{"error", "code"}``."""

    @pytest.mark.parametrize(
        "errors, expected",
        [
            ([], "INVALID_BODY"),
            ([{"type": "json_invalid", "loc": ("body", 12)}], "INVALID_BODY"),
            ([{"type": "missing", "loc": ("body", "leadId")}], "MISSING_LEAD_ID"),
            ([{"type": "int_parsing", "loc": ("query", "page")}], "INVALID_PAGE"),
            (
                [{"type": "int_parsing", "loc": ("body", "items", 0, "quantity")}],
                "INVALID_QUANTITY",
            ),
            ([{"type": "model_attributes_type", "loc": ("body",)}], "INVALID_BODY"),
        ],
    )
    def test_mapping(self, errors, expected):
        assert validation_error_code(errors) == expected

    @pytest.mark.asyncio
    async def test_malformed_json(self, client):
        response = await client.post(
            "/api/v1/leads",
            content=b'{"name": "A",',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_BODY"
        assert set(response.json()) == {"error", "code"}

    @pytest.mark.asyncio
    async def test_wrong_type_in_body(self, client, auth_headers, new_lead):
        lead = await new_lead()

        response = await client.patch(
            f"/api/v1/leads/{lead['id']}",
            json={"assignedTo": "someone"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ASSIGNED_TO"

    @pytest.mark.asyncio
    async def test_wrong_type_in_query(self, client, auth_headers):
        response = await client.get(
            "/api/v1/leads", params={"page": "two"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PAGE"


class TestDomainErrors:
    def test_status_codes(self):
        assert LeadPipelineError().status_code == 500
        assert NotFoundError().status_code == 404
        assert ConflictError().status_code == 409

    def test_default_codes(self):
        assert NotFoundError().code == "NOT_FOUND"
        assert NotFoundError("Quote not found", "QUOTE_NOT_FOUND").code == (
            "QUOTE_NOT_FOUND"
        )


class ExplodingDashboard:
    async def compute_dashboard_stats(self):
        raise RuntimeError("connection reset by peer")


class TestUnexpectedErrors:
    @pytest.mark.asyncio
    async def test_internal_error_hides_details(self):
        async def fake_identity():
            return Identity(user_id="u1", email="u1@example.com", name="U1")

        async def fake_service():
            return ExplodingDashboard()

        app.dependency_overrides[require_identity] = fake_identity
        app.dependency_overrides[get_dashboard_service] = fake_service
        try:
            transport = ASGITransport(app=app, raise_app_exceptions=False)
            async with AsyncClient(transport=transport, base_url="http://test") as c:
                response = await c.get("/api/v1/dashboard/stats")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "code": "INTERNAL_ERROR",
        }


class TestHealth:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/api/v1/health"])
    async def test_health(self, client, path):
        response = await client.get(path)

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
