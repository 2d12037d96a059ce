import pytest

from app.models import Product
from app.scripts.seed import PRODUCTS, promote_admin, seed_products


class TestCatalogue:
    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, db_session, row_count):
        first = await seed_products(db_session)
        second = await seed_products(db_session)

        assert first == len(PRODUCTS)
        assert second == 0
        assert await row_count(Product) == len(PRODUCTS)

    @pytest.mark.asyncio
    async def test_lists_active_products_only(self, client, db_session):
        await seed_products(db_session)
        db_session.add(
            Product(category="signs", name="Retirado", base_price=10, is_active=False)
        )
        await db_session.commit()

        response = await client.get("/api/v1/products")

        assert response.status_code == 200
        names = [p["name"] for p in response.json()["products"]]
        assert "Retirado" not in names
        assert len(names) == len(PRODUCTS)
        categories = [p["category"] for p in response.json()["products"]]
        assert categories == sorted(categories)


class TestPromoteAdmin:
    @pytest.mark.asyncio
    async def test_promotes_existing_profile(
        self, client, db_session, auth_headers
    ):
        assert await promote_admin(db_session, "Agent@Example.com") is True

        listing = await client.get("/api/v1/crm-users", headers=auth_headers)
        assert listing.status_code == 200

    @pytest.mark.asyncio
    async def test_creates_profile_for_bare_identity(
        self, client, db_session, other_headers
    ):
        assert await promote_admin(db_session, "other@example.com") is True

        me = await client.get("/api/v1/crm-users/me", headers=other_headers)
        assert me.json()["role"] == "admin"

    @pytest.mark.asyncio
    async def test_unknown_email(self, db_session):
        assert await promote_admin(db_session, "nobody@example.com") is False
