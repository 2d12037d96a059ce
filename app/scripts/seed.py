"""Seed the product catalogue and, optionally, promote an admin.

Usage:
    python -m app.scripts.seed [admin-email]

Products already present (same category and name) are left alone, so
the script can be re-run.  When an email is given, the auth user with
that email gets an ``admin`` CRM profile (or has its profile promoted).
"""

import asyncio
import sys
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from app.repositories.auth_repository import AuthRepository
from app.repositories.crm_user_repository import CrmUserRepository
from app.repositories.product_repository import ProductRepository
from app.schemas.common import CrmRole

PRODUCTS = [
    {
        "category": "signs",
        "name": "Letrero exterior",
        "base_price": 450,
        "description_es": "Letrero para fachada en PVC o aluminio compuesto.",
        "description_en": "Storefront sign in PVC or aluminium composite.",
    },
    {
        "category": "signs",
        "name": "Letrero iluminado LED",
        "base_price": 1200,
        "description_es": "Caja de luz o letras corpóreas con iluminación LED.",
        "description_en": "Light box or channel letters with LED lighting.",
    },
    {
        "category": "signs",
        "name": "Vinil vehicular",
        "base_price": 350,
        "description_es": "Rotulación de vehículos con vinil de alta duración.",
        "description_en": "Vehicle lettering in long-life vinyl.",
    },
    {
        "category": "logos",
        "name": "Diseño de logo",
        "base_price": 199,
        "description_es": "Tres propuestas y dos rondas de cambios.",
        "description_en": "Three concepts and two revision rounds.",
    },
    {
        "category": "websites",
        "name": "Sitio web Starter",
        "base_price": 299,
        "description_es": "Página de aterrizaje con formulario de contacto.",
        "description_en": "Landing page with contact form.",
    },
    {
        "category": "websites",
        "name": "Sitio web Profesional",
        "base_price": 799,
        "description_es": "Sitio de hasta cinco secciones con blog.",
        "description_en": "Up to five sections with a blog.",
    },
]


async def seed_products(session: AsyncSession) -> int:
    repo = ProductRepository(session)
    created = 0
    for product in PRODUCTS:
        existing = await repo.get_by_category_and_name(
            product["category"], product["name"]
        )
        if existing is None:
            await repo.create(**product, is_active=True)
            created += 1
    await repo.commit()
    return created


async def promote_admin(session: AsyncSession, email: str) -> bool:
    auth_user = await AuthRepository(session).get_user_by_email(email.lower())
    if auth_user is None:
        return False
    users = CrmUserRepository(session)
    crm_user = await users.get_by_auth_user_id(auth_user.id)
    if crm_user is None:
        await users.create(
            auth_user_id=auth_user.id,
            email=auth_user.email.lower(),
            name=auth_user.name,
            role=CrmRole.admin.value,
        )
    else:
        crm_user.role = CrmRole.admin.value
    await users.commit()
    return True


async def seed(admin_email: Optional[str] = None):
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with session_maker() as session:
        created = await seed_products(session)
        print(f"Created {created} products ({len(PRODUCTS) - created} already present)")

        if admin_email:
            if await promote_admin(session, admin_email):
                print(f"{admin_email} is now an admin")
            else:
                print(f"No auth user with email {admin_email}; sign up first")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed(sys.argv[1] if len(sys.argv) > 1 else None))
