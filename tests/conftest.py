import asyncio
import os
import tempfile
from pathlib import Path

import pytest

# Must be set before the app (and its engine) is imported
_DB_DIR = Path(tempfile.mkdtemp(prefix="cocktail-shop-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'test.db'}"
os.environ["JWT_SECRET"] = "test-secret"

from fastapi import HTTPException, status  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from core.auth import current_active_user, current_active_superuser  # noqa: E402
from db.database import async_session_maker, create_db_and_tables, drop_db_and_tables  # noqa: E402
from db.users import User  # noqa: E402
from main import app  # noqa: E402


async def _create_user(email: str, is_superuser: bool) -> User:
    async with async_session_maker() as session:
        user = User(
            email=email,
            hashed_password="not-a-real-hash",
            is_active=True,
            is_superuser=is_superuser,
            is_verified=True,
        )
        session.add(user)
        await session.commit()
        return user


def login_as(user: User):
    """Authenticate every request as `user`."""
    def forbidden():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)

    app.dependency_overrides[current_active_user] = lambda: user
    app.dependency_overrides[current_active_superuser] = (lambda: user) if user.is_superuser else forbidden


@pytest.fixture
def client():
    asyncio.run(drop_db_and_tables())
    asyncio.run(create_db_and_tables())
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin(client):
    user = asyncio.run(_create_user("admin@example.com", True))
    login_as(user)
    return user


@pytest.fixture
def member(client):
    return asyncio.run(_create_user("member@example.com", False))


@pytest.fixture
def catalog(client, admin):
    """Gin, bitters, a lime garnish and an unpriced juice."""
    payloads = {
        "gin": {"name": "Gin", "type": "spirit", "price": 30.00, "bottle_size": "750ml"},
        "bitters": {"name": "Angostura", "type": "bitters", "price": 10.00},
        "lime": {"name": "Lime Wedge", "type": "garnish", "price": 0.50},
        "juice": {"name": "Fresh Juice", "type": "juice"},
    }
    created = {}
    for key, payload in payloads.items():
        resp = client.post("/ingredients/", json=payload)
        assert resp.status_code == 201, resp.text
        created[key] = resp.json()
    return created


@pytest.fixture
def gin_cocktail(client, catalog):
    resp = client.post("/cocktail-recipes/", json={
        "name": "Pink Gin",
        "description": "Gin and bitters",
        "ingredients": [
            {"name": "Gin", "amount": 2, "unit": "oz"},
            {"name": "angostura", "amount": 3, "unit": "dash"},
            {"name": "Lime Wedge", "amount": 1, "unit": "piece"},
        ],
    })
    assert resp.status_code == 201, resp.text
    return resp.json()
