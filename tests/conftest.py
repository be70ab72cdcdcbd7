import os

# Keep the app from touching the fallback SQLite file while the modules import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app import models  # noqa: E402,F401
from app.database import Base, get_db_session  # noqa: E402
from app.main import app  # noqa: E402


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_engine):
    session_factory = sessionmaker(
        bind=db_engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def pet_survey(client):
    """
    Survey with a gated follow-up:
    1. "Do you own a pet?" (radio Yes/No)
    2. "What kind?" shown only if 1 equals "Yes"
    3. "Any allergies?" (checkbox)
    4. "Age" (number)
    """
    survey = (await client.post("/api/surveys", json={"title": "Pets"})).json()
    survey_id = survey["id"]

    async def add_question(order_index, text, question_type, **extra):
        payload = {
            "survey_id": survey_id,
            "question_text": text,
            "question_type": question_type,
            "order_index": order_index,
            **extra,
        }
        response = await client.post("/api/questions", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    owns_pet = await add_question(
        1,
        "Do you own a pet?",
        "radio",
        options=[{"option_text": "Yes"}, {"option_text": "No"}],
    )
    kind = await add_question(2, "What kind?", "text")
    allergies = await add_question(
        3,
        "Any allergies?",
        "checkbox",
        options=[{"option_text": "Cats"}, {"option_text": "Dogs"}, {"option_text": "Pollen"}],
    )
    age = await add_question(4, "Age", "number")

    condition = await client.post(
        "/api/conditions",
        json={
            "survey_id": survey_id,
            "source_question_id": owns_pet["id"],
            "target_question_id": kind["id"],
            "condition_type": "show_if",
            "condition_operator": "equals",
            "condition_value": "Yes",
        },
    )
    assert condition.status_code == 201, condition.text

    return {
        "survey_id": survey_id,
        "owns_pet": owns_pet["id"],
        "kind": kind["id"],
        "allergies": allergies["id"],
        "age": age["id"],
        "condition_id": condition.json()["id"],
    }
