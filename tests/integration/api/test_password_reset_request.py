from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import func
from sqlmodel import select

from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken


async def tokens_for(session, user_id):
    result = await session.exec(
        select(PasswordResetToken)
        .where(PasswordResetToken.user_id == user_id)
        .order_by(PasswordResetToken.created_at)
        .execution_options(populate_existing=True)
    )
    return list(result.all())


@pytest.mark.asyncio
async def test_request_for_existing_user_creates_token(client: AsyncClient, seed, db_session, test_data):
    user_id = await seed.create_user()

    response = await client.post("/password-reset/request", json={"email": "buyer@example.com"})

    assert response.status_code == 202
    assert response.json() == test_data.get_item("responses", "password_reset_accepted")

    tokens = await tokens_for(db_session, user_id)
    assert len(tokens) == 1
    token = tokens[0]
    assert token.used is False
    assert len(token.token) == 43
    assert token.expires_at - token.created_at == timedelta(hours=1)


@pytest.mark.asyncio
async def test_unknown_email_gets_identical_response(client: AsyncClient, seed, db_session):
    await seed.create_user()

    known = await client.post("/password-reset/request", json={"email": "buyer@example.com"})
    unknown = await client.post("/password-reset/request", json={"email": "nobody@example.com"})

    assert unknown.status_code == known.status_code == 202
    assert unknown.json() == known.json()

    count = (await db_session.exec(select(func.count(PasswordResetToken.id)))).one()
    assert count == 1


@pytest.mark.asyncio
async def test_email_lookup_is_case_insensitive(client: AsyncClient, seed, db_session):
    user_id = await seed.create_user()

    response = await client.post("/password-reset/request", json={"email": "Buyer@Example.com"})

    assert response.status_code == 202
    assert len(await tokens_for(db_session, user_id)) == 1


@pytest.mark.asyncio
async def test_second_request_within_five_minutes_is_throttled(client: AsyncClient, seed, db_session):
    user_id = await seed.create_user()

    first = await client.post("/password-reset/request", json={"email": "buyer@example.com"})
    second = await client.post("/password-reset/request", json={"email": "buyer@example.com"})

    assert first.status_code == second.status_code == 202
    assert first.json() == second.json()
    assert len(await tokens_for(db_session, user_id)) == 1


@pytest.mark.asyncio
async def test_new_request_invalidates_older_tokens(client: AsyncClient, seed, db_session):
    user_id = await seed.create_user()
    created_at = utcnow() - timedelta(minutes=10)
    db_session.add(
        PasswordResetToken(
            user_id=user_id,
            token="older-token-from-ten-minutes-ago",
            created_at=created_at,
            expires_at=created_at + timedelta(hours=1),
        )
    )
    await db_session.commit()

    response = await client.post("/password-reset/request", json={"email": "buyer@example.com"})

    assert response.status_code == 202
    tokens = await tokens_for(db_session, user_id)
    assert len(tokens) == 2
    older, newer = tokens
    assert older.used is True
    assert newer.used is False


@pytest.mark.asyncio
async def test_invalid_email_is_rejected(client: AsyncClient):
    response = await client.post("/password-reset/request", json={"email": "not-an-email"})

    assert response.status_code == 422
