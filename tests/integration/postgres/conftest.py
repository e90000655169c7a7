"""PostgreSQL fixtures backed by testcontainers.

The container starts once per session; each test gets fresh tables.
Tests using them skip themselves when no Docker daemon is reachable.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from testcontainers.postgres import PostgresContainer

# Minimal tables the adapters read and write; the host application owns the real schema
TEST_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS meetings (
        id uuid PRIMARY KEY,
        tenant_id uuid NOT NULL,
        status text NOT NULL,
        convocation_no smallint NOT NULL DEFAULT 1,
        title text NOT NULL DEFAULT '',
        quorum_policy_id uuid,
        vote_policy_id uuid,
        validated_at timestamptz
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS motions (
        id uuid PRIMARY KEY,
        meeting_id uuid NOT NULL,
        tenant_id uuid NOT NULL,
        title text NOT NULL DEFAULT '',
        vote_policy_id uuid,
        quorum_policy_id uuid,
        secret boolean NOT NULL DEFAULT false,
        opened_at timestamptz,
        closed_at timestamptz,
        decision_status text
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS proxies (
        id uuid PRIMARY KEY,
        tenant_id uuid NOT NULL,
        meeting_id uuid NOT NULL,
        giver_member_id uuid NOT NULL,
        receiver_member_id uuid NOT NULL,
        created_at timestamptz NOT NULL,
        revoked_at timestamptz,
        UNIQUE (tenant_id, meeting_id, giver_member_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ballots (
        id bigserial PRIMARY KEY,
        tenant_id uuid NOT NULL,
        motion_id uuid NOT NULL,
        voter_member_id uuid NOT NULL,
        value text NOT NULL,
        weight double precision NOT NULL,
        is_proxy_vote boolean NOT NULL,
        proxy_holder_id uuid,
        cast_at timestamptz NOT NULL,
        source text NOT NULL,
        superseded_at timestamptz
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS vote_tokens (
        token_hash char(64) PRIMARY KEY,
        tenant_id uuid NOT NULL,
        meeting_id uuid NOT NULL,
        member_id uuid NOT NULL,
        motion_id uuid NOT NULL,
        expires_at timestamptz NOT NULL,
        used_at timestamptz,
        created_at timestamptz NOT NULL
    )
    """,
]


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """Session-scoped PostgreSQL 16 container."""
    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def postgres_async_url(postgres_container: PostgresContainer) -> str:
    sync_url = postgres_container.get_connection_url()
    return sync_url.replace("postgresql+psycopg2://", "postgresql+asyncpg://").replace(
        "postgresql://", "postgresql+asyncpg://"
    )


@pytest.fixture
async def session_factory(
    postgres_async_url: str,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over freshly truncated tables."""
    engine = create_async_engine(postgres_async_url, echo=False, pool_size=20)
    async with engine.begin() as conn:
        for statement in TEST_SCHEMA:
            await conn.execute(text(statement))
        await conn.execute(text("TRUNCATE meetings, motions, proxies, ballots, vote_tokens"))

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()
