"""
Pytest configuration and fixtures for the bridge tests.

Provides:
- Async test database with SQLite
- Test client with the Slack client, user cache and background sessions overridden
- A fake Slack Web API client that records calls
- Factory fixtures for creating test data
"""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool, event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from chatbridge.db import get_db
from chatbridge.deps import get_session_factory, get_slack_service, get_user_cache
from chatbridge.main import app
from chatbridge.models import (
    Base,
    Channel,
    Message,
    MessageCorrelation,
    MembershipRole,
    MessageOrigin,
    Server,
    ServerMembership,
    SlackBridge,
    SlackWorkspace,
    User,
)
from chatbridge.services.slack import SlackAPIError, SlackService
from chatbridge.services.user_cache import NullCache

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEAM_ID = "T0001"
BOT_USER_ID = "UBOT"
SIGNING_SECRET = "test-signing-secret"


class FakeSlackClient:
    """Records Web API calls; errors can be scripted per Slack channel."""

    def __init__(self):
        self.posts: list[dict] = []
        self.reactions_added: list[tuple] = []
        self.reactions_removed: list[tuple] = []
        self.post_errors: dict[str, str] = {}
        self.reaction_errors: dict[str, str] = {}
        self.users: dict[str, dict] = {}
        self.user_lookups: list[str] = []
        self.channels: list[dict] = []
        self.channels_error: str | None = None
        self.token_response: dict | None = None
        self.team_info: dict | None = None
        self._ts = 1700000000

    def get_authorization_url(self, client_id: str, state: str, redirect_uri: str) -> str:
        return SlackService().get_authorization_url(client_id, state, redirect_uri)

    async def exchange_code_for_token(self, client_id, client_secret, code, redirect_uri):
        return self.token_response

    async def get_team_info(self, access_token):
        return self.team_info

    async def get_user_info(self, access_token, user_id):
        self.user_lookups.append(user_id)
        return self.users.get(user_id)

    async def list_channels(self, access_token, types="public_channel,private_channel"):
        if self.channels_error:
            raise SlackAPIError(self.channels_error)
        return list(self.channels)

    async def post_message(
        self,
        access_token,
        channel_id,
        text,
        thread_ts=None,
        username=None,
        icon_url=None,
        unfurl_links=True,
    ):
        self.posts.append({
            "token": access_token,
            "channel": channel_id,
            "text": text,
            "thread_ts": thread_ts,
            "username": username,
            "icon_url": icon_url,
        })
        error = self.post_errors.get(channel_id)
        if error:
            raise SlackAPIError(error)
        self._ts += 1
        return {"ok": True, "channel": channel_id, "ts": f"{self._ts}.000100"}

    async def add_reaction(self, access_token, channel_id, ts, name):
        error = self.reaction_errors.get(channel_id)
        if error:
            raise SlackAPIError(error)
        self.reactions_added.append((channel_id, ts, name))

    async def remove_reaction(self, access_token, channel_id, ts, name):
        error = self.reaction_errors.get(channel_id)
        if error:
            raise SlackAPIError(error)
        self.reactions_removed.append((channel_id, ts, name))


@pytest_asyncio.fixture
async def db_engine():
    """Create async test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )

    # Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest properly
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for tests."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_slack() -> FakeSlackClient:
    return FakeSlackClient()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, fake_slack: FakeSlackClient) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client with database and Slack overrides."""

    async def override_get_db():
        yield db_session

    @asynccontextmanager
    async def background_session():
        yield db_session
        await db_session.commit()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_slack_service] = lambda: fake_slack
    app.dependency_overrides[get_user_cache] = lambda: NullCache()
    app.dependency_overrides[get_session_factory] = lambda: background_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_headers(user: User, server: Server, membership_factory) -> dict[str, str]:
    """Bearer headers for a user who owns the shared server."""
    await membership_factory(server, user, MembershipRole.OWNER)
    return {"Authorization": f"Bearer {user.session_token}"}


# ============================================================================
# Factory Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def user_factory(db_session: AsyncSession):
    """Factory for creating test users with a live session."""

    async def _create_user(display_name: str = "Ada Lovelace", avatar_url: str | None = None) -> User:
        user = User(
            email=f"test-{uuid.uuid4().hex[:8]}@example.com",
            display_name=display_name,
            avatar_url=avatar_url,
        )
        user.generate_session_token()
        db_session.add(user)
        await db_session.flush()
        return user

    return _create_user


@pytest_asyncio.fixture
async def server_factory(db_session: AsyncSession):
    """Factory for creating test servers."""

    async def _create_server(**overrides) -> Server:
        fields = {
            "name": "Acme",
            "slug": f"acme-{uuid.uuid4().hex[:8]}",
            "slack_signing_secret": SIGNING_SECRET,
        }
        fields.update(overrides)
        server = Server(**fields)
        db_session.add(server)
        await db_session.flush()
        return server

    return _create_server


@pytest_asyncio.fixture
async def membership_factory(db_session: AsyncSession):
    """Factory for adding users to servers."""

    async def _create_membership(
        server: Server, user: User, role: MembershipRole = MembershipRole.MEMBER
    ) -> ServerMembership:
        membership = ServerMembership(server_id=server.id, user_id=user.id, role=role.value)
        db_session.add(membership)
        await db_session.flush()
        return membership

    return _create_membership


@pytest_asyncio.fixture
async def channel_factory(db_session: AsyncSession):
    """Factory for creating test channels."""

    async def _create_channel(server: Server, name: str = "general") -> Channel:
        channel = Channel(server_id=server.id, name=name)
        db_session.add(channel)
        await db_session.flush()
        return channel

    return _create_channel


@pytest_asyncio.fixture
async def workspace_factory(db_session: AsyncSession):
    """Factory for creating Slack installations."""

    async def _create_workspace(
        server: Server,
        team_id: str = TEAM_ID,
        bot_access_token: str | None = "xoxb-test",
        bot_user_id: str = BOT_USER_ID,
    ) -> SlackWorkspace:
        workspace = SlackWorkspace(
            server_id=server.id,
            team_id=team_id,
            team_name="Acme Slack",
            bot_access_token=bot_access_token,
            bot_user_id=bot_user_id,
            scopes=["chat:write"],
        )
        db_session.add(workspace)
        await db_session.flush()
        return workspace

    return _create_workspace


@pytest_asyncio.fixture
async def bridge_factory(db_session: AsyncSession):
    """Factory for creating bridges."""

    async def _create_bridge(
        channel: Channel,
        workspace: SlackWorkspace,
        slack_channel_id: str = "C0001",
        **overrides,
    ) -> SlackBridge:
        fields = {
            "server_id": channel.server_id,
            "channel_id": channel.id,
            "workspace_id": workspace.id,
            "slack_team_id": workspace.team_id,
            "slack_channel_id": slack_channel_id,
            "slack_channel_name": slack_channel_id.lower(),
        }
        fields.update(overrides)
        bridge = SlackBridge(**fields)
        db_session.add(bridge)
        await db_session.flush()
        return bridge

    return _create_bridge


@pytest_asyncio.fixture
async def message_factory(db_session: AsyncSession):
    """Factory for creating messages, internal by default."""

    async def _create_message(
        channel: Channel,
        body: str = "Hello from the team",
        user: User | None = None,
        origin_bridge: SlackBridge | None = None,
        thread_id: int | None = None,
    ) -> Message:
        if origin_bridge is not None:
            message = Message(
                channel_id=channel.id,
                author_id="slack:U777",
                display_name="Grace Hopper",
                body=body,
                origin=MessageOrigin.EXTERNAL.value,
                origin_bridge_id=origin_bridge.id,
            )
        else:
            message = Message(
                channel_id=channel.id,
                user_id=user.id if user else None,
                author_id=str(user.id) if user else "1",
                display_name=user.display_name if user else "Ada Lovelace",
                body=body,
            )
        message.thread_id = thread_id
        db_session.add(message)
        await db_session.flush()
        return message

    return _create_message


@pytest_asyncio.fixture
async def correlate(db_session: AsyncSession):
    """Link a message to a Slack ts on a bridge."""

    async def _correlate(message: Message, bridge: SlackBridge, ts: str, external: bool = False) -> MessageCorrelation:
        correlation = MessageCorrelation(
            message_id=message.id,
            bridge_id=bridge.id,
            slack_team_id=bridge.slack_team_id,
            slack_channel_id=bridge.slack_channel_id,
            slack_ts=ts,
            is_external_origin=external,
        )
        db_session.add(correlation)
        await db_session.flush()
        return correlation

    return _correlate


# ============================================================================
# Common setups
# ============================================================================


@pytest_asyncio.fixture
async def user(user_factory) -> User:
    return await user_factory()


@pytest_asyncio.fixture
async def server(server_factory) -> Server:
    return await server_factory()


@pytest_asyncio.fixture
async def channel(channel_factory, server) -> Channel:
    return await channel_factory(server)


@pytest_asyncio.fixture
async def workspace(workspace_factory, server) -> SlackWorkspace:
    return await workspace_factory(server)


@pytest_asyncio.fixture
async def bridge(bridge_factory, channel, workspace) -> SlackBridge:
    return await bridge_factory(channel, workspace)
