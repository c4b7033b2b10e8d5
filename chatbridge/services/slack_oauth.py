"""
Slack app installation: signed OAuth state and workspace storage.

The OAuth ``state`` carries the server being connected and where to send
the browser afterwards. It is signed with the application secret so the
callback can trust it without server-side storage.
"""

import base64
import hashlib
import hmac
import json
import logging
import secrets
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode, urlsplit

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chatbridge.models import Server, SlackWorkspace
from chatbridge.models.base import utc_now
from chatbridge.services.bridge_resolver import BridgeConfigurationError
from chatbridge.settings import settings

logger = logging.getLogger(__name__)

STATE_MAX_AGE_SECONDS = 600  # 10 minutes


@dataclass
class InstallState:
    server_id: int
    redirect: str
    user_id: int | None = None


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def _sign(payload: str) -> str:
    return hmac.new(settings.secret_key.encode(), payload.encode(), hashlib.sha256).hexdigest()


def safe_redirect(redirect: str | None) -> str:
    """Only allow relative paths or URLs on our own base URL."""
    if not redirect:
        return "/"
    if redirect.startswith("/") and not redirect.startswith("//"):
        return redirect
    base = urlsplit(settings.base_url)
    target = urlsplit(redirect)
    if (target.scheme, target.netloc) == (base.scheme, base.netloc):
        return redirect
    return "/"


def with_query(url: str, **params: str) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(params)}"


def encode_state(state: InstallState, now: float | None = None) -> str:
    payload = _b64encode(json.dumps({
        "sid": state.server_id,
        "r": state.redirect,
        "uid": state.user_id,
        "iat": int(now if now is not None else time.time()),
        "n": secrets.token_urlsafe(8),
    }, separators=(",", ":")).encode())
    return f"{payload}.{_sign(payload)}"


def decode_state(value: str | None, now: float | None = None) -> InstallState | None:
    """Return the install state, or None if it is forged, malformed or expired."""
    if not value or "." not in value:
        return None
    payload, signature = value.rsplit(".", 1)
    if not hmac.compare_digest(_sign(payload), signature):
        return None
    try:
        data = json.loads(_b64decode(payload))
        issued_at = int(data["iat"])
        server_id = int(data["sid"])
    except (ValueError, KeyError, TypeError):
        return None

    now = now if now is not None else time.time()
    if now - issued_at > STATE_MAX_AGE_SECONDS:
        return None
    return InstallState(server_id=server_id, redirect=safe_redirect(data.get("r")), user_id=data.get("uid"))


def app_credentials(server: Server) -> tuple[str, str]:
    """Client id and secret for a server's Slack app, falling back to the global app.

    Raises:
        BridgeConfigurationError: If neither is configured.
    """
    if server.has_slack_credentials:
        return server.slack_client_id, server.slack_client_secret
    if settings.slack_enabled:
        return settings.slack_client_id, settings.slack_client_secret
    raise BridgeConfigurationError(f"No Slack app credentials for server {server.id}")


async def store_installation(
    db: AsyncSession,
    server: Server,
    token_data: dict[str, Any],
    installed_by_id: int | None = None,
    team_info: dict[str, Any] | None = None,
) -> SlackWorkspace:
    """Create or refresh the SlackWorkspace for an ``oauth.v2.access`` response."""
    team = token_data.get("team") or {}
    team_id = team.get("id")
    if not team_id:
        raise ValueError("oauth.v2.access response has no team id")

    result = await db.execute(
        select(SlackWorkspace).where(
            SlackWorkspace.server_id == server.id,
            SlackWorkspace.team_id == team_id,
        )
    )
    workspace = result.unique().scalar_one_or_none()
    if workspace is None:
        workspace = SlackWorkspace(server_id=server.id, team_id=team_id)
        db.add(workspace)

    authed_user = token_data.get("authed_user") or {}
    workspace.team_name = team.get("name")
    workspace.bot_user_id = token_data.get("bot_user_id")
    workspace.bot_access_token = token_data.get("access_token")
    workspace.access_token = authed_user.get("access_token")
    workspace.scopes = [s for s in (token_data.get("scope") or "").split(",") if s]
    workspace.installed_by_id = installed_by_id
    workspace.installed_at = utc_now()
    workspace.is_active = True

    if team_info:
        workspace.team_domain = team_info.get("domain")
        workspace.team_icon = (team_info.get("icon") or {}).get("image_68")

    server.slack_enabled = True
    await db.flush()
    logger.info(f"Slack team {team_id} installed for server {server.id}")
    return workspace
