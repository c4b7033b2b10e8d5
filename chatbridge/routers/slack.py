"""
Slack integration router.

Handles the Events API webhook, the app install flow, and bridge
administration for a server.
"""

import json
import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field
from sqlalchemy import func, select

from chatbridge.deps import (
    CurrentUser,
    DBSession,
    SlackClient,
    UserCache,
    get_server_by_id,
    get_server_membership,
    require_server_admin,
)
from chatbridge.models import BridgeStatus, Channel, Server, SlackBridge, SlackWorkspace, SyncDirection
from chatbridge.services.bridge_resolver import INBOUND_DIRECTIONS, BridgeConfigurationError, find_inbound_conflict
from chatbridge.services.slack import SlackAPIError
from chatbridge.services.slack_events import handle_event_callback
from chatbridge.services.slack_oauth import (
    InstallState,
    app_credentials,
    decode_state,
    encode_state,
    safe_redirect,
    store_installation,
    with_query,
)
from chatbridge.services.slack_signature import SignatureError, is_url_verification, verify_slack_signature
from chatbridge.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/integrations/slack", tags=["slack"])


# ==================== Schemas ====================

class BridgeCreateRequest(BaseModel):
    """Create a bridge between an internal channel and a Slack channel."""
    workspace_id: int
    channel_id: int
    slack_channel_id: str = Field(..., min_length=1, max_length=32)
    slack_channel_name: str | None = None
    sync_direction: SyncDirection | None = None
    sync_reactions: bool | None = None
    sync_threads: bool | None = None
    show_slack_usernames: bool = True
    display_name_override: str | None = Field(None, max_length=80)
    avatar_url_override: str | None = None


class BridgeUpdateRequest(BaseModel):
    """Partial update of a bridge; omitted fields are left unchanged."""
    status: BridgeStatus | None = None
    sync_direction: SyncDirection | None = None
    sync_reactions: bool | None = None
    sync_threads: bool | None = None
    show_slack_usernames: bool | None = None
    slack_channel_name: str | None = None
    display_name_override: str | None = Field(None, max_length=80)
    avatar_url_override: str | None = None


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def bridge_payload(bridge: SlackBridge) -> dict:
    return {
        "id": bridge.id,
        "server_id": bridge.server_id,
        "channel_id": bridge.channel_id,
        "workspace_id": bridge.workspace_id,
        "slack_team_id": bridge.slack_team_id,
        "slack_channel_id": bridge.slack_channel_id,
        "slack_channel_name": bridge.slack_channel_name,
        "sync_direction": bridge.sync_direction,
        "status": bridge.status,
        "sync_reactions": bridge.sync_reactions,
        "sync_threads": bridge.sync_threads,
        "show_slack_usernames": bridge.show_slack_usernames,
        "display_name_override": bridge.display_name_override,
        "avatar_url_override": bridge.avatar_url_override,
        "message_count": bridge.message_count,
        "last_sync_at": _iso(bridge.last_sync_at),
        "last_error": bridge.last_error,
    }


async def _get_bridge(db: DBSession, server_id: int, bridge_id: int) -> SlackBridge:
    bridge = await db.get(SlackBridge, bridge_id)
    if not bridge or bridge.server_id != server_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bridge not found")
    return bridge


async def _get_workspace(db: DBSession, server_id: int, workspace_id: int) -> SlackWorkspace:
    workspace = await db.get(SlackWorkspace, workspace_id)
    if not workspace or workspace.server_id != server_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Slack workspace not found")
    return workspace


async def _ensure_inbound_available(
    db: DBSession, team_id: str, slack_channel_id: str, bridge_id: int | None = None
) -> None:
    """A Slack channel feeds at most one active inbound bridge."""
    conflict = await find_inbound_conflict(db, team_id, slack_channel_id, exclude_bridge_id=bridge_id)
    if conflict is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Slack channel already feeds channel {conflict.channel_id}",
        )


# ==================== Events API ====================

async def _process_events_request(
    request: Request,
    db: DBSession,
    signing_secret: str | None,
    slack: SlackClient,
    cache: UserCache,
) -> JSONResponse:
    body = await request.body()
    try:
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body")

    # Handle URL verification challenge
    if is_url_verification(payload):
        logger.info("Slack URL verification challenge")
        return JSONResponse({"challenge": payload["challenge"]})

    if not signing_secret:
        logger.error("Slack signing secret not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Slack signing secret not configured",
        )

    try:
        verify_slack_signature(
            signing_secret,
            request.headers.get("X-Slack-Signature"),
            request.headers.get("X-Slack-Request-Timestamp"),
            body,
        )
    except SignatureError as e:
        logger.warning(f"Rejected Slack webhook: {e.code}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.code)

    if not isinstance(payload, dict):
        logger.warning(f"Ignoring Slack payload of type {type(payload).__name__}")
        return JSONResponse({"status": "ok"})

    if payload.get("type") == "event_callback":
        retry = request.headers.get("X-Slack-Retry-Num")
        if retry:
            logger.info(f"Slack retry #{retry} ({request.headers.get('X-Slack-Retry-Reason')})")

        # Always answer 200 so Slack does not retry events we cannot handle
        try:
            outcome = await handle_event_callback(db, payload, slack=slack, cache=cache)
            await db.commit()
            logger.info(f"Slack event {payload.get('event_id')}: {outcome}")
        except Exception:
            logger.exception(f"Error processing Slack event {payload.get('event_id')}")
            await db.rollback()

    return JSONResponse({"status": "ok"})


@router.post("/events/{server_id}")
async def slack_events_for_server(
    request: Request,
    server_id: int,
    db: DBSession,
    slack: SlackClient,
    cache: UserCache,
):
    """Events API endpoint for a server running its own Slack app."""
    server = await db.get(Server, server_id)
    signing_secret = (server.slack_signing_secret if server else None) or settings.slack_signing_secret
    return await _process_events_request(request, db, signing_secret, slack, cache)


@router.post("/events")
async def slack_events(
    request: Request,
    db: DBSession,
    slack: SlackClient,
    cache: UserCache,
):
    """Events API endpoint for the globally configured Slack app."""
    return await _process_events_request(request, db, settings.slack_signing_secret, slack, cache)


# ==================== Install / OAuth ====================

@router.get("/install")
async def slack_install(
    db: DBSession,
    user: CurrentUser,
    slack: SlackClient,
    server_id: int = Query(...),
    redirect: str | None = Query(None),
):
    """Start the Slack app install flow for a server."""
    server = await get_server_by_id(server_id, db)
    await require_server_admin(server.id, user, db)
    try:
        client_id, _ = app_credentials(server)
    except BridgeConfigurationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Slack integration is not configured",
        )

    state = encode_state(InstallState(server_id=server.id, redirect=safe_redirect(redirect), user_id=user.id))
    auth_url = slack.get_authorization_url(client_id, state, settings.slack_oauth_redirect_uri)
    return RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/oauth/callback")
async def slack_oauth_callback(
    db: DBSession,
    slack: SlackClient,
    code: str | None = Query(None),
    state: str | None = Query(None),
    error: str | None = Query(None),
):
    """Handle the Slack OAuth redirect and store the installation."""
    install = decode_state(state)
    redirect_to = install.redirect if install else "/"

    def fail(reason: str) -> RedirectResponse:
        logger.warning(f"Slack install failed: {reason}")
        return RedirectResponse(url=with_query(redirect_to, slack_error=reason), status_code=status.HTTP_302_FOUND)

    if not code:
        return fail(error or "missing_code")
    if install is None:
        return fail("invalid_state")

    server = await db.get(Server, install.server_id)
    if server is None:
        return fail("invalid_state")

    try:
        client_id, client_secret = app_credentials(server)
    except BridgeConfigurationError:
        return fail("not_configured")

    token_data = await slack.exchange_code_for_token(
        client_id, client_secret, code, settings.slack_oauth_redirect_uri
    )
    if not token_data or not token_data.get("access_token"):
        return fail("token_exchange_failed")

    team_info = await slack.get_team_info(token_data["access_token"])
    try:
        await store_installation(db, server, token_data, installed_by_id=install.user_id, team_info=team_info)
    except ValueError:
        return fail("token_exchange_failed")
    await db.commit()

    return RedirectResponse(url=with_query(redirect_to, slack_connected="true"), status_code=status.HTTP_302_FOUND)


# ==================== Channels ====================

@router.get("/servers/{server_id}/channels")
async def list_slack_channels(
    server_id: int,
    db: DBSession,
    user: CurrentUser,
    slack: SlackClient,
    workspace_id: int = Query(...),
):
    """List public and private Slack channels available to bridge."""
    await require_server_admin(server_id, user, db)
    workspace = await _get_workspace(db, server_id, workspace_id)
    if not workspace.bot_access_token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Slack workspace has no bot token",
        )

    try:
        channels = await slack.list_channels(workspace.bot_access_token)
    except SlackAPIError as e:
        logger.error(f"Failed to list Slack channels for workspace {workspace.id}: {e.error}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.error)

    merged = {
        c["id"]: {
            "id": c["id"],
            "name": c.get("name") or c["id"],
            "is_private": bool(c.get("is_private")),
            "is_member": bool(c.get("is_member")),
            "num_members": c.get("num_members"),
        }
        for c in channels
        if c.get("id")
    }
    return JSONResponse({"channels": sorted(merged.values(), key=lambda c: c["name"].lower())})


# ==================== Bridges ====================

@router.get("/servers/{server_id}/bridges")
async def list_bridges(
    server_id: int,
    db: DBSession,
    user: CurrentUser,
):
    """List all bridges of a server, including paused and disconnected ones."""
    await get_server_by_id(server_id, db)
    await get_server_membership(server_id, user, db)
    result = await db.execute(
        select(SlackBridge)
        .where(SlackBridge.server_id == server_id)
        .order_by(SlackBridge.id)
    )
    bridges = result.unique().scalars().all()
    return JSONResponse({"bridges": [bridge_payload(b) for b in bridges]})


@router.post("/servers/{server_id}/bridges", status_code=status.HTTP_201_CREATED)
async def create_bridge(
    server_id: int,
    data: BridgeCreateRequest,
    db: DBSession,
    user: CurrentUser,
):
    """Create a bridge, or reconnect a previously disconnected one."""
    server = await get_server_by_id(server_id, db)
    await require_server_admin(server_id, user, db)
    workspace = await _get_workspace(db, server_id, data.workspace_id)

    channel = await db.get(Channel, data.channel_id)
    if not channel or channel.server_id != server_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not found")

    result = await db.execute(
        select(SlackBridge).where(
            SlackBridge.slack_team_id == workspace.team_id,
            SlackBridge.slack_channel_id == data.slack_channel_id,
            SlackBridge.channel_id == channel.id,
        )
    )
    bridge = result.unique().scalar_one_or_none()
    if bridge is not None and bridge.status != BridgeStatus.DISCONNECTED.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This channel is already bridged",
        )

    sync_direction = (data.sync_direction or SyncDirection(server.slack_default_sync_direction)).value
    if sync_direction in INBOUND_DIRECTIONS:
        await _ensure_inbound_available(
            db, workspace.team_id, data.slack_channel_id, bridge.id if bridge is not None else None
        )

    if bridge is None:
        bridge = SlackBridge(
            server_id=server.id,
            channel_id=channel.id,
            slack_team_id=workspace.team_id,
            slack_channel_id=data.slack_channel_id,
            created_by_id=user.id,
        )
        db.add(bridge)

    # Unset options fall back to the server's defaults
    bridge.workspace_id = workspace.id
    bridge.slack_channel_name = data.slack_channel_name
    bridge.sync_direction = sync_direction
    bridge.sync_reactions = (
        data.sync_reactions if data.sync_reactions is not None else server.slack_default_sync_reactions
    )
    bridge.sync_threads = data.sync_threads if data.sync_threads is not None else server.slack_default_sync_threads
    bridge.show_slack_usernames = data.show_slack_usernames
    bridge.display_name_override = data.display_name_override
    bridge.avatar_url_override = data.avatar_url_override
    bridge.reset()

    await db.commit()
    logger.info(f"Bridge {bridge.id}: channel {channel.id} <-> Slack {workspace.team_id}/{data.slack_channel_id}")
    return JSONResponse(bridge_payload(bridge), status_code=status.HTTP_201_CREATED)


@router.patch("/servers/{server_id}/bridges/{bridge_id}")
async def update_bridge(
    server_id: int,
    bridge_id: int,
    data: BridgeUpdateRequest,
    db: DBSession,
    user: CurrentUser,
):
    """Update a bridge's status or sync options."""
    await require_server_admin(server_id, user, db)
    bridge = await _get_bridge(db, server_id, bridge_id)
    changes = data.model_dump(exclude_unset=True)

    target_status = BridgeStatus(changes["status"]).value if changes.get("status") is not None else bridge.status
    target_direction = (
        SyncDirection(changes["sync_direction"]).value
        if changes.get("sync_direction") is not None
        else bridge.sync_direction
    )
    if target_status == BridgeStatus.ACTIVE.value and target_direction in INBOUND_DIRECTIONS:
        await _ensure_inbound_available(db, bridge.slack_team_id, bridge.slack_channel_id, bridge.id)

    new_status = changes.pop("status", None)
    if new_status is not None:
        if new_status == BridgeStatus.ACTIVE:
            bridge.reset()
        else:
            bridge.status = BridgeStatus(new_status).value

    if changes.get("sync_direction") is not None:
        changes["sync_direction"] = SyncDirection(changes["sync_direction"]).value

    for field, value in changes.items():
        if value is None and field not in ("slack_channel_name", "display_name_override", "avatar_url_override"):
            continue
        setattr(bridge, field, value)

    await db.commit()
    return JSONResponse(bridge_payload(bridge))


@router.delete("/servers/{server_id}/bridges/{bridge_id}")
async def disconnect_bridge(
    server_id: int,
    bridge_id: int,
    db: DBSession,
    user: CurrentUser,
):
    """Disconnect a bridge. The row is kept for its history."""
    await require_server_admin(server_id, user, db)
    bridge = await _get_bridge(db, server_id, bridge_id)
    bridge.status = BridgeStatus.DISCONNECTED.value
    await db.commit()
    logger.info(f"Bridge {bridge.id} disconnected by user {user.id}")
    return JSONResponse({"status": "disconnected", "bridge": bridge_payload(bridge)})


@router.get("/servers/{server_id}/status")
async def slack_status(
    server_id: int,
    db: DBSession,
    user: CurrentUser,
):
    """Summary of a server's Slack setup."""
    server = await get_server_by_id(server_id, db)
    await get_server_membership(server_id, user, db)

    workspace_count = await db.scalar(
        select(func.count(SlackWorkspace.id)).where(
            SlackWorkspace.server_id == server_id,
            SlackWorkspace.is_active == True,  # noqa: E712
        )
    )
    result = await db.execute(
        select(SlackBridge.status, func.count(SlackBridge.id))
        .where(SlackBridge.server_id == server_id)
        .group_by(SlackBridge.status)
    )
    by_status = {row[0]: row[1] for row in result.all()}

    return JSONResponse({
        "enabled": server.slack_enabled,
        "has_credentials": server.has_slack_credentials or settings.slack_enabled,
        "workspace_count": workspace_count or 0,
        "bridge_count": sum(by_status.values()),
        "active_bridges": by_status.get(BridgeStatus.ACTIVE.value, 0),
        "has_errors": by_status.get(BridgeStatus.ERROR.value, 0) > 0,
    })
