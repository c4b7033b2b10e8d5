"""
Inbound Slack Events API processing.

Takes an already-verified ``event_callback`` payload and mirrors it into
the internal chat: new messages (flat or threaded) and reaction changes.
Nothing in here raises to the webhook; routing misses and filtered events
are logged and reported as an outcome label, processing errors are
recorded on the bridge.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from chatbridge.models import Message, MessageCorrelation, MessageOrigin, SlackBridge, SlackWorkspace
from chatbridge.services.bridge_resolver import find_inbound_bridge, get_workspace_for_bridge
from chatbridge.services.correlations import find_correlation
from chatbridge.services.origin import message_skip_reason, slack_author_id
from chatbridge.services.reactions import apply_inbound_reaction
from chatbridge.services.slack import SlackService, slack_service
from chatbridge.services.slack_formatting import slack_to_markdown
from chatbridge.services.threads import add_thread_message, find_or_create_thread
from chatbridge.services.user_cache import UserInfoCache, default_ttl, user_info_cache

logger = logging.getLogger(__name__)

DEFAULT_SLACK_AUTHOR = "Slack User"


async def resolve_slack_author(
    slack: SlackService,
    cache: UserInfoCache,
    workspace: SlackWorkspace,
    user_id: str,
) -> tuple[str, str | None]:
    """Return (display name, avatar url) for a Slack user, cached per team."""
    key = f"{workspace.team_id}:{user_id}"
    value, found = cache.get(key)
    if found:
        return value

    info = await slack.get_user_info(workspace.bot_access_token, user_id)
    if not info:
        return DEFAULT_SLACK_AUTHOR, None

    profile = info.get("profile") or {}
    name = (
        profile.get("real_name")
        or info.get("real_name")
        or profile.get("display_name")
        or info.get("name")
        or DEFAULT_SLACK_AUTHOR
    )
    value = (name, profile.get("image_48"))
    cache.put(key, value, default_ttl())
    return value


async def handle_event_callback(
    db: AsyncSession,
    payload: dict[str, Any],
    slack: SlackService | None = None,
    cache: UserInfoCache | None = None,
) -> str:
    """Dispatch one ``event_callback`` payload by event type."""
    event = payload.get("event") or {}
    if not isinstance(event, dict):
        return "ignored"
    team_id = payload.get("team_id") or event.get("team")
    event_type = event.get("type")

    if event_type == "message":
        return await handle_message_event(db, team_id, event, slack=slack, cache=cache)
    if event_type in ("reaction_added", "reaction_removed"):
        outcome = await apply_inbound_reaction(db, team_id, event, added=event_type == "reaction_added")
        logger.info(f"Slack {event_type} on {team_id}: {outcome}")
        return outcome

    logger.debug(f"Ignoring Slack event type {event_type}")
    return "ignored"


async def handle_message_event(
    db: AsyncSession,
    team_id: str | None,
    event: dict[str, Any],
    slack: SlackService | None = None,
    cache: UserInfoCache | None = None,
) -> str:
    """Mirror one Slack ``message`` event into the bridged channel."""
    slack = slack or slack_service
    cache = cache if cache is not None else user_info_cache

    bridge = await find_inbound_bridge(db, team_id, event.get("channel"))
    if bridge is None:
        logger.info(f"No active inbound bridge for Slack channel {team_id}/{event.get('channel')}")
        return "no_bridge"

    workspace = await get_workspace_for_bridge(db, bridge)
    if workspace is None:
        logger.error(f"Workspace not found for bridge {bridge.id} (team {team_id})")
        return "no_workspace"

    reason = message_skip_reason(event, workspace)
    if reason is not None:
        logger.info(f"Skipping Slack message on bridge {bridge.id}: {reason}")
        return "skipped"

    # Slack retries deliveries it thinks failed
    if await find_correlation(db, bridge.slack_team_id, bridge.slack_channel_id, event["ts"]):
        logger.info(f"Slack message {event['ts']} already ingested")
        return "duplicate"

    try:
        return await _ingest_message(db, bridge, workspace, event, slack, cache)
    except Exception as e:
        logger.exception(f"Error processing Slack message on bridge {bridge.id}")
        bridge.record_error(f"inbound: {e}")
        return "error"


async def _ingest_message(
    db: AsyncSession,
    bridge: SlackBridge,
    workspace: SlackWorkspace,
    event: dict[str, Any],
    slack: SlackService,
    cache: UserInfoCache,
) -> str:
    user_id = event["user"]
    ts = event["ts"]
    thread_ts = event.get("thread_ts")
    text = event.get("text") or ""

    author_name, author_avatar = DEFAULT_SLACK_AUTHOR, None
    if bridge.show_slack_usernames:
        author_name, author_avatar = await resolve_slack_author(slack, cache, workspace, user_id)

    message = Message(
        channel_id=bridge.channel_id,
        user_id=None,
        author_id=slack_author_id(user_id),
        display_name=author_name,
        photo_url=author_avatar,
        body=slack_to_markdown(text),
        plain_text=text,
        origin=MessageOrigin.EXTERNAL.value,
        origin_bridge_id=bridge.id,
    )

    thread = None
    if thread_ts and thread_ts != ts and bridge.sync_threads:
        root_correlation = await find_correlation(db, bridge.slack_team_id, bridge.slack_channel_id, thread_ts)
        if root_correlation is not None:
            root = await db.get(Message, root_correlation.message_id)
            if root is not None:
                thread, _ = await find_or_create_thread(db, root, created_by=message.author_id)

    try:
        async with db.begin_nested():
            if thread is not None:
                add_thread_message(thread, message)
            db.add(message)
            await db.flush()
            db.add(MessageCorrelation(
                message_id=message.id,
                bridge_id=bridge.id,
                slack_team_id=bridge.slack_team_id,
                slack_channel_id=bridge.slack_channel_id,
                slack_ts=ts,
                slack_thread_ts=thread_ts,
                is_thread_reply=bool(thread_ts and thread_ts != ts),
                is_external_origin=True,
            ))
            await db.flush()
    except IntegrityError:
        # Concurrent retry of the same delivery won the correlation
        logger.info(f"Slack message {ts} ingested concurrently; dropping duplicate")
        return "duplicate"

    bridge.record_sync()
    logger.info(f"Slack message {ts} synced to channel {bridge.channel_id} as message {message.id}")
    return "threaded" if thread is not None else "created"
