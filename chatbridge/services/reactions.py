"""
Reaction storage and Slack reaction sync.

Reactions are stored one row per (message, reactor, emoji key); the
aggregate shown on a message is those rows grouped by key. Adds are
guarded by the unique constraint and removes delete-if-present, so both
are safe to repeat.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from chatbridge.db import get_db_context
from chatbridge.models import MessageCorrelation, MessageReaction, ReactionMap, SlackBridge, build_reaction_map
from chatbridge.services.bridge_resolver import find_inbound_bridge, get_workspace_for_bridge
from chatbridge.services.correlations import find_correlation
from chatbridge.services.emoji import emoji_from_name, reaction_key, slack_reaction_name
from chatbridge.services.origin import is_bot_actor, is_external_reactor, slack_author_id
from chatbridge.services.slack import SlackAPIError, SlackService, slack_service

logger = logging.getLogger(__name__)


@dataclass
class ReactionChange:
    """Internal reactors that added or removed one emoji."""

    emoji: str
    added: set[str] = field(default_factory=set)
    removed: set[str] = field(default_factory=set)
    remaining: int = 0  # Internal reactors left after the change
    previous: int = 0  # Internal reactors before the change


async def get_reaction_map(db: AsyncSession, message_id: int) -> ReactionMap:
    result = await db.execute(
        select(MessageReaction)
        .where(MessageReaction.message_id == message_id)
        .order_by(MessageReaction.id)
    )
    return build_reaction_map(result.scalars().all())


async def add_reaction(
    db: AsyncSession,
    message_id: int,
    reactor_id: str,
    emoji: str,
    origin: str = "internal",
) -> bool:
    """Add a reaction. Returns False if the reactor already had it."""
    key = reaction_key(emoji)
    existing = await db.execute(
        select(MessageReaction.id).where(
            MessageReaction.message_id == message_id,
            MessageReaction.reactor_id == reactor_id,
            MessageReaction.reaction_key == key,
        )
    )
    if existing.scalar_one_or_none() is not None:
        return False

    try:
        async with db.begin_nested():
            db.add(MessageReaction(
                message_id=message_id,
                reactor_id=reactor_id,
                reaction_key=key,
                emoji=emoji,
                origin=origin,
            ))
            await db.flush()
    except IntegrityError:
        # Concurrent add of the same reaction
        return False
    return True


async def remove_reaction(db: AsyncSession, message_id: int, reactor_id: str, emoji: str) -> bool:
    """Remove a reaction. Returns False if there was nothing to remove."""
    result = await db.execute(
        delete(MessageReaction).where(
            MessageReaction.message_id == message_id,
            MessageReaction.reactor_id == reactor_id,
            MessageReaction.reaction_key == reaction_key(emoji),
        )
    )
    return (result.rowcount or 0) > 0


async def toggle_reaction(db: AsyncSession, message_id: int, reactor_id: str, emoji: str) -> bool:
    """Toggle a reaction. Returns True if it is now present."""
    if await remove_reaction(db, message_id, reactor_id, emoji):
        return False
    await add_reaction(db, message_id, reactor_id, emoji)
    return True


def diff_reactions(before: ReactionMap, after: ReactionMap) -> dict[str, ReactionChange]:
    """Per-emoji internal reactor changes between two aggregates.

    Slack reactors are ignored; they were mirrored in and must not be
    mirrored back out.
    """
    changes: dict[str, ReactionChange] = {}
    for key in set(before) | set(after):
        old_entry = before.get(key) or {}
        new_entry = after.get(key) or {}
        old_users = {u for u in old_entry.get("users", set()) if not is_external_reactor(u)}
        new_users = {u for u in new_entry.get("users", set()) if not is_external_reactor(u)}

        added = new_users - old_users
        removed = old_users - new_users
        if not added and not removed:
            continue

        changes[key] = ReactionChange(
            emoji=new_entry.get("emoji") or old_entry.get("emoji") or "",
            added=added,
            removed=removed,
            remaining=len(new_users),
        )
    return changes


def slack_reaction_changes(before: ReactionMap, after: ReactionMap) -> dict[str, ReactionChange]:
    """Internal reactor changes grouped by Slack reaction name.

    Distinct keys can share one Slack name (``❤`` and ``❤️`` are both
    ``heart``), so ``previous`` and ``remaining`` count internal reactors
    across every key that maps to the name.
    """
    grouped: dict[str, ReactionChange] = {}
    for change in diff_reactions(before, after).values():
        name = slack_reaction_name(change.emoji)
        entry = grouped.setdefault(name, ReactionChange(emoji=change.emoji))
        entry.added |= change.added
        entry.removed |= change.removed

    for name, entry in grouped.items():
        entry.previous = len(_internal_reactors_for_name(before, name))
        entry.remaining = len(_internal_reactors_for_name(after, name))
    return grouped


def _internal_reactors_for_name(reactions: ReactionMap, name: str) -> set[str]:
    reactors: set[str] = set()
    for entry in reactions.values():
        if slack_reaction_name(entry["emoji"]) == name:
            reactors.update(u for u in entry["users"] if not is_external_reactor(u))
    return reactors


async def apply_inbound_reaction(
    db: AsyncSession,
    team_id: str | None,
    event: dict[str, Any],
    added: bool,
) -> str:
    """Mirror a Slack ``reaction_added`` / ``reaction_removed`` event.

    Returns a short outcome label for logging.
    """
    item = event.get("item") or {}
    if item.get("type", "message") != "message":
        return "unsupported_item"

    bridge = await find_inbound_bridge(db, team_id, item.get("channel"))
    if bridge is None:
        return "no_bridge"

    workspace = await get_workspace_for_bridge(db, bridge)
    user_id = event.get("user")
    if is_bot_actor(user_id, workspace):
        return "own_bot"
    if not user_id or not event.get("reaction"):
        return "invalid_event"
    if not bridge.sync_reactions:
        return "reactions_disabled"

    correlation = await find_correlation(db, team_id, item.get("channel"), item.get("ts"))
    if correlation is None:
        return "no_correlation"

    emoji = emoji_from_name(event["reaction"])
    reactor_id = slack_author_id(user_id)
    if added:
        changed = await add_reaction(db, correlation.message_id, reactor_id, emoji, origin="external")
    else:
        changed = await remove_reaction(db, correlation.message_id, reactor_id, emoji)

    if changed:
        bridge.record_sync(count=0)
    return "applied" if changed else "unchanged"


async def sync_reaction_change(
    db: AsyncSession,
    message_id: int,
    before: ReactionMap,
    after: ReactionMap,
    slack: SlackService | None = None,
) -> int:
    """Push internal reaction changes to every bridge the message is on.

    Calls ``reactions.add`` when a Slack reaction name gains its first
    internal reactor and ``reactions.remove`` once it has none left. Never
    raises on Slack failures. Returns the number of Slack calls that succeeded.
    """
    slack = slack or slack_service
    changes = slack_reaction_changes(before, after)
    if not changes:
        return 0

    result = await db.execute(
        select(MessageCorrelation).where(MessageCorrelation.message_id == message_id)
    )
    correlations = result.scalars().all()

    calls = 0
    for correlation in correlations:
        bridge = await _outbound_reaction_bridge(db, correlation)
        if bridge is None:
            continue
        workspace = await get_workspace_for_bridge(db, bridge)
        if workspace is None or not workspace.is_connected:
            logger.warning(f"Bridge {bridge.id} has no bot token; reaction not synced")
            continue

        for name, change in changes.items():
            try:
                if change.added and change.previous == 0:
                    await slack.add_reaction(
                        workspace.bot_access_token, correlation.slack_channel_id, correlation.slack_ts, name
                    )
                    calls += 1
                elif change.removed and change.remaining == 0:
                    await slack.remove_reaction(
                        workspace.bot_access_token, correlation.slack_channel_id, correlation.slack_ts, name
                    )
                    calls += 1
            except SlackAPIError as e:
                logger.warning(f"Reaction sync to bridge {bridge.id} failed: {e.error}")
                bridge.record_error(f"reactions: {e.error}", terminal=e.is_terminal)
                if e.is_terminal:
                    break

    return calls


async def _outbound_reaction_bridge(db: AsyncSession, correlation: MessageCorrelation) -> SlackBridge | None:
    bridge = await db.get(SlackBridge, correlation.bridge_id)
    if bridge is None or not bridge.is_active or not bridge.allows_outbound or not bridge.sync_reactions:
        return None
    return bridge


async def run_reaction_sync(
    message_id: int,
    before: ReactionMap,
    after: ReactionMap,
    slack: SlackService | None = None,
    session_factory=None,
) -> None:
    """Background-task entry point: sync reactions in a fresh session."""
    session_factory = session_factory or get_db_context
    try:
        async with session_factory() as db:
            await sync_reaction_change(db, message_id, before, after, slack=slack)
    except Exception:
        logger.exception(f"Reaction sync failed for message {message_id}")
