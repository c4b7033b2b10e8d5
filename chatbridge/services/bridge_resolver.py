"""
Bridge lookups for both sync directions.

Inbound lookups go through the (team, channel, status) index and outbound
lookups through the (server, channel, status) index; neither scans a
server's bridges.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chatbridge.models import BridgeStatus, SlackBridge, SlackWorkspace, SyncDirection

logger = logging.getLogger(__name__)

INBOUND_DIRECTIONS = (SyncDirection.INBOUND.value, SyncDirection.BIDIRECTIONAL.value)
OUTBOUND_DIRECTIONS = (SyncDirection.OUTBOUND.value, SyncDirection.BIDIRECTIONAL.value)


class BridgeConfigurationError(Exception):
    """Raised when Slack credentials or secrets needed for a request are missing."""


async def find_inbound_bridge(
    db: AsyncSession,
    team_id: str | None,
    channel_id: str | None,
) -> SlackBridge | None:
    """Find the active bridge that accepts messages from a Slack channel."""
    if not team_id or not channel_id:
        return None

    result = await db.execute(
        select(SlackBridge)
        .where(
            SlackBridge.slack_team_id == team_id,
            SlackBridge.slack_channel_id == channel_id,
            SlackBridge.status == BridgeStatus.ACTIVE.value,
            SlackBridge.sync_direction.in_(INBOUND_DIRECTIONS),
        )
        .order_by(SlackBridge.id)
    )
    bridges = result.unique().scalars().all()
    if not bridges:
        return None
    if len(bridges) > 1:
        logger.warning(
            f"Multiple inbound bridges for Slack channel {team_id}/{channel_id}; using bridge {bridges[0].id}"
        )
    return bridges[0]


async def find_outbound_bridges(
    db: AsyncSession,
    server_id: int,
    channel_id: int,
) -> list[SlackBridge]:
    """All active bridges that post messages from an internal channel to Slack."""
    result = await db.execute(
        select(SlackBridge)
        .where(
            SlackBridge.server_id == server_id,
            SlackBridge.channel_id == channel_id,
            SlackBridge.status == BridgeStatus.ACTIVE.value,
            SlackBridge.sync_direction.in_(OUTBOUND_DIRECTIONS),
        )
        .order_by(SlackBridge.id)
    )
    return list(result.unique().scalars().all())


async def get_workspace_for_bridge(db: AsyncSession, bridge: SlackBridge) -> SlackWorkspace | None:
    """Return the installation a bridge posts through."""
    return await db.get(SlackWorkspace, bridge.workspace_id)


async def find_inbound_conflict(
    db: AsyncSession,
    team_id: str,
    channel_id: str,
    exclude_bridge_id: int | None = None,
) -> SlackBridge | None:
    """Another active bridge already receiving messages from a Slack channel."""
    query = select(SlackBridge).where(
        SlackBridge.slack_team_id == team_id,
        SlackBridge.slack_channel_id == channel_id,
        SlackBridge.status == BridgeStatus.ACTIVE.value,
        SlackBridge.sync_direction.in_(INBOUND_DIRECTIONS),
    )
    if exclude_bridge_id is not None:
        query = query.where(SlackBridge.id != exclude_bridge_id)
    result = await db.execute(query.order_by(SlackBridge.id))
    return result.unique().scalars().first()
