"""
Lookups and write-back for message correlations.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from chatbridge.models import MessageCorrelation, SlackBridge

logger = logging.getLogger(__name__)


async def find_correlation(
    db: AsyncSession,
    team_id: str | None,
    channel_id: str | None,
    ts: str | None,
) -> MessageCorrelation | None:
    """Find the internal counterpart of a Slack message."""
    if not team_id or not channel_id or not ts:
        return None
    result = await db.execute(
        select(MessageCorrelation).where(
            MessageCorrelation.slack_team_id == team_id,
            MessageCorrelation.slack_channel_id == channel_id,
            MessageCorrelation.slack_ts == ts,
        )
    )
    return result.scalar_one_or_none()


async def correlations_by_bridge(db: AsyncSession, message_id: int) -> dict[int, MessageCorrelation]:
    result = await db.execute(
        select(MessageCorrelation).where(MessageCorrelation.message_id == message_id)
    )
    return {c.bridge_id: c for c in result.scalars().all()}


async def upsert_correlation(
    db: AsyncSession,
    message_id: int,
    bridge: SlackBridge,
    slack_ts: str,
    slack_thread_ts: str | None = None,
    is_external_origin: bool = False,
) -> MessageCorrelation | None:
    """Record that ``message_id`` is ``slack_ts`` on the bridge's Slack channel.

    Returns None when the Slack message is already correlated to another
    internal message (a retried delivery).
    """
    result = await db.execute(
        select(MessageCorrelation).where(
            MessageCorrelation.bridge_id == bridge.id,
            MessageCorrelation.message_id == message_id,
        )
    )
    correlation = result.scalar_one_or_none()
    if correlation is not None:
        correlation.slack_ts = slack_ts
        correlation.slack_thread_ts = slack_thread_ts
        correlation.is_thread_reply = bool(slack_thread_ts and slack_thread_ts != slack_ts)
        await db.flush()
        return correlation

    correlation = MessageCorrelation(
        message_id=message_id,
        bridge_id=bridge.id,
        slack_team_id=bridge.slack_team_id,
        slack_channel_id=bridge.slack_channel_id,
        slack_ts=slack_ts,
        slack_thread_ts=slack_thread_ts,
        is_thread_reply=bool(slack_thread_ts and slack_thread_ts != slack_ts),
        is_external_origin=is_external_origin,
    )
    try:
        async with db.begin_nested():
            db.add(correlation)
            await db.flush()
    except IntegrityError:
        logger.info(f"Slack message {bridge.slack_channel_id}/{slack_ts} already correlated")
        return None
    return correlation
