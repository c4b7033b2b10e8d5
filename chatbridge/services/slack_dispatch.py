"""
Outbound dispatch of internal messages to bridged Slack channels.

One job is built per outbound bridge. Jobs only talk to Slack and run
concurrently under a semaphore; their results are applied to the session
one at a time afterwards, since a session must not be shared between
concurrent tasks.

A failing bridge never affects the others. Terminal Slack errors move the
bridge to ``error`` so later dispatches skip it until an operator resets it;
anything else is logged and left for the next message.
"""

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from chatbridge.db import get_db_context
from chatbridge.models import Channel, Message, Server, SlackBridge, Thread, User
from chatbridge.services.bridge_resolver import find_outbound_bridges, get_workspace_for_bridge
from chatbridge.services.correlations import correlations_by_bridge, upsert_correlation
from chatbridge.services.origin import may_dispatch_to, origin_of
from chatbridge.services.slack import TERMINAL_ERRORS, SlackAPIError, SlackService, slack_service
from chatbridge.services.slack_formatting import markdown_to_slack
from chatbridge.settings import settings

logger = logging.getLogger(__name__)

__all__ = [
    "TERMINAL_ERRORS",
    "DispatchJob",
    "DispatchResult",
    "dispatch_message",
    "run_dispatch",
]


@dataclass
class OutboundPost:
    """Arguments for one chat.postMessage call."""

    text: str
    username: str | None = None
    icon_url: str | None = None


@dataclass
class DispatchJob:
    bridge: SlackBridge
    token: str
    post: OutboundPost
    thread_ts: str | None = None
    # Root of a thread that has no Slack counterpart on this bridge yet
    backfill_root_id: int | None = None
    backfill_post: OutboundPost | None = None


@dataclass
class DispatchResult:
    bridge_id: int
    ts: str | None = None
    thread_ts: str | None = None
    root_ts: str | None = None
    error: str | None = None
    terminal: bool = False

    @property
    def ok(self) -> bool:
        return self.ts is not None and self.error is None


def _display_for(
    bridge: SlackBridge,
    server: Server | None,
    message: Message,
    author: User | None,
) -> OutboundPost:
    """Username and icon: bridge override, then server override, then the author."""
    author_name = message.display_name or (author.display_name if author else None)
    author_icon = message.photo_url or (author.avatar_url if author else None)

    username = bridge.display_name_override or (server.slack_bot_display_name if server else None) or author_name
    icon_url = bridge.avatar_url_override or (server.slack_bot_avatar_url if server else None) or author_icon
    return OutboundPost(text=markdown_to_slack(message.body), username=username, icon_url=icon_url)


async def _author_of(db: AsyncSession, message: Message) -> User | None:
    if message.user_id is None:
        return None
    return await db.get(User, message.user_id)


async def _build_jobs(
    db: AsyncSession,
    message: Message,
    bridges: list[SlackBridge],
    server: Server | None,
) -> list[DispatchJob]:
    existing = await correlations_by_bridge(db, message.id)
    author = await _author_of(db, message)

    root: Message | None = None
    root_author: User | None = None
    root_correlations = {}
    if message.thread_id is not None:
        thread = await db.get(Thread, message.thread_id)
        if thread is not None:
            root = await db.get(Message, thread.root_message_id)
        if root is not None:
            root_correlations = await correlations_by_bridge(db, root.id)
            root_author = await _author_of(db, root)

    jobs = []
    for bridge in bridges:
        if bridge.id in existing:
            logger.debug(f"Message {message.id} already on bridge {bridge.id}")
            continue

        workspace = await get_workspace_for_bridge(db, bridge)
        if workspace is None or not workspace.is_connected:
            logger.warning(f"Bridge {bridge.id} has no bot token; skipping outbound message {message.id}")
            continue

        job = DispatchJob(
            bridge=bridge,
            token=workspace.bot_access_token,
            post=_display_for(bridge, server, message, author),
        )

        # Replies go into the Slack thread only when the bridge syncs threads
        if root is not None and bridge.sync_threads:
            root_correlation = root_correlations.get(bridge.id)
            if root_correlation is not None:
                job.thread_ts = root_correlation.slack_ts
            elif may_dispatch_to(origin_of(root), bridge):
                job.backfill_root_id = root.id
                job.backfill_post = _display_for(bridge, server, root, root_author)

        jobs.append(job)
    return jobs


async def _run_job(job: DispatchJob, slack: SlackService, semaphore: asyncio.Semaphore) -> DispatchResult:
    result = DispatchResult(bridge_id=job.bridge.id)
    channel = job.bridge.slack_channel_id

    async with semaphore:
        try:
            thread_ts = job.thread_ts
            if job.backfill_post is not None:
                response = await slack.post_message(
                    job.token,
                    channel,
                    job.backfill_post.text,
                    username=job.backfill_post.username,
                    icon_url=job.backfill_post.icon_url,
                )
                result.root_ts = response.get("ts")
                thread_ts = result.root_ts

            response = await slack.post_message(
                job.token,
                channel,
                job.post.text,
                thread_ts=thread_ts,
                username=job.post.username,
                icon_url=job.post.icon_url,
            )
            result.ts = response.get("ts")
            result.thread_ts = thread_ts
            if result.ts is None:
                result.error = "missing_ts"
        except SlackAPIError as e:
            result.error = e.error
            result.terminal = e.is_terminal
        except Exception as e:
            logger.exception(f"Unexpected error posting to bridge {job.bridge.id}")
            result.error = type(e).__name__

    return result


async def _apply_result(db: AsyncSession, message: Message, job: DispatchJob, result: DispatchResult) -> None:
    bridge = job.bridge

    if result.root_ts and job.backfill_root_id is not None:
        await upsert_correlation(db, job.backfill_root_id, bridge, result.root_ts)
        bridge.record_sync()

    if result.ok:
        await upsert_correlation(db, message.id, bridge, result.ts, slack_thread_ts=result.thread_ts)
        bridge.record_sync()
        logger.info(f"Message {message.id} posted to Slack {bridge.slack_channel_id} as {result.ts}")
        return

    if result.terminal:
        logger.error(f"Bridge {bridge.id} disabled after terminal Slack error: {result.error}")
        bridge.record_error(result.error, terminal=True)
    else:
        logger.warning(f"Transient Slack error on bridge {bridge.id} for message {message.id}: {result.error}")


async def dispatch_message(
    db: AsyncSession,
    message_id: int,
    slack: SlackService | None = None,
    concurrency: int | None = None,
) -> list[DispatchResult]:
    """Post an internal message to every outbound bridge of its channel.

    Never raises; failures are logged and recorded per bridge.
    """
    slack = slack or slack_service
    concurrency = concurrency or settings.slack_outbound_concurrency

    try:
        message = await db.get(Message, message_id)
        if message is None or message.is_deleted:
            return []

        channel = await db.get(Channel, message.channel_id)
        if channel is None:
            return []

        origin = origin_of(message)
        bridges = [
            bridge
            for bridge in await find_outbound_bridges(db, channel.server_id, channel.id)
            if may_dispatch_to(origin, bridge)
        ]
        if not bridges:
            return []

        server = await db.get(Server, channel.server_id)
        jobs = await _build_jobs(db, message, bridges, server)
        if not jobs:
            return []

        semaphore = asyncio.Semaphore(concurrency)
        results = await asyncio.gather(*(_run_job(job, slack, semaphore) for job in jobs))

        for job, result in zip(jobs, results):
            await _apply_result(db, message, job, result)
        await db.flush()
        return list(results)
    except Exception:
        logger.exception(f"Outbound dispatch failed for message {message_id}")
        return []


async def run_dispatch(
    message_id: int,
    slack: SlackService | None = None,
    session_factory=None,
) -> None:
    """Background-task entry point: dispatch in a fresh session."""
    session_factory = session_factory or get_db_context
    try:
        async with session_factory() as db:
            await dispatch_message(db, message_id, slack=slack)
    except Exception:
        logger.exception(f"Outbound dispatch session failed for message {message_id}")
