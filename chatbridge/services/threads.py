"""
Thread creation, reply bookkeeping and auto-archive.

A thread hangs off exactly one root message. Creation is find-or-create
guarded by the unique ``root_message_id``: the insert runs in a savepoint
and a writer that loses the race reuses the row the winner inserted.
"""

import logging
import re
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from chatbridge.models import Message, Thread, ThreadStatus
from chatbridge.models.base import utc_now
from chatbridge.settings import settings

logger = logging.getLogger(__name__)

MIN_TTL_HOURS = 1
MIN_MEMBERS = 2
THREAD_NAME_LENGTH = 48

_WHITESPACE = re.compile(r"\s+")


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def clamp_ttl_hours(value: int | None) -> int:
    return clamp(value or settings.thread_default_ttl_hours, MIN_TTL_HOURS, settings.thread_max_ttl_hours)


def clamp_max_members(value: int | None) -> int:
    return clamp(value or settings.thread_max_members, MIN_MEMBERS, settings.thread_max_members)


def derive_preview(text: str | None, limit: int | None = None) -> str:
    """Single-line preview: whitespace collapsed and truncated."""
    limit = limit or settings.thread_preview_length
    cleaned = _WHITESPACE.sub(" ", text or "").strip()
    return cleaned[:limit]


def thread_name_from_source(text: str | None) -> str:
    cleaned = _WHITESPACE.sub(" ", text or "").strip()
    if not cleaned:
        return "Thread"
    return cleaned[:THREAD_NAME_LENGTH].strip()


def next_auto_archive_at(ttl_hours: int, now: datetime | None = None) -> datetime:
    return (now or utc_now()) + timedelta(hours=clamp_ttl_hours(ttl_hours))


async def get_thread_for_root(db: AsyncSession, root_message_id: int) -> Thread | None:
    result = await db.execute(select(Thread).where(Thread.root_message_id == root_message_id))
    return result.unique().scalar_one_or_none()


async def find_or_create_thread(
    db: AsyncSession,
    root: Message,
    created_by: str,
    ttl_hours: int | None = None,
    max_members: int | None = None,
    now: datetime | None = None,
) -> tuple[Thread, bool]:
    """Return the thread rooted at ``root``, creating it if needed.

    Returns:
        (thread, created) where ``created`` is False when an existing thread,
        possibly inserted concurrently by another writer, was reused.
    """
    existing = await get_thread_for_root(db, root.id)
    if existing is not None:
        return existing, False

    now = now or utc_now()
    ttl = clamp_ttl_hours(ttl_hours)
    members = [created_by]
    preview = derive_preview(root.body) or f"{root.display_name or 'Someone'} started a thread."

    thread = Thread(
        channel_id=root.channel_id,
        root_message_id=root.id,
        created_by=created_by,
        name=thread_name_from_source(root.body),
        preview=preview,
        last_message_preview=preview,
        last_message_at=now,
        ttl_hours=ttl,
        auto_archive_at=next_auto_archive_at(ttl, now),
        status=ThreadStatus.ACTIVE.value,
        max_members=clamp_max_members(max_members),
        member_ids=members,
        member_count=len(members),
        message_count=0,
    )

    try:
        async with db.begin_nested():
            db.add(thread)
            await db.flush()
    except IntegrityError:
        logger.info(f"Thread for message {root.id} created concurrently; reusing it")
        existing = await get_thread_for_root(db, root.id)
        if existing is None:
            raise
        return existing, False

    logger.info(f"Created thread {thread.id} on message {root.id}")
    return thread, True


def add_thread_member(thread: Thread, member_id: str) -> bool:
    """Add a member while the thread is below its member limit."""
    members = list(thread.member_ids or [])
    if member_id in members or len(members) >= thread.max_members:
        return False
    members.append(member_id)
    # Reassign so the JSON column is flagged dirty
    thread.member_ids = members
    thread.member_count = len(members)
    return True


def add_thread_message(
    thread: Thread,
    message: Message,
    now: datetime | None = None,
) -> None:
    """Place ``message`` in ``thread`` and refresh the thread's summary fields."""
    now = now or utc_now()
    message.thread_id = thread.id
    message.channel_id = thread.channel_id

    thread.last_message_at = now
    thread.last_message_preview = derive_preview(message.body)
    thread.message_count = (thread.message_count or 0) + 1
    thread.auto_archive_at = next_auto_archive_at(thread.ttl_hours, now)

    # New activity brings an archived thread back
    if thread.status != ThreadStatus.ACTIVE.value:
        thread.status = ThreadStatus.ACTIVE.value
        thread.archived_at = None

    add_thread_member(thread, message.author_id)


def archive_thread(thread: Thread, now: datetime | None = None) -> None:
    thread.status = ThreadStatus.ARCHIVED.value
    thread.archived_at = now or utc_now()


async def archive_expired_threads(db: AsyncSession, now: datetime | None = None) -> int:
    """Archive active threads whose auto-archive deadline has passed."""
    now = now or utc_now()
    result = await db.execute(
        select(Thread).where(
            Thread.status == ThreadStatus.ACTIVE.value,
            Thread.auto_archive_at.is_not(None),
        )
    )
    archived = 0
    for thread in result.unique().scalars().all():
        if thread.is_expired(now):
            archive_thread(thread, now)
            archived += 1

    if archived:
        logger.info(f"Archived {archived} expired threads")
    return archived
