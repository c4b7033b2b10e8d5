"""
Thread model for reply chains rooted at a channel message.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbridge.db import Base
from chatbridge.models.base import TimestampMixin, ensure_utc, utc_now


class ThreadStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class Thread(Base, TimestampMixin):
    """A reply chain hanging off one channel message."""

    __tablename__ = "threads"

    id: Mapped[int] = mapped_column(primary_key=True)
    channel_id: Mapped[int] = mapped_column(ForeignKey("channels.id", ondelete="CASCADE"), nullable=False, index=True)

    # Unique: at most one thread per root message, whoever creates it first wins
    root_message_id: Mapped[int] = mapped_column(
        ForeignKey("messages.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    preview: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_message_preview: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_message_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Archiving
    ttl_hours: Mapped[int] = mapped_column(Integer, default=24, nullable=False)
    auto_archive_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=ThreadStatus.ACTIVE.value, nullable=False)

    # Membership
    max_members: Mapped[int] = mapped_column(Integer, default=20, nullable=False)
    member_ids: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    member_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    message_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    root_message = relationship("Message", foreign_keys=[root_message_id], lazy="joined")

    @property
    def is_archived(self) -> bool:
        return self.status == ThreadStatus.ARCHIVED.value

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the auto-archive deadline has passed."""
        deadline = ensure_utc(self.auto_archive_at)
        if deadline is None:
            return False
        return (now or utc_now()) >= deadline

    def __repr__(self) -> str:
        return f"<Thread {self.id} on message {self.root_message_id}>"
