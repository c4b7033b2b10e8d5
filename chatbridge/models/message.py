"""
Message model for chat messages.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbridge.db import Base
from chatbridge.models.base import TimestampMixin


class MessageOrigin(str, Enum):
    """Where a message was first authored."""
    INTERNAL = "internal"
    EXTERNAL = "external"


class Message(Base, TimestampMixin):
    """Message model for chat.

    Channel messages have ``thread_id`` unset; replies living in a thread
    carry the owning thread's id and are excluded from the channel feed.
    """

    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(primary_key=True)
    channel_id: Mapped[int] = mapped_column(ForeignKey("channels.id", ondelete="CASCADE"), nullable=False, index=True)
    thread_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)  # Nullable for external messages

    # Author as displayed. Slack authors use "slack:<user id>".
    author_id: Mapped[str] = mapped_column(String(64), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Content
    body: Mapped[str] = mapped_column(Text, nullable=False)
    plain_text: Mapped[str | None] = mapped_column(Text, nullable=True)  # Original Slack text for external messages

    # Origin tag, fixed at creation
    origin: Mapped[str] = mapped_column(String(20), default=MessageOrigin.INTERNAL.value, nullable=False)
    origin_bridge_id: Mapped[int | None] = mapped_column(
        ForeignKey("slack_bridges.id", ondelete="SET NULL"), nullable=True
    )

    # Edit/delete tracking
    edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    channel = relationship("Channel", back_populates="messages")
    user = relationship("User", back_populates="messages", lazy="joined")
    correlations = relationship(
        "MessageCorrelation",
        back_populates="message",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    reactions = relationship(
        "MessageReaction",
        back_populates="message",
        lazy="noload",
        cascade="all, delete-orphan",
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_external(self) -> bool:
        """Check if this message was ingested from Slack."""
        return self.origin == MessageOrigin.EXTERNAL.value

    @property
    def is_thread_reply(self) -> bool:
        return self.thread_id is not None

    def __repr__(self) -> str:
        return f"<Message {self.id} by {self.author_id}>"
