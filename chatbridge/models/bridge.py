"""
Bridge model for linking internal channels with Slack channels.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbridge.db import Base
from chatbridge.models.base import TimestampMixin, utc_now


class SyncDirection(str, Enum):
    """Which way messages flow through a bridge."""
    INBOUND = "slack-to-hconnect"
    OUTBOUND = "hconnect-to-slack"
    BIDIRECTIONAL = "bidirectional"


class BridgeStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    ERROR = "error"
    DISCONNECTED = "disconnected"


class SlackBridge(Base, TimestampMixin):
    """
    Links an internal channel to a Slack channel.
    Enables one- or two-way sync of messages, threads and reactions.
    """
    __tablename__ = "slack_bridges"

    __table_args__ = (
        # One bridge per Slack channel per internal channel
        UniqueConstraint("slack_team_id", "slack_channel_id", "channel_id", name="uq_bridge_slack_channel"),
        # Inbound resolution index
        Index("ix_bridge_team_channel_status", "slack_team_id", "slack_channel_id", "status"),
        # Outbound fan-out index
        Index("ix_bridge_server_channel_status", "server_id", "channel_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Internal side
    server_id: Mapped[int] = mapped_column(ForeignKey("servers.id", ondelete="CASCADE"), nullable=False)
    channel_id: Mapped[int] = mapped_column(ForeignKey("channels.id", ondelete="CASCADE"), nullable=False)

    # Slack side
    workspace_id: Mapped[int] = mapped_column(
        ForeignKey("slack_workspaces.id", ondelete="CASCADE"), nullable=False
    )
    slack_team_id: Mapped[str] = mapped_column(String(32), nullable=False)
    slack_channel_id: Mapped[str] = mapped_column(String(32), nullable=False)
    slack_channel_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Sync settings
    sync_direction: Mapped[str] = mapped_column(String(30), default=SyncDirection.BIDIRECTIONAL.value, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=BridgeStatus.ACTIVE.value, nullable=False)
    sync_reactions: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sync_threads: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    show_slack_usernames: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Optional per-bridge display override for outbound posts
    display_name_override: Mapped[str | None] = mapped_column(String(80), nullable=True)
    avatar_url_override: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Tracking
    message_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_sync_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    workspace = relationship("SlackWorkspace", lazy="joined")
    server = relationship("Server", lazy="joined")

    def __repr__(self) -> str:
        return f"<SlackBridge {self.slack_team_id}/{self.slack_channel_id} <-> Channel {self.channel_id}>"

    @property
    def is_active(self) -> bool:
        return self.status == BridgeStatus.ACTIVE.value

    @property
    def allows_inbound(self) -> bool:
        return self.sync_direction in (SyncDirection.INBOUND.value, SyncDirection.BIDIRECTIONAL.value)

    @property
    def allows_outbound(self) -> bool:
        return self.sync_direction in (SyncDirection.OUTBOUND.value, SyncDirection.BIDIRECTIONAL.value)

    def record_sync(self, count: int = 1) -> None:
        """Bump counters after a successful sync."""
        self.message_count = (self.message_count or 0) + count
        self.last_sync_at = utc_now()

    def record_error(self, error: str, terminal: bool = False) -> None:
        """Record a failure; terminal failures take the bridge out of rotation."""
        self.last_error = error
        if terminal:
            self.status = BridgeStatus.ERROR.value

    def reset(self) -> None:
        """Bring an errored bridge back into rotation."""
        self.status = BridgeStatus.ACTIVE.value
        self.last_error = None
