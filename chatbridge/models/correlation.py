"""
Cross-references between internal messages and Slack messages.
"""

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbridge.db import Base
from chatbridge.models.base import TimestampMixin


class MessageCorrelation(Base, TimestampMixin):
    """
    Links an internal message to its Slack counterpart through one bridge.

    A message posted internally and fanned out to several bridges gets one
    row per bridge. A message ingested from Slack gets exactly one row,
    flagged ``is_external_origin``.
    """

    __tablename__ = "message_correlations"

    __table_args__ = (
        # One Slack counterpart per bridge
        UniqueConstraint("bridge_id", "message_id", name="uq_correlation_bridge_message"),
        # A Slack message maps to at most one internal message
        UniqueConstraint("slack_team_id", "slack_channel_id", "slack_ts", name="uq_correlation_slack_ts"),
        Index("ix_correlation_lookup", "slack_team_id", "slack_channel_id", "slack_ts"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    message_id: Mapped[int] = mapped_column(
        ForeignKey("messages.id", ondelete="CASCADE"), nullable=False, index=True
    )
    bridge_id: Mapped[int] = mapped_column(
        ForeignKey("slack_bridges.id", ondelete="CASCADE"), nullable=False
    )

    slack_team_id: Mapped[str] = mapped_column(String(32), nullable=False)
    slack_channel_id: Mapped[str] = mapped_column(String(32), nullable=False)
    slack_ts: Mapped[str] = mapped_column(String(32), nullable=False)
    slack_thread_ts: Mapped[str | None] = mapped_column(String(32), nullable=True)

    is_thread_reply: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_external_origin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    message = relationship("Message", back_populates="correlations")

    def __repr__(self) -> str:
        return f"<MessageCorrelation message {self.message_id} <-> {self.slack_channel_id}/{self.slack_ts}>"
