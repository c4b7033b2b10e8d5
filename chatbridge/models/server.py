"""
Server model for multi-tenant organization.

A server also carries its own Slack app configuration so that each
tenant can install a separate Slack app with its own signing secret.
"""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbridge.db import Base
from chatbridge.models.base import TimestampMixin


class Server(Base, TimestampMixin):
    """Server (organization/team) model."""

    __tablename__ = "servers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    icon_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Slack app credentials
    slack_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    slack_client_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    slack_client_secret: Mapped[str | None] = mapped_column(Text, nullable=True)
    slack_signing_secret: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Display override used for every outbound post unless a bridge sets its own
    slack_bot_display_name: Mapped[str | None] = mapped_column(String(80), nullable=True)
    slack_bot_avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Defaults applied to newly created bridges
    slack_default_sync_direction: Mapped[str] = mapped_column(String(30), default="bidirectional", nullable=False)
    slack_default_sync_reactions: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    slack_default_sync_threads: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    channels = relationship("Channel", back_populates="server", lazy="noload")

    @property
    def has_slack_credentials(self) -> bool:
        return bool(self.slack_client_id and self.slack_client_secret)

    def __repr__(self) -> str:
        return f"<Server {self.slug}>"
