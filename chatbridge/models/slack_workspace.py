"""
Slack workspace installation (OAuth grant) model.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbridge.db import Base
from chatbridge.models.base import TimestampMixin, utc_now


class SlackWorkspace(Base, TimestampMixin):
    """
    Stores the OAuth tokens of one Slack app installation.
    Each server can have one installation per Slack team.
    """
    __tablename__ = "slack_workspaces"

    __table_args__ = (
        UniqueConstraint("server_id", "team_id", name="uq_slack_workspace_server_team"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    server_id: Mapped[int] = mapped_column(ForeignKey("servers.id", ondelete="CASCADE"), nullable=False, index=True)

    # Team info
    team_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    team_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    team_domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    team_icon: Mapped[str | None] = mapped_column(Text, nullable=True)

    # OAuth tokens
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    bot_user_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    bot_access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    scopes: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    installed_by_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    installed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    server = relationship("Server", lazy="joined")

    def __repr__(self) -> str:
        return f"<SlackWorkspace {self.team_id} for server {self.server_id}>"

    @property
    def is_connected(self) -> bool:
        """Check if installation is usable for bot calls."""
        return bool(self.bot_access_token) and self.is_active
