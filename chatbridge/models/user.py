"""
User model for authentication and identity.
"""

import secrets
from datetime import datetime, timedelta

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbridge.db import Base
from chatbridge.models.base import TimestampMixin, ensure_utc, utc_now
from chatbridge.settings import settings


class User(Base, TimestampMixin):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Avatar
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Session management
    session_token: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True, index=True)
    session_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Status
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    last_seen_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    messages = relationship("Message", back_populates="user", lazy="noload")

    def generate_session_token(self) -> str:
        """Generate a new session token and set expiry."""
        self.session_token = secrets.token_hex(32)
        self.session_expires_at = utc_now() + timedelta(hours=settings.session_expire_hours)
        return self.session_token

    def is_session_valid(self) -> bool:
        """Check if current session is valid."""
        if not self.session_token or not self.session_expires_at:
            return False
        return utc_now() < ensure_utc(self.session_expires_at)

    def update_last_seen(self) -> None:
        """Update last seen timestamp."""
        self.last_seen_at = utc_now()

    def __repr__(self) -> str:
        return f"<User {self.email}>"
