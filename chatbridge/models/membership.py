"""
Server membership model.
"""

from enum import Enum

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from chatbridge.db import Base
from chatbridge.models.base import TimestampMixin


class MembershipRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class ServerMembership(Base, TimestampMixin):
    """A user's membership of a server; owners and admins manage its Slack bridges."""

    __tablename__ = "server_memberships"
    __table_args__ = (
        UniqueConstraint("server_id", "user_id", name="uq_membership_server_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    server_id: Mapped[int] = mapped_column(ForeignKey("servers.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), default=MembershipRole.MEMBER.value, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role in (MembershipRole.OWNER.value, MembershipRole.ADMIN.value)

    def __repr__(self) -> str:
        return f"<ServerMembership user={self.user_id} server={self.server_id} role={self.role}>"
