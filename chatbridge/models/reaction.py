"""
Message reaction model for emoji reactions on messages.
"""

from collections.abc import Iterable

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatbridge.db import Base
from chatbridge.models.base import TimestampMixin

# {reaction_key: {"emoji": str, "users": set[str]}}
ReactionMap = dict[str, dict]


class MessageReaction(Base, TimestampMixin):
    """One reactor's use of one emoji on one message.

    The per-message aggregate is these rows grouped by ``reaction_key``;
    an emoji with no reactors has no rows and so no entry.
    """

    __tablename__ = "message_reactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    message_id: Mapped[int] = mapped_column(
        ForeignKey("messages.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Internal user id as a string, or "slack:<user id>" for Slack reactors
    reactor_id: Mapped[str] = mapped_column(String(64), nullable=False)

    # Storage-safe encoding of the emoji's code points, see services.emoji.reaction_key
    reaction_key: Mapped[str] = mapped_column(String(200), nullable=False)
    emoji: Mapped[str] = mapped_column(String(64), nullable=False)

    origin: Mapped[str] = mapped_column(String(20), default="internal", nullable=False)

    # Relationships
    message = relationship("Message", back_populates="reactions")

    # One reactor can only react with each emoji once per message
    __table_args__ = (
        UniqueConstraint("message_id", "reactor_id", "reaction_key", name="uq_message_reactor_key"),
    )

    def __repr__(self) -> str:
        return f"<MessageReaction {self.emoji} by {self.reactor_id} on message {self.message_id}>"


def build_reaction_map(reactions: Iterable[MessageReaction]) -> ReactionMap:
    """Group reaction rows into the per-message aggregate."""
    groups: ReactionMap = {}
    for reaction in reactions:
        entry = groups.setdefault(reaction.reaction_key, {"emoji": reaction.emoji, "users": set()})
        entry["users"].add(reaction.reactor_id)
    return groups
