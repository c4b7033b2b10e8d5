"""
Message origin and echo-loop filtering.

Every message is tagged at creation as internal or as external (ingested
through a specific bridge). The tag is checked at both boundaries:

* inbound, events produced by our own bot are dropped before they become
  messages;
* outbound, an external message is never posted back to the bridge it
  arrived through.
"""

from dataclasses import dataclass
from typing import Any

from chatbridge.models import Message, SlackBridge, SlackWorkspace

SLACK_AUTHOR_PREFIX = "slack:"

# Channel housekeeping events that carry no user content
SKIP_SUBTYPES = frozenset({
    "channel_join",
    "channel_leave",
    "channel_topic",
    "channel_purpose",
    "channel_name",
    "channel_archive",
    "channel_unarchive",
    "group_join",
    "group_leave",
})


@dataclass(frozen=True)
class InternalOrigin:
    """Authored in the internal chat."""


@dataclass(frozen=True)
class ExternalOrigin:
    """Ingested from Slack through one bridge."""

    bridge_id: int


Origin = InternalOrigin | ExternalOrigin


def origin_of(message: Message) -> Origin:
    """Derive the origin tag of a stored message."""
    if message.is_external and message.origin_bridge_id is not None:
        return ExternalOrigin(bridge_id=message.origin_bridge_id)
    return InternalOrigin()


def may_dispatch_to(origin: Origin, bridge: SlackBridge) -> bool:
    """Whether a message of this origin may be posted through ``bridge``."""
    if isinstance(origin, ExternalOrigin):
        return origin.bridge_id != bridge.id
    return True


def slack_author_id(slack_user_id: str) -> str:
    return f"{SLACK_AUTHOR_PREFIX}{slack_user_id}"


def is_external_reactor(reactor_id: str) -> bool:
    """Reactors mirrored in from Slack are never mirrored back out."""
    return reactor_id.startswith(SLACK_AUTHOR_PREFIX)


def is_bot_actor(user_id: str | None, workspace: SlackWorkspace | None) -> bool:
    """True when a Slack event was produced by our own bot user."""
    if not user_id or workspace is None or not workspace.bot_user_id:
        return False
    return user_id == workspace.bot_user_id


def message_skip_reason(event: dict[str, Any], workspace: SlackWorkspace | None = None) -> str | None:
    """Return why an inbound message event must not be ingested, or None."""
    subtype = event.get("subtype")
    if event.get("bot_id") or subtype == "bot_message":
        return "bot_message"
    if subtype in SKIP_SUBTYPES:
        return f"subtype:{subtype}"
    if is_bot_actor(event.get("user"), workspace):
        return "own_bot"
    if not event.get("user"):
        return "no_user"
    if not event.get("ts"):
        return "no_ts"
    if not (event.get("text") or "").strip():
        return "no_text"
    return None
