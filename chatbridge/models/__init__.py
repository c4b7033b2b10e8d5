# Models package
from chatbridge.db import Base
from chatbridge.models.user import User
from chatbridge.models.server import Server
from chatbridge.models.membership import MembershipRole, ServerMembership
from chatbridge.models.channel import Channel
from chatbridge.models.message import Message, MessageOrigin
from chatbridge.models.correlation import MessageCorrelation
from chatbridge.models.thread import Thread, ThreadStatus
from chatbridge.models.reaction import MessageReaction, ReactionMap, build_reaction_map
from chatbridge.models.slack_workspace import SlackWorkspace
from chatbridge.models.bridge import SlackBridge, SyncDirection, BridgeStatus

__all__ = [
    "Base",
    "User",
    "Server",
    "MembershipRole",
    "ServerMembership",
    "Channel",
    "Message",
    "MessageOrigin",
    "MessageCorrelation",
    "Thread",
    "ThreadStatus",
    "MessageReaction",
    "ReactionMap",
    "build_reaction_map",
    "SlackWorkspace",
    "SlackBridge",
    "SyncDirection",
    "BridgeStatus",
]
