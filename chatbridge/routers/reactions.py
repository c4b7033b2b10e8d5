"""
Reactions router for message reactions.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Form, HTTPException
from fastapi.responses import JSONResponse

from chatbridge.deps import CurrentUser, DBSession, SessionFactory, SlackClient, get_server_membership
from chatbridge.models import Channel, Message, ReactionMap, User
from chatbridge.services.reactions import get_reaction_map, run_reaction_sync, toggle_reaction

router = APIRouter(prefix="/reactions", tags=["reactions"])


async def _get_message_for_member(db: DBSession, message_id: int, user: User) -> Message:
    message = await db.get(Message, message_id)
    if not message or message.is_deleted:
        raise HTTPException(status_code=404, detail="Message not found")
    channel = await db.get(Channel, message.channel_id)
    await get_server_membership(channel.server_id, user, db)
    return message


def reactions_payload(reactions: ReactionMap, user_id: str) -> list[dict]:
    """Reaction groups as shown under a message."""
    return [
        {
            "key": key,
            "emoji": entry["emoji"],
            "count": len(entry["users"]),
            "user_reacted": user_id in entry["users"],
        }
        for key, entry in reactions.items()
    ]


@router.post("/{message_id}/toggle")
async def toggle_message_reaction(
    message_id: int,
    background_tasks: BackgroundTasks,
    user: CurrentUser,
    db: DBSession,
    slack: SlackClient,
    session_factory: SessionFactory,
    emoji: Annotated[str, Form()],
):
    """Toggle a reaction on a message (add if not exists, remove if exists)."""
    emoji = emoji.strip()
    if not emoji:
        raise HTTPException(status_code=400, detail="Emoji is required")

    await _get_message_for_member(db, message_id, user)

    reactor_id = str(user.id)
    before = await get_reaction_map(db, message_id)
    active = await toggle_reaction(db, message_id, reactor_id, emoji)
    after = await get_reaction_map(db, message_id)
    await db.commit()

    background_tasks.add_task(
        run_reaction_sync, message_id, before, after, slack=slack, session_factory=session_factory
    )
    return JSONResponse({
        "message_id": message_id,
        "active": active,
        "reactions": reactions_payload(after, reactor_id),
    })


@router.get("/{message_id}")
async def get_reactions(
    message_id: int,
    user: CurrentUser,
    db: DBSession,
):
    """Get the reaction groups of a message."""
    await _get_message_for_member(db, message_id, user)
    reactions = await get_reaction_map(db, message_id)
    return JSONResponse({"message_id": message_id, "reactions": reactions_payload(reactions, str(user.id))})
