"""
Internal message endpoints.

Posting a message or a thread reply stores it and then schedules outbound
dispatch to the channel's Slack bridges as a background task, so Slack
latency or failures never affect the response.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Form, HTTPException, status
from fastapi.responses import JSONResponse

from chatbridge.deps import CurrentUser, DBSession, SessionFactory, SlackClient, get_server_membership
from chatbridge.models import Channel, Message, MessageOrigin, Thread
from chatbridge.services.slack_dispatch import run_dispatch
from chatbridge.services.threads import add_thread_message, find_or_create_thread

router = APIRouter(tags=["messages"])


def message_payload(message: Message) -> dict:
    return {
        "id": message.id,
        "channel_id": message.channel_id,
        "thread_id": message.thread_id,
        "author_id": message.author_id,
        "display_name": message.display_name,
        "body": message.body,
        "origin": message.origin,
        "created_at": message.created_at.isoformat() if message.created_at else None,
    }


def thread_payload(thread: Thread) -> dict:
    return {
        "id": thread.id,
        "root_message_id": thread.root_message_id,
        "name": thread.name,
        "status": thread.status,
        "message_count": thread.message_count,
        "member_count": thread.member_count,
        "last_message_preview": thread.last_message_preview,
        "auto_archive_at": thread.auto_archive_at.isoformat() if thread.auto_archive_at else None,
    }


def _new_message(channel_id: int, user, body: str) -> Message:
    return Message(
        channel_id=channel_id,
        user_id=user.id,
        author_id=str(user.id),
        display_name=user.display_name,
        photo_url=user.avatar_url,
        body=body,
        origin=MessageOrigin.INTERNAL.value,
    )


@router.post("/channels/{channel_id}/messages", status_code=status.HTTP_201_CREATED)
async def post_message(
    channel_id: int,
    background_tasks: BackgroundTasks,
    db: DBSession,
    user: CurrentUser,
    slack: SlackClient,
    session_factory: SessionFactory,
    body: Annotated[str, Form()],
):
    """Post a message to a channel."""
    body = body.strip()
    if not body:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message body is empty")

    channel = await db.get(Channel, channel_id)
    if not channel or channel.is_archived:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Channel not found")
    await get_server_membership(channel.server_id, user, db)

    message = _new_message(channel.id, user, body)
    db.add(message)
    await db.commit()

    background_tasks.add_task(run_dispatch, message.id, slack=slack, session_factory=session_factory)
    return JSONResponse(message_payload(message), status_code=status.HTTP_201_CREATED)


@router.post("/messages/{message_id}/replies", status_code=status.HTTP_201_CREATED)
async def post_reply(
    message_id: int,
    background_tasks: BackgroundTasks,
    db: DBSession,
    user: CurrentUser,
    slack: SlackClient,
    session_factory: SessionFactory,
    body: Annotated[str, Form()],
):
    """Reply to a channel message, starting its thread if needed."""
    body = body.strip()
    if not body:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message body is empty")

    root = await db.get(Message, message_id)
    if not root or root.is_deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    if root.is_thread_reply:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Replies can only be added to channel messages",
        )

    channel = await db.get(Channel, root.channel_id)
    await get_server_membership(channel.server_id, user, db)

    thread, _ = await find_or_create_thread(db, root, created_by=str(user.id))

    reply = _new_message(root.channel_id, user, body)
    add_thread_message(thread, reply)
    db.add(reply)
    await db.commit()

    background_tasks.add_task(run_dispatch, reply.id, slack=slack, session_factory=session_factory)
    return JSONResponse(
        {"message": message_payload(reply), "thread": thread_payload(thread)},
        status_code=status.HTTP_201_CREATED,
    )
