"""
Slack Web API client for the bridge.

Handles the OAuth install flow, posting bridged messages and reactions,
and the read calls used to label Slack authors and list channels.
"""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from chatbridge.settings import settings

logger = logging.getLogger(__name__)

# Reaction calls that mean the desired state already holds
IDEMPOTENT_REACTION_ERRORS = frozenset({"already_reacted", "no_reaction"})

# Errors that will not go away by retrying; the bridge needs operator action
TERMINAL_ERRORS = frozenset({
    "channel_not_found",
    "not_in_channel",
    "is_archived",
    "account_inactive",
    "token_revoked",
    "invalid_auth",
    "missing_scope",
    "team_access_not_granted",
})


class SlackAPIError(Exception):
    """A Slack Web API call failed, either at HTTP level or with ok=false."""

    def __init__(self, error: str, status_code: int | None = None):
        self.error = error
        self.status_code = status_code
        super().__init__(f"Slack API error: {error}" + (f" (HTTP {status_code})" if status_code else ""))

    @property
    def is_terminal(self) -> bool:
        return self.error in TERMINAL_ERRORS


class SlackService:
    """Service for Slack OAuth and bot API calls."""

    OAUTH_AUTHORIZE_URL = "https://slack.com/oauth/v2/authorize"

    # Bot scopes needed to bridge channels
    BOT_SCOPES = [
        "channels:read",        # List public channels
        "groups:read",          # List private channels the bot is in
        "channels:history",     # Receive message events in public channels
        "groups:history",       # Receive message events in private channels
        "chat:write",           # Post bridged messages
        "chat:write.customize", # Post with the author's name and avatar
        "reactions:read",       # Receive reaction events
        "reactions:write",      # Mirror reactions
        "users:read",           # Resolve Slack author names
        "team:read",            # Workspace name and icon
    ]

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or settings.slack_api_base_url).rstrip("/")
        self.timeout = timeout or settings.slack_request_timeout_seconds

    def get_authorization_url(self, client_id: str, state: str, redirect_uri: str) -> str:
        """Generate Slack OAuth authorization URL."""
        params = {
            "client_id": client_id,
            "scope": ",".join(self.BOT_SCOPES),
            "redirect_uri": redirect_uri,
            "state": state,
        }
        return f"{self.OAUTH_AUTHORIZE_URL}?{urlencode(params)}"

    async def _call(
        self,
        method: str,
        token: str | None = None,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Call a Web API method and return the decoded body.

        Raises:
            SlackAPIError: On transport failure, non-200 status or ``ok: false``.
        """
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if json is not None or data is not None:
                    response = await client.post(
                        f"{self.base_url}/{method}",
                        headers=headers,
                        json=json,
                        data=data,
                    )
                else:
                    response = await client.get(
                        f"{self.base_url}/{method}",
                        headers=headers,
                        params=params,
                    )
        except httpx.HTTPError as e:
            logger.warning(f"Slack {method} request failed: {e}")
            raise SlackAPIError("request_failed") from e

        if response.status_code == 429:
            raise SlackAPIError("ratelimited", 429)
        if response.status_code != 200:
            raise SlackAPIError("http_error", response.status_code)

        body = response.json()
        if not body.get("ok"):
            raise SlackAPIError(body.get("error") or "unknown_error", response.status_code)
        return body

    async def exchange_code_for_token(
        self,
        client_id: str,
        client_secret: str,
        code: str,
        redirect_uri: str,
    ) -> dict[str, Any] | None:
        """Exchange authorization code for a bot token."""
        try:
            return await self._call(
                "oauth.v2.access",
                data={
                    "client_id": client_id,
                    "client_secret": client_secret,
                    "code": code,
                    "redirect_uri": redirect_uri,
                },
            )
        except SlackAPIError as e:
            logger.error(f"Slack token exchange error: {e.error}")
            return None

    async def get_user_info(self, access_token: str, user_id: str) -> dict[str, Any] | None:
        """Get user info from Slack, or None if it cannot be fetched."""
        try:
            data = await self._call("users.info", access_token, params={"user": user_id})
        except SlackAPIError as e:
            logger.debug(f"users.info failed for {user_id}: {e.error}")
            return None
        return data.get("user")

    async def get_team_info(self, access_token: str) -> dict[str, Any] | None:
        """Get team/workspace info from Slack, or None if it cannot be fetched."""
        try:
            data = await self._call("team.info", access_token)
        except SlackAPIError as e:
            logger.debug(f"team.info failed: {e.error}")
            return None
        return data.get("team")

    async def list_channels(
        self,
        access_token: str,
        types: str = "public_channel,private_channel",
    ) -> list[dict[str, Any]]:
        """
        List the channels visible to the bot.

        Args:
            access_token: Bot token of the installation
            types: Comma-separated list of conversation types to include

        Returns:
            Every page of ``conversations.list`` concatenated.
        """
        channels = []
        cursor = None

        while True:
            params = {
                "types": types,
                "limit": 200,
                "exclude_archived": "true",
            }
            if cursor:
                params["cursor"] = cursor

            data = await self._call("conversations.list", access_token, params=params)
            channels.extend(data.get("channels", []))

            # Pagination
            cursor = (data.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                break

        return channels

    async def post_message(
        self,
        access_token: str,
        channel_id: str,
        text: str,
        thread_ts: str | None = None,
        username: str | None = None,
        icon_url: str | None = None,
        unfurl_links: bool = True,
    ) -> dict[str, Any]:
        """
        Post a message to a Slack channel.

        Args:
            access_token: Bot token (needs chat:write)
            channel_id: Slack channel ID
            text: Message text in Slack mrkdwn
            thread_ts: Parent timestamp when replying in a thread
            username: Display name to post as (needs chat:write.customize)
            icon_url: Avatar to post with

        Returns:
            The API response; ``ts`` identifies the new message.
        """
        payload: dict[str, Any] = {
            "channel": channel_id,
            "text": text,
            "unfurl_links": unfurl_links,
        }
        if thread_ts:
            payload["thread_ts"] = thread_ts
        if username:
            payload["username"] = username
        if icon_url:
            payload["icon_url"] = icon_url

        return await self._call("chat.postMessage", access_token, json=payload)

    async def add_reaction(self, access_token: str, channel_id: str, ts: str, name: str) -> None:
        """Add a reaction as the bot."""
        try:
            await self._call(
                "reactions.add",
                access_token,
                json={"channel": channel_id, "timestamp": ts, "name": name},
            )
        except SlackAPIError as e:
            if e.error not in IDEMPOTENT_REACTION_ERRORS:
                raise

    async def remove_reaction(self, access_token: str, channel_id: str, ts: str, name: str) -> None:
        """Remove the bot's reaction."""
        try:
            await self._call(
                "reactions.remove",
                access_token,
                json={"channel": channel_id, "timestamp": ts, "name": name},
            )
        except SlackAPIError as e:
            if e.error not in IDEMPOTENT_REACTION_ERRORS:
                raise


# Singleton instance
slack_service = SlackService()
