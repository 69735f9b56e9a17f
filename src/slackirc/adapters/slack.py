"""Slack adapter: Socket Mode events in, chat.postMessage out.

The bridge looks channels and users up synchronously, so everything a message
refers to is fetched into the caches before its event is published.
"""

from __future__ import annotations

import asyncio
import contextlib
import re
from dataclasses import dataclass
from typing import Any

import aiohttp
from cachetools import TTLCache
from loguru import logger
from slack_sdk.errors import SlackApiError
from slack_sdk.socket_mode.aiohttp import SocketModeClient
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse
from slack_sdk.web.async_client import AsyncWebClient
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from slackirc.adapters.base import AdapterBase, SlackChannel, SlackUser
from slackirc.errors import TransportError
from slackirc.events import SLACK, classify_slack_event, connected, disconnected, session_error
from slackirc.gateway.bus import Bus

# 5 attempts, exponential backoff 1-15s, on transient network errors
DEFAULT_RETRY = retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=1, max=15),
    retry=retry_if_exception_type((aiohttp.ClientError, asyncio.TimeoutError)),
    reraise=True,
)

_USER_REF = re.compile(r"<@([UW]\w+)")
_CHANNEL_REF = re.compile(r"<#([CGD]\w+)")

_RENAME_EVENTS = ("channel_rename", "group_rename")
_LEFT_EVENTS = ("channel_left", "group_left")


@dataclass(frozen=True)
class _Post:
    channel: SlackChannel
    text: str
    username: str
    icon_url: str


def _channel_from_payload(data: dict[str, Any]) -> SlackChannel:
    return SlackChannel(
        id=data["id"],
        name=data.get("name", ""),
        is_channel=bool(data.get("is_channel", True)) and not data.get("is_private", False),
    )


class SlackAdapter(AdapterBase):
    """Slack side of the bridge. Implements SlackSession."""

    def __init__(
        self,
        bus: Bus,
        token: str,
        app_token: str | None,
        *,
        user_cache_ttl: int = 3600,
        web_client: AsyncWebClient | None = None,
    ) -> None:
        self._bus = bus
        self._app_token = app_token
        self._web = web_client or AsyncWebClient(token=token)
        self._socket: SocketModeClient | None = None
        self._channels: dict[str, SlackChannel] = {}
        self._members: set[str] = set()
        self._users: TTLCache[str, SlackUser] = TTLCache(maxsize=10_000, ttl=user_cache_ttl)
        self._bot_user_id: str | None = None
        self._outbound: asyncio.Queue[_Post] = asyncio.Queue()
        self._consumer_task: asyncio.Task | None = None

    @property
    def name(self) -> str:
        return "slack"

    # SlackSession

    def get_channel_by_id(self, channel_id: str) -> SlackChannel | None:
        return self._channels.get(channel_id)

    def get_channel_by_name(self, name: str) -> SlackChannel | None:
        """Member channel by mapping name: ``#general`` (public) or ``secret`` (private)."""
        for channel_id in self._members:
            channel = self._channels.get(channel_id)
            if channel and channel.display_name == name:
                return channel
        return None

    def get_user_by_id(self, user_id: str) -> SlackUser | None:
        return self._users.get(user_id)

    def post_message(self, channel: SlackChannel, text: str, username: str, icon_url: str) -> None:
        self._outbound.put_nowait(_Post(channel, text, username, icon_url))

    # Web API

    @DEFAULT_RETRY
    async def _fetch_user(self, user_id: str) -> SlackUser:
        resp = await self._web.users_info(user=user_id)
        user = SlackUser(id=user_id, name=resp["user"]["name"])
        self._users[user_id] = user
        return user

    @DEFAULT_RETRY
    async def _fetch_channel(self, channel_id: str) -> SlackChannel:
        resp = await self._web.conversations_info(channel=channel_id)
        channel = _channel_from_payload(resp["channel"])
        self._channels[channel_id] = channel
        if resp["channel"].get("is_member"):
            self._members.add(channel_id)
        return channel

    @DEFAULT_RETRY
    async def _load_channels(self) -> None:
        async for page in await self._web.conversations_list(
            types="public_channel,private_channel",
            exclude_archived=True,
            limit=200,
        ):
            for data in page["channels"]:
                channel = _channel_from_payload(data)
                self._channels[channel.id] = channel
                if data.get("is_member"):
                    self._members.add(channel.id)
        logger.info("Slack: bot is in {} channels", len(self._members))

    async def _prefetch(self, text: str, author: str) -> None:
        """Fetch the author and every referenced user/channel missing from the caches."""
        user_ids = {author, *_USER_REF.findall(text)}
        channel_ids = set(_CHANNEL_REF.findall(text))
        for user_id in user_ids - set(self._users):
            try:
                await self._fetch_user(user_id)
            except SlackApiError as exc:
                logger.warning("Slack users.info failed for {}: {}", user_id, exc.response.get("error"))
        for channel_id in channel_ids - set(self._channels):
            try:
                await self._fetch_channel(channel_id)
            except SlackApiError as exc:
                logger.warning("Slack conversations.info failed for {}: {}", channel_id, exc.response.get("error"))

    # Events

    async def handle_event(self, payload: dict[str, Any]) -> None:
        """Update caches from membership events; publish relayable messages."""
        etype = payload.get("type")
        if etype in _RENAME_EVENTS:
            data = payload.get("channel") or {}
            old = self._channels.get(data.get("id", ""))
            if old:
                self._channels[old.id] = SlackChannel(old.id, data.get("name", old.name), old.is_channel)
                logger.info("Slack channel renamed: {} -> {}", old.name, data.get("name"))
        elif etype == "channel_created":
            data = payload.get("channel") or {}
            if data.get("id"):
                self._channels[data["id"]] = _channel_from_payload(data)
        elif etype == "member_joined_channel":
            if payload.get("user") == self._bot_user_id:
                await self._fetch_channel(payload["channel"])
                self._members.add(payload["channel"])
        elif etype in _LEFT_EVENTS:
            self._members.discard(payload.get("channel", ""))
        elif etype == "message":
            evt = classify_slack_event(payload)
            if evt is None:
                logger.debug("Ignoring Slack message subtype {}", payload.get("subtype"))
                return
            await self._prefetch(evt.text, evt.author)
            self._bus.publish("slack", evt)

    async def _on_request(self, client: SocketModeClient, req: SocketModeRequest) -> None:
        await client.send_socket_mode_response(SocketModeResponse(envelope_id=req.envelope_id))
        if req.type != "events_api":
            return
        try:
            await self.handle_event(req.payload.get("event") or {})
        except Exception as exc:
            logger.exception("Slack event handling failed: {}", exc)
            _, evt = session_error(SLACK, exc)
            self._bus.publish("slack", evt)

    async def _consume_outbound(self) -> None:
        while True:
            try:
                post = await self._outbound.get()
                await self._web.chat_postMessage(
                    channel=post.channel.id,
                    text=post.text,
                    username=post.username,
                    icon_url=post.icon_url,
                )
            except asyncio.CancelledError:
                break
            except SlackApiError as exc:
                err = TransportError(
                    f"chat.postMessage failed: {exc.response.get('error')}",
                    code="post_failed",
                    original_error=exc,
                )
                _, evt = session_error(SLACK, err)
                self._bus.publish("slack", evt)
            except Exception as exc:
                logger.exception("Slack send failed: {}", exc)

    async def start(self) -> None:
        """Load channel membership, open the Socket Mode connection and start the send consumer."""
        try:
            auth = await self._web.auth_test()
            self._bot_user_id = auth.get("user_id")
            await self._load_channels()
        except (SlackApiError, aiohttp.ClientError) as exc:
            raise TransportError("Slack bootstrap failed", code="bootstrap_failed", original_error=exc) from exc

        self._consumer_task = asyncio.create_task(self._consume_outbound())
        if not self._app_token:
            logger.warning("appToken not set; Slack events will not be received")
            return
        self._socket = SocketModeClient(app_token=self._app_token, web_client=self._web)
        self._socket.socket_mode_request_listeners.append(self._on_request)
        await self._socket.connect()
        logger.info("Connected to Slack as {}", self._bot_user_id)
        _, evt = connected(SLACK)
        self._bus.publish("slack", evt)

    async def stop(self) -> None:
        if self._socket:
            await self._socket.disconnect()
            await self._socket.close()
            _, evt = disconnected(SLACK, expected=True)
            self._bus.publish("slack", evt)
        if self._consumer_task:
            self._consumer_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer_task
        self._socket = None
        self._consumer_task = None
