"""IRC adapter: pydle client publishing inbound events, queued fire-and-forget sends."""

from __future__ import annotations

import asyncio
import contextlib
import random
from dataclasses import dataclass
from typing import Any

import pydle
from loguru import logger

from slackirc.adapters.base import AdapterBase
from slackirc.errors import TransportError
from slackirc.events import IRC, action, connected, disconnected, invite, notice, plain, session_error
from slackirc.gateway.bus import Bus

# Backoff: min 2s, max 60s, jitter
_BACKOFF_MIN = 2
_BACKOFF_MAX = 60
_MAX_ATTEMPTS = 10

DEFAULT_FLOOD_DELAY_MS = 500

# ircOptions keys consumed by connect(); everything else goes to the client constructor
_CONNECT_OPTIONS = ("port", "tls", "tls_verify", "password")


@dataclass(frozen=True)
class Outbound:
    """One queued IRC command."""

    command: str
    args: tuple[str, ...]


async def _connect_with_backoff(client: pydle.Client, hostname: str, **connect_kwargs: Any) -> None:
    """Connect with exponential backoff and jitter on failure; reconnect on disconnect."""
    attempt = 0
    while True:
        try:
            await client.connect(hostname=hostname, **connect_kwargs)
            # connect() returns once the connection loop ends
            attempt = 0
            wait = _BACKOFF_MIN * random.uniform(0.5, 1.5)
            logger.info("IRC disconnected, reconnecting in {:.1f}s", wait)
            await asyncio.sleep(wait)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            attempt += 1
            if attempt >= _MAX_ATTEMPTS:
                logger.exception("IRC connect failed after {} attempts", _MAX_ATTEMPTS)
                raise TransportError(
                    f"IRC connect to {hostname} failed",
                    code="connect_failed",
                    details={"attempts": attempt},
                    original_error=exc,
                ) from exc
            delay = min(_BACKOFF_MAX, _BACKOFF_MIN * (2 ** (attempt - 1)))
            wait = delay * random.uniform(0.5, 1.5)
            logger.warning(
                "IRC connect failed (attempt {}): {}, retrying in {:.1f}s",
                attempt,
                exc,
                wait,
            )
            await asyncio.sleep(wait)


class IRCClient(pydle.Client):
    """Pydle client that turns IRC callbacks into bus events."""

    def __init__(
        self,
        bus: Bus,
        nickname: str,
        channels: list[tuple[str, str | None]],
        **kwargs: Any,
    ) -> None:
        super().__init__(nickname, **kwargs)
        self._bus = bus
        self._autojoin = channels

    async def on_connect(self) -> None:
        """Registration complete: join mapped channels, then announce the session."""
        await super().on_connect()
        logger.info("IRC registered as {}", self.nickname)
        for channel, password in self._autojoin:
            await self.join(channel, password)
        _, evt = connected(IRC)
        self._bus.publish("irc", evt)

    async def on_disconnect(self, expected: bool) -> None:
        await super().on_disconnect(expected)
        _, evt = disconnected(IRC, expected=expected)
        self._bus.publish("irc", evt)

    async def on_message(self, target: str, by: str, message: str) -> None:
        await super().on_message(target, by, message)
        _, evt = plain(IRC, target, by, message)
        self._bus.publish("irc", evt)

    async def on_notice(self, target: str, by: str, message: str) -> None:
        await super().on_notice(target, by, message)
        _, evt = notice(IRC, target, by, message)
        self._bus.publish("irc", evt)

    async def on_ctcp_action(self, by: str, target: str, contents: str) -> None:
        _, evt = action(IRC, target, by, contents)
        self._bus.publish("irc", evt)

    async def on_invite(self, channel: str, by: str) -> None:
        await super().on_invite(channel, by)
        _, evt = invite(IRC, channel, by)
        self._bus.publish("irc", evt)

    async def on_raw_error(self, message: Any) -> None:
        await super().on_raw_error(message)
        _, evt = session_error(IRC, " ".join(str(p) for p in getattr(message, "params", [])))
        self._bus.publish("irc", evt)


class IRCAdapter(AdapterBase):
    """IRC side of the bridge. Implements IrcSession: say/notice/join/send are queued."""

    def __init__(
        self,
        bus: Bus,
        server: str,
        nickname: str,
        channels: list[tuple[str, str | None]],
        irc_options: dict[str, Any] | None = None,
    ) -> None:
        options = dict(irc_options or {})
        self._bus = bus
        self._server = server
        self._nickname = nickname
        self._channels = channels
        self._flood_delay = float(options.pop("floodProtectionDelay", DEFAULT_FLOOD_DELAY_MS)) / 1000
        self._connect_kwargs = {k: options.pop(k) for k in _CONNECT_OPTIONS if k in options}
        options.setdefault("username", nickname)
        options.setdefault("realname", nickname)
        self._client_kwargs = options
        self._client: IRCClient | None = None
        self._outbound: asyncio.Queue[Outbound] = asyncio.Queue()
        self._task: asyncio.Task | None = None
        self._consumer_task: asyncio.Task | None = None

    @property
    def name(self) -> str:
        return "irc"

    def say(self, channel: str, text: str) -> None:
        self._outbound.put_nowait(Outbound("PRIVMSG", (channel, text)))

    def notice(self, channel: str, text: str) -> None:
        self._outbound.put_nowait(Outbound("NOTICE", (channel, text)))

    def join(self, channel: str, password: str | None = None) -> None:
        args = (channel, password) if password else (channel,)
        self._outbound.put_nowait(Outbound("JOIN", args))

    def send(self, *args: str) -> None:
        if not args:
            return
        self._outbound.put_nowait(Outbound(args[0], tuple(args[1:])))

    async def _deliver(self, item: Outbound) -> None:
        client = self._client
        if client is None or not client.connected:
            raise TransportError(f"IRC not connected; dropping {item.command}", code="not_connected")
        if item.command == "PRIVMSG":
            await client.message(*item.args)
        elif item.command == "NOTICE":
            await client.notice(*item.args)
        elif item.command == "JOIN":
            await client.join(*item.args)
        else:
            await client.rawmsg(item.command, *item.args)

    async def _consume_outbound(self) -> None:
        """Drain the send queue, spacing sends by the flood protection delay."""
        while True:
            try:
                item = await self._outbound.get()
                await self._deliver(item)
                if self._flood_delay:
                    await asyncio.sleep(self._flood_delay)
            except asyncio.CancelledError:
                break
            except TransportError as exc:
                logger.warning("{}", exc)
            except Exception as exc:
                logger.exception("IRC send failed: {}", exc)

    async def start(self) -> None:
        """Connect to IRC and start the send consumer."""
        self._client = IRCClient(
            self._bus,
            self._nickname,
            self._channels,
            **self._client_kwargs,
        )
        self._consumer_task = asyncio.create_task(self._consume_outbound())
        self._task = asyncio.create_task(
            _connect_with_backoff(self._client, self._server, **self._connect_kwargs)
        )
        logger.info(
            "IRC connection started: {}, channels {}",
            self._server,
            [channel for channel, _ in self._channels],
        )

    async def wait(self) -> None:
        """Block until the connection task ends.

        Raises TransportError once reconnecting gives up.
        """
        if self._task:
            await self._task

    async def stop(self) -> None:
        """Disconnect and cancel background tasks."""
        for task in (self._task, self._consumer_task):
            if task and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        if self._client and self._client.connected:
            await self._client.disconnect(expected=True)
        self._client = None
        self._task = None
        self._consumer_task = None
