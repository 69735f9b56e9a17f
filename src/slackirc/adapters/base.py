"""Adapter interface and the session contracts the bridge talks to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class SlackChannel:
    """Slack conversation the bot is a member of."""

    id: str
    name: str
    is_channel: bool = True  # public channel; private groups have no '#'

    @property
    def display_name(self) -> str:
        """Name as written in channelMapping keys."""
        return f"#{self.name}" if self.is_channel else self.name


@dataclass(frozen=True)
class SlackUser:
    id: str
    name: str


class SlackSession(Protocol):
    """What the bridge needs from the Slack side. Lookups are synchronous, sends fire-and-forget."""

    def get_channel_by_id(self, channel_id: str) -> SlackChannel | None: ...

    def get_channel_by_name(self, name: str) -> SlackChannel | None: ...

    def get_user_by_id(self, user_id: str) -> SlackUser | None: ...

    def post_message(self, channel: SlackChannel, text: str, username: str, icon_url: str) -> None: ...


class IrcSession(Protocol):
    """What the bridge needs from the IRC side. All calls are fire-and-forget."""

    def say(self, channel: str, text: str) -> None: ...

    def notice(self, channel: str, text: str) -> None: ...

    def join(self, channel: str, password: str | None = None) -> None: ...

    def send(self, *args: str) -> None: ...


class AdapterBase(ABC):
    """Interface for protocol adapters: publish inbound events to the bus, start/stop."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Adapter identifier ('slack' or 'irc')."""
        ...

    @abstractmethod
    async def start(self) -> None:
        """Start the adapter (connect, register handlers)."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop the adapter (disconnect, cleanup)."""
        ...
