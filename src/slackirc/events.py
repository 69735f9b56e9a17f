"""Event types and dispatcher: a closed set of inbound variants built at the adapter boundary."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from loguru import logger

SLACK = "slack"
IRC = "irc"

# Slack message subtypes relayed besides plain user messages
ALLOWED_SUBTYPES = frozenset({"me_message"})


class Subtype(Enum):
    """How a relayed message is rendered on the destination side."""

    PLAIN = "plain"
    ACTION = "action"
    NOTICE = "notice"
    COMMAND = "command"


@dataclass
class Plain:
    """Normal chat message."""

    origin: str  # "slack" | "irc"
    channel: str  # Slack channel ID or IRC channel name
    author: str  # Slack user ID or IRC nick
    text: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """/me message."""

    origin: str
    channel: str
    author: str
    text: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class Notice:
    """IRC NOTICE."""

    origin: str
    channel: str
    author: str
    text: str
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class Invite:
    """Bot was invited to a channel."""

    origin: str
    channel: str
    author: str


@dataclass
class Connected:
    """Session is up (Slack socket open, IRC registration complete)."""

    origin: str


@dataclass
class Disconnected:
    """Session went away; reconnect belongs to the adapter."""

    origin: str
    expected: bool = False


@dataclass
class SessionError:
    """Error reported by a protocol session."""

    origin: str
    error: object


@dataclass(frozen=True)
class RelayMessage:
    """Normalized message on its way through the bridge. Consumed once."""

    author: str
    source_channel: str  # Slack-side name
    dest_channel: str  # IRC-side name
    body: str
    subtype: Subtype = Subtype.PLAIN
    weakened: bool = False


MESSAGE_EVENTS = (Plain, Action, Notice)


class EventTarget(Protocol):
    """Receiver of bus events (the Bridge)."""

    def accept_event(self, source: str, evt: object) -> bool:
        """Return True if this target wants the event."""
        ...

    def push_event(self, source: str, evt: object) -> None:
        """Handle the event."""
        ...


def event(type_name: str):
    """Tag an event factory with its type name.

    Adapters build inbound events through these factories; the wrapped call
    returns ``(type_name, evt)`` and the factory carries ``TYPE`` for lookups.
    """

    def decorator(f: Any) -> Any:
        @functools.wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> tuple[str, object]:
            evt = f(*args, **kwargs)
            return (type_name, evt)

        wrapper.TYPE = type_name
        return wrapper

    return decorator


@event("plain")
def plain(
    origin: str,
    channel: str,
    author: str,
    text: str,
    *,
    raw: dict[str, Any] | None = None,
) -> Plain:
    return Plain(origin=origin, channel=channel, author=author, text=text, raw=raw or {})


@event("action")
def action(
    origin: str,
    channel: str,
    author: str,
    text: str,
    *,
    raw: dict[str, Any] | None = None,
) -> Action:
    return Action(origin=origin, channel=channel, author=author, text=text, raw=raw or {})


@event("notice")
def notice(
    origin: str,
    channel: str,
    author: str,
    text: str,
    *,
    raw: dict[str, Any] | None = None,
) -> Notice:
    return Notice(origin=origin, channel=channel, author=author, text=text, raw=raw or {})


@event("invite")
def invite(origin: str, channel: str, author: str) -> Invite:
    return Invite(origin=origin, channel=channel, author=author)


@event("connected")
def connected(origin: str) -> Connected:
    return Connected(origin=origin)


@event("disconnected")
def disconnected(origin: str, *, expected: bool = False) -> Disconnected:
    return Disconnected(origin=origin, expected=expected)


@event("session_error")
def session_error(origin: str, error: object) -> SessionError:
    return SessionError(origin=origin, error=error)


def classify_slack_event(payload: dict[str, Any]) -> Plain | Action | None:
    """Turn a raw Slack ``message`` payload into a Plain/Action event.

    Only plain user messages and ``me_message`` are relayed; bot posts, joins,
    leaves, edits and every other subtype yield None.
    """
    if payload.get("type") != "message":
        return None
    subtype = payload.get("subtype")
    if subtype and subtype not in ALLOWED_SUBTYPES:
        return None
    channel = payload.get("channel")
    user = payload.get("user")
    if not channel or not user:
        return None
    text = payload.get("text") or ""
    if subtype == "me_message":
        _, evt = action(SLACK, channel, user, text, raw=payload)
    else:
        _, evt = plain(SLACK, channel, user, text, raw=payload)
    return evt


class Dispatcher:
    """Fans inbound Slack/IRC events out to bridge targets.

    A target that raises is logged with its traceback and skipped, so one
    malformed message never stops relaying for the rest.
    """

    def __init__(self) -> None:
        self._targets: list[EventTarget] = []

    def register(self, target: EventTarget) -> None:
        self._targets.append(target)

    def unregister(self, target: EventTarget) -> None:
        if target in self._targets:
            self._targets.remove(target)

    def dispatch(self, source: str, evt: object) -> None:
        for target in self._targets:
            try:
                if target.accept_event(source, evt):
                    target.push_event(source, evt)
            except Exception as exc:
                logger.exception("{} event from {} failed in {}: {}", type(evt).__name__, source, target, exc)
