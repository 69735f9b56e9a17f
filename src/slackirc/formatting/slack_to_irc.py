"""Convert Slack message markup to plain text for IRC."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping

from slackirc.errors import ResolutionError
from slackirc.formatting.emoji import EMOJI

Resolver = Callable[[str], str | None]

_NEWLINE = re.compile(r"\r\n|\r|\n")
_BROADCAST = re.compile(r"<!(channel|group|everyone|here)(?:\|[^>]*)?>")
_CHANNEL_REF = re.compile(r"<#([CGD]\w+)(?:\|([^>]*))?>")
_USER_REF = re.compile(r"<@([UW]\w+)(?:\|([^>]*))?>")
# Anything bracketed that is not a command/channel/user reference: <url> or <url|label>
_LINK = re.compile(r"<(?![!#@])([^\s|>]+)(?:\|[^>]*)?>")
_COMMAND = re.compile(r"<!(\w+)(?:\|([^>]*))?>")
_EMOJI_CODE = re.compile(r":([\w+-]+):")


def to_irc(
    text: str,
    channel_resolver: Resolver,
    user_resolver: Resolver,
    emoji: Mapping[str, str] = EMOJI,
) -> str:
    """Rewrite a Slack message body into the plain text IRC expects.

    Entities are unescaped before any bracket rewriting because Slack sends
    user-typed ``<``/``>`` as ``&lt;``/``&gt;``. ``&amp;`` is unescaped first,
    so entity text the user typed literally (``&amp;lt;``) also ends up as
    ``<`` on IRC. Raises ResolutionError when a channel or user reference
    carries no label and the resolver cannot name it.
    """
    if not text:
        return text

    text = _NEWLINE.sub(" ", text)
    text = text.replace("&amp;", "&").replace("&lt;", "<").replace("&gt;", ">")
    text = _BROADCAST.sub(lambda m: "@" + m.group(1), text)

    def _channel(m: re.Match[str]) -> str:
        label = m.group(2)
        if label:
            return "#" + label
        name = channel_resolver(m.group(1))
        if not name:
            raise ResolutionError(
                f"Unknown Slack channel {m.group(1)}",
                code="unknown_channel",
                details={"channel_id": m.group(1)},
            )
        return "#" + name.lstrip("#")

    def _user(m: re.Match[str]) -> str:
        label = m.group(2)
        if label:
            return "@" + label
        name = user_resolver(m.group(1))
        if not name:
            raise ResolutionError(
                f"Unknown Slack user {m.group(1)}",
                code="unknown_user",
                details={"user_id": m.group(1)},
            )
        return "@" + name

    text = _CHANNEL_REF.sub(_channel, text)
    text = _USER_REF.sub(_user, text)
    text = _LINK.sub(r"\1", text)
    text = _COMMAND.sub(lambda m: f"<{m.group(2) or m.group(1)}>", text)
    return _EMOJI_CODE.sub(lambda m: emoji.get(m.group(1), m.group(0)), text)
