"""Display identity for IRC authors shown on Slack."""

from __future__ import annotations

from urllib.parse import quote

from slackirc.config import DEFAULT_AVATAR_URL


def avatar_url(nick: str, template: str = DEFAULT_AVATAR_URL) -> str:
    """Deterministic avatar URL for an IRC nick; no lookup involved."""
    return template.format(nick=quote(nick, safe=""))
