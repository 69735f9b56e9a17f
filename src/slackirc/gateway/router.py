"""Channel mapping: Slack channel <-> IRC channel, built once from config."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from loguru import logger

from slackirc.errors import ConfigurationError


@dataclass(frozen=True)
class ChannelMapping:
    """Immutable bidirectional table. IRC channel names are stored lower-cased."""

    to_irc: Mapping[str, str]
    to_slack: Mapping[str, str]
    passwords: Mapping[str, str]

    @classmethod
    def build(cls, raw: Any) -> ChannelMapping:
        """Build from ``{slackChannel: "#ircchannel[ password]"}``.

        Raises ConfigurationError for an empty or non-mapping value, an empty
        destination, or two Slack channels pointing at the same IRC channel.
        """
        if not isinstance(raw, Mapping):
            raise ConfigurationError(
                "channelMapping must be a mapping",
                code="invalid_mapping",
                details={"type": type(raw).__name__},
            )
        if not raw:
            raise ConfigurationError("channelMapping is empty", code="empty_mapping")

        to_irc: dict[str, str] = {}
        to_slack: dict[str, str] = {}
        passwords: dict[str, str] = {}
        for slack_channel, value in raw.items():
            tokens = value.split() if isinstance(value, str) else []
            if not tokens:
                raise ConfigurationError(
                    f"channelMapping[{slack_channel!r}] has no IRC channel",
                    code="empty_destination",
                    details={"slack_channel": slack_channel},
                )
            irc_channel = tokens[0].lower()
            if irc_channel in to_slack:
                raise ConfigurationError(
                    f"IRC channel {irc_channel} is mapped from both "
                    f"{to_slack[irc_channel]!r} and {slack_channel!r}",
                    code="duplicate_destination",
                    details={"irc_channel": irc_channel},
                )
            to_irc[str(slack_channel)] = irc_channel
            to_slack[irc_channel] = str(slack_channel)
            if len(tokens) > 1:
                passwords[irc_channel] = tokens[1]

        logger.info(
            "Channel mapping: loaded {} channels{}",
            len(to_irc),
            f" ({len(passwords)} with keys)" if passwords else "",
        )
        return cls(
            to_irc=MappingProxyType(to_irc),
            to_slack=MappingProxyType(to_slack),
            passwords=MappingProxyType(passwords),
        )

    def resolve_to_dest(self, slack_channel: str) -> str | None:
        """IRC channel for a Slack channel name (``#name`` for public channels)."""
        return self.to_irc.get(slack_channel)

    def resolve_to_source(self, irc_channel: str) -> str | None:
        """Slack channel for an IRC channel; case-insensitive."""
        return self.to_slack.get(irc_channel.lower())

    def password_for(self, irc_channel: str) -> str | None:
        """Channel key to join with, if configured."""
        return self.passwords.get(irc_channel.lower())

    def irc_channels(self) -> list[str]:
        """All mapped IRC channels, in config order."""
        return list(self.to_slack)
