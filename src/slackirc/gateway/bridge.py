"""Bridge: relays inbound events from one session to the other."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from slackirc.errors import ResolutionError, UnmappedChannelWarning
from slackirc.events import (
    IRC,
    MESSAGE_EVENTS,
    SLACK,
    Action,
    Connected,
    Disconnected,
    Invite,
    Notice,
    Plain,
    RelayMessage,
    SessionError,
    Subtype,
)
from slackirc.formatting import (
    emphasize,
    insert_space,
    is_weakened,
    normalize,
    strip_control_codes,
    to_irc,
    to_source,
    weaken,
)
from slackirc.formatting.emoji import EMOJI
from slackirc.identity import avatar_url

if TYPE_CHECKING:
    from loguru import Logger

    from slackirc.adapters.base import IrcSession, SlackChannel, SlackSession
    from slackirc.config import Config
    from slackirc.gateway.router import ChannelMapping

SLACKBOT_ID = "USLACKBOT"


class SessionState(Enum):
    IDLE = "idle"
    CONNECTED = "connected"
    RELAYING = "relaying"
    DISCONNECTED = "disconnected"


class Bridge:
    """Bus target that turns each inbound event into exactly one relay on the other side.

    Events are handled to completion, one at a time; the translated text is
    fully computed before any outbound call is made.
    """

    def __init__(
        self,
        config: Config,
        mapping: ChannelMapping,
        slack: SlackSession,
        irc: IrcSession,
        *,
        emoji: Mapping[str, str] = EMOJI,
        log: Logger | None = None,
    ) -> None:
        self._mapping = mapping
        self._slack = slack
        self._irc = irc
        self._emoji = emoji
        self._command_characters = config.command_characters
        self._auto_send_commands = config.auto_send_commands
        self._avatar_template = config.avatar_url
        self._mute_slackbot = config.mute_slackbot
        self._log = log or logger.bind(component="bridge")
        self._state = {SLACK: SessionState.IDLE, IRC: SessionState.IDLE}
        self._commands_sent = False

    def state(self, origin: str) -> SessionState:
        return self._state[origin]

    def accept_event(self, source: str, evt: object) -> bool:
        return isinstance(evt, (*MESSAGE_EVENTS, Invite, Connected, Disconnected, SessionError))

    def push_event(self, source: str, evt: object) -> None:
        if isinstance(evt, Connected):
            self._on_connected(evt)
        elif isinstance(evt, Disconnected):
            self._state[evt.origin] = SessionState.DISCONNECTED
            if evt.origin == IRC:
                self._commands_sent = False
            self._log.warning("{} session disconnected (expected={})", evt.origin, evt.expected)
        elif isinstance(evt, SessionError):
            self._log.error("Received error event from {}: {}", evt.origin, evt.error)
        elif isinstance(evt, Invite):
            self._on_invite(evt)
        elif isinstance(evt, MESSAGE_EVENTS):
            self._relay(evt)

    def is_command(self, text: str) -> bool:
        return bool(text) and text[0] in self._command_characters

    def _on_connected(self, evt: Connected) -> None:
        self._state[evt.origin] = SessionState.CONNECTED
        self._log.debug("Connected to {}", evt.origin)
        if evt.origin != IRC or self._commands_sent:
            return
        self._commands_sent = True
        for command in self._auto_send_commands:
            self._log.debug("Auto-sending IRC command: {}", command)
            self._irc.send(*command)

    def _on_invite(self, evt: Invite) -> None:
        if evt.origin != IRC:
            return
        channel = evt.channel.lower()
        self._log.debug("Received invite: {} from {}", channel, evt.author)
        if self._mapping.resolve_to_source(channel) is None:
            self._log.debug("Channel not found in config, not joining: {}", channel)
            return
        self._irc.join(channel, self._mapping.password_for(channel))
        self._log.debug("Joining channel: {}", channel)

    def _relay(self, evt: Plain | Action | Notice) -> None:
        previous = self._state[evt.origin]
        self._state[evt.origin] = SessionState.RELAYING
        try:
            if evt.origin == SLACK:
                message = self._translate_from_slack(evt)
                if message is not None:
                    self._send_to_irc(message)
            else:
                channel, message = self._translate_from_irc(evt)
                self._send_to_slack(channel, message)
        except UnmappedChannelWarning as exc:
            self._log.log("INFO" if exc.code == "not_member" else "DEBUG", "{}", exc)
        except ResolutionError as exc:
            self._log.warning("Dropping message from {} in {}: {}", evt.author, evt.channel, exc)
        finally:
            self._state[evt.origin] = previous

    # Slack -> IRC

    def _channel_name(self, channel_id: str) -> str | None:
        channel = self._slack.get_channel_by_id(channel_id)
        return channel.name if channel else None

    def _user_name(self, user_id: str) -> str | None:
        user = self._slack.get_user_by_id(user_id)
        return user.name if user else None

    def _translate_from_slack(self, evt: Plain | Action | Notice) -> RelayMessage | None:
        if self._mute_slackbot and evt.author == SLACKBOT_ID:
            self._log.debug("Muted Slackbot message in {}", evt.channel)
            return None

        channel = self._slack.get_channel_by_id(evt.channel)
        if channel is None:
            raise UnmappedChannelWarning(
                f"Received message from a channel the bot isn't in: {evt.channel}",
                code="not_member",
            )
        irc_channel = self._mapping.resolve_to_dest(channel.display_name)
        self._log.debug("Channel mapping: {} -> {}", channel.display_name, irc_channel)
        if not irc_channel:
            raise UnmappedChannelWarning(
                f"Slack channel {channel.display_name} is not mapped",
                code="unmapped",
            )

        author = self._user_name(evt.author)
        if not author:
            raise ResolutionError(
                f"Unknown Slack user {evt.author}",
                code="unknown_user",
                details={"user_id": evt.author},
            )
        text = to_irc(evt.text, self._channel_name, self._user_name, self._emoji)

        weakened = is_weakened(text)
        if weakened:
            text = normalize(text)

        if self.is_command(text):
            subtype = Subtype.COMMAND
        elif isinstance(evt, Action):
            subtype = Subtype.ACTION
        else:
            subtype = Subtype.PLAIN

        return RelayMessage(
            author=author,
            source_channel=channel.display_name,
            dest_channel=irc_channel,
            body=text,
            subtype=subtype,
            weakened=weakened,
        )

    def _send_to_irc(self, message: RelayMessage) -> None:
        text = message.body
        if message.subtype is Subtype.COMMAND:
            # Command parsers on IRC must see the text untouched; name the sender first
            self._irc.say(message.dest_channel, f"Command sent from Slack by {message.author}:")
        elif message.subtype is Subtype.ACTION:
            text = f"Action: {message.author} {text}"
        else:
            text = f"<{insert_space(message.author)}> {text}"

        self._log.debug("Sending message to IRC {} -> {}: {}", message.source_channel, message.dest_channel, text)
        if message.weakened:
            self._irc.notice(message.dest_channel, text)
        else:
            self._irc.say(message.dest_channel, text)

    # IRC -> Slack

    def _translate_from_irc(self, evt: Plain | Action | Notice) -> tuple[SlackChannel, RelayMessage]:
        slack_name = self._mapping.resolve_to_source(evt.channel)
        if not slack_name:
            raise UnmappedChannelWarning(f"IRC channel {evt.channel} is not mapped", code="unmapped")
        channel = self._slack.get_channel_by_name(slack_name)
        if channel is None:
            raise UnmappedChannelWarning(
                f"Tried to send a message to a channel the bot isn't in: {slack_name}",
                code="not_member",
            )

        if isinstance(evt, Notice):
            subtype = Subtype.NOTICE
        elif isinstance(evt, Action):
            subtype = Subtype.ACTION
        else:
            subtype = Subtype.PLAIN

        return channel, RelayMessage(
            author=evt.author,
            source_channel=slack_name,
            dest_channel=evt.channel.lower(),
            body=to_source(strip_control_codes(evt.text)),
            subtype=subtype,
        )

    def _send_to_slack(self, channel: SlackChannel, message: RelayMessage) -> None:
        text = message.body
        if message.subtype is Subtype.NOTICE:
            text = weaken(text)
        elif message.subtype is Subtype.ACTION:
            text = emphasize(text)

        self._log.debug("Sending message to Slack {} -> {}: {}", message.dest_channel, message.source_channel, text)
        self._slack.post_message(
            channel,
            text=text,
            username=message.author,
            icon_url=avatar_url(message.author, self._avatar_template),
        )
