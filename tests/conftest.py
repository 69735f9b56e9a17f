"""Shared fixtures: a bridge wired to mock sessions."""

from __future__ import annotations

import pytest

from slackirc.adapters.base import SlackChannel, SlackUser
from slackirc.config import Config
from slackirc.gateway import Bridge, Bus, ChannelMapping
from tests.mocks import MockIrcSession, MockSlackSession

BASE_CONFIG = {
    "server": "irc.example.net",
    "nickname": "slackbot",
    "token": "xoxb-test",
    "channelMapping": {
        "#general": "#bridge",
        "#ops": "#Ops-Room secretkey",
        "private": "#private",
    },
    "commandCharacters": ["!", "."],
    "autoSendCommands": [["MODE", "slackbot", "+x"], ["PRIVMSG", "NickServ", "IDENTIFY pw"]],
}


@pytest.fixture
def config() -> Config:
    return Config(dict(BASE_CONFIG)).validate()


@pytest.fixture
def mapping(config: Config) -> ChannelMapping:
    return ChannelMapping.build(config.channel_mapping)


@pytest.fixture
def slack() -> MockSlackSession:
    return MockSlackSession(
        channels=[
            SlackChannel("C100", "general"),
            SlackChannel("C200", "ops"),
            SlackChannel("C300", "random"),
            SlackChannel("G400", "private", is_channel=False),
        ],
        users=[
            SlackUser("U1", "alice"),
            SlackUser("U2", "bob"),
        ],
    )


@pytest.fixture
def irc() -> MockIrcSession:
    return MockIrcSession()


@pytest.fixture
def bridge(config: Config, mapping: ChannelMapping, slack: MockSlackSession, irc: MockIrcSession) -> Bridge:
    return Bridge(config, mapping, slack, irc)


@pytest.fixture
def bus(bridge: Bridge) -> Bus:
    bus = Bus()
    bus.register(bridge)
    return bus
