"""Tests for the Slack <-> IRC channel mapping."""

from __future__ import annotations

import pytest

from slackirc.errors import ConfigurationError
from slackirc.gateway.router import ChannelMapping


class TestBuild:
    def test_lowercases_and_strips_password(self):
        # Arrange
        raw = {"#general": "#Bridge", "#ops": "#Ops-Room  secretkey"}

        # Act
        mapping = ChannelMapping.build(raw)

        # Assert
        assert mapping.resolve_to_dest("#general") == "#bridge"
        assert mapping.resolve_to_dest("#ops") == "#ops-room"
        assert mapping.password_for("#OPS-ROOM") == "secretkey"
        assert mapping.password_for("#bridge") is None

    def test_inverse(self):
        mapping = ChannelMapping.build({"#general": "#bridge", "private": "#private"})
        assert mapping.resolve_to_source("#bridge") == "#general"
        assert mapping.resolve_to_source("#private") == "private"

    def test_source_lookup_case_insensitive(self):
        mapping = ChannelMapping.build({"#general": "#Bridge"})
        assert mapping.resolve_to_source("#BRIDGE") == "#general"

    def test_dest_lookup_is_exact(self):
        mapping = ChannelMapping.build({"#general": "#bridge"})
        assert mapping.resolve_to_dest("#General") is None

    def test_unmapped(self):
        mapping = ChannelMapping.build({"#general": "#bridge"})
        assert mapping.resolve_to_dest("#random") is None
        assert mapping.resolve_to_source("#elsewhere") is None

    def test_irc_channels_in_order(self):
        mapping = ChannelMapping.build({"#a": "#one", "#b": "#Two key", "c": "#three"})
        assert mapping.irc_channels() == ["#one", "#two", "#three"]

    def test_immutable(self):
        mapping = ChannelMapping.build({"#general": "#bridge"})
        with pytest.raises(TypeError):
            mapping.to_irc["#new"] = "#x"  # type: ignore[index]
        with pytest.raises(AttributeError):
            mapping.to_slack = {}  # type: ignore[misc]


class TestBuildErrors:
    @pytest.mark.parametrize("raw", [None, [], "#general", 3])
    def test_not_a_mapping(self, raw):
        with pytest.raises(ConfigurationError) as exc_info:
            ChannelMapping.build(raw)
        assert exc_info.value.code == "invalid_mapping"

    def test_empty(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ChannelMapping.build({})
        assert exc_info.value.code == "empty_mapping"

    @pytest.mark.parametrize("value", ["", "   ", None, 42])
    def test_empty_destination(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            ChannelMapping.build({"#general": value})
        assert exc_info.value.code == "empty_destination"
        assert exc_info.value.details == {"slack_channel": "#general"}

    def test_duplicate_destination_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ChannelMapping.build({"#general": "#bridge", "#random": "#BRIDGE key"})
        assert exc_info.value.code == "duplicate_destination"
