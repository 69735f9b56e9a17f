"""Tests for Slack -> IRC and IRC -> Slack text conversion."""

from __future__ import annotations

import pytest

from slackirc.errors import ResolutionError
from slackirc.formatting.irc_to_slack import to_source
from slackirc.formatting.slack_to_irc import to_irc

CHANNELS = {"C123": "random", "C456": "dev-ops"}
USERS = {"U123": "alice", "W999": "enterprise-bob"}


def _irc(text: str, emoji: dict[str, str] | None = None) -> str:
    if emoji is None:
        return to_irc(text, CHANNELS.get, USERS.get)
    return to_irc(text, CHANNELS.get, USERS.get, emoji)


class TestToIrc:
    """Test Slack markup rewriting for IRC."""

    @pytest.mark.parametrize(
        "input,expected",
        [
            ("<!channel> hello", "@channel hello"),
            ("<!group> hello", "@group hello"),
            ("<!everyone> hello", "@everyone hello"),
            ("<!here> hello", "@here hello"),
            ("<!here|here> hello", "@here hello"),
        ],
    )
    def test_broadcast_mentions(self, input, expected):
        assert _irc(input) == expected

    def test_channel_with_label(self):
        assert _irc("<#C123|general>") == "#general"

    def test_channel_resolved_by_id(self):
        assert _irc("<#C123>") == "#random"

    def test_channel_label_with_hyphen(self):
        assert _irc("see <#C456|dev-ops> now") == "see #dev-ops now"

    def test_unknown_channel_raises(self):
        with pytest.raises(ResolutionError) as exc_info:
            _irc("<#C000>")
        assert exc_info.value.code == "unknown_channel"
        assert exc_info.value.details == {"channel_id": "C000"}

    def test_user_with_label(self):
        assert _irc("hi <@U123|al>") == "hi @al"

    def test_user_resolved_by_id(self):
        assert _irc("hi <@U123>") == "hi @alice"
        assert _irc("<@W999>: ping") == "@enterprise-bob: ping"

    def test_unknown_user_raises(self):
        with pytest.raises(ResolutionError) as exc_info:
            _irc("hi <@U000>")
        assert exc_info.value.code == "unknown_user"

    def test_bare_link(self):
        assert _irc("see <https://example.com/a_b>") == "see https://example.com/a_b"

    def test_labelled_link_keeps_url(self):
        assert _irc("<https://example.com|example>") == "https://example.com"

    def test_mailto_link(self):
        assert _irc("<mailto:a@b.org>") == "mailto:a@b.org"

    def test_command_with_label(self):
        assert _irc("<!subteam^S1|devs>") == "<!subteam^S1|devs>"
        assert _irc("<!date|Friday>") == "<Friday>"

    def test_command_without_label(self):
        assert _irc("<!foo>") == "<foo>"

    def test_emoji_known(self):
        assert _irc(":smile: hi", {"smile": "😄"}) == "😄 hi"

    def test_emoji_unknown_left_alone(self):
        assert _irc(":xyzabc:") == ":xyzabc:"

    def test_emoji_default_table(self):
        assert _irc("nice :+1:") == "nice 👍"

    def test_emoji_does_not_eat_times(self):
        assert _irc("meet at 10:30:00") == "meet at 10:30:00"

    @pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
    def test_newlines_collapse(self, newline):
        assert _irc(f"one{newline}two") == "one two"

    def test_entities_unescaped(self):
        assert _irc("a &amp; b") == "a & b"
        assert _irc("1 &lt; 2 &gt; 0") == "1 < 2 > 0"

    def test_entity_encoded_brackets_rewritten(self):
        # Unescaping happens first, so encoded brackets become link syntax
        assert _irc("&lt;https://x.org&gt;") == "https://x.org"

    def test_literal_entity_text_is_unescaped_twice(self):
        # A typed "&lt;" arrives as "&amp;lt;" and reaches IRC as "<"
        assert _irc("write &amp;lt; 3") == "write < 3"

    def test_empty(self):
        assert _irc("") == ""

    def test_combined(self):
        text = "<!channel> <@U123> posted <https://x.org|x> in <#C123> :smile:"
        assert _irc(text, {"smile": ":)"}) == "@channel @alice posted https://x.org in #random :)"


class TestToSource:
    """Test IRC text cleanup for Slack."""

    def test_passthrough(self):
        assert to_source("hello *world* _x_") == "hello *world* _x_"

    def test_strips_color_codes(self):
        assert to_source("\x0312colored") == "colored"
        assert to_source("\x034red\x03") == "red\x03"

    def test_control_without_digits_kept(self):
        assert to_source("\x02bold\x02") == "\x02bold\x02"

    def test_empty(self):
        assert to_source("") == ""
