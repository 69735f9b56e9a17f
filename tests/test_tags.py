"""Tests for style envelopes and nick/control-code helpers."""

from __future__ import annotations

import pytest

from slackirc.formatting.tags import (
    ZERO_WIDTH_SPACE,
    emphasize,
    insert_space,
    is_emphasized,
    is_weakened,
    normalize,
    strip_control_codes,
    weaken,
)


class TestEnvelopes:
    def test_emphasize(self):
        assert emphasize("waves") == "*waves*"
        assert is_emphasized("*waves*")

    def test_weaken(self):
        assert weaken("server notice") == "_ server notice _"
        assert is_weakened("_ server notice _")

    @pytest.mark.parametrize("text", ["hello", "*half", "half_", "", "_"])
    def test_not_weakened(self, text):
        assert not is_weakened(text)

    @pytest.mark.parametrize("text", ["hello", "*half", "half*", "", "*"])
    def test_not_emphasized(self, text):
        assert not is_emphasized(text)

    def test_multiline_envelope(self):
        assert is_weakened("_line one\nline two_")

    def test_normalize_weakened(self):
        assert normalize(weaken("hi there")) == "hi there"

    def test_normalize_emphasized(self):
        assert normalize(emphasize("hi there")) == "hi there"

    def test_normalize_slack_italics(self):
        assert normalize("_hi_") == "hi"

    def test_normalize_strips_only_one_marker(self):
        assert normalize("__hi__") == "_hi_"

    def test_normalize_plain_untouched(self):
        assert normalize("plain") == "plain"


class TestInsertSpace:
    def test_breaks_nick(self):
        assert insert_space("bob") == f"b{ZERO_WIDTH_SPACE}o{ZERO_WIDTH_SPACE}b"

    def test_single_char(self):
        assert insert_space("x") == "x"

    def test_empty(self):
        assert insert_space("") == ""


class TestStripControlCodes:
    def test_bold_italic_underline(self):
        assert strip_control_codes("\x02bold\x02 \x1ditalic\x1d \x1funder\x1f") == "bold italic under"

    def test_colors(self):
        assert strip_control_codes("\x0304,12red on blue\x03 plain") == "red on blue plain"

    def test_hex_color(self):
        assert strip_control_codes("\x04ff0000red\x0f") == "red"

    def test_reset_and_reverse(self):
        assert strip_control_codes("\x16rev\x0f\x11mono\x1estrike") == "revmonostrike"

    def test_plain_untouched(self):
        assert strip_control_codes("nothing to see: 100%") == "nothing to see: 100%"
