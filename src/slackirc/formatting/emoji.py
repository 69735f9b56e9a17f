"""Slack emoji short codes -> glyphs. Read-only; unknown codes are left as typed."""

from __future__ import annotations

from types import MappingProxyType

EMOJI = MappingProxyType(
    {
        "+1": "👍",
        "-1": "👎",
        "100": "💯",
        "angry": "😠",
        "astonished": "😲",
        "bangbang": "‼️",
        "beer": "🍺",
        "beers": "🍻",
        "birthday": "🎂",
        "blush": "😊",
        "boom": "💥",
        "broken_heart": "💔",
        "bug": "🐛",
        "cake": "🍰",
        "cat": "🐱",
        "clap": "👏",
        "coffee": "☕",
        "cold_sweat": "😰",
        "confused": "😕",
        "cry": "😢",
        "disappointed": "😞",
        "dizzy_face": "😵",
        "dog": "🐶",
        "expressionless": "😑",
        "eyes": "👀",
        "facepalm": "🤦",
        "fire": "🔥",
        "flushed": "😳",
        "frowning": "😦",
        "ghost": "👻",
        "gift": "🎁",
        "grey_question": "❔",
        "grimacing": "😬",
        "grin": "😁",
        "grinning": "😀",
        "heart": "❤️",
        "heart_eyes": "😍",
        "heavy_check_mark": "✔️",
        "hugging_face": "🤗",
        "hushed": "😯",
        "innocent": "😇",
        "joy": "😂",
        "kiss": "💋",
        "kissing_heart": "😘",
        "laughing": "😆",
        "satisfied": "😆",
        "light_bulb": "💡",
        "bulb": "💡",
        "lock": "🔒",
        "mask": "😷",
        "muscle": "💪",
        "neutral_face": "😐",
        "no_mouth": "😶",
        "ok": "🆗",
        "ok_hand": "👌",
        "open_mouth": "😮",
        "pensive": "😔",
        "persevere": "😣",
        "pizza": "🍕",
        "point_down": "👇",
        "point_left": "👈",
        "point_right": "👉",
        "point_up": "☝️",
        "poop": "💩",
        "hankey": "💩",
        "pray": "🙏",
        "question": "❓",
        "rage": "😡",
        "raised_hands": "🙌",
        "relaxed": "☺️",
        "relieved": "😌",
        "rocket": "🚀",
        "rofl": "🤣",
        "scream": "😱",
        "see_no_evil": "🙈",
        "shrug": "🤷",
        "simple_smile": "🙂",
        "slightly_smiling_face": "🙂",
        "slightly_frowning_face": "🙁",
        "sleeping": "😴",
        "sleepy": "😪",
        "smile": "😄",
        "smiley": "😃",
        "smirk": "😏",
        "sob": "😭",
        "sparkles": "✨",
        "star": "⭐",
        "stuck_out_tongue": "😛",
        "stuck_out_tongue_winking_eye": "😜",
        "sunglasses": "😎",
        "sweat": "😓",
        "sweat_smile": "😅",
        "tada": "🎉",
        "thinking_face": "🤔",
        "thumbsup": "👍",
        "thumbsdown": "👎",
        "tired_face": "😫",
        "triumph": "😤",
        "unamused": "😒",
        "upside_down_face": "🙃",
        "v": "✌️",
        "warning": "⚠️",
        "wave": "👋",
        "weary": "😩",
        "white_check_mark": "✅",
        "wink": "😉",
        "worried": "😟",
        "x": "❌",
        "yum": "😋",
        "zap": "⚡",
        "zzz": "💤",
    }
)
