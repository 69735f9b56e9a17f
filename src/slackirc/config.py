"""Configuration: YAML + .env + environment overlay."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from slackirc.errors import ConfigurationError

REQUIRED_FIELDS = ("server", "nickname", "channelMapping", "token")

DEFAULT_AVATAR_URL = "https://robohash.org/{nick}.png?size=48x48"

# Env keys that override config file values
_ENV_OVERRIDES = {
    "SLACK_IRC_TOKEN": "token",
    "SLACK_IRC_APP_TOKEN": "appToken",
    "SLACK_IRC_SERVER": "server",
    "SLACK_IRC_NICKNAME": "nickname",
}


def _deep_update(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_update(result[key], value)
        else:
            result[key] = value
    return result


def _env_overrides() -> dict[str, Any]:
    return {key: os.environ[env] for env, key in _ENV_OVERRIDES.items() if os.environ.get(env)}


def load_config(path: str | Path) -> dict[str, Any]:
    """Load config from YAML file. Use SafeLoader. Returns raw dict."""
    path = Path(path)
    if not path.exists():
        logger.warning("Config file not found: {}", path)
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse config {}: {}", path, exc)
        raise
    if not isinstance(data, dict):
        logger.warning("Config file {} has invalid structure (expected dict)", path)
        return {}
    return data


def load_config_with_env(path: str | Path) -> dict[str, Any]:
    """Load config from YAML and overlay env-derived values (.env honoured)."""
    from dotenv import load_dotenv

    load_dotenv()
    return _deep_update(load_config(path), _env_overrides())


class Config:
    """Config accessor. Passed explicitly to the components that need it."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}

    def validate(self) -> Config:
        """Check required fields and optional field shapes; raise ConfigurationError."""
        for name in REQUIRED_FIELDS:
            if not self._data.get(name):
                raise ConfigurationError(
                    f"Missing configuration field {name}",
                    code="missing_field",
                    details={"field": name},
                )
        chars = self._data.get("commandCharacters") or []
        if isinstance(chars, str):
            chars = list(chars)
        if not isinstance(chars, list) or any(
            not isinstance(c, str) or len(c) != 1 for c in chars
        ):
            raise ConfigurationError(
                "commandCharacters must be a list of single characters",
                code="invalid_command_characters",
            )
        commands = self._data.get("autoSendCommands") or []
        if not isinstance(commands, list) or any(
            not isinstance(cmd, list) or not cmd for cmd in commands
        ):
            raise ConfigurationError(
                "autoSendCommands must be a list of non-empty argument lists",
                code="invalid_auto_send_commands",
            )
        return self

    @property
    def server(self) -> str:
        return str(self._data.get("server", ""))

    @property
    def nickname(self) -> str:
        return str(self._data.get("nickname", ""))

    @property
    def token(self) -> str:
        """Slack bot token (xoxb-...)."""
        return str(self._data.get("token", ""))

    @property
    def app_token(self) -> str | None:
        """Slack app-level token (xapp-...) for Socket Mode."""
        return self._data.get("appToken") or None

    @property
    def channel_mapping(self) -> Any:
        """Raw ``{slackChannel: "#irc[ key]"}`` value; shape is checked by ChannelMapping.build."""
        return self._data.get("channelMapping")

    @property
    def command_characters(self) -> frozenset[str]:
        return frozenset(self._data.get("commandCharacters") or ())

    @property
    def auto_send_commands(self) -> list[list[str]]:
        return [[str(arg) for arg in cmd] for cmd in self._data.get("autoSendCommands") or []]

    @property
    def irc_options(self) -> dict[str, Any]:
        opts = self._data.get("ircOptions")
        return dict(opts) if isinstance(opts, dict) else {}

    @property
    def avatar_url(self) -> str:
        return str(self._data.get("avatarUrl") or DEFAULT_AVATAR_URL)

    @property
    def mute_slackbot(self) -> bool:
        return bool(self._data.get("muteSlackbot", False))

    @property
    def user_cache_ttl_seconds(self) -> int:
        """TTL for cached Slack user records."""
        return int(self._data.get("userCacheTtlSeconds", 3600))
