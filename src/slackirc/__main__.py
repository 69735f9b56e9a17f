"""Bridge entrypoint. Loads config, wires adapters to the bridge, runs until cancelled."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from loguru import logger

from slackirc import __version__
from slackirc.adapters import IRCAdapter, SlackAdapter
from slackirc.config import Config, load_config_with_env
from slackirc.errors import BridgeError, ConfigurationError
from slackirc.gateway import Bridge, Bus, ChannelMapping

# Third-party libraries to intercept and route through loguru
_INTERCEPTED_LIBRARIES = ["pydle", "pydle.client", "pydle.connection", "slack_sdk", "slack_sdk.socket_mode"]


def _intercept_logging(level: str) -> None:
    """Route standard-library logging from pydle/slack_sdk to loguru."""

    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                log_level = logger.level(record.levelname).name
            except ValueError:
                log_level = str(record.levelno)
            msg = record.getMessage()
            logger.patch(
                lambda r: r.update(
                    name=record.name,
                    function=record.funcName,
                    line=record.lineno,
                ),
            ).opt(exception=record.exc_info).log(log_level, msg)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for lib in _INTERCEPTED_LIBRARIES:
        lib_logger = logging.getLogger(lib)
        lib_logger.handlers = [InterceptHandler()]
        lib_logger.propagate = False
        lib_logger.setLevel(level)


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. verbose=True or LOG_LEVEL=DEBUG enables DEBUG; otherwise INFO."""
    level = "INFO"
    if verbose:
        level = "DEBUG"
    else:
        env_level = (os.environ.get("LOG_LEVEL") or "").upper()
        if env_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
            level = env_level

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | {message}",
    )
    _intercept_logging(level)


def build(config: Config) -> tuple[Bus, Bridge, SlackAdapter, IRCAdapter]:
    """Validate config and wire bus, adapters and bridge. Raises ConfigurationError."""
    config.validate()
    mapping = ChannelMapping.build(config.channel_mapping)

    bus = Bus()
    slack = SlackAdapter(
        bus,
        config.token,
        config.app_token,
        user_cache_ttl=config.user_cache_ttl_seconds,
    )
    irc = IRCAdapter(
        bus,
        config.server,
        config.nickname,
        [(channel, mapping.password_for(channel)) for channel in mapping.irc_channels()],
        config.irc_options,
    )
    bridge = Bridge(config, mapping, slack, irc)
    bus.register(bridge)
    return bus, bridge, slack, irc


def main() -> None:
    """Main entrypoint."""
    parser = argparse.ArgumentParser(description="Slack <-> IRC relay bot")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    if not args.config.exists():
        logger.error("Config file not found: {}", args.config)
        sys.exit(1)

    config = Config(load_config_with_env(args.config))
    logger.info("Config loaded from {}", args.config)
    try:
        _, _, slack, irc = build(config)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: {}", exc)
        sys.exit(1)

    try:
        asyncio.run(_run(slack, irc))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except BridgeError as exc:
        logger.error("Bridge stopped: {}", exc)
        sys.exit(1)


async def _run(slack: SlackAdapter, irc: IRCAdapter) -> None:
    """Start both adapters and run until cancelled or the IRC connection gives up."""
    logger.debug("Connecting to IRC and Slack")
    await slack.start()
    await irc.start()

    try:
        # Raises TransportError once the IRC side gives up reconnecting
        await irc.wait()
    except asyncio.CancelledError:
        logger.info("Bridge shutting down")
    finally:
        for adapter in (irc, slack):
            logger.info("Stopping {} adapter", adapter.name)
            await adapter.stop()


if __name__ == "__main__":
    main()
