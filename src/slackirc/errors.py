"""Bridge domain exceptions."""

from __future__ import annotations


class BridgeError(Exception):
    """Base for bridge domain errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class ConfigurationError(BridgeError):
    """Missing/invalid config field or malformed channel mapping. Fatal at startup."""


class ResolutionError(BridgeError):
    """A Slack channel or user ID in a message could not be resolved to a name."""


class UnmappedChannelWarning(BridgeError):
    """Traffic from (or invite to) a channel with no configured counterpart."""


class TransportError(BridgeError):
    """Connectivity or delivery failure reported by a protocol session."""
