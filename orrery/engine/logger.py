"""Renderer logging utilities with channel toggles."""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional

DEFAULT_CHANNELS = {
    "render": True,
    "assets": True,
    "input": False,
    "frame": False,
}


@dataclass
class LoggerConfig:
    """Configuration for runtime logging."""

    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=lambda: DEFAULT_CHANNELS.copy())

    @classmethod
    def from_settings(cls, data: Mapping[str, Any]) -> "LoggerConfig":
        level_name = str(data.get("logLevel", "INFO")).upper()
        level = getattr(logging, level_name, logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
        channels = DEFAULT_CHANNELS.copy()
        channels.update({str(k): bool(v) for k, v in data.get("logChannels", {}).items()})
        return cls(level=level, channels=channels)


class ChannelLogger(logging.LoggerAdapter):
    """Adapter that drops records below ERROR while its channel is switched off.

    Every record it lets through carries the channel name as ``record.channel``.
    """

    def __init__(self, name: str, logger: logging.Logger, enabled: bool) -> None:
        super().__init__(logger, {"channel": name})
        self.enabled = enabled

    @property
    def name(self) -> str:
        return self.extra["channel"]

    def isEnabledFor(self, level: int) -> bool:
        if not self.logger.isEnabledFor(level):
            return False
        return self.enabled or level >= logging.ERROR


class RenderLogger:
    """Owns the ``orrery`` logger tree and one adapter per channel."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(
            level=config.level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stdout,
        )
        self.config = config
        self.root = logging.getLogger("orrery")
        self.root.setLevel(config.level)
        self._channels: Dict[str, ChannelLogger] = {
            name: self._make(name, enabled) for name, enabled in config.channels.items()
        }

    def _make(self, name: str, enabled: bool) -> ChannelLogger:
        return ChannelLogger(name, self.root.getChild(name), enabled)

    def channel(self, name: str) -> ChannelLogger:
        # Channels missing from the config start switched off.
        if name not in self._channels:
            self._channels[name] = self._make(name, False)
        return self._channels[name]

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled

    def channels(self) -> Iterable[str]:
        return self._channels.keys()


def init_logger(settings: Optional[Mapping[str, Any]] = None) -> RenderLogger:
    """Initialise logging from the loaded settings mapping."""

    return RenderLogger(LoggerConfig.from_settings(settings or {}))


__all__ = ["ChannelLogger", "DEFAULT_CHANNELS", "LoggerConfig", "RenderLogger", "init_logger"]
