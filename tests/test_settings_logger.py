"""Tests for settings loading and channel logging."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest
from pygame.math import Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from orrery.engine.logger import ChannelLogger, LoggerConfig, RenderLogger, init_logger
from orrery.engine.settings import DEFAULT_SETTINGS, RenderSettings, load_settings


def test_missing_settings_give_defaults(tmp_path):
    assert load_settings(tmp_path / "settings.json") == DEFAULT_SETTINGS


def test_malformed_settings_give_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{broken")
    assert load_settings(path) == DEFAULT_SETTINGS


def test_partial_settings_merge_over_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"resolution": [320, 200], "starField": False}))
    settings = RenderSettings.load(path)
    assert settings.resolution == (320, 200)
    assert not settings.star_field
    assert settings.star_count == 800
    assert settings.background_color == Vector3(0.2, 0.2, 0.4)


def test_render_settings_conversions():
    settings = RenderSettings.from_dict(
        {"frameDelayMs": 40, "starCount": -5, "modelPath": "models/rock.obj", "timeStep": 0.5}
    )
    assert settings.frame_delay == pytest.approx(0.04)
    assert settings.star_count == 0
    assert settings.model_path == Path("models/rock.obj")
    assert settings.time_step == 0.5


def test_logger_config_from_settings():
    config = LoggerConfig.from_settings({"logLevel": "debug", "logChannels": {"frame": True}})
    assert config.level == logging.DEBUG
    assert config.channels["frame"]
    assert config.channels["render"]
    assert LoggerConfig.from_settings({"logLevel": "loud"}).level == logging.INFO


def test_disabled_channel_is_silent_except_errors(caplog):
    channel = ChannelLogger("assets", logging.getLogger("orrery.test.assets"), False)
    with caplog.at_level(logging.DEBUG, logger="orrery.test.assets"):
        channel.info("hidden")
        channel.warning("hidden")
        channel.error("shown")
    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["shown"]


def test_enabled_channel_emits(caplog):
    channel = ChannelLogger("render", logging.getLogger("orrery.test.render"), True)
    with caplog.at_level(logging.INFO, logger="orrery.test.render"):
        channel.info("frame %d", 3)
    assert caplog.records[0].getMessage() == "frame 3"


def test_render_logger_channels():
    logger = init_logger({"logChannels": {"input": True}})
    assert isinstance(logger, RenderLogger)
    assert logger.channel("input").enabled
    assert not logger.channel("frame").enabled
    assert not logger.channel("custom").enabled
    logger.set_enabled("custom", True)
    assert logger.channel("custom").enabled
    assert logger.channel("render").name == "render"
    assert "custom" in logger.channels()


def test_channel_level_checks_follow_toggle():
    base = logging.getLogger("orrery.test.toggle")
    base.setLevel(logging.DEBUG)
    channel = ChannelLogger("toggle", base, False)
    assert not channel.isEnabledFor(logging.INFO)
    assert channel.isEnabledFor(logging.ERROR)
    channel.enabled = True
    assert channel.isEnabledFor(logging.DEBUG)
    base.setLevel(logging.WARNING)
    assert not channel.isEnabledFor(logging.INFO)


def test_channel_records_carry_channel_name(caplog):
    logger = init_logger({"logChannels": {"frame": True}})
    frame = logger.channel("frame")
    with caplog.at_level(logging.DEBUG, logger="orrery.frame"):
        frame.debug("t=%.1f", 0.5)
    record = caplog.records[-1]
    assert record.name == "orrery.frame"
    assert record.channel == "frame"
    assert record.getMessage() == "t=0.5"
