"""Keyboard bindings mapped onto view state transitions."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import pygame

from orrery.world.system import ViewState

LOGGER = logging.getLogger(__name__)

PAN_STEP = 10.0
ZOOM_STEP = 0.05
ROTATE_STEP = math.pi / 30.0

DEFAULT_BINDINGS = {
    "pan_right": ["K_RIGHT"],
    "pan_left": ["K_LEFT"],
    "pan_up": ["K_UP"],
    "pan_down": ["K_DOWN"],
    "zoom_in": ["K_s"],
    "zoom_out": ["K_a"],
    "rotate_x_neg": ["K_q"],
    "rotate_x_pos": ["K_w"],
    "rotate_y_neg": ["K_e"],
    "rotate_y_pos": ["K_r"],
    "rotate_z_neg": ["K_t"],
    "rotate_z_pos": ["K_y"],
    "toggle_rotate": ["K_SPACE"],
    "toggle_orbit": ["K_o"],
    "quit": ["K_ESCAPE"],
}

# Applied once per key press rather than every frame the key is held.
TOGGLE_ACTIONS = ("toggle_rotate", "toggle_orbit", "quit")


def _default_actions() -> Dict[str, list[str]]:
    return {action: list(keys) for action, keys in DEFAULT_BINDINGS.items()}


def _key_code(name: str) -> Optional[int]:
    code = getattr(pygame, name, None)
    return code if isinstance(code, int) else None


@dataclass
class InputBindings:
    """Runtime structure representing current bindings."""

    actions: Dict[str, list[str]] = field(default_factory=_default_actions)

    @classmethod
    def load(cls, path: Path) -> "InputBindings":
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            return cls()
        actions = _default_actions()
        actions.update({k: list(v) for k, v in data.get("bindings", {}).items()})
        return cls(actions=actions)

    def key_map(self) -> Dict[int, list[str]]:
        mapping: Dict[int, list[str]] = {}
        for action, keys in self.actions.items():
            for key_name in keys:
                code = _key_code(key_name)
                if code is None:
                    LOGGER.warning("Unknown key '%s' bound to '%s'", key_name, action)
                    continue
                mapping.setdefault(code, []).append(action)
        return mapping


class InputMapper:
    """Tracks held keys and turns them into the next frame's ``ViewState``."""

    def __init__(self, bindings: Optional[InputBindings] = None) -> None:
        self.bindings = bindings or InputBindings()
        self._key_map = self.bindings.key_map()
        self.action_state: Dict[str, bool] = {action: False for action in self.bindings.actions}
        self._pressed: Dict[str, bool] = {action: False for action in TOGGLE_ACTIONS}

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
            return
        down = event.type == pygame.KEYDOWN
        for action in self._key_map.get(event.key, ()):
            if down and action in self._pressed and not self.action_state.get(action, False):
                self._pressed[action] = True
            self.action_state[action] = down

    def action(self, name: str) -> bool:
        return self.action_state.get(name, False)

    def consume_press(self, name: str) -> bool:
        value = self._pressed.get(name, False)
        self._pressed[name] = False
        return value

    def apply(self, view: ViewState) -> ViewState:
        """Next view: held keys act every frame, toggles once per press."""

        dx = (PAN_STEP if self.action("pan_right") else 0.0) - (PAN_STEP if self.action("pan_left") else 0.0)
        dy = (PAN_STEP if self.action("pan_down") else 0.0) - (PAN_STEP if self.action("pan_up") else 0.0)
        if dx or dy:
            view = view.panned(dx, dy)

        if self.action("zoom_in"):
            view = view.zoomed(ZOOM_STEP)
        if self.action("zoom_out"):
            view = view.zoomed(-ZOOM_STEP)

        rx = self._axis("rotate_x_pos", "rotate_x_neg")
        ry = self._axis("rotate_y_pos", "rotate_y_neg")
        rz = self._axis("rotate_z_pos", "rotate_z_neg")
        if rx or ry or rz:
            view = view.rotated(rx, ry, rz)

        if self.consume_press("toggle_rotate"):
            view = view.with_auto_rotate_toggled()
        if self.consume_press("toggle_orbit"):
            view = view.with_auto_orbit_toggled()
        return view

    def _axis(self, positive: str, negative: str) -> float:
        value = 0.0
        if self.action(positive):
            value += ROTATE_STEP
        if self.action(negative):
            value -= ROTATE_STEP
        return value


__all__ = ["DEFAULT_BINDINGS", "InputBindings", "InputMapper"]
