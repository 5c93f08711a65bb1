from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from models.color import Color

INFO = "info"
ERROR = "error"


@dataclass(frozen=True)
class PickerState:
    """
    Display state of one picker session.
    Never mutated in place: every transition below returns a new state.
    """
    colors: Tuple[Color, ...] = ()
    capturing: bool = False
    notification: Optional[str] = None
    notification_level: str = INFO

    def to_dict(self):
        return {
            "colors": [c.to_dict() for c in self.colors],
            "capturing": self.capturing,
            "notification": self.notification,
            "notification_level": self.notification_level if self.notification else None,
        }


def capture_started(state: PickerState) -> PickerState:
    return replace(state, capturing=True)


def capture_completed(state: PickerState, colors: Iterable[Color]) -> PickerState:
    return replace(state, colors=tuple(colors), capturing=False)


def capture_failed(state: PickerState) -> PickerState:
    # previous colors stay on screen
    return replace(state, capturing=False)


def notify(state: PickerState, message: str, level: str = INFO) -> PickerState:
    return replace(state, notification=message, notification_level=level)


def notification_expired(state: PickerState) -> PickerState:
    return replace(state, notification=None, notification_level=INFO)
