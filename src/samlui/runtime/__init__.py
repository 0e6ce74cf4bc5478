"""Runtime: control instance lifecycle and the headless reference adapter."""

from .headless import HeadlessInstance, HeadlessNode, HeadlessRenderer, HeadlessSurface
from .instance import ControlInstance

__all__ = [
    "ControlInstance",
    "HeadlessInstance",
    "HeadlessNode",
    "HeadlessRenderer",
    "HeadlessSurface",
]
