"""Qt rendering and event-loop backend."""

from .app import ShellWindow, main, run
from .gfx import QtGfx

__all__ = ["QtGfx", "ShellWindow", "main", "run"]
