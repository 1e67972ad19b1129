"""Plot widget that forwards raw mouse input as pointer events in data coordinates."""

from __future__ import annotations

from typing import Callable, Optional, Tuple

import pyqtgraph as pg
from PySide6.QtCore import Qt

from ..core.interaction import PointerFlags

PointerCallback = Callable[[float, float, int], object]

_BUTTON_FLAGS = {
    Qt.MouseButton.LeftButton: PointerFlags.PRIMARY,
    Qt.MouseButton.RightButton: PointerFlags.SECONDARY,
}


def button_flags(buttons) -> PointerFlags:
    """Translate a Qt button or button mask into pointer button bits."""
    flags = PointerFlags.NONE
    for button, flag in _BUTTON_FLAGS.items():
        if buttons & button:
            flags |= flag
    return flags


class PointerCanvas(pg.PlotWidget):
    """PlotWidget whose mouse handling is replaced by a single pointer callback.

    Panning, zooming and the context menu are disabled; the view is set by
    the draw path every frame.
    """

    def __init__(self, parent=None) -> None:
        super().__init__(parent=parent)
        self._pointer_callback: Optional[PointerCallback] = None
        self.plotItem.setAspectLocked(True, ratio=1.0)
        self.plotItem.setMenuEnabled(False)
        self.plotItem.hideButtons()
        self.plotItem.showGrid(x=True, y=True, alpha=0.2)
        self.plotItem.vb.setMouseEnabled(x=False, y=False)

    def set_pointer_callback(self, callback: Optional[PointerCallback]) -> None:
        self._pointer_callback = callback

    def _data_position(self, event) -> Tuple[float, float]:
        scene_pos = self.mapToScene(event.position().toPoint())
        data_pos = self.plotItem.vb.mapSceneToView(scene_pos)
        return data_pos.x(), data_pos.y()

    def _emit(self, event, flags: PointerFlags) -> None:
        if self._pointer_callback is None:
            return
        x, y = self._data_position(event)
        self._pointer_callback(x, y, int(flags))
        event.accept()

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        self._emit(event, PointerFlags.PRESS | button_flags(event.button()))

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        held = button_flags(event.buttons())
        if not held:
            return
        self._emit(event, PointerFlags.DRAG | held)

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        self._emit(event, PointerFlags.RELEASE | button_flags(event.button()))
