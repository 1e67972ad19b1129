"""PySide6/PyQtGraph event loop backend for the interactive shell."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Tuple

import pyqtgraph as pg
from PySide6.QtCore import QTimer
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow, QToolBar

from ..core.drawing import Gfx, draw_session
from ..core.session import Session
from .canvas import PointerCanvas, PointerCallback
from .gfx import QtGfx

logger = logging.getLogger(__name__)

DEFAULT_FRAME_INTERVAL_MS = 16

IdleCallback = Callable[[], object]
DrawCallback = Callable[[Gfx], None]
Button = Tuple[str, Callable[[], None]]


class ShellWindow(QMainWindow):
    """Main window: toolbar buttons, the pointer canvas and a status line.

    A timer fires once per frame and calls ``idle`` followed by ``draw``.
    """

    def __init__(
        self,
        title: str,
        idle: IdleCallback,
        draw: DrawCallback,
        pointer: PointerCallback,
        buttons: Sequence[Button] = (),
        status: Optional[Callable[[], str]] = None,
        interval_ms: int = DEFAULT_FRAME_INTERVAL_MS,
    ) -> None:
        super().__init__()
        self.setWindowTitle(title)
        self.resize(720, 720)
        self._idle = idle
        self._draw = draw
        self._status = status

        toolbar = QToolBar("Controls", self)
        self.addToolBar(toolbar)
        for label, callback in buttons:
            action = QAction(label, self)
            action.triggered.connect(lambda _checked=False, cb=callback: cb())
            toolbar.addAction(action)

        self.canvas = PointerCanvas(self)
        self.canvas.set_pointer_callback(pointer)
        self.setCentralWidget(self.canvas)
        self.gfx = QtGfx(self.canvas.plotItem)

        self._status_label = QLabel(self)
        self.statusBar().addPermanentWidget(self._status_label)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_frame)
        self._timer.start(max(1, int(interval_ms)))

    def _on_frame(self) -> None:
        self._idle()
        self.gfx.begin_frame()
        self._draw(self.gfx)
        self.gfx.end_frame()
        if self._status is not None:
            self._status_label.setText(self._status())

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._timer.stop()
        super().closeEvent(event)


def _application() -> QApplication:
    app = QApplication.instance() or QApplication([])
    app.setStyle("Fusion")
    pg.setConfigOptions(background="w", foreground="k", antialias=True)
    return app


def main(
    title: str,
    idle: IdleCallback,
    draw: DrawCallback,
    pointer: PointerCallback,
    buttons: Sequence[Button] = (),
    status: Optional[Callable[[], str]] = None,
    interval_ms: int = DEFAULT_FRAME_INTERVAL_MS,
) -> int:
    """Open a window and run the event loop until it is closed."""
    app = _application()
    window = ShellWindow(title, idle, draw, pointer, buttons, status, interval_ms)
    window.show()
    return app.exec()


def _status_text(session: Session) -> str:
    return (
        f"{session.state.value} | iterations: {session.iterations} | "
        f"obstacles: {len(session.obstacles)}"
    )


def run(session: Session, interval_ms: int = DEFAULT_FRAME_INTERVAL_MS) -> int:
    """Drive ``session`` interactively."""
    logger.info("Starting interactive session '%s'", session.title)
    return main(
        session.title,
        idle=session.on_idle,
        draw=lambda gfx: draw_session(session, gfx),
        pointer=session.on_pointer,
        buttons=[
            ("Step", session.step),
            ("Run", session.toggle_run),
            ("Jumble", session.jumble),
        ],
        status=lambda: _status_text(session),
        interval_ms=interval_ms,
    )
