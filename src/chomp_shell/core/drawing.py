"""Draw path: paints a session through the backend's drawing primitives."""

from __future__ import annotations

import math
from typing import Protocol

from .session import Session

FULL_TURN = 2.0 * math.pi

# (width, r, g, b, a)
ROBOT_FILL_PEN = (1.0, 0.7, 0.7, 0.7, 0.5)
ROBOT_OUTLINE_PEN = (3.0, 0.2, 0.2, 0.2, 1.0)
PATH_PEN = (1.0, 0.2, 0.2, 0.2, 1.0)
START_POINT_PEN = (5.0, 0.8, 0.2, 0.2, 1.0)
WAYPOINT_POINT_PEN = (5.0, 0.5, 0.5, 0.5, 1.0)
GOAL_POINT_PEN = (5.0, 0.2, 0.8, 0.2, 1.0)
OBSTACLE_PEN = (1.0, 0.0, 0.0, 1.0, 0.2)


class Gfx(Protocol):
    """Drawing primitives a rendering backend provides."""

    def set_pen(self, width: float, red: float, green: float, blue: float, alpha: float) -> None:
        ...

    def fill_arc(self, cx: float, cy: float, radius: float, start: float, end: float) -> None:
        ...

    def draw_arc(self, cx: float, cy: float, radius: float, start: float, end: float) -> None:
        ...

    def draw_line(self, x0: float, y0: float, x1: float, y1: float) -> None:
        ...

    def draw_point(self, x: float, y: float) -> None:
        ...

    def set_view(self, x0: float, y0: float, x1: float, y1: float) -> None:
        ...


def draw_session(session: Session, gfx: Gfx) -> None:
    low, high = session.viewport()
    gfx.set_view(float(low[0]), float(low[1]), float(high[0]), float(high[1]))

    # robots: start, waypoints, goal
    for entity in session.display.entities():
        x, y = entity.position
        gfx.set_pen(*ROBOT_FILL_PEN)
        gfx.fill_arc(x, y, entity.radius, 0.0, FULL_TURN)
        gfx.set_pen(*ROBOT_OUTLINE_PEN)
        gfx.draw_arc(x, y, entity.radius, 0.0, FULL_TURN)

    # trajectory
    start = session.trajectory.start
    goal = session.trajectory.goal
    waypoints = session.trajectory.waypoints
    gfx.set_pen(*PATH_PEN)
    previous = start
    for point in waypoints:
        gfx.draw_line(float(previous[0]), float(previous[1]), float(point[0]), float(point[1]))
        previous = point
    gfx.draw_line(float(previous[0]), float(previous[1]), float(goal[0]), float(goal[1]))

    gfx.set_pen(*START_POINT_PEN)
    gfx.draw_point(float(start[0]), float(start[1]))
    gfx.set_pen(*WAYPOINT_POINT_PEN)
    for point in waypoints:
        gfx.draw_point(float(point[0]), float(point[1]))
    gfx.set_pen(*GOAL_POINT_PEN)
    gfx.draw_point(float(goal[0]), float(goal[1]))

    # obstacles
    for obstacle in session.obstacles:
        gfx.set_pen(*OBSTACLE_PEN)
        gfx.fill_arc(obstacle.center[0], obstacle.center[1], obstacle.radius, 0.0, FULL_TURN)
