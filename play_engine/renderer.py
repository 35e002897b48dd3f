"""
Play Renderer - Generates preview diagrams from plays.

This module renders:
- Field with yard lines, hash marks and the line of scrimmage
- Offensive players as circles, defenders as X markers, ghosts faded
- Routes (solid; custom routes dashed; primary route highlighted)
- Pre-snap motion as a dotted curve through its control point
- Blocks as short T-capped lines
- Blitz paths in red, zone drops ending in an ellipse
- Special teams paths and the ball-carrier run path

The renderer is a host surface: it reads a PlayModel (or rebuilds one from a
serialized PlayDiagram) and never changes it.
"""

import io
from typing import List, Union

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend

import matplotlib.pyplot as plt
import matplotlib.patches as patches
import numpy as np

from play_engine.config import FIELD_HEIGHT, FIELD_WIDTH, LINE_OF_SCRIMMAGE_Y
from play_engine.geometry import block_arrow_endpoint, motion_control_point, quadratic_bezier
from play_engine.model import PlayModel
from play_engine.schema import (
    MotionType,
    PlayDiagram,
    Player,
    Point,
    Route,
    Side,
    SpecialTeamsPathType,
)


# ============================================================
# STYLING
# ============================================================

FIELD_GREEN = "#2f7d32"
FIELD_GREEN_DARK = "#2a7030"
LINE_COLOR = "white"
LOS_COLOR = "#4fc3f7"

OFFENSE_COLOR = "#1565c0"
DEFENSE_COLOR = "#c62828"
ROUTE_COLOR = "white"
PRIMARY_ROUTE_COLOR = "#ffd600"
MOTION_COLOR = "#b3e5fc"
BLOCK_COLOR = "#eeeeee"
BLITZ_COLOR = "#ff1744"
ZONE_COLOR = "#ffab40"
RUN_PATH_COLOR = "#ffd600"

SPECIAL_TEAMS_COLORS = {
    SpecialTeamsPathType.BLOCK: "#eeeeee",
    SpecialTeamsPathType.COVERAGE: "#ff7043",
    SpecialTeamsPathType.RUN: "#ffd600",
    SpecialTeamsPathType.PASS: "#80d8ff",
    SpecialTeamsPathType.RETURN: "#69f0ae",
}

GHOST_ALPHA = 0.3
PLAYER_RADIUS = 9
ZONE_WIDTH = 60
ZONE_HEIGHT = 26
BLOCK_CAP = 8


# ============================================================
# FIELD RENDERER
# ============================================================

class FieldRenderer:
    """Renders the field background"""

    YARD_SPACING = 40
    HASH_OFFSET = 90

    def __init__(self, ax):
        self.ax = ax

    def draw(self):
        self.ax.set_xlim(0, FIELD_WIDTH)
        self.ax.set_ylim(FIELD_HEIGHT, 0)  # screen coordinates: y grows downward

        self._draw_grass()
        self._draw_yard_lines()
        self._draw_hashes()
        self._draw_line_of_scrimmage()

        self.ax.set_aspect("equal")
        self.ax.axis("off")

    def _draw_grass(self):
        stripes = FIELD_HEIGHT // self.YARD_SPACING
        for i in range(stripes):
            color = FIELD_GREEN if i % 2 == 0 else FIELD_GREEN_DARK
            self.ax.add_patch(patches.Rectangle(
                (0, i * self.YARD_SPACING), FIELD_WIDTH, self.YARD_SPACING,
                color=color, zorder=0
            ))

    def _draw_yard_lines(self):
        for y in range(0, FIELD_HEIGHT + 1, self.YARD_SPACING):
            self.ax.plot([0, FIELD_WIDTH], [y, y], color=LINE_COLOR, lw=0.8, alpha=0.5, zorder=1)

    def _draw_hashes(self):
        left = FIELD_WIDTH / 2 - self.HASH_OFFSET
        right = FIELD_WIDTH / 2 + self.HASH_OFFSET
        for y in np.arange(0, FIELD_HEIGHT, self.YARD_SPACING / 5):
            for x in (left, right):
                self.ax.plot([x - 4, x + 4], [y, y], color=LINE_COLOR, lw=0.6, alpha=0.6, zorder=1)

    def _draw_line_of_scrimmage(self):
        self.ax.plot(
            [0, FIELD_WIDTH], [LINE_OF_SCRIMMAGE_Y, LINE_OF_SCRIMMAGE_Y],
            color=LOS_COLOR, lw=2, zorder=2
        )


# ============================================================
# PLAYER RENDERER
# ============================================================

class PlayerRenderer:
    """Renders offensive circles, defensive X markers and their labels"""

    def __init__(self, ax):
        self.ax = ax

    def draw(self, player: Player):
        alpha = GHOST_ALPHA if player.is_dummy else 1.0
        if player.side == Side.OFFENSE:
            self._draw_offense(player, alpha)
        else:
            self._draw_defense(player, alpha)

        self.ax.annotate(
            player.label,
            (player.x, player.y),
            textcoords="offset points",
            xytext=(0, -14 if player.side == Side.DEFENSE else 12),
            ha='center',
            fontsize=6,
            fontweight='bold',
            color='white',
            alpha=alpha,
            zorder=11
        )

    def _draw_offense(self, player: Player, alpha: float):
        edge = PRIMARY_ROUTE_COLOR if player.is_primary else "white"
        self.ax.add_patch(patches.Circle(
            (player.x, player.y), PLAYER_RADIUS,
            facecolor=OFFENSE_COLOR, edgecolor=edge,
            lw=2 if player.is_primary else 1.2,
            alpha=alpha, zorder=10
        ))

    def _draw_defense(self, player: Player, alpha: float):
        self.ax.scatter(
            player.x, player.y, s=110, marker="x",
            c=DEFENSE_COLOR, linewidths=2.5,
            alpha=alpha, zorder=10
        )


# ============================================================
# PATH RENDERER
# ============================================================

def _xy(points: List[Point]):
    return [p.x for p in points], [p.y for p in points]


class PathRenderer:
    """Renders routes, motion, blocks and defensive paths"""

    LINE_WIDTH = 1.8

    def __init__(self, ax):
        self.ax = ax

    def _arrow_head(self, start: Point, end: Point, color: str, alpha: float = 1.0):
        if start.x == end.x and start.y == end.y:
            return
        self.ax.annotate(
            "", xy=(end.x, end.y), xytext=(start.x, start.y),
            arrowprops=dict(arrowstyle="-|>", color=color, lw=self.LINE_WIDTH, mutation_scale=10),
            alpha=alpha, zorder=6
        )

    def draw_route(self, route: Route):
        if len(route.points) < 2:
            return
        color = PRIMARY_ROUTE_COLOR if route.is_primary else ROUTE_COLOR
        width = self.LINE_WIDTH * (1.6 if route.is_primary else 1.0)
        style = "--" if route.is_custom else "-"

        xs, ys = _xy(route.points)
        self.ax.plot(xs, ys, style, color=color, lw=width, zorder=5, solid_capstyle='round')
        self._arrow_head(route.points[-2], route.points[-1], color)

    def draw_motion(self, player: Player):
        if player.motion_type == MotionType.NONE or player.motion_endpoint is None:
            return
        start = player.point
        end = player.motion_endpoint
        control = player.motion_control_point or motion_control_point(start, end)
        curve = quadratic_bezier(start, control, end, samples=24)

        xs, ys = _xy(curve)
        self.ax.plot(xs, ys, ":", color=MOTION_COLOR, lw=self.LINE_WIDTH, zorder=5)

    def draw_block(self, player: Player):
        if not player.block_type:
            return
        start = player.point
        end = block_arrow_endpoint(start, player.block_type, player.block_direction)
        self.ax.plot([start.x, end.x], [start.y, end.y], color=BLOCK_COLOR, lw=self.LINE_WIDTH, zorder=5)

        # T-cap perpendicular to the block direction
        dx, dy = end.x - start.x, end.y - start.y
        length = np.hypot(dx, dy)
        if length == 0:
            return
        px, py = -dy / length * BLOCK_CAP, dx / length * BLOCK_CAP
        self.ax.plot(
            [end.x - px, end.x + px], [end.y - py, end.y + py],
            color=BLOCK_COLOR, lw=self.LINE_WIDTH, zorder=5
        )

    def draw_blitz(self, points: List[Point]):
        xs, ys = _xy(points)
        self.ax.plot(xs, ys, color=BLITZ_COLOR, lw=self.LINE_WIDTH, zorder=5)
        self._arrow_head(points[-2], points[-1], BLITZ_COLOR)

    def draw_zone(self, points: List[Point]):
        start, end = points[0], points[-1]
        self.ax.plot([start.x, end.x], [start.y, end.y], "--", color=ZONE_COLOR, lw=1.2, zorder=4)
        self.ax.add_patch(patches.Ellipse(
            (end.x, end.y), ZONE_WIDTH, ZONE_HEIGHT,
            facecolor=ZONE_COLOR, edgecolor=ZONE_COLOR, alpha=0.25, zorder=3
        ))

    def draw_special_teams(self, player: Player):
        if player.special_teams_endpoint is None:
            return
        color = SPECIAL_TEAMS_COLORS.get(player.special_teams_path_type, ROUTE_COLOR)
        start, end = player.point, player.special_teams_endpoint
        self.ax.plot([start.x, end.x], [start.y, end.y], "--", color=color, lw=self.LINE_WIDTH, zorder=5)
        self._arrow_head(start, end, color)

    def draw_run_path(self, points: List[Point]):
        xs, ys = _xy(points)
        self.ax.plot(xs, ys, color=RUN_PATH_COLOR, lw=self.LINE_WIDTH * 1.4, zorder=6)
        self._arrow_head(points[-2], points[-1], RUN_PATH_COLOR)


# ============================================================
# MAIN RENDER FUNCTIONS
# ============================================================

def _as_model(source: Union[PlayModel, PlayDiagram, dict]) -> PlayModel:
    if isinstance(source, PlayModel):
        return source
    if isinstance(source, dict):
        source = PlayDiagram.model_validate(source)
    model = PlayModel()
    model.load_play(source.attributes, source)
    return model


def _draw(source: Union[PlayModel, PlayDiagram, dict], figsize: tuple):
    model = _as_model(source)
    fig, ax = plt.subplots(figsize=figsize)

    FieldRenderer(ax).draw()
    paths = PathRenderer(ax)

    for path in model.defensive_paths():
        if path.kind == "blitz":
            paths.draw_blitz(path.points)
        else:
            paths.draw_zone(path.points)

    for route in model.routes:
        paths.draw_route(route)

    run = model.run_path()
    if run:
        paths.draw_run_path(run)

    for player in model.players:
        paths.draw_motion(player)
        paths.draw_block(player)
        paths.draw_special_teams(player)

    players = PlayerRenderer(ax)
    for player in model.all_players:
        players.draw(player)

    title = model.attributes.play_name or model.formation
    if title:
        ax.set_title(title, fontsize=10)

    return fig


def render(
    source: Union[PlayModel, PlayDiagram, dict],
    output_path: str,
    fmt: str = "svg",
    figsize: tuple = (10, 5.8),
    dpi: int = 100
) -> str:
    """
    Render a play to a file.

    Args:
        source: PlayModel, PlayDiagram, or a diagram dict in wire format
        output_path: Where to write the image
        fmt: "svg" or "png"
        figsize: Figure dimensions (width, height) in inches
        dpi: Resolution for raster output

    Returns:
        The output path
    """
    fig = _draw(source, figsize)
    fig.savefig(output_path, format=fmt, bbox_inches="tight", dpi=dpi)
    plt.close(fig)
    return output_path


def render_to_string(
    source: Union[PlayModel, PlayDiagram, dict],
    figsize: tuple = (10, 5.8),
) -> str:
    """Render a play and return the SVG markup"""
    fig = _draw(source, figsize)
    buffer = io.StringIO()
    fig.savefig(buffer, format="svg", bbox_inches="tight")
    plt.close(fig)
    return buffer.getvalue()
