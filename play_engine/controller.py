"""
Interaction Controller - Pointer, drawing and undo/redo state for the editor.

Three concerns share one pointer-event stream:
- Drag: IDLE -> DRAGGING_* -> IDLE. Pointer moves write straight onto the
  model so the diagram and the data never drift apart mid-drag.
- Freehand drawing: INACTIVE -> DRAWING -> finished/cancelled. While drawing,
  drags and selection are suppressed.
- Undo/redo: a bounded log of discrete edits. Drags never push entries.

Cancelling a drag or a drawing always returns to the last committed state.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from play_engine.catalog import CUSTOM_ROUTE
from play_engine.errors import DrawingError
from play_engine.geometry import distance
from play_engine.model import ModelSnapshot, PlayModel
from play_engine.schema import Point, Route, Side

logger = logging.getLogger(__name__)


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING_PLAYER = "draggingPlayer"
    DRAGGING_MOTION_ENDPOINT = "draggingMotionEndpoint"
    DRAGGING_MOTION_CONTROL_POINT = "draggingMotionControlPoint"
    DRAGGING_BLOCK_DIRECTION = "draggingBlockDirection"
    DRAGGING_ZONE_ENDPOINT = "draggingZoneEndpoint"
    DRAGGING_SPECIAL_TEAMS_PATH = "draggingSpecialTeamsPath"


class DrawState(str, Enum):
    INACTIVE = "inactive"
    DRAWING = "drawing"


class ActionType(str, Enum):
    ASSIGNMENT = "assignment"
    BLOCK_TYPE = "blockType"
    MOTION = "motion"
    COVERAGE_ROLE = "coverageRole"
    BLITZ = "blitz"
    PRIMARY = "primary"


@dataclass
class EditAction:
    """One entry of the undo log"""
    type: ActionType
    player_id: str
    previous_state: Dict[str, Any] = field(default_factory=dict)
    new_state: Dict[str, Any] = field(default_factory=dict)


_OFFENSE_FIELDS = ("assignment", "block_type", "block_direction")
_MOTION_FIELDS = ("motion_type", "motion_direction", "motion_endpoint", "motion_control_point")
_DEFENSE_FIELDS = ("coverage_role", "coverage_depth", "coverage_description", "blitz_gap", "zone_endpoint")


class InteractionController:
    """
    Drives a PlayModel from pointer and keyboard events.

    Usage:
        controller = InteractionController(model)
        controller.pointer_down(DragState.DRAGGING_PLAYER, "offense-0", Point(x=100, y=200))
        controller.pointer_move(Point(x=120, y=200))
        controller.pointer_up(Point(x=120, y=200))
        controller.apply_action(ActionType.ASSIGNMENT, "offense-8", {"assignment": "Post"})
        controller.undo()
    """

    def __init__(
        self,
        model: PlayModel,
        history_limit: Optional[int] = None,
        click_threshold: Optional[float] = None,
    ):
        self.model = model
        self.history_limit = history_limit or model.settings.history_limit
        self.click_threshold = click_threshold if click_threshold is not None else model.settings.click_threshold

        self.drag_state = DragState.IDLE
        self.drag_player_id: Optional[str] = None
        self.selected_player_id: Optional[str] = None
        self._drag_snapshot: Optional[ModelSnapshot] = None
        self._press_point: Optional[Point] = None

        self.draw_state = DrawState.INACTIVE
        self.drawing_player_id: Optional[str] = None
        self.drawing_points: List[Point] = []
        self._editing_route: Optional[Route] = None

        self._undo: deque = deque(maxlen=self.history_limit)
        self._redo: List[EditAction] = []

    # ============================================================
    # DRAG
    # ============================================================

    def pointer_down(self, target: Union[DragState, str], player_id: str, point: Point) -> None:
        if self.draw_state == DrawState.DRAWING:
            logger.debug("Ignoring pointer down on %s while drawing", player_id)
            return

        target = DragState(target)
        if target == DragState.IDLE:
            return

        self.model.get_player(player_id)
        self._drag_snapshot = self.model.snapshot()
        self._press_point = Point(x=point.x, y=point.y)
        self.drag_state = target
        self.drag_player_id = player_id

    def pointer_move(self, point: Point) -> None:
        if self.drag_state == DragState.IDLE:
            return

        pid = self.drag_player_id
        if self.drag_state == DragState.DRAGGING_PLAYER:
            self.model.move_player(pid, point)
        elif self.drag_state == DragState.DRAGGING_MOTION_ENDPOINT:
            self.model.set_motion_endpoint(pid, point)
        elif self.drag_state == DragState.DRAGGING_MOTION_CONTROL_POINT:
            self.model.set_motion_control_point(pid, point)
        elif self.drag_state == DragState.DRAGGING_BLOCK_DIRECTION:
            self.model.set_block_direction(pid, point)
        elif self.drag_state == DragState.DRAGGING_ZONE_ENDPOINT:
            self.model.set_zone_endpoint(pid, point)
        elif self.drag_state == DragState.DRAGGING_SPECIAL_TEAMS_PATH:
            self.model.set_special_teams_endpoint(pid, point)

    def pointer_up(self, point: Point) -> None:
        """
        Finish a drag.

        A press on a player that moved less than the click threshold is a
        click: the player snaps back and is either selected or, if it owns a
        finished custom route, reopened for editing.
        """
        if self.drag_state == DragState.IDLE:
            return

        pid = self.drag_player_id
        is_click = (
            self.drag_state == DragState.DRAGGING_PLAYER
            and distance(self._press_point, point) < self.click_threshold
        )

        if is_click:
            self.model.restore(self._drag_snapshot)
            route = self.model.route_for(pid)
            self._reset_drag()
            if route is not None and route.is_custom:
                self._open_drawing(pid, route)
            else:
                self.selected_player_id = pid
            return

        logger.debug("Committed %s for %s", self.drag_state.value, pid)
        self._reset_drag()

    def cancel_drag(self) -> None:
        if self.drag_state == DragState.IDLE:
            return
        self.model.restore(self._drag_snapshot)
        self._reset_drag()

    def _reset_drag(self) -> None:
        self.drag_state = DragState.IDLE
        self.drag_player_id = None
        self._drag_snapshot = None
        self._press_point = None

    # ============================================================
    # FREEHAND DRAWING
    # ============================================================

    def start_drawing(self, player_id: str) -> None:
        if self.drag_state != DragState.IDLE:
            self.cancel_drag()
        player = self.model.get_player(player_id)
        start = player.route_start
        existing = self.model.route_for(player_id)
        if existing is not None and not existing.is_custom:
            existing = None
        self._open_drawing(player_id, existing, [Point(x=start.x, y=start.y)])

    def _open_drawing(
        self,
        player_id: str,
        route: Optional[Route],
        points: Optional[List[Point]] = None,
    ) -> None:
        """Enter DRAWING; ``route`` is the committed custom route a cancel goes back to"""
        self.draw_state = DrawState.DRAWING
        self.drawing_player_id = player_id
        self._editing_route = route.model_copy(deep=True) if route is not None else None
        if points is None:
            points = [Point(x=p.x, y=p.y) for p in route.points]
        self.drawing_points = points
        self.selected_player_id = None

    def _require_drawing(self) -> None:
        if self.draw_state != DrawState.DRAWING:
            raise DrawingError("No route is being drawn")

    def add_point(self, point: Point) -> None:
        self._require_drawing()
        self.drawing_points.append(Point(x=point.x, y=point.y))

    def undo_last_point(self) -> None:
        """Drop the last clicked point; the start point always stays"""
        self._require_drawing()
        if len(self.drawing_points) > 1:
            self.drawing_points.pop()

    def finish_drawing(self) -> Route:
        self._require_drawing()
        if len(self.drawing_points) < 2:
            raise DrawingError("A custom route needs at least 2 points")

        route = self.model.set_custom_route(self.drawing_player_id, self.drawing_points)
        self._reset_drawing()
        return route

    def cancel_drawing(self) -> None:
        """Discard the points; a committed custom route stays as it was, a new one is dropped"""
        if self.draw_state != DrawState.DRAWING:
            return
        pid = self.drawing_player_id
        if self._editing_route is not None:
            current = self.model.route_for(pid)
            if current is None or current.points != self._editing_route.points:
                self.model.set_custom_route(pid, self._editing_route.points)
        elif self.model.get_player(pid).assignment == CUSTOM_ROUTE:
            self.model.remove_custom_route(pid)
        self._reset_drawing()

    def _reset_drawing(self) -> None:
        self.draw_state = DrawState.INACTIVE
        self.drawing_player_id = None
        self.drawing_points = []
        self._editing_route = None

    def escape(self) -> None:
        if self.draw_state == DrawState.DRAWING:
            self.cancel_drawing()
        elif self.drag_state != DragState.IDLE:
            self.cancel_drag()

    # ============================================================
    # UNDO / REDO
    # ============================================================

    @property
    def can_undo(self) -> bool:
        return len(self._undo) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._redo) > 0

    def apply_action(
        self,
        action_type: Union[ActionType, str],
        player_id: str,
        new_state: Optional[Dict[str, Any]] = None,
    ) -> EditAction:
        action_type = ActionType(action_type)
        new_state = dict(new_state or {})
        previous = self._capture(action_type, player_id)

        self._apply(action_type, player_id, new_state)

        action = EditAction(action_type, player_id, previous, new_state)
        self._undo.append(action)
        self._redo.clear()
        return action

    def undo(self) -> Optional[EditAction]:
        if not self._undo:
            return None
        action = self._undo.pop()
        self._restore(action.type, action.player_id, action.previous_state)
        self._redo.append(action)
        return action

    def redo(self) -> Optional[EditAction]:
        if not self._redo:
            return None
        action = self._redo.pop()
        self._apply(action.type, action.player_id, action.new_state)
        self._undo.append(action)
        return action

    def _capture(self, action_type: ActionType, player_id: str) -> Dict[str, Any]:
        player = self.model.get_player(player_id)

        if action_type == ActionType.PRIMARY:
            primary = next((p.id for p in self.model.offensive_players() if p.is_primary), None)
            return {"primary": primary}

        if action_type in (ActionType.ASSIGNMENT, ActionType.BLOCK_TYPE):
            names = _OFFENSE_FIELDS
        elif action_type == ActionType.MOTION:
            names = _MOTION_FIELDS
        else:
            names = _DEFENSE_FIELDS

        state = {name: getattr(player, name) for name in names}
        state = {k: v.model_copy() if isinstance(v, Point) else v for k, v in state.items()}

        if action_type in (ActionType.ASSIGNMENT, ActionType.BLOCK_TYPE):
            route = self.model.route_for(player_id)
            state["custom_points"] = (
                [p.model_copy() for p in route.points] if route is not None and route.is_custom else None
            )
        return state

    def _apply(self, action_type: ActionType, player_id: str, state: Dict[str, Any]) -> None:
        model = self.model
        if action_type == ActionType.ASSIGNMENT:
            model.set_assignment(player_id, state.get("assignment"))
        elif action_type == ActionType.BLOCK_TYPE:
            model.set_block_type(player_id, state.get("block_type"))
        elif action_type == ActionType.MOTION:
            model.set_motion(player_id, state.get("motion_type"), state.get("motion_direction"))
        elif action_type == ActionType.COVERAGE_ROLE:
            model.set_coverage_role(
                player_id,
                state.get("coverage_role"),
                state.get("coverage_depth"),
                state.get("coverage_description"),
            )
        elif action_type == ActionType.BLITZ:
            model.set_blitz(player_id, state.get("blitz_gap"))
        elif action_type == ActionType.PRIMARY:
            model.toggle_primary(player_id)

    def _restore(self, action_type: ActionType, player_id: str, state: Dict[str, Any]) -> None:
        model = self.model

        if action_type == ActionType.PRIMARY:
            for player in model.players:
                if player.side == Side.OFFENSE:
                    player.is_primary = player.id == state.get("primary")
            model.recompute_routes()
            return

        player = model.get_player(player_id)
        custom_points = state.get("custom_points")
        for name, value in state.items():
            if name != "custom_points":
                setattr(player, name, value.model_copy() if isinstance(value, Point) else value)

        if custom_points:
            model.set_custom_route(player_id, custom_points)
        else:
            model.recompute_routes()
