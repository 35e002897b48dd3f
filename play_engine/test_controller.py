"""Tests for the interaction controller: drags, freehand drawing and undo/redo."""

import pytest

from play_engine.catalog import CUSTOM_ROUTE
from play_engine.controller import ActionType, DragState, DrawState, InteractionController
from play_engine.errors import DrawingError, PlayerNotFoundError
from play_engine.schema import Point


RB = "offense-10"
X = "offense-0"
SL = "offense-7"


def _draw_custom(model, player_id=RB):
    return model.set_custom_route(player_id, [Point(x=380, y=260), Point(x=450, y=220), Point(x=470, y=150)])


# =============================================================================
# Drag
# =============================================================================


class TestDrag:

    def test_drag_moves_player(self, controller, spread_model):
        start = spread_model.get_player(X).point
        controller.pointer_down(DragState.DRAGGING_PLAYER, X, start)
        assert controller.drag_state == DragState.DRAGGING_PLAYER

        controller.pointer_move(Point(x=150, y=200))
        assert spread_model.get_player(X).x == 150

        controller.pointer_up(Point(x=150, y=200))
        assert controller.drag_state == DragState.IDLE
        assert spread_model.get_player(X).x == 150

    def test_drags_do_not_push_undo(self, controller, spread_model):
        start = spread_model.get_player(X).point
        controller.pointer_down("draggingPlayer", X, start)
        controller.pointer_move(Point(x=150, y=200))
        controller.pointer_up(Point(x=150, y=200))
        assert not controller.can_undo

    def test_route_follows_dragged_player(self, controller, spread_model):
        spread_model.set_assignment(X, "Go/Streak/9")
        controller.pointer_down(DragState.DRAGGING_PLAYER, X, spread_model.get_player(X).point)
        controller.pointer_move(Point(x=150, y=200))
        assert spread_model.route_for(X).points[0] == Point(x=150, y=200)

    def test_click_selects_and_snaps_back(self, controller, spread_model):
        start = spread_model.get_player(X).point
        controller.pointer_down(DragState.DRAGGING_PLAYER, X, start)
        controller.pointer_move(Point(x=start.x + 2, y=start.y))
        controller.pointer_up(Point(x=start.x + 2, y=start.y))

        assert controller.selected_player_id == X
        assert spread_model.get_player(X).point == start

    def test_click_on_custom_route_reopens_drawing(self, controller, spread_model):
        route = _draw_custom(spread_model)
        start = spread_model.get_player(RB).point
        controller.pointer_down(DragState.DRAGGING_PLAYER, RB, start)
        controller.pointer_up(start)

        assert controller.draw_state == DrawState.DRAWING
        assert controller.drawing_player_id == RB
        assert controller.drawing_points == route.points
        assert controller.selected_player_id is None

    def test_cancel_drag_restores(self, controller, spread_model):
        start = spread_model.get_player(X).point
        controller.pointer_down(DragState.DRAGGING_PLAYER, X, start)
        controller.pointer_move(Point(x=150, y=220))
        controller.cancel_drag()

        assert controller.drag_state == DragState.IDLE
        assert spread_model.get_player(X).point == start

    def test_escape_cancels_drag(self, controller, spread_model):
        start = spread_model.get_player(X).point
        controller.pointer_down(DragState.DRAGGING_PLAYER, X, start)
        controller.pointer_move(Point(x=150, y=220))
        controller.escape()
        assert spread_model.get_player(X).point == start

    def test_motion_endpoint_drag(self, controller, spread_model):
        spread_model.set_motion(SL, "Jet")
        spread_model.set_assignment(SL, "Flat")
        end = spread_model.get_player(SL).motion_endpoint

        controller.pointer_down(DragState.DRAGGING_MOTION_ENDPOINT, SL, end)
        controller.pointer_move(Point(x=300, y=230))
        controller.pointer_up(Point(x=300, y=230))

        assert spread_model.get_player(SL).motion_endpoint == Point(x=300, y=230)
        assert spread_model.route_for(SL).points[0] == Point(x=300, y=230)

    def test_block_direction_drag(self, controller, spread_model):
        spread_model.set_block_type("offense-1", "Run Block")
        lt = spread_model.get_player("offense-1")
        controller.pointer_down(DragState.DRAGGING_BLOCK_DIRECTION, lt.id, lt.point)
        controller.pointer_move(Point(x=lt.x - 20, y=170))
        controller.pointer_up(Point(x=lt.x - 20, y=170))
        assert lt.block_direction == Point(x=lt.x - 20, y=170)

    def test_zone_endpoint_drag(self, four_three_model):
        four_three_model.apply_coverage("Cover 3")
        fs = next(p for p in four_three_model.players if p.label == "FS")
        controller = InteractionController(four_three_model)

        controller.pointer_down(DragState.DRAGGING_ZONE_ENDPOINT, fs.id, fs.point)
        controller.pointer_move(Point(x=420, y=50))
        controller.pointer_up(Point(x=420, y=50))
        assert four_three_model.get_player(fs.id).zone_endpoint == Point(x=420, y=50)

    def test_unknown_player(self, controller):
        with pytest.raises(PlayerNotFoundError):
            controller.pointer_down(DragState.DRAGGING_PLAYER, "offense-42", Point(x=0, y=0))


# =============================================================================
# Freehand drawing
# =============================================================================


class TestDrawing:

    def test_draw_and_finish(self, controller, spread_model):
        controller.start_drawing(RB)
        assert controller.drawing_points == [spread_model.get_player(RB).point]

        controller.add_point(Point(x=450, y=240))
        controller.add_point(Point(x=470, y=150))
        route = controller.finish_drawing()

        assert route.is_custom
        assert len(route.points) == 3
        assert spread_model.get_player(RB).assignment == CUSTOM_ROUTE
        assert controller.draw_state == DrawState.INACTIVE

    def test_drawing_starts_at_motion_endpoint(self, controller, spread_model):
        spread_model.set_motion(SL, "Jet")
        controller.start_drawing(SL)
        assert controller.drawing_points[0] == spread_model.get_player(SL).motion_endpoint

    def test_finish_needs_two_points(self, controller):
        controller.start_drawing(RB)
        with pytest.raises(DrawingError):
            controller.finish_drawing()
        assert controller.draw_state == DrawState.DRAWING

    def test_points_need_an_open_drawing(self, controller):
        with pytest.raises(DrawingError):
            controller.add_point(Point(x=1, y=1))
        with pytest.raises(DrawingError):
            controller.undo_last_point()

    def test_undo_last_point_keeps_start(self, controller):
        controller.start_drawing(RB)
        controller.add_point(Point(x=450, y=240))
        controller.undo_last_point()
        controller.undo_last_point()
        assert len(controller.drawing_points) == 1

    def test_pointer_down_ignored_while_drawing(self, controller, spread_model):
        controller.start_drawing(RB)
        controller.pointer_down(DragState.DRAGGING_PLAYER, X, spread_model.get_player(X).point)
        assert controller.drag_state == DragState.IDLE

    def test_cancel_new_drawing_drops_custom_assignment(self, controller, spread_model):
        spread_model.set_assignment(RB, CUSTOM_ROUTE)
        controller.start_drawing(RB)
        controller.add_point(Point(x=450, y=240))
        controller.cancel_drawing()

        assert spread_model.get_player(RB).assignment is None
        assert spread_model.route_for(RB) is None

    def test_cancel_edit_keeps_route(self, controller, spread_model):
        original = _draw_custom(spread_model).points
        start = spread_model.get_player(RB).point
        controller.pointer_down(DragState.DRAGGING_PLAYER, RB, start)
        controller.pointer_up(start)
        controller.add_point(Point(x=500, y=100))
        controller.escape()

        assert controller.draw_state == DrawState.INACTIVE
        assert spread_model.route_for(RB).points == original

    def test_cancel_redraw_keeps_committed_route(self, controller, spread_model):
        spread_model.set_assignment(X, CUSTOM_ROUTE)
        controller.start_drawing(X)
        controller.add_point(Point(x=150, y=120))
        committed = controller.finish_drawing().points

        spread_model.set_assignment(X, CUSTOM_ROUTE)
        controller.start_drawing(X)
        controller.add_point(Point(x=60, y=100))
        controller.escape()

        route = spread_model.route_for(X)
        assert route is not None
        assert route.is_custom
        assert route.points == committed
        assert spread_model.get_player(X).assignment == CUSTOM_ROUTE

    def test_redraw_starts_from_player(self, controller, spread_model):
        _draw_custom(spread_model)
        controller.start_drawing(RB)
        assert controller.drawing_points == [spread_model.get_player(RB).point]

    def test_finish_edit_replaces_points(self, controller, spread_model):
        _draw_custom(spread_model)
        start = spread_model.get_player(RB).point
        controller.pointer_down(DragState.DRAGGING_PLAYER, RB, start)
        controller.pointer_up(start)
        controller.add_point(Point(x=500, y=100))
        route = controller.finish_drawing()
        assert len(route.points) == 4
        assert spread_model.route_for(RB).points[-1] == Point(x=500, y=100)


# =============================================================================
# Undo / redo
# =============================================================================


class TestUndoRedo:

    def test_assignment_undo_redo(self, controller, spread_model):
        controller.apply_action(ActionType.ASSIGNMENT, X, {"assignment": "Post"})
        assert spread_model.route_for(X).assignment == "Post"

        controller.undo()
        assert spread_model.get_player(X).assignment is None
        assert spread_model.route_for(X) is None
        assert controller.can_redo

        controller.redo()
        assert spread_model.route_for(X).assignment == "Post"
        assert not controller.can_redo

    def test_undo_restores_custom_route(self, controller, spread_model):
        original = _draw_custom(spread_model).points
        controller.apply_action(ActionType.ASSIGNMENT, RB, {"assignment": "Flat"})
        assert not spread_model.route_for(RB).is_custom

        controller.undo()
        route = spread_model.route_for(RB)
        assert route.is_custom
        assert route.points == original

    def test_undo_custom_assignment_leaves_no_drawing(self, controller, spread_model):
        controller.apply_action(ActionType.ASSIGNMENT, X, {"assignment": CUSTOM_ROUTE})
        controller.undo()

        assert spread_model.get_player(X).assignment is None
        assert spread_model.route_for(X) is None
        assert controller.draw_state == DrawState.INACTIVE
        assert controller.drawing_player_id is None

    def test_block_type_undo(self, controller, spread_model):
        controller.apply_action("blockType", "offense-1", {"block_type": "Pull"})
        controller.undo()
        assert spread_model.get_player("offense-1").block_type is None

    def test_motion_undo(self, controller, spread_model):
        controller.apply_action(ActionType.MOTION, SL, {"motion_type": "Jet", "motion_direction": "toward-center"})
        assert spread_model.get_player(SL).motion_endpoint is not None
        controller.undo()
        slot = spread_model.get_player(SL)
        assert slot.motion_type == "None"
        assert slot.motion_endpoint is None

    def test_primary_undo(self, controller, spread_model):
        controller.apply_action(ActionType.PRIMARY, X)
        controller.apply_action(ActionType.PRIMARY, SL)
        controller.undo()
        assert spread_model.get_player(X).is_primary
        assert not spread_model.get_player(SL).is_primary

    def test_blitz_undo_restores_coverage(self, four_three_model):
        four_three_model.apply_coverage("Cover 3")
        mike = next(p.id for p in four_three_model.players if p.label == "MIKE")
        controller = InteractionController(four_three_model)

        controller.apply_action(ActionType.BLITZ, mike, {"blitz_gap": "Strong A-gap"})
        controller.undo()

        player = four_three_model.get_player(mike)
        assert player.blitz_gap is None
        assert player.coverage_role == "Middle Hook"
        assert player.coverage_depth == 10

    def test_new_action_clears_redo(self, controller):
        controller.apply_action(ActionType.ASSIGNMENT, X, {"assignment": "Post"})
        controller.undo()
        controller.apply_action(ActionType.ASSIGNMENT, X, {"assignment": "Corner"})
        assert not controller.can_redo

    def test_history_is_bounded(self, spread_model):
        controller = InteractionController(spread_model, history_limit=2)
        for route in ("Post", "Corner", "Out"):
            controller.apply_action(ActionType.ASSIGNMENT, X, {"assignment": route})

        assert controller.undo() is not None
        assert controller.undo() is not None
        assert controller.undo() is None
        assert spread_model.get_player(X).assignment == "Post"

    def test_undo_with_empty_history(self, controller):
        assert controller.undo() is None
        assert controller.redo() is None
