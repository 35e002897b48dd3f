"""
Play Model - Mutable editing state for one play diagram.

The model owns the on-field players, their routes, the optional ghost
(reference) formations and the play attributes. Every mutation is a plain
method call; derived routes are regenerated explicitly through
``recompute_routes`` at the end of each committed edit, so callers never see
a half-updated diagram.

Invariants kept here:
- A player has either a route-style ``assignment`` or a ``block_type``.
- A defender has either a ``coverage_role`` or a ``blitz_gap``; switching
  clears any dragged ``zone_endpoint``.
- At most one offensive player is primary, and the primary flag on routes
  mirrors the player.
- Ghost players never appear in ``serialize()`` and are never validated.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from play_engine.catalog import (
    BLOCK,
    BLOCKING_ASSIGNMENTS,
    CUSTOM_ROUTE,
    MAN_ROLE,
    RUN_PLAY_TYPES,
    centered_layout,
    coverage_assignment,
    get_coverage,
    get_formation,
    is_defensive_lineman,
    is_offensive_lineman,
    legal_motion_types,
)
from play_engine.config import CENTER_X, LINE_OF_SCRIMMAGE_Y, EngineSettings, get_settings
from play_engine.errors import PlayerNotFoundError
from play_engine.geometry import (
    blitz_path,
    coerce_motion_type,
    default_zone_endpoint,
    gap_position,
    hole_position,
    motion_endpoint,
    parse_hole_label,
    route_path,
)
from play_engine.schema import (
    ODK,
    FormationSlot,
    MotionDirection,
    MotionType,
    PlayAttributes,
    PlayDiagram,
    Player,
    Point,
    Route,
    RouteKind,
    Side,
)
from play_engine.special_teams import get_play_paths, is_offensive_style

logger = logging.getLogger(__name__)


@dataclass
class DefensivePath:
    """Rendered path for one defender: a blitz rush or a zone drop"""
    player_id: str
    kind: str  # "blitz" or "zone"
    points: List[Point]


@dataclass
class ModelSnapshot:
    """Deep copy of everything an undo or a cancelled drag has to restore"""
    players: List[Player]
    routes: List[Route]
    references: Dict[Side, List[Player]]
    attributes: PlayAttributes
    slots: Dict[str, FormationSlot] = field(default_factory=dict)


def _copy_point(point: Optional[Point]) -> Optional[Point]:
    if point is None:
        return None
    return Point(x=point.x, y=point.y)


class PlayModel:
    """
    Editing state for a single play.

    Usage:
        model = PlayModel(ODK.OFFENSE, "Shotgun Spread")
        model.set_assignment("offense-0", "Go/Streak/9")
        model.set_motion("offense-7", "Jet")
        diagram = model.serialize()
    """

    def __init__(
        self,
        odk: Union[ODK, str] = ODK.OFFENSE,
        formation: Optional[str] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.attributes = PlayAttributes(odk=ODK(odk), formation=formation)
        self.players: List[Player] = []
        self.routes: List[Route] = []
        self.references: Dict[Side, List[Player]] = {Side.OFFENSE: [], Side.DEFENSE: []}
        self._slots: Dict[str, FormationSlot] = {}

        if formation:
            self.load_formation(odk, formation)

    # ============================================================
    # PROPERTIES & LOOKUPS
    # ============================================================

    @property
    def odk(self) -> ODK:
        return self.attributes.odk

    @property
    def formation(self) -> Optional[str]:
        return self.attributes.formation

    @property
    def all_players(self) -> List[Player]:
        """Real players followed by every ghost"""
        return self.players + self.references[Side.OFFENSE] + self.references[Side.DEFENSE]

    def get_player(self, player_id: str) -> Player:
        for player in self.all_players:
            if player.id == player_id:
                return player
        raise PlayerNotFoundError(player_id)

    def route_for(self, player_id: str) -> Optional[Route]:
        for route in self.routes:
            if route.player_id == player_id:
                return route
        return None

    def offensive_players(self) -> List[Player]:
        return [p for p in self.players if p.side == Side.OFFENSE and not p.is_dummy]

    def defensive_players(self) -> List[Player]:
        return [p for p in self.players if p.side == Side.DEFENSE and not p.is_dummy]

    def _on_line(self, player: Player) -> bool:
        return abs(player.y - LINE_OF_SCRIMMAGE_Y) <= self.settings.rules.los_tolerance

    def _drop_route(self, player_id: str) -> None:
        self.routes = [r for r in self.routes if r.player_id != player_id]

    # ============================================================
    # FORMATIONS & LOADING
    # ============================================================

    def load_formation(self, odk: Union[ODK, str], name: str) -> None:
        """
        Replace the whole player set with a catalog formation.

        Destructive: every route and custom route is dropped.
        Defense gets the current coverage applied; special teams get the
        paths of the current called play.
        """
        odk = ODK(odk)
        slots = centered_layout(get_formation(odk, name))
        if not slots:
            logger.warning("Unknown %s formation '%s', keeping current players", odk.value, name)
            return

        if odk == ODK.OFFENSE:
            side = Side.OFFENSE
        elif odk == ODK.DEFENSE:
            side = Side.DEFENSE
        else:
            side = Side.OFFENSE if is_offensive_style(name) else Side.DEFENSE

        self.players = []
        self._slots = {}
        for idx, slot in enumerate(slots):
            player_id = f"{odk.value}-{idx}"
            self.players.append(Player(
                id=player_id,
                position=slot.position,
                label=slot.label,
                x=slot.x,
                y=slot.y,
                side=side,
                responsibility=slot.responsibility,
            ))
            self._slots[player_id] = slot

        self.routes = []
        self.attributes.odk = odk
        self.attributes.formation = name

        if odk == ODK.DEFENSE and self.attributes.coverage:
            self.apply_coverage(self.attributes.coverage)
        if odk == ODK.SPECIAL_TEAMS:
            self.attributes.unit = name
            if self.attributes.special_teams_play:
                self.set_special_teams_play(self.attributes.special_teams_play)

        logger.info("Loaded %s formation '%s' with %d players", odk.value, name, len(self.players))

    def load_reference(self, odk: Union[ODK, str], name: Optional[str]) -> None:
        """Overlay a ghost formation used only for gap geometry and context"""
        side = Side(ODK(odk).value)
        if not name:
            self.clear_reference(side)
            return

        slots = centered_layout(get_formation(odk, name))
        if not slots:
            logger.warning("Unknown reference formation '%s'", name)
            return

        self.references[side] = [
            Player(
                id=f"dummy-{side.value}-{idx}",
                position=slot.position,
                label=slot.label,
                x=slot.x,
                y=slot.y,
                side=side,
                responsibility=slot.responsibility,
                is_dummy=True,
            )
            for idx, slot in enumerate(slots)
        ]

    def clear_reference(self, side: Union[Side, str]) -> None:
        self.references[Side(side)] = []

    def load_play(
        self,
        attributes: Union[PlayAttributes, dict],
        diagram: Union[PlayDiagram, dict],
    ) -> None:
        """Hydrate the model from a saved snapshot"""
        if isinstance(attributes, dict):
            attributes = PlayAttributes.model_validate(attributes)
        if isinstance(diagram, dict):
            diagram = PlayDiagram.model_validate(diagram)

        self.attributes = attributes.model_copy(deep=True)
        if diagram.formation and not self.attributes.formation:
            self.attributes.formation = diagram.formation
        self.attributes.odk = diagram.odk

        self.players = [p.model_copy(deep=True) for p in diagram.players]
        self.routes = [r.model_copy(deep=True) for r in diagram.routes if r.is_custom]

        slots = centered_layout(get_formation(self.odk, self.formation))
        self._slots = {f"{self.odk.value}-{idx}": slot for idx, slot in enumerate(slots)}

        self.recompute_routes()
        logger.info("Loaded play '%s' (%d players)", self.attributes.play_name, len(self.players))

    def serialize(self) -> PlayDiagram:
        return PlayDiagram(
            players=[p.model_copy(deep=True) for p in self.players if not p.is_dummy],
            routes=[r.model_copy(deep=True) for r in self.routes],
            formation=self.formation,
            odk=self.odk,
            attributes=self.attributes.model_copy(deep=True),
        )

    def update_attributes(self, **changes) -> None:
        """Set play-level attributes (play_type, target_hole, ball_carrier...)"""
        merged = {**self.attributes.model_dump(), **changes}
        self.attributes = PlayAttributes.model_validate(merged)

    # ============================================================
    # OFFENSIVE EDITS
    # ============================================================

    def set_assignment(self, player_id: str, label: Optional[str]) -> None:
        player = self.get_player(player_id)

        # Linemen pick a block technique from the same menu
        if label in BLOCKING_ASSIGNMENTS:
            self.set_block_type(player_id, label)
            return

        player.block_type = None
        player.block_direction = None
        player.assignment = label

        if label == CUSTOM_ROUTE:
            existing = self.route_for(player_id)
            if existing is None or not existing.is_custom:
                self._drop_route(player_id)
        elif label is None or label == BLOCK:
            self._drop_route(player_id)

        self.recompute_routes()

    def set_block_type(self, player_id: str, block_type: Optional[str]) -> None:
        player = self.get_player(player_id)
        player.block_type = block_type
        player.block_direction = None
        if player.assignment != BLOCK:
            player.assignment = None
        self._drop_route(player_id)
        self.recompute_routes()

    def set_block_direction(self, player_id: str, point: Optional[Point]) -> None:
        self.get_player(player_id).block_direction = _copy_point(point)

    def apply_block_type_to_all(self, block_type: Optional[str]) -> None:
        """Give every offensive lineman the same block technique"""
        for player in self.offensive_players():
            if is_offensive_lineman(player.position):
                player.block_type = block_type
                player.block_direction = None
                player.assignment = None
                self._drop_route(player.id)
        self.recompute_routes()

    def _refresh_motion(self, player: Player) -> None:
        if player.motion_type == MotionType.NONE:
            player.motion_endpoint = None
            player.motion_control_point = None
            return
        result = motion_endpoint(
            player.point,
            player.motion_type,
            player.motion_direction,
            center_x=CENTER_X,
            on_los=self._on_line(player),
        )
        player.motion_endpoint = result.endpoint
        player.motion_control_point = result.control_point

    def set_motion(
        self,
        player_id: str,
        motion_type: Union[MotionType, str, None],
        direction: Union[MotionDirection, str, None] = None,
    ) -> None:
        player = self.get_player(player_id)
        motion = coerce_motion_type(motion_type if motion_type is not None else MotionType.NONE)
        if motion is None:
            logger.warning("Ignoring unknown motion type %r for %s", motion_type, player_id)
            return
        if motion.value not in legal_motion_types(player.position):
            logger.warning("Ignoring %s motion for %s (%s)", motion.value, player_id, player.position)
            return

        player.motion_type = motion
        if direction is not None:
            player.motion_direction = MotionDirection(direction)
        self._refresh_motion(player)
        self.recompute_routes()

    def set_motion_direction(self, player_id: str, direction: Union[MotionDirection, str]) -> None:
        player = self.get_player(player_id)
        player.motion_direction = MotionDirection(direction)
        self._refresh_motion(player)
        self.recompute_routes()

    def set_motion_endpoint(self, player_id: str, point: Point) -> None:
        """Dragged motion endpoint; routes start from here afterwards"""
        player = self.get_player(player_id)
        if player.motion_type == MotionType.NONE:
            return
        player.motion_endpoint = _copy_point(point)
        self.recompute_routes()

    def set_motion_control_point(self, player_id: str, point: Point) -> None:
        player = self.get_player(player_id)
        if player.motion_type == MotionType.NONE:
            return
        player.motion_control_point = _copy_point(point)

    def toggle_primary(self, player_id: str) -> None:
        player = self.get_player(player_id)
        if player.side != Side.OFFENSE or player.is_dummy:
            logger.warning("Only offensive players can be primary, ignoring %s", player_id)
            return

        make_primary = not player.is_primary
        for other in self.offensive_players():
            other.is_primary = False
        player.is_primary = make_primary
        self.recompute_routes()

    def move_player(self, player_id: str, point: Point) -> None:
        player = self.get_player(player_id)
        player.x = point.x
        player.y = point.y
        self._refresh_motion(player)
        self.recompute_routes()

    def set_custom_route(self, player_id: str, points: Sequence[Point]) -> Route:
        if len(points) < 2:
            raise ValueError(f"Custom route for {player_id} needs at least 2 points")

        player = self.get_player(player_id)
        player.assignment = CUSTOM_ROUTE
        player.block_type = None
        player.block_direction = None

        route = Route(
            id=f"route-{player_id}",
            player_id=player_id,
            points=[_copy_point(p) for p in points],
            assignment=CUSTOM_ROUTE,
            is_primary=player.is_primary,
            is_custom=True,
        )
        self._drop_route(player_id)
        self.routes.append(route)
        self.recompute_routes()
        return route

    def remove_custom_route(self, player_id: str) -> None:
        player = self.get_player(player_id)
        route = self.route_for(player_id)
        if route is not None and route.is_custom:
            self._drop_route(player_id)
        if player.assignment == CUSTOM_ROUTE:
            player.assignment = None
        self.recompute_routes()

    # ============================================================
    # SPECIAL TEAMS
    # ============================================================

    def set_special_teams_play(self, play: Optional[str]) -> None:
        """Apply the endpoints of a called special teams play to the unit"""
        self.attributes.special_teams_play = play
        for player in self.players:
            player.special_teams_endpoint = None
            player.special_teams_path_type = None

        for path in get_play_paths(self.attributes.unit or self.formation, play):
            player = next((p for p in self.players if p.position == path.position), None)
            if player is None:
                continue
            if path.start is not None:
                player.x, player.y = path.start.x, path.start.y
            player.special_teams_endpoint = _copy_point(path.endpoint)
            player.special_teams_path_type = path.path_type

    def set_special_teams_endpoint(self, player_id: str, point: Optional[Point]) -> None:
        self.get_player(player_id).special_teams_endpoint = _copy_point(point)

    # ============================================================
    # DEFENSIVE EDITS
    # ============================================================

    def _apply_coverage_entry(self, player: Player, coverage_name: Optional[str]) -> bool:
        if is_defensive_lineman(player.position, player.label):
            return False
        entry = coverage_assignment(player.label, coverage_name)
        if entry is None:
            return False
        player.coverage_role = entry.role
        player.coverage_depth = entry.depth
        player.coverage_description = entry.description
        player.blitz_gap = None
        player.zone_endpoint = None
        return True

    def apply_coverage(self, name: Optional[str]) -> None:
        """
        Apply a coverage shell to the defense.

        Defensive linemen keep their rush/contain jobs; everyone else whose
        label appears in the shell gets its role, depth and description, and
        loses any blitz or dragged zone.
        """
        self.attributes.coverage = name
        if get_coverage(name) is None:
            logger.warning("Unknown coverage '%s'", name)
            return
        applied = sum(self._apply_coverage_entry(p, name) for p in self.defensive_players())
        logger.debug("Coverage %s applied to %d defenders", name, applied)

    def set_coverage_role(
        self,
        player_id: str,
        role: Optional[str],
        depth: Optional[float] = None,
        description: Optional[str] = None,
    ) -> None:
        player = self.get_player(player_id)
        player.coverage_role = role
        player.coverage_depth = depth
        player.coverage_description = description
        player.blitz_gap = None
        player.zone_endpoint = None

    def set_blitz(self, player_id: str, gap: Optional[str]) -> None:
        player = self.get_player(player_id)
        player.blitz_gap = gap
        player.zone_endpoint = None
        if gap is not None:
            player.coverage_role = None
            player.coverage_depth = None
            player.coverage_description = None

    def set_zone_endpoint(self, player_id: str, point: Optional[Point]) -> None:
        self.get_player(player_id).zone_endpoint = _copy_point(point)

    def reset_to_role(self, player_id: str) -> None:
        """Back to what the current coverage says for this defender"""
        player = self.get_player(player_id)
        player.blitz_gap = None
        player.zone_endpoint = None
        self._apply_coverage_entry(player, self.attributes.coverage)

    def reset_to_technique(self, player_id: str) -> None:
        """Drop a manual blitz or zone drag; coverage fields and position are kept"""
        player = self.get_player(player_id)
        player.blitz_gap = None
        player.zone_endpoint = None

        slot = self._slots.get(player_id)
        if slot is not None:
            player.responsibility = slot.responsibility

    # ============================================================
    # RECOMPUTE & DERIVED PATHS
    # ============================================================

    def recompute_routes(self) -> None:
        """
        Rebuild derived routes from assignments.

        Custom routes survive only while their player is still assigned a
        custom route. Derived routes are regenerated from scratch, starting at
        the motion endpoint when the player motions. Idempotent.
        """
        players = {p.id: p for p in self.players}
        custom = {
            r.player_id: r
            for r in self.routes
            if r.is_custom
            and r.player_id in players
            and players[r.player_id].assignment == CUSTOM_ROUTE
        }

        routes = []
        for player in self.offensive_players():
            if player.id in custom:
                route = custom[player.id]
                route.is_primary = player.is_primary
                routes.append(route)
                continue

            label = player.assignment
            if not label or label in (BLOCK, CUSTOM_ROUTE) or player.block_type:
                continue

            start = player.route_start
            points = route_path(start, label, is_left_of_center=start.x < CENTER_X)
            if len(points) < 2:
                continue

            routes.append(Route(
                id=f"route-{player.id}",
                player_id=player.id,
                points=points,
                assignment=label,
                is_primary=player.is_primary,
                kind=RouteKind.PASS,
            ))

        self.routes = routes
        logger.debug("Recomputed routes: %d derived, %d custom", len(routes) - len(custom), len(custom))

    def defensive_paths(self) -> List[DefensivePath]:
        """Blitz rush or zone drop for every defender that has one"""
        defenders = self.defensive_players()
        ghost_line = self.references[Side.OFFENSE] or None
        paths = []

        for player in defenders:
            if player.blitz_gap:
                target = gap_position(player.blitz_gap, CENTER_X, ghost_line)
                others = [d.point for d in defenders if d.id != player.id]
                paths.append(DefensivePath(
                    player.id, "blitz", blitz_path(player.point, target, others)
                ))
            elif (
                player.coverage_role
                and player.coverage_role != MAN_ROLE
                and not is_defensive_lineman(player.position, player.label)
            ):
                end = player.zone_endpoint or default_zone_endpoint(player)
                paths.append(DefensivePath(player.id, "zone", [player.point, _copy_point(end)]))

        return paths

    def run_path(self) -> Optional[List[Point]]:
        """Ball-carrier path to the target hole on run plays"""
        attrs = self.attributes
        if attrs.play_type not in RUN_PLAY_TYPES or not attrs.ball_carrier or not attrs.target_hole:
            return None

        offense = self.offensive_players()
        carrier = next((p for p in offense if p.label == attrs.ball_carrier), None)
        if carrier is None:
            return None

        hole = hole_position(parse_hole_label(attrs.target_hole), offense)
        return [_copy_point(carrier.route_start), hole]

    # ============================================================
    # SNAPSHOTS
    # ============================================================

    def snapshot(self) -> ModelSnapshot:
        return ModelSnapshot(
            players=[p.model_copy(deep=True) for p in self.players],
            routes=[r.model_copy(deep=True) for r in self.routes],
            references={side: [p.model_copy(deep=True) for p in ghosts]
                        for side, ghosts in self.references.items()},
            attributes=self.attributes.model_copy(deep=True),
            slots=dict(self._slots),
        )

    def restore(self, snapshot: ModelSnapshot) -> None:
        self.players = [p.model_copy(deep=True) for p in snapshot.players]
        self.routes = [r.model_copy(deep=True) for r in snapshot.routes]
        self.references = {side: [p.model_copy(deep=True) for p in ghosts]
                           for side, ghosts in snapshot.references.items()}
        self.attributes = snapshot.attributes.model_copy(deep=True)
        self._slots = dict(snapshot.slots)
