"""
Play Diagram Schema - Core data models using Pydantic.

This module defines the type system for play diagrams: players, routes,
formation slots, play attributes and the serialized diagram snapshot.

Coordinate system (field space, 700 x 400):
- x: 0 = left sideline, 700 = right sideline, 350 = center
- y: 0 = top of diagram, 400 = bottom, 200 = line of scrimmage
- Offense lines up at y >= 200 and attacks toward y = 0

Field names are snake_case in Python; on the wire they are camelCase
(``motionType``, ``isPrimary``) so persisted diagrams from the web client
load unchanged.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Tuple
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class Side(str, Enum):
    OFFENSE = "offense"
    DEFENSE = "defense"


class ODK(str, Enum):
    """Offense / Defense / Kicking unit of a play"""
    OFFENSE = "offense"
    DEFENSE = "defense"
    SPECIAL_TEAMS = "specialTeams"


class MotionType(str, Enum):
    NONE = "None"
    JET = "Jet"
    ORBIT = "Orbit"
    ACROSS = "Across"
    RETURN = "Return"
    SHIFT = "Shift"


class MotionDirection(str, Enum):
    TOWARD_CENTER = "toward-center"
    AWAY_FROM_CENTER = "away-from-center"


class RouteKind(str, Enum):
    PASS = "pass"
    RUN = "run"


class SpecialTeamsPathType(str, Enum):
    BLOCK = "block"
    COVERAGE = "coverage"
    RUN = "run"
    PASS = "pass"
    RETURN = "return"


class _WireModel(BaseModel):
    """Base model that accepts snake_case or camelCase and emits camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


# ============================================================
# CORE TYPES
# ============================================================

class Point(_WireModel):
    """A coordinate in field space"""
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


class Player(_WireModel):
    """
    One on-field slot.

    Offensive behaviour: ``assignment`` (route label) or ``block_type``, plus an
    independent pre-snap motion. Defensive behaviour: ``coverage_role`` or
    ``blitz_gap``, either of which may carry a dragged ``zone_endpoint``.
    """
    id: str = Field(min_length=1)
    position: str = Field(description="Canonical position code (LT, X, MIKE, ...)")
    label: str = Field(default="", description="Display label, defaults to position")
    x: float
    y: float
    side: Side

    # Offense
    assignment: Optional[str] = None
    block_type: Optional[str] = None
    block_direction: Optional[Point] = None
    motion_type: MotionType = MotionType.NONE
    motion_direction: MotionDirection = MotionDirection.TOWARD_CENTER
    motion_endpoint: Optional[Point] = None
    motion_control_point: Optional[Point] = None

    # Defense
    coverage_role: Optional[str] = None
    coverage_depth: Optional[float] = None
    coverage_description: Optional[str] = None
    blitz_gap: Optional[str] = None
    zone_endpoint: Optional[Point] = None
    responsibility: Optional[str] = None

    # Special teams
    special_teams_endpoint: Optional[Point] = None
    special_teams_path_type: Optional[SpecialTeamsPathType] = None

    is_primary: bool = False
    is_dummy: bool = False

    @model_validator(mode='after')
    def default_label(self):
        if not self.label:
            self.label = self.position
        return self

    @property
    def point(self) -> Point:
        return Point(x=self.x, y=self.y)

    @property
    def route_start(self) -> Point:
        """Where a post-snap path starts: the motion endpoint if the player motions"""
        if self.motion_endpoint is not None:
            return self.motion_endpoint
        return self.point


class Route(_WireModel):
    """A derived or hand-drawn path owned by one player"""
    id: str
    player_id: str
    points: List[Point] = Field(min_length=1)
    assignment: Optional[str] = None
    is_primary: bool = False
    is_custom: bool = False
    kind: RouteKind = RouteKind.PASS

    @model_validator(mode='after')
    def custom_routes_need_two_points(self):
        if self.is_custom and len(self.points) < 2:
            raise ValueError(f"Custom route {self.id} needs at least 2 points")
        return self


class FormationSlot(BaseModel):
    """One immutable entry of a catalog formation"""
    model_config = ConfigDict(frozen=True)

    position: str
    label: str
    x: float
    y: float
    responsibility: Optional[str] = None


# ============================================================
# PLAY ATTRIBUTES & DIAGRAM
# ============================================================

class PlayAttributes(_WireModel):
    """
    Play-level metadata stored next to the diagram.

    Unknown keys (down & distance, hash, custom tags...) are kept so they
    survive a load/save round trip.
    """
    model_config = ConfigDict(extra="allow")

    odk: ODK = ODK.OFFENSE
    formation: Optional[str] = None
    play_type: Optional[str] = None
    target_hole: Optional[str] = None
    ball_carrier: Optional[str] = None
    coverage: Optional[str] = None
    blitz_type: Optional[str] = None
    unit: Optional[str] = Field(default=None, description="Special teams unit (Kickoff, Punt...)")
    special_teams_play: Optional[str] = None
    play_name: Optional[str] = None
    play_code: Optional[str] = None


class PlayDiagram(_WireModel):
    """
    Serialized play snapshot handed to the persistence adapter.

    Versionless and plain: players (never ghosts), routes, formation and odk.
    """
    players: List[Player] = Field(default_factory=list)
    routes: List[Route] = Field(default_factory=list)
    formation: Optional[str] = None
    odk: ODK = ODK.OFFENSE
    attributes: PlayAttributes = Field(default_factory=PlayAttributes)

    @field_validator('players')
    @classmethod
    def no_dummies(cls, v):
        return [p for p in v if not p.is_dummy]

    @model_validator(mode='after')
    def validate_references(self):
        """Ensure every route belongs to a known player, one route each"""
        player_ids = {p.id for p in self.players}
        seen = set()

        for route in self.routes:
            if route.player_id not in player_ids:
                raise ValueError(f"Route {route.id}: player '{route.player_id}' not found in players")
            if route.player_id in seen:
                raise ValueError(f"Player '{route.player_id}' has more than one route")
            seen.add(route.player_id)

        primaries = [p.id for p in self.players if p.is_primary]
        if len(primaries) > 1:
            raise ValueError(f"Only one primary player allowed, got {primaries}")

        return self
