"""
Football Play Diagram Engine

Place eleven players on a field, give each one a route, block, motion,
coverage or blitz, and let the engine draw the paths and check the formation
before the play is saved.

Quick Start:
    from play_engine import PlayModel, validate_play, render

    model = PlayModel("offense", "Shotgun Spread")
    model.set_assignment("offense-0", "Go/Streak/9")
    model.set_motion("offense-7", "Jet")

    result = validate_play(model)
    if result.is_valid:
        render(model, "play.svg")

Saving:
    from play_engine import SavePipeline, InMemoryPlayStore

    pipeline = SavePipeline(InMemoryPlayStore())
    saved = pipeline.save(model, "Spread Jet Go", override=False)
"""

from play_engine.schema import (
    # Enums
    Side,
    ODK,
    MotionType,
    MotionDirection,
    RouteKind,
    SpecialTeamsPathType,

    # Core types
    Point,
    Player,
    Route,
    FormationSlot,
    PlayAttributes,
    PlayDiagram,
)

from play_engine.errors import (
    PlayEngineError,
    PlayerNotFoundError,
    DrawingError,
    PersistenceError,
    CoachSheetError,
)

from play_engine.config import (
    EngineSettings,
    RuleSettings,
    get_settings,
)

from play_engine.catalog import (
    list_formations,
    get_formation,
    centered_layout,
    legal_assignments,
    legal_motion_types,
    position_group,
)

from play_engine.geometry import (
    route_path,
    motion_endpoint,
    block_arrow_endpoint,
    gap_position,
    hole_position,
    blitz_path,
)

from play_engine.route_detection import (
    detect_route,
    detect_block_type,
    route_options,
)

from play_engine.model import PlayModel

from play_engine.validator import (
    ValidationResult,
    ValidationIssue,
    validate_play,
)

from play_engine.controller import (
    ActionType,
    DragState,
    DrawState,
    InteractionController,
)

from play_engine.autosave import (
    DraftAutosaver,
    DraftSnapshot,
    InMemoryDraftStore,
    FileDraftStore,
)

from play_engine.persistence import (
    SavedPlay,
    InMemoryPlayStore,
    SupabasePlayStore,
)

from play_engine.pipeline import SavePipeline, SaveResult

from play_engine.renderer import render, render_to_string


__all__ = [
    # Schema
    "Side",
    "ODK",
    "MotionType",
    "MotionDirection",
    "RouteKind",
    "SpecialTeamsPathType",
    "Point",
    "Player",
    "Route",
    "FormationSlot",
    "PlayAttributes",
    "PlayDiagram",

    # Errors
    "PlayEngineError",
    "PlayerNotFoundError",
    "DrawingError",
    "PersistenceError",
    "CoachSheetError",

    # Config
    "EngineSettings",
    "RuleSettings",
    "get_settings",

    # Catalog
    "list_formations",
    "get_formation",
    "centered_layout",
    "legal_assignments",
    "legal_motion_types",
    "position_group",

    # Geometry
    "route_path",
    "motion_endpoint",
    "block_arrow_endpoint",
    "gap_position",
    "hole_position",
    "blitz_path",

    # Route detection
    "detect_route",
    "detect_block_type",
    "route_options",

    # Editing
    "PlayModel",
    "ActionType",
    "DragState",
    "DrawState",
    "InteractionController",

    # Validation
    "ValidationResult",
    "ValidationIssue",
    "validate_play",

    # Drafts & saving
    "DraftAutosaver",
    "DraftSnapshot",
    "InMemoryDraftStore",
    "FileDraftStore",
    "SavedPlay",
    "InMemoryPlayStore",
    "SupabasePlayStore",
    "SavePipeline",
    "SaveResult",

    # Rendering
    "render",
    "render_to_string",
]

__version__ = "1.0.0"
