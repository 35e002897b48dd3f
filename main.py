"""
Football Play Diagram API

FastAPI backend that:
1. Serves the formation catalog to the play builder
2. Validates plays against formation rules
3. Generates route geometry and renders play previews to SVG
4. Writes coach install sheets with Claude
5. Saves validated plays to the playbook
"""

import base64
from dataclasses import asdict
import logging
from typing import List, Optional

import anthropic
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from play_engine import __version__
from play_engine.catalog import (
    centered_layout,
    formation_metadata,
    get_formation,
    list_formations,
)
from play_engine.coach_sheet import describe_play
from play_engine.config import get_settings
from play_engine.errors import (
    CoachSheetError,
    PersistenceError,
    PlayerNotFoundError,
)
from play_engine.geometry import route_path
from play_engine.model import PlayModel
from play_engine.persistence import InMemoryPlayStore, PlayStore, SupabasePlayStore
from play_engine.pipeline import SavePipeline
from play_engine.renderer import render_to_string
from play_engine.schema import ODK, PlayAttributes, PlayDiagram, Point
from play_engine.validator import validate_play

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("play_api")

# ============================================================
# FASTAPI APP SETUP
# ============================================================

app = FastAPI(
    title="Football Play Diagram API",
    description="Build, validate and render football play diagrams",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================
# REQUEST/RESPONSE MODELS
# ============================================================

class PlayRequest(BaseModel):
    """A play diagram in wire format, with optional attribute overrides"""
    diagram: dict = Field(..., description="Serialized PlayDiagram")
    attributes: Optional[dict] = Field(default=None, description="PlayAttributes; defaults to the diagram's")


class SavePlayRequest(PlayRequest):
    play_name: str = Field(..., min_length=1, description="Name shown in the playbook")
    override: bool = Field(default=False, description="Save even when validation reports errors")
    play_id: Optional[str] = Field(default=None, description="Existing play to update")


class RouteRequest(BaseModel):
    route_name: str = Field(..., description="e.g. 'Go/Streak/9', 'Post', 'In/Dig'")
    start: Point
    is_left_of_center: Optional[bool] = None
    los_y: float = Field(default=200)


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: List[str]
    warnings: List[str]


class RouteResponse(BaseModel):
    route_name: str
    points: List[Point]


class RenderResponse(BaseModel):
    success: bool
    play_name: Optional[str] = None
    svg: str  # Base64 encoded SVG


class DescribeResponse(BaseModel):
    success: bool
    title: str
    summary: str
    description: str  # Markdown coach sheet
    coaching_points: List[str]
    svg: str  # Base64 encoded SVG


class SaveResponse(BaseModel):
    saved: bool
    overridden: bool = False
    validation: ValidationResponse
    play: Optional[dict] = None


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str


# ============================================================
# HELPERS
# ============================================================

_store: Optional[PlayStore] = None


def get_play_store() -> PlayStore:
    """Supabase when configured, otherwise an in-process store"""
    global _store
    if _store is None:
        if settings.has_supabase:
            _store = SupabasePlayStore()
        else:
            logger.warning("Supabase not configured, plays are kept in memory")
            _store = InMemoryPlayStore()
    return _store


def _model_from(request: PlayRequest) -> PlayModel:
    diagram = PlayDiagram.model_validate(request.diagram)
    attributes = (
        PlayAttributes.model_validate(request.attributes)
        if request.attributes is not None
        else diagram.attributes
    )
    model = PlayModel(settings=settings)
    model.load_play(attributes, diagram)
    return model


def _encode_svg(source) -> str:
    svg_content = render_to_string(source)
    return base64.b64encode(svg_content.encode()).decode()


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, PlayerNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, anthropic.APIError):
        return HTTPException(status_code=502, detail=f"Claude API error: {str(e)}")
    if isinstance(e, (CoachSheetError, PersistenceError)):
        return HTTPException(status_code=502, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=422, detail=f"Validation error: {str(e)}")
    logger.exception("Unhandled error")
    return HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


# ============================================================
# API ENDPOINTS
# ============================================================

@app.get("/", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint"""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/api/formations/{odk}")
async def formations(odk: str):
    """Formation names for offense, defense or specialTeams"""
    try:
        odk = ODK(odk)
    except ValueError as e:
        raise _http_error(e)
    return {"odk": odk.value, "formations": list_formations(odk)}


@app.get("/api/formations/{odk}/{name}")
async def formation_layout(odk: str, name: str):
    """Centered layout (and metadata for offense) of one formation"""
    try:
        odk = ODK(odk)
    except ValueError as e:
        raise _http_error(e)

    slots = centered_layout(get_formation(odk, name))
    if not slots:
        raise HTTPException(status_code=404, detail=f"Formation not found: {name}")

    metadata = formation_metadata(name) if odk == ODK.OFFENSE else None
    return {
        "odk": odk.value,
        "name": name,
        "slots": [slot.model_dump(exclude_none=True) for slot in slots],
        "metadata": asdict(metadata) if metadata else None,
    }


@app.post("/api/plays/validate", response_model=ValidationResponse)
async def validate(request: PlayRequest):
    """Run the formation rules over a play"""
    try:
        model = _model_from(request)
        result = validate_play(model)
        logger.info("[VALIDATE] %s: %d errors, %d warnings",
                    model.formation, len(result.errors), len(result.warnings))
        return ValidationResponse(**result.to_dict())
    except Exception as e:
        raise _http_error(e)


@app.post("/api/geometry/route", response_model=RouteResponse)
async def route_geometry(request: RouteRequest):
    """Points of a named route from a start position"""
    points = route_path(
        request.start,
        request.route_name,
        los_y=request.los_y,
        is_left_of_center=request.is_left_of_center,
    )
    return RouteResponse(route_name=request.route_name, points=points)


@app.post("/api/plays/render", response_model=RenderResponse)
async def render_play(request: PlayRequest):
    """Render a play to SVG"""
    try:
        model = _model_from(request)
        svg = _encode_svg(model)
        logger.info("[RENDER] %s: %d bytes (base64)", model.formation, len(svg))
        return RenderResponse(success=True, play_name=model.attributes.play_name, svg=svg)
    except Exception as e:
        raise _http_error(e)


@app.post("/api/plays/describe", response_model=DescribeResponse)
async def describe(request: PlayRequest):
    """
    Write a coach install sheet for a play.

    Returns the SVG preview alongside the markdown sheet.
    """
    try:
        model = _model_from(request)
        sheet = describe_play(model.serialize())
        return DescribeResponse(
            success=True,
            title=sheet.get("title", ""),
            summary=sheet.get("summary", ""),
            description=sheet.get("coach_sheet", ""),
            coaching_points=sheet.get("coaching_points", []),
            svg=_encode_svg(model),
        )
    except Exception as e:
        raise _http_error(e)


@app.post("/api/plays", response_model=SaveResponse)
async def save_play(request: SavePlayRequest, store: PlayStore = Depends(get_play_store)):
    """
    Validate and save a play.

    Errors block the save unless ``override`` is set; the response always
    carries the validation so the client can ask the coach.
    """
    try:
        model = _model_from(request)
        result = SavePipeline(store).save(
            model, request.play_name, override=request.override, play_id=request.play_id
        )
        return SaveResponse(
            saved=result.saved,
            overridden=result.overridden,
            validation=ValidationResponse(**result.validation.to_dict()),
            play=result.play.to_dict() if result.play else None,
        )
    except Exception as e:
        raise _http_error(e)


# ============================================================
# RUN SERVER
# ============================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
