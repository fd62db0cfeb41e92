"""FastAPI main application."""

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field
from typing import List, Optional
import structlog

from ..config import settings
from ..core.session import TerrainSession
from ..core.terrain_analysis import analyze_terrain
from ..core.terrain_generator import TerrainConfig
from ..lore.lore_provider import LoreProvider
from ..render.renderer import encode_png, export_filename, export_png, render_image
from ..utils.logging import configure_logging

# Configure logging
configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Topology Terrain API",
    description="Spanning-tree maze terrain generator",
    version="0.1.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Single live terrain; every request works against the most recent one
session = TerrainSession(
    TerrainConfig(
        width=settings.default_width,
        height=settings.default_height,
        density=settings.default_density,
    )
)
lore_provider = LoreProvider()


# Request/Response models
class TerrainGenerationRequest(BaseModel):
    """Request to generate a new terrain."""

    width: int = Field(129, ge=1, description="Canvas width in pixels (raised to 20 if smaller)")
    height: int = Field(129, ge=1, description="Canvas height in pixels (raised to 20 if smaller)")
    density: int = Field(50, ge=0, le=100, description="Wall density; higher means smaller rooms")
    seed: Optional[str] = Field(None, description="Random seed for reproducible generation")


class TerrainConfigUpdate(BaseModel):
    """Partial configuration change. Zoom alone never regenerates."""

    width: Optional[int] = Field(None, ge=1)
    height: Optional[int] = Field(None, ge=1)
    density: Optional[int] = Field(None, ge=0, le=100)
    scale: Optional[int] = Field(None, ge=1, description="Display zoom factor")
    seed: Optional[str] = Field(None, description="Seed for the regenerated terrain; a seed alone rerolls")


class TerrainSummary(BaseModel):
    """Summary information about the current terrain."""

    generation: int
    seed: Optional[str]
    width: int
    height: int
    density: int
    scale: int
    room_size: int
    rows: int
    cols: int
    edge_count: int
    path_fraction: float
    path_components: int


class TerrainGrid(TerrainSummary):
    """Summary plus the raw grid (0 = path, 1 = wall)."""

    grid: List[List[int]]


class LoreResponse(BaseModel):
    """Lore text for a terrain."""

    lore: str
    width: int
    height: int
    stale: bool = False


def _check_limits(width: Optional[int], height: Optional[int]) -> None:
    if width is not None and width > settings.max_width:
        raise HTTPException(status_code=400, detail=f"Width exceeds maximum of {settings.max_width}")
    if height is not None and height > settings.max_height:
        raise HTTPException(status_code=400, detail=f"Height exceeds maximum of {settings.max_height}")


def _current():
    if session.result is None:
        raise HTTPException(status_code=404, detail="No terrain generated yet")
    return session.result


def _summary() -> TerrainSummary:
    result = _current()
    stats = analyze_terrain(result)
    geometry = result.geometry
    return TerrainSummary(
        generation=session.generation,
        seed=result.seed,
        width=result.width,
        height=result.height,
        density=session.config.density,
        scale=session.scale,
        room_size=geometry.room_size,
        rows=geometry.rows,
        cols=geometry.cols,
        edge_count=result.edge_count,
        path_fraction=stats.path_fraction,
        path_components=stats.path_components,
    )


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Generate the initial terrain so the viewer has something to show."""
    logger.info("Starting Topology Terrain API")
    if session.result is None:
        session.generate()
    logger.info("API startup complete", generation=session.generation)


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Topology Terrain API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/terrain/generate", response_model=TerrainSummary)
def generate_terrain(request: TerrainGenerationRequest):
    """Generate a fresh terrain, replacing the current one."""
    logger.info("Terrain generation requested", request=request.model_dump())
    _check_limits(request.width, request.height)

    session.generate(
        TerrainConfig(width=request.width, height=request.height, density=request.density),
        seed=request.seed,
    )
    return _summary()


@app.patch("/terrain/config", response_model=TerrainSummary)
def update_config(update: TerrainConfigUpdate):
    """
    Apply a configuration change.

    Width, height or density changes regenerate the terrain, as does a seed
    on its own; scale only changes how it is drawn.
    """
    _check_limits(update.width, update.height)
    if update.scale is not None and update.scale > settings.max_scale:
        raise HTTPException(status_code=400, detail=f"Scale exceeds maximum of {settings.max_scale}")

    regenerated = session.update(
        width=update.width,
        height=update.height,
        density=update.density,
        scale=update.scale,
        seed=update.seed,
    )
    logger.info("Terrain config updated", regenerated=regenerated, generation=session.generation)
    return _summary()


@app.get("/terrain", response_model=TerrainSummary)
def get_terrain():
    """Get current terrain details."""
    return _summary()


@app.get("/terrain/grid", response_model=TerrainGrid)
def get_terrain_grid():
    """Get current terrain including its pixel grid."""
    summary = _summary()
    return TerrainGrid(**summary.model_dump(), grid=session.result.to_rows())


@app.get("/terrain/image.png")
def get_terrain_image(scale: Optional[int] = Query(None, ge=1)):
    """Render the current terrain at the requested (or session) zoom."""
    result = _current()
    scale = scale or session.scale
    if scale > settings.max_scale:
        raise HTTPException(status_code=400, detail=f"Scale exceeds maximum of {settings.max_scale}")

    return Response(content=encode_png(render_image(result, scale)), media_type="image/png")


@app.get("/terrain/export.png")
def export_terrain():
    """Download the current terrain as a 1:1 PNG."""
    result = _current()
    filename = export_filename(result)
    logger.info("Terrain export requested", filename=filename)
    return Response(
        content=export_png(result),
        media_type="image/png",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@app.post("/terrain/lore", response_model=LoreResponse)
async def request_lore():
    """
    Ask the lore service about the current terrain.

    If the terrain is replaced while the request is in flight, the text is
    returned with stale=True and not stored.
    """
    ticket = session.begin_lore_request()
    if ticket is None:
        raise HTTPException(status_code=404, detail="No terrain generated yet")

    text = await lore_provider.request_lore(ticket.width, ticket.height)
    stored = session.complete_lore(ticket, text)
    return LoreResponse(lore=text, width=ticket.width, height=ticket.height, stale=not stored)


@app.get("/terrain/lore", response_model=LoreResponse)
def get_lore():
    """Get the stored lore for the current terrain."""
    result = _current()
    return LoreResponse(lore=session.lore_text, width=result.width, height=result.height)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
