"""
Raster rendering and PNG export for terrain grids.

WALL pixels are black and PATH pixels are white. Zoom is nearest-neighbor only,
so every grid pixel stays a hard-edged square.
"""

import io
from pathlib import Path
from typing import Optional, Union

import numpy as np
import structlog
from PIL import Image

from ..config import settings
from ..core.terrain_generator import CellType, GenerationResult

logger = structlog.get_logger()

WALL_COLOR = 0    # pure black
PATH_COLOR = 255  # pure white


class RenderError(RuntimeError):
    """Raised when there is nothing to render."""


def _require(result: Optional[GenerationResult]) -> GenerationResult:
    if result is None:
        raise RenderError("No terrain has been generated")
    return result


def to_pixels(result: GenerationResult) -> np.ndarray:
    """Grayscale pixel array, one byte per grid cell."""
    result = _require(result)
    return np.where(result.grid == CellType.PATH, PATH_COLOR, WALL_COLOR).astype(np.uint8)


def render_image(result: GenerationResult, scale: int = 1) -> Image.Image:
    """
    Render a terrain as a two-color "L" image.

    Args:
        result: Generated terrain
        scale: Integer zoom; each grid pixel becomes a scale x scale square

    Returns:
        PIL image of size (width * scale, height * scale)
    """
    if scale < 1:
        raise ValueError(f"scale must be a positive integer, got {scale}")

    image = Image.fromarray(to_pixels(result))
    if scale > 1:
        image = image.resize(
            (result.width * scale, result.height * scale),
            resample=Image.NEAREST,
        )
    return image


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def export_png(result: GenerationResult) -> bytes:
    """Encoded PNG at exactly width x height, 1:1 with the grid."""
    return encode_png(render_image(result, scale=1))


def export_filename(result: GenerationResult) -> str:
    result = _require(result)
    return f"topology-terrain-{result.width}x{result.height}.png"


def save_png(result: GenerationResult, path: Optional[Union[str, Path]] = None) -> Path:
    """
    Write the 1:1 PNG to disk.

    Without a path the file goes into settings.export_dir. A directory path
    gets the standard export file name appended.
    """
    if path is None:
        path = Path(settings.export_dir) / export_filename(result)
    path = Path(path)
    if path.is_dir():
        path = path / export_filename(result)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(export_png(result))
    logger.info("Terrain exported", path=str(path), width=result.width, height=result.height)
    return path
