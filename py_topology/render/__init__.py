"""
Rendering of terrain grids to raster images.
"""

from .renderer import (
    RenderError, render_image, export_png, export_filename, save_png, to_pixels,
    WALL_COLOR, PATH_COLOR,
)

__all__ = ["RenderError", "render_image", "export_png", "export_filename", "save_png",
           "to_pixels", "WALL_COLOR", "PATH_COLOR"]
