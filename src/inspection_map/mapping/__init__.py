"""Neighborhood choropleth visualization module.

Colors neighborhood boundaries by an aggregate inspection or violation
score and lists each neighborhood's scored businesses on hover.
"""

from .styles import (
    BUCKET_COUNT,
    PALETTES,
    MISSING_COLOR,
    BoundaryStyle,
    build_color_scale,
    fill_color,
    get_boundary_style,
    get_palette,
)
from .labeling import (
    LEGEND_MULTIPLIERS,
    LegendEntry,
    TooltipModel,
    build_legend,
    format_legend_html,
    format_tooltip_html,
)
from .map_data_builder import (
    BoundaryFeature,
    MapDataBuilder,
    get_all_geometries,
    get_feature_name,
)
from .render_state import RenderState, compute_render_state
from .geometry_utils import get_bounding_box, get_bounds_center, validate_geometry

__all__ = [
    "BUCKET_COUNT",
    "PALETTES",
    "MISSING_COLOR",
    "BoundaryStyle",
    "build_color_scale",
    "fill_color",
    "get_boundary_style",
    "get_palette",
    "LEGEND_MULTIPLIERS",
    "LegendEntry",
    "TooltipModel",
    "build_legend",
    "format_legend_html",
    "format_tooltip_html",
    "BoundaryFeature",
    "MapDataBuilder",
    "get_all_geometries",
    "get_feature_name",
    "RenderState",
    "compute_render_state",
    "get_bounding_box",
    "get_bounds_center",
    "validate_geometry",
]
