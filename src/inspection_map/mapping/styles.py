"""Color and style constants for neighborhood choropleth rendering."""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from branca.colormap import StepColormap

BUCKET_COUNT = 9

# ColorBrewer sequential 9-class palettes, light to dark
PALETTES = {
    "Reds": (
        "#fff5f0", "#fee0d2", "#fcbba1", "#fc9272", "#fb6a4a",
        "#ef3b2c", "#cb181d", "#a50f15", "#67000d",
    ),
    "Oranges": (
        "#fff5eb", "#fee6ce", "#fdd0a2", "#fdae6b", "#fd8d3c",
        "#f16913", "#d94801", "#a63603", "#7f2704",
    ),
    "Blues": (
        "#f7fbff", "#deebf7", "#c6dbef", "#9ecae1", "#6baed6",
        "#4292c6", "#2171b5", "#08519c", "#08306b",
    ),
    "Greens": (
        "#f7fcf5", "#e5f5e0", "#c7e9c0", "#a1d99b", "#74c476",
        "#41ab5d", "#238b45", "#006d2c", "#00441b",
    ),
    "Purples": (
        "#fcfbfd", "#efedf5", "#dadaeb", "#bcbddc", "#9e9ac8",
        "#807dba", "#6a51a3", "#54278f", "#3f007d",
    ),
}

MISSING_COLOR = "#cccccc"  # Gray for neighborhoods without an aggregate


@dataclass(frozen=True)
class BoundaryStyle:
    """Leaflet path style for a neighborhood polygon."""

    fill_color: str  # Hex with # (e.g., "#fb6a4a")
    stroke_color: str
    weight: int = 3
    fill_opacity: float = 0.6

    def to_leaflet(self) -> dict:
        """Convert to the style dict Leaflet's GeoJSON layer expects."""
        return {
            "color": self.stroke_color,
            "fillColor": self.fill_color,
            "weight": self.weight,
            "fillOpacity": self.fill_opacity,
        }


def get_palette(name: str = "Reds") -> Tuple[str, ...]:
    """Look up a 9-class palette by ColorBrewer name."""
    try:
        return PALETTES[name]
    except KeyError:
        raise ValueError(
            f"Unknown palette {name!r}; expected one of {sorted(PALETTES)}"
        ) from None


def build_color_scale(
    bounds: Tuple[float, float],
    palette: Sequence[str] = PALETTES["Reds"],
) -> StepColormap:
    """
    Quantize [min, max] uniformly into one bucket per palette color.

    Values at or below min take the first color and values at or above max
    take the last. When min == max every in-domain value takes the first color.

    Args:
        bounds: (min, max) from color_domain_bounds
        palette: Colors light to dark

    Returns:
        branca StepColormap over the domain
    """
    vmin, vmax = bounds
    n = len(palette)
    index = [vmin + (vmax - vmin) * i / n for i in range(n + 1)]
    return StepColormap(colors=list(palette), index=index, vmin=vmin, vmax=vmax)


def fill_color(
    scale: StepColormap,
    value: Optional[float],
    missing_color: str = MISSING_COLOR,
) -> str:
    """Hex color for a metric value; the neutral color when it is missing."""
    if value is None:
        return missing_color
    return scale.rgb_hex_str(value)


def get_boundary_style(
    scale: StepColormap,
    value: Optional[float],
    weight: int = 3,
    fill_opacity: float = 0.6,
    missing_color: str = MISSING_COLOR,
) -> BoundaryStyle:
    """Style a neighborhood polygon by its metric value."""
    color = fill_color(scale, value, missing_color)
    return BoundaryStyle(
        fill_color=color,
        stroke_color=color,
        weight=weight,
        fill_opacity=fill_opacity,
    )
