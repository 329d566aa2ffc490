"""Legend and hover tooltip generation for the choropleth."""

from dataclasses import dataclass, field
from html import escape
from typing import List, Optional, Sequence, Tuple

from branca.colormap import StepColormap

from ..models.schemas import ScoredInspection

# Fractions of the (max - min) span at which legend swatches are sampled
LEGEND_MULTIPLIERS = (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9)


@dataclass(frozen=True)
class LegendEntry:
    """One legend row: a sampled threshold and the color it falls in."""

    threshold: float
    color: str  # Hex with #
    label: str  # Threshold with two decimals


@dataclass(frozen=True)
class TooltipModel:
    """What the hover box shows for one neighborhood."""

    neighborhood: str
    rows: Tuple[ScoredInspection, ...] = field(default_factory=tuple)
    score: Optional[float] = None  # Neighborhood metric value, None if unknown


def build_legend(
    scale: StepColormap,
    bounds: Tuple[float, float],
    multipliers: Sequence[float] = LEGEND_MULTIPLIERS,
) -> List[LegendEntry]:
    """
    Sample the color scale at fixed fractions of the domain span.

    These thresholds are only for display; the scale itself buckets the
    domain uniformly.

    Args:
        scale: Color scale built from the same bounds
        bounds: (min, max) color domain
        multipliers: Fractions of the span to sample

    Returns:
        List of LegendEntry, one per multiplier
    """
    base, top = bounds
    diff = top - base

    entries = []
    for mult in multipliers:
        threshold = base + diff * mult
        entries.append(
            LegendEntry(
                threshold=threshold,
                color=scale.rgb_hex_str(threshold),
                label=f"{threshold:.2f}",
            )
        )
    return entries


def format_legend_html(entries: List[LegendEntry], title: str = "") -> str:
    """
    Format legend entries as a bottom-left map overlay.

    Args:
        entries: Legend rows from build_legend
        title: Optional heading (e.g., the metric label)

    Returns:
        HTML string for the legend
    """
    if not entries:
        return ""

    rows = []
    for entry in entries:
        rows.append(
            f'<i style="background: {entry.color}; width: 18px; height: 18px; '
            f'float: left; margin-right: 8px; opacity: 0.7;"></i> {entry.label}<br>'
        )

    heading = f'<div class="legend-title"><b>{escape(title)}</b></div>' if title else ""

    return f"""
    <div class="info legend" style="position: fixed; bottom: 30px; left: 10px; z-index: 9999;
         background: rgba(255, 255, 255, 0.9); padding: 6px 8px; border-radius: 5px;
         box-shadow: 0 0 15px rgba(0, 0, 0, 0.2); font: 12px/18px Arial, Helvetica, sans-serif;">
        {heading}
        {''.join(rows)}
    </div>
    """


def format_score(score: Optional[float]) -> str:
    if score is None:
        return "N/A"
    return f"{score:g}"


def format_tooltip_html(tooltip: TooltipModel) -> str:
    """Render the hover box: neighborhood header plus a business/score table."""
    html = f"<h1 class='chloropleth-tooltip-header'>{escape(tooltip.neighborhood)}</h1>"
    html += "<table>"
    for row in tooltip.rows:
        html += "<tr>"
        html += f"<td>{escape(row.business_name)}</td>"
        html += f"<td>{format_score(row.score)}</td>"
        html += "</tr>"
    html += "</table>"
    return html
