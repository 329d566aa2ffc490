"""Render choropleth states to interactive Leaflet maps via folium."""

import os
import copy
import json
import logging
from datetime import datetime
from typing import Dict, Any, List, Optional, Tuple
from dataclasses import dataclass, field
from pathlib import Path

import folium
from branca.element import Element

from ..config.settings import settings
from ..models.schemas import Datasets, MetricSelection
from ..orchestrator.choropleth_orchestrator import ChoroplethWidget
from .geometry_utils import get_bounds_center
from .labeling import format_legend_html
from .map_data_builder import get_all_geometries
from .render_state import RenderState

logger = logging.getLogger(__name__)


@dataclass
class ChoroplethMapResult:
    """Result of rendering one metric's map."""

    success: bool  # False when no boundary polygon could be drawn
    html_path: Optional[str]
    metric: str
    bounds: Optional[Tuple[float, float]]
    legend_html: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class ChoroplethMapGenerator:
    """Generate interactive HTML choropleths of neighborhood inspection scores."""

    def __init__(
        self,
        datasets: Datasets,
        output_dir: Optional[str] = None,
        center: Optional[Tuple[float, float]] = None,
        zoom: Optional[int] = None,
        tiles: Optional[str] = None,
        attribution: Optional[str] = None,
        palette: Optional[str] = None,
    ):
        """
        Initialize the map generator.

        Args:
            datasets: Loaded businesses, aggregates and boundaries
            output_dir: Directory for output files
            center: (lat, lon) map center; bounds center of the boundaries if omitted
            zoom: Initial zoom level
            tiles: Tile URL template
            attribution: Tile attribution HTML
            palette: ColorBrewer palette name
        """
        self.datasets = datasets
        self.output_dir = output_dir or settings.OUTPUT_DIR or self._get_default_output_dir()
        self.widget = ChoroplethWidget(datasets, palette=palette)
        self.center = center or self._get_default_center()
        self.zoom = zoom or settings.MAP_ZOOM
        self.tiles = tiles or settings.TILE_URL
        self.attribution = attribution or settings.TILE_ATTRIBUTION

        # Ensure output directory exists
        Path(self.output_dir).mkdir(parents=True, exist_ok=True)

    def _get_default_output_dir(self) -> str:
        """Get default output directory."""
        base = Path(__file__).parent.parent / "map_outputs"
        return str(base)

    def _get_default_center(self) -> Tuple[float, float]:
        if settings.MAP_CENTER_LAT is not None and settings.MAP_CENTER_LON is not None:
            return (settings.MAP_CENTER_LAT, settings.MAP_CENTER_LON)
        return get_bounds_center(get_all_geometries(self.widget.state.features))

    def render(self, state: RenderState) -> folium.Map:
        """
        Draw a RenderState onto a fresh folium map.

        The boundary layer, tooltip and legend all come from the state, so a
        metric switch is a full redraw.
        """
        m = folium.Map(location=list(self.center), zoom_start=self.zoom, tiles=None)
        folium.TileLayer(tiles=self.tiles, attr=self.attribution, name="Base map").add_to(m)

        if state.geojson["features"]:
            highlight_weight = settings.BOUNDARY_WEIGHT + 2
            folium.GeoJson(
                copy.deepcopy(state.geojson),
                name=state.metric.label,
                style_function=lambda feature: feature["properties"]["style"],
                highlight_function=lambda feature: {"weight": highlight_weight},
                tooltip=folium.GeoJsonTooltip(
                    fields=["tooltip_html"],
                    labels=False,
                    sticky=True,
                ),
            ).add_to(m)
        else:
            logger.warning("No boundary features to render on map")

        legend_html = format_legend_html(list(state.legend), title=state.metric.label)
        m.get_root().html.add_child(Element(legend_html))
        return m

    def generate(
        self,
        metric: MetricSelection = MetricSelection.INSPECTIONS,
        run_id: Optional[str] = None,
    ) -> ChoroplethMapResult:
        """
        Render and save the map for one metric.

        Args:
            metric: Metric driving the boundary colors
            run_id: Unique identifier for this run (used in filenames)

        Returns:
            ChoroplethMapResult with the HTML path and metadata
        """
        run_id = run_id or datetime.now().strftime("%Y%m%d_%H%M%S")
        metric = MetricSelection(metric)
        logger.info(f"Generating {metric.value} choropleth for run: {run_id}")

        state = self.widget.on_metric_change(metric)
        m = self.render(state)

        html_path = os.path.join(self.output_dir, f"{run_id}_{metric.value}_choropleth.html")
        m.save(html_path)

        metadata = {
            "run_id": run_id,
            "generated_at": datetime.now().isoformat(),
            "metric": metric.value,
            "bounds": list(state.bounds),
            "legend": [
                {"threshold": e.threshold, "color": e.color, "label": e.label}
                for e in state.legend
            ],
            "stats": state.stats,
            "settings": {
                "center": list(self.center),
                "zoom": self.zoom,
                "palette": self.widget.palette,
                "inspection_selection": self.widget.selection,
            },
        }

        if state.stats.get("unmatched"):
            logger.warning(
                f"{state.stats['unmatched']} boundaries had no aggregate: "
                f"{state.stats['unmatched_names']}"
            )
        logger.info(f"Choropleth saved: {html_path}")

        return ChoroplethMapResult(
            success=bool(state.geojson["features"]),
            html_path=html_path,
            metric=metric.value,
            bounds=state.bounds,
            legend_html=format_legend_html(list(state.legend), title=metric.label),
            metadata=metadata,
        )

    def generate_all(self, run_id: Optional[str] = None) -> List[ChoroplethMapResult]:
        """Render every metric and save a combined metadata JSON."""
        run_id = run_id or datetime.now().strftime("%Y%m%d_%H%M%S")
        results = [self.generate(metric, run_id=run_id) for metric in MetricSelection]

        meta_path = os.path.join(self.output_dir, f"{run_id}_choropleth_metadata.json")
        with open(meta_path, "w") as f:
            json.dump({r.metric: r.metadata for r in results}, f, indent=2)

        return results


def generate_choropleth_maps(
    datasets: Datasets,
    output_dir: Optional[str] = None,
    run_id: Optional[str] = None,
    **kwargs,
) -> List[ChoroplethMapResult]:
    """
    Convenience function to generate the maps for every metric.

    Args:
        datasets: Loaded businesses, aggregates and boundaries
        output_dir: Directory for output files
        run_id: Unique identifier for this run
        **kwargs: Additional arguments passed to ChoroplethMapGenerator

    Returns:
        List of ChoroplethMapResult, one per metric
    """
    generator = ChoroplethMapGenerator(datasets=datasets, output_dir=output_dir, **kwargs)
    return generator.generate_all(run_id=run_id)
