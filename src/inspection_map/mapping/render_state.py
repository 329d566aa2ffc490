"""Immutable snapshot of everything the map shows for one metric."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from branca.colormap import StepColormap

from ..models.schemas import Datasets, MetricSelection
from ..utils.aggregator import InspectionSelection, ScoreAggregator
from .labeling import LegendEntry, TooltipModel, build_legend
from .map_data_builder import BoundaryFeature, MapDataBuilder
from .styles import MISSING_COLOR, build_color_scale, get_palette

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderState:
    """Map contents for one metric. Replaced wholesale, never edited."""

    metric: MetricSelection
    bounds: Tuple[float, float]
    color_scale: StepColormap = field(compare=False, repr=False)
    features: Tuple[BoundaryFeature, ...]
    legend: Tuple[LegendEntry, ...]
    tooltips: Dict[str, TooltipModel] = field(compare=False, repr=False)
    geojson: Dict[str, Any] = field(compare=False, repr=False)
    stats: Dict[str, Any] = field(compare=False, default_factory=dict)

    def tooltip_for(self, name: str) -> TooltipModel:
        """Hover model for a neighborhood, empty if the name is unknown."""
        return self.tooltips.get(name) or TooltipModel(neighborhood=name)

    def color_for(self, name: str) -> str:
        for feat in self.features:
            if feat.name == name:
                return feat.style.fill_color
        return MISSING_COLOR


def compute_render_state(
    metric: MetricSelection,
    datasets: Datasets,
    palette: str = "Reds",
    selection: InspectionSelection = "earliest",
    weight: int = 3,
    fill_opacity: float = 0.6,
    missing_color: str = MISSING_COLOR,
) -> RenderState:
    """
    Compute the map contents for a metric from the datasets.

    Pure: the same inputs always give an equal RenderState and the datasets
    are left untouched.

    Args:
        metric: Metric driving the boundary colors
        datasets: Loaded businesses, aggregates and boundaries
        palette: ColorBrewer palette name
        selection: Which scored inspection represents a business
        weight: Boundary stroke width
        fill_opacity: Boundary fill opacity
        missing_color: Fill for neighborhoods without an aggregate

    Returns:
        RenderState

    Raises:
        EmptyDatasetError: if there are no aggregates
    """
    metric = MetricSelection(metric)
    aggregator = ScoreAggregator(datasets.businesses, datasets.aggregates, selection)

    bounds = aggregator.color_domain_bounds(metric)
    scale = build_color_scale(bounds, get_palette(palette))

    builder = MapDataBuilder(
        datasets,
        aggregator=aggregator,
        weight=weight,
        fill_opacity=fill_opacity,
        missing_color=missing_color,
    )
    features, stats = builder.build_map_features(metric, scale)
    tooltips = builder.build_tooltips(metric, [f.name for f in features])
    geojson = {
        "type": "FeatureCollection",
        "features": builder.to_geojson_features(features, tooltips),
    }

    logger.debug(
        f"Render state for {metric.value}: domain {bounds}, "
        f"{stats['matched']} matched / {stats['unmatched']} unmatched boundaries"
    )

    return RenderState(
        metric=metric,
        bounds=bounds,
        color_scale=scale,
        features=tuple(features),
        legend=tuple(build_legend(scale, bounds)),
        tooltips=tooltips,
        geojson=geojson,
        stats=stats,
    )
