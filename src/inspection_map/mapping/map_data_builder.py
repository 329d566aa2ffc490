"""Build GeoJSON features for choropleth rendering."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from branca.colormap import StepColormap

from ..errors import UnknownNeighborhoodError
from ..models.schemas import Datasets, MetricSelection
from ..utils.aggregator import ScoreAggregator
from .geometry_utils import validate_geometry
from .labeling import TooltipModel, format_tooltip_html
from .styles import MISSING_COLOR, BoundaryStyle, get_boundary_style

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundaryFeature:
    """A neighborhood polygon ready for map rendering."""

    name: str
    geometry: Dict[str, Any]
    style: BoundaryStyle
    value: Optional[float]  # Metric value, None when unmatched
    matched: bool


def get_feature_name(feature: Mapping[str, Any]) -> str:
    """Neighborhood name carried by a boundary feature (properties.name)."""
    return (feature.get("properties") or {}).get("name") or ""


def get_all_geometries(features: Sequence[BoundaryFeature]) -> List[Dict[str, Any]]:
    """Extract all geometries from features for bounding box calculation."""
    return [f.geometry for f in features if f.geometry]


class MapDataBuilder:
    """Build map data from the boundary dataset and neighborhood aggregates."""

    def __init__(
        self,
        datasets: Datasets,
        aggregator: Optional[ScoreAggregator] = None,
        weight: int = 3,
        fill_opacity: float = 0.6,
        missing_color: str = MISSING_COLOR,
    ):
        """
        Initialize the map data builder.

        Args:
            datasets: Loaded businesses, aggregates and boundaries
            aggregator: Aggregator over the same datasets (built if omitted)
            weight: Boundary stroke width
            fill_opacity: Boundary fill opacity
            missing_color: Fill for neighborhoods without an aggregate
        """
        self.datasets = datasets
        self.aggregator = aggregator or ScoreAggregator(
            datasets.businesses, datasets.aggregates
        )
        self.weight = weight
        self.fill_opacity = fill_opacity
        self.missing_color = missing_color

    def build_map_features(
        self,
        metric: MetricSelection,
        scale: StepColormap,
    ) -> Tuple[List[BoundaryFeature], Dict[str, Any]]:
        """
        Resolve each boundary feature to its metric value and fill color.

        Features whose name has no aggregate are kept with the neutral style
        so the rest of the map stays usable.

        Returns:
            Tuple of (features list, stats dict)
        """
        features = []
        stats = {
            "total_boundaries": len(self.datasets.boundary_features),
            "matched": 0,
            "unmatched": 0,
            "unmatched_names": [],
            "skipped_no_geometry": 0,
        }

        for raw in self.datasets.boundary_features:
            geometry = raw.get("geometry")
            name = get_feature_name(raw)
            if not validate_geometry(geometry):
                stats["skipped_no_geometry"] += 1
                continue

            try:
                value = self.aggregator.require_aggregate(name).value_for(metric)
                matched = True
            except UnknownNeighborhoodError as e:
                logger.warning(f"{e}; rendering with neutral color")
                value = None
                matched = False

            if matched:
                stats["matched"] += 1
            else:
                stats["unmatched"] += 1
                stats["unmatched_names"].append(name)

            features.append(
                BoundaryFeature(
                    name=name,
                    geometry=geometry,
                    style=get_boundary_style(
                        scale,
                        value,
                        weight=self.weight,
                        fill_opacity=self.fill_opacity,
                        missing_color=self.missing_color,
                    ),
                    value=value,
                    matched=matched,
                )
            )

        return features, stats

    def build_tooltips(
        self,
        metric: MetricSelection,
        names: List[str],
    ) -> Dict[str, TooltipModel]:
        """Precompute the hover listing for each named neighborhood."""
        return {
            name: TooltipModel(
                neighborhood=name,
                rows=tuple(self.aggregator.latest_scored_inspections(name)),
                score=self.aggregator.metric_value(name, metric),
            )
            for name in names
        }

    def to_geojson_features(
        self,
        features: List[BoundaryFeature],
        tooltips: Mapping[str, TooltipModel],
    ) -> List[Dict[str, Any]]:
        """
        Convert BoundaryFeatures to GeoJSON features with embedded styles.

        Args:
            features: List of BoundaryFeature objects
            tooltips: Hover models keyed by neighborhood name

        Returns:
            List of GeoJSON Feature dicts
        """
        geojson_features = []

        for i, feat in enumerate(features):
            tooltip = tooltips.get(feat.name) or TooltipModel(neighborhood=feat.name)
            geojson_features.append(
                {
                    "type": "Feature",
                    "id": str(i),
                    "properties": {
                        "name": feat.name,
                        "value": feat.value,
                        "matched": feat.matched,
                        "style": feat.style.to_leaflet(),
                        "tooltip_html": format_tooltip_html(tooltip),
                    },
                    "geometry": feat.geometry,
                }
            )

        return geojson_features
