"""Derive tooltip listings and color-scale bounds from the loaded datasets.

Source collections are never mutated: inspection histories are sorted into
new lists and every output row is a fresh ScoredInspection.
"""

import logging
from typing import Dict, List, Literal, Mapping, Optional, Tuple

from ..errors import EmptyDatasetError, UnknownNeighborhoodError
from ..models.schemas import (
    BusinessRecord,
    MetricSelection,
    NeighborhoodAggregate,
    ScoredInspection,
)

logger = logging.getLogger(__name__)

InspectionSelection = Literal["earliest", "latest"]


def _select_scored_inspection(
    business_id: str,
    record: BusinessRecord,
    selection: InspectionSelection,
) -> Optional[ScoredInspection]:
    """Pick one scored inspection for a business, or None if it has none."""
    ordered = sorted(record.inspection_data, key=lambda entry: entry.date)
    scored = [entry for entry in ordered if entry.score is not None]
    if not scored:
        return None

    entry = scored[0] if selection == "earliest" else scored[-1]
    return ScoredInspection(
        business_id=business_id,
        business_name=record.business_data.name,
        score=entry.score,
        date=entry.date,
    )


def latest_scored_inspections_by_neighborhood(
    neighborhood: str,
    businesses: Mapping[str, BusinessRecord],
    selection: InspectionSelection = "earliest",
) -> List[ScoredInspection]:
    """
    List one scored inspection per business located in a neighborhood.

    Each business's history is sorted ascending by date and unscored entries
    are dropped. With selection="earliest" the first remaining entry is used,
    with "latest" the last one. Businesses without any scored inspection are
    left out. Rows follow the iteration order of `businesses`.

    Args:
        neighborhood: Neighborhood name to match against business_data.neighborhood
        businesses: Business records keyed by business id
        selection: "earliest" or "latest"

    Returns:
        List of ScoredInspection (empty if no business matches)
    """
    if selection not in ("earliest", "latest"):
        raise ValueError(f"Unknown inspection selection: {selection!r}")

    results = []
    for business_id, record in businesses.items():
        if record.business_data.neighborhood != neighborhood:
            continue
        row = _select_scored_inspection(business_id, record, selection)
        if row is not None:
            results.append(row)
    return results


def color_domain_bounds(
    metric: MetricSelection,
    aggregates: Mapping[str, NeighborhoodAggregate],
) -> Tuple[float, float]:
    """
    Return (min, max) of the selected metric across all neighborhoods.

    Raises:
        EmptyDatasetError: if there are no aggregates to bound
    """
    metric = MetricSelection(metric)
    values = sorted(agg.value_for(metric) for agg in aggregates.values())
    if not values:
        raise EmptyDatasetError(
            f"Cannot compute {metric.value} color domain: no neighborhood aggregates"
        )
    return values[0], values[-1]


class ScoreAggregator:
    """Bind the business and aggregate datasets for repeated lookups."""

    def __init__(
        self,
        businesses: Mapping[str, BusinessRecord],
        aggregates: Mapping[str, NeighborhoodAggregate],
        selection: InspectionSelection = "earliest",
    ):
        self.businesses = businesses
        self.aggregates = aggregates
        self.selection = selection

    def latest_scored_inspections(self, neighborhood: str) -> List[ScoredInspection]:
        return latest_scored_inspections_by_neighborhood(
            neighborhood, self.businesses, self.selection
        )

    def color_domain_bounds(self, metric: MetricSelection) -> Tuple[float, float]:
        return color_domain_bounds(metric, self.aggregates)

    def find_aggregate(self, name: str) -> Optional[NeighborhoodAggregate]:
        """Aggregate for a neighborhood, or None when the name is unknown."""
        return self.aggregates.get(name)

    def require_aggregate(self, name: str) -> NeighborhoodAggregate:
        aggregate = self.find_aggregate(name)
        if aggregate is None:
            raise UnknownNeighborhoodError(name)
        return aggregate

    def metric_value(self, name: str, metric: MetricSelection) -> Optional[float]:
        aggregate = self.find_aggregate(name)
        if aggregate is None:
            return None
        return aggregate.value_for(metric)

    def unmatched_business_neighborhoods(self) -> Dict[str, int]:
        """Count businesses whose neighborhood has no aggregate, by name."""
        counts: Dict[str, int] = {}
        for record in self.businesses.values():
            name = record.business_data.neighborhood
            if name not in self.aggregates:
                counts[name] = counts.get(name, 0) + 1
        if counts:
            logger.warning(
                f"{sum(counts.values())} businesses reference neighborhoods "
                f"without aggregates: {sorted(counts)}"
            )
        return counts
