# src/inspection_map/orchestrator/choropleth_orchestrator.py
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, TypedDict, Union

from ..config.settings import settings
from ..models.schemas import Datasets, MetricSelection
from ..mapping.labeling import TooltipModel
from ..mapping.map_data_builder import get_feature_name
from ..mapping.render_state import RenderState, compute_render_state
from ..utils.aggregator import ScoreAggregator

logger = logging.getLogger(__name__)


class WidgetEvent(TypedDict, total=False):
    type: str  # "metric_changed" | "hover"
    metric: str
    neighborhood: str
    state: RenderState
    tooltip: TooltipModel


class ChoroplethWidget:
    """
    Event-driven choropleth: ShowingInspections <-> ShowingViolations.

    All datasets are fixed at construction. Every metric change recomputes a
    fresh RenderState and swaps it in with a single assignment, so observers
    never see a half-updated map.
    """

    def __init__(
        self,
        datasets: Datasets,
        metric: Union[MetricSelection, str, None] = None,
        palette: Optional[str] = None,
        selection: Optional[str] = None,
        on_event: Optional[Callable[[WidgetEvent], None]] = None,
    ):
        self.datasets = datasets
        self.palette = palette or settings.PALETTE
        self.selection = selection or settings.INSPECTION_SELECTION
        self._subscribers: List[Callable[[WidgetEvent], None]] = []
        if on_event:
            self._subscribers.append(on_event)

        ScoreAggregator(datasets.businesses, datasets.aggregates).unmatched_business_neighborhoods()

        initial = MetricSelection(metric or settings.DEFAULT_METRIC)
        self._state = self._compute(initial)
        logger.info(
            f"Choropleth initialized showing {initial.value} "
            f"(domain {self._state.bounds[0]:.2f}..{self._state.bounds[1]:.2f})"
        )

    @property
    def state(self) -> RenderState:
        return self._state

    @property
    def metric(self) -> MetricSelection:
        return self._state.metric

    @property
    def state_name(self) -> str:
        if self.metric is MetricSelection.INSPECTIONS:
            return "ShowingInspections"
        return "ShowingViolations"

    def subscribe(self, callback: Callable[[WidgetEvent], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def on_metric_change(self, selection: Union[MetricSelection, str]) -> RenderState:
        """
        Handle the metric control's change event.

        Args:
            selection: "inspections" / "violations" or a MetricSelection

        Returns:
            The new RenderState

        Raises:
            ValueError: for an unknown metric name
        """
        metric = MetricSelection(selection)
        new_state = self._compute(metric)
        self._state = new_state
        logger.info(
            f"Switched to {metric.value} "
            f"(domain {new_state.bounds[0]:.2f}..{new_state.bounds[1]:.2f})"
        )
        self._emit({"type": "metric_changed", "metric": metric.value, "state": new_state})
        return new_state

    def on_hover(self, feature: Union[Mapping[str, Any], str]) -> TooltipModel:
        """
        Handle a hover over a boundary feature.

        Args:
            feature: GeoJSON feature (properties.name) or a neighborhood name

        Returns:
            TooltipModel for the hovered neighborhood
        """
        name = feature if isinstance(feature, str) else get_feature_name(feature)
        tooltip = self._state.tooltip_for(name)
        self._emit({"type": "hover", "neighborhood": name, "tooltip": tooltip})
        return tooltip

    def _compute(self, metric: MetricSelection) -> RenderState:
        return compute_render_state(
            metric,
            self.datasets,
            palette=self.palette,
            selection=self.selection,
            weight=settings.BOUNDARY_WEIGHT,
            fill_opacity=settings.FILL_OPACITY,
            missing_color=settings.MISSING_COLOR,
        )

    def _emit(self, event: WidgetEvent) -> None:
        for callback in list(self._subscribers):
            callback(event)

    def summary(self) -> Dict[str, Any]:
        return {
            "state": self.state_name,
            "metric": self.metric.value,
            "bounds": list(self._state.bounds),
            "stats": self._state.stats,
        }
