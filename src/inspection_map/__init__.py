# src/inspection_map/__init__.py
from .orchestrator.choropleth_orchestrator import ChoroplethWidget, WidgetEvent
from .mapping.map_generator import ChoroplethMapGenerator, ChoroplethMapResult
from .models.schemas import Datasets, MetricSelection
from .errors import EmptyDatasetError, UnknownNeighborhoodError


class InspectionMap:
    """
    Public interface: one widget plus the HTML renderer over the same datasets.
    """

    def __init__(
        self,
        *,
        businesses: dict,
        aggregates: dict,
        boundaries: dict,
        output_dir: str | None = None,
        on_event=None,  # optional callback for hover / metric_changed events
    ):
        self.datasets = Datasets.from_json(businesses, aggregates, boundaries)
        self._generator = ChoroplethMapGenerator(self.datasets, output_dir=output_dir)
        if on_event:
            self._generator.widget.subscribe(on_event)

    @property
    def widget(self) -> ChoroplethWidget:
        return self._generator.widget

    def select_metric(self, metric: str | MetricSelection):
        return self.widget.on_metric_change(metric)

    def hover(self, feature):
        return self.widget.on_hover(feature)

    def render(self, *, run_id: str | None = None) -> list[ChoroplethMapResult]:
        return self._generator.generate_all(run_id=run_id)


__all__ = [
    "InspectionMap",
    "ChoroplethWidget",
    "WidgetEvent",
    "ChoroplethMapGenerator",
    "ChoroplethMapResult",
    "Datasets",
    "MetricSelection",
    "EmptyDatasetError",
    "UnknownNeighborhoodError",
]
