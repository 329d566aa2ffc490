"""Tests for folium choropleth rendering."""

import json
import os

import folium
import pytest

from inspection_map import InspectionMap
from inspection_map.mapping.geometry_utils import (
    get_bounding_box,
    get_bounds_center,
    validate_geometry,
)
from inspection_map.mapping.map_data_builder import get_all_geometries
from inspection_map.mapping.map_generator import (
    ChoroplethMapGenerator,
    generate_choropleth_maps,
)
from inspection_map.models.schemas import Datasets, MetricSelection


# =============================================================================
# Sample data helpers
# =============================================================================

BUSINESSES = {
    "b1": {
        "business_data": {"name": "La Taqueria", "neighborhood": "Mission"},
        "inspection_data": [{"date": 1, "Score": 92}],
    },
    "b2": {
        "business_data": {"name": "Zuni Cafe", "neighborhood": "SoMa"},
        "inspection_data": [{"date": 1, "Score": 96}],
    },
}

AGGREGATES = {
    "Mission": {"avg_inspection_score": 80, "avg_violation_score": 4.0},
    "SoMa": {"avg_inspection_score": 95, "avg_violation_score": 1.0},
}

BOUNDARIES = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {"name": "Mission"},
            "geometry": {
                "type": "Polygon",
                "coordinates": [[[-122.43, 37.74], [-122.40, 37.74], [-122.40, 37.77], [-122.43, 37.74]]],
            },
        },
        {
            "type": "Feature",
            "properties": {"name": "SoMa"},
            "geometry": {
                "type": "MultiPolygon",
                "coordinates": [[[[-122.41, 37.77], [-122.39, 37.77], [-122.39, 37.79], [-122.41, 37.77]]]],
            },
        },
    ],
}


def _datasets():
    return Datasets.from_json(BUSINESSES, AGGREGATES, BOUNDARIES)


# =============================================================================
# TestGeometryUtils
# =============================================================================


class TestGeometryUtils:
    def test_bounding_box_mixed_types(self):
        geoms = [f["geometry"] for f in BOUNDARIES["features"]]
        assert get_bounding_box(geoms) == (-122.43, 37.74, -122.39, 37.79)

    def test_bounds_center_is_lat_lon(self):
        geoms = [f["geometry"] for f in BOUNDARIES["features"]]
        lat, lon = get_bounds_center(geoms)
        assert lat == pytest.approx(37.765)
        assert lon == pytest.approx(-122.41)

    def test_empty_bounding_box(self):
        assert get_bounding_box([]) == (0, 0, 0, 0)

    def test_validate_geometry(self):
        assert validate_geometry(BOUNDARIES["features"][0]["geometry"])
        assert validate_geometry(BOUNDARIES["features"][1]["geometry"])
        assert not validate_geometry(None)
        assert not validate_geometry({"type": "Point", "coordinates": [0, 0]})
        assert not validate_geometry({"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]})


# =============================================================================
# TestChoroplethMapGenerator
# =============================================================================


class TestChoroplethMapGenerator:
    def test_render_returns_folium_map(self, tmp_path):
        generator = ChoroplethMapGenerator(_datasets(), output_dir=str(tmp_path))
        m = generator.render(generator.widget.state)
        assert isinstance(m, folium.Map)

    def test_default_center_from_boundaries(self, tmp_path):
        generator = ChoroplethMapGenerator(_datasets(), output_dir=str(tmp_path))
        assert generator.center[0] == pytest.approx(37.765)
        assert generator.center[1] == pytest.approx(-122.41)

    def test_default_center_ignores_unrendered_boundaries(self, tmp_path):
        boundaries = {
            "type": "FeatureCollection",
            "features": BOUNDARIES["features"]
            + [
                {
                    "type": "Feature",
                    "properties": {"name": "Farallones"},
                    "geometry": {"type": "Polygon", "coordinates": [[[-123.0, 37.70], [-123.0, 37.71]]]},
                },
            ],
        }
        datasets = Datasets.from_json(BUSINESSES, AGGREGATES, boundaries)
        generator = ChoroplethMapGenerator(datasets, output_dir=str(tmp_path))
        assert generator.widget.state.stats["skipped_no_geometry"] == 1
        assert generator.center[0] == pytest.approx(37.765)
        assert generator.center[1] == pytest.approx(-122.41)

    def test_all_geometries_from_rendered_features(self, tmp_path):
        generator = ChoroplethMapGenerator(_datasets(), output_dir=str(tmp_path))
        geometries = get_all_geometries(generator.widget.state.features)
        assert [g["type"] for g in geometries] == ["Polygon", "MultiPolygon"]

    def test_explicit_center(self, tmp_path):
        generator = ChoroplethMapGenerator(
            _datasets(), output_dir=str(tmp_path), center=(37.7749, -122.4194), zoom=12
        )
        assert generator.center == (37.7749, -122.4194)
        assert generator.zoom == 12

    def test_generate_writes_html(self, tmp_path):
        generator = ChoroplethMapGenerator(_datasets(), output_dir=str(tmp_path))
        result = generator.generate(MetricSelection.INSPECTIONS, run_id="test")

        assert result.success
        assert result.html_path == os.path.join(str(tmp_path), "test_inspections_choropleth.html")
        assert os.path.exists(result.html_path)
        html = open(result.html_path).read()
        assert "Mission" in html
        assert "81.50" in html  # first legend threshold
        assert result.bounds == (80, 95)
        assert result.metadata["stats"]["matched"] == 2

    def test_generate_without_drawable_boundaries_is_not_success(self, tmp_path):
        boundaries = {"type": "FeatureCollection", "features": []}
        datasets = Datasets.from_json(BUSINESSES, AGGREGATES, boundaries)
        generator = ChoroplethMapGenerator(
            datasets, output_dir=str(tmp_path), center=(37.7749, -122.4194)
        )
        result = generator.generate(MetricSelection.INSPECTIONS, run_id="empty")

        assert not result.success
        assert os.path.exists(result.html_path)
        assert result.metadata["stats"]["total_boundaries"] == 0

    def test_generate_switches_widget_state(self, tmp_path):
        generator = ChoroplethMapGenerator(_datasets(), output_dir=str(tmp_path))
        result = generator.generate("violations", run_id="test")
        assert generator.widget.state_name == "ShowingViolations"
        assert result.bounds == (1.0, 4.0)
        assert "Average violation score" in result.legend_html

    def test_render_does_not_mutate_state(self, tmp_path):
        generator = ChoroplethMapGenerator(_datasets(), output_dir=str(tmp_path))
        state = generator.widget.state
        before = json.dumps(state.geojson, sort_keys=True)
        generator.render(state).get_root().render()
        assert json.dumps(state.geojson, sort_keys=True) == before

    def test_generate_all_writes_metadata(self, tmp_path):
        results = generate_choropleth_maps(_datasets(), output_dir=str(tmp_path), run_id="all")
        assert [r.metric for r in results] == ["inspections", "violations"]

        meta_path = tmp_path / "all_choropleth_metadata.json"
        assert meta_path.exists()
        meta = json.loads(meta_path.read_text())
        assert set(meta) == {"inspections", "violations"}
        assert meta["violations"]["bounds"] == [1.0, 4.0]
        assert len(meta["inspections"]["legend"]) == 9


# =============================================================================
# TestInspectionMap (public interface)
# =============================================================================


class TestInspectionMap:
    def test_end_to_end(self, tmp_path):
        events = []
        inspection_map = InspectionMap(
            businesses=BUSINESSES,
            aggregates=AGGREGATES,
            boundaries=BOUNDARIES,
            output_dir=str(tmp_path),
            on_event=events.append,
        )
        tooltip = inspection_map.hover("Mission")
        assert [r.business_name for r in tooltip.rows] == ["La Taqueria"]

        state = inspection_map.select_metric("violations")
        assert state.bounds == (1.0, 4.0)

        results = inspection_map.render(run_id="e2e")
        assert all(os.path.exists(r.html_path) for r in results)
        assert [e["type"] for e in events][:2] == ["hover", "metric_changed"]
