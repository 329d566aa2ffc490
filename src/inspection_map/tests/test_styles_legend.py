"""Tests for the quantized color scale, legend and tooltip formatting."""

import pytest

from inspection_map.mapping.labeling import (
    LEGEND_MULTIPLIERS,
    TooltipModel,
    build_legend,
    format_legend_html,
    format_tooltip_html,
)
from inspection_map.mapping.styles import (
    BUCKET_COUNT,
    MISSING_COLOR,
    PALETTES,
    BoundaryStyle,
    build_color_scale,
    fill_color,
    get_boundary_style,
    get_palette,
)
from inspection_map.models.schemas import ScoredInspection

REDS = PALETTES["Reds"]


# =============================================================================
# TestColorScale
# =============================================================================


class TestColorScale:
    def test_palettes_have_nine_classes(self):
        for name, colors in PALETTES.items():
            assert len(colors) == BUCKET_COUNT, name

    def test_domain_endpoints(self):
        scale = build_color_scale((0, 90), REDS)
        assert scale.rgb_hex_str(0) == REDS[0]
        assert scale.rgb_hex_str(90) == REDS[-1]

    def test_uniform_buckets(self):
        scale = build_color_scale((0, 90), REDS)
        # Bucket width is 10: [0,10) -> 0, [10,20) -> 1, ...
        assert scale.rgb_hex_str(5) == REDS[0]
        assert scale.rgb_hex_str(10) == REDS[1]
        assert scale.rgb_hex_str(45) == REDS[4]
        assert scale.rgb_hex_str(89.9) == REDS[8]

    def test_out_of_domain_clamps(self):
        scale = build_color_scale((0, 90), REDS)
        assert scale.rgb_hex_str(-50) == REDS[0]
        assert scale.rgb_hex_str(500) == REDS[-1]

    def test_degenerate_domain_uses_first_color(self):
        scale = build_color_scale((50, 50), REDS)
        assert scale.rgb_hex_str(50) == REDS[0]

    def test_fill_color_missing_value(self):
        scale = build_color_scale((0, 90), REDS)
        assert fill_color(scale, None) == MISSING_COLOR
        assert fill_color(scale, None, missing_color="#000000") == "#000000"
        assert fill_color(scale, 45) == REDS[4]

    def test_unknown_palette(self):
        with pytest.raises(ValueError):
            get_palette("Rainbow")

    def test_other_palette(self):
        scale = build_color_scale((0, 9), get_palette("Blues"))
        assert scale.rgb_hex_str(0) == PALETTES["Blues"][0]


# =============================================================================
# TestBoundaryStyle
# =============================================================================


class TestBoundaryStyle:
    def test_to_leaflet(self):
        style = BoundaryStyle(fill_color="#fb6a4a", stroke_color="#fb6a4a")
        assert style.to_leaflet() == {
            "color": "#fb6a4a",
            "fillColor": "#fb6a4a",
            "weight": 3,
            "fillOpacity": 0.6,
        }

    def test_style_from_value(self):
        scale = build_color_scale((0, 90), REDS)
        style = get_boundary_style(scale, 85, weight=2, fill_opacity=0.5)
        assert style.fill_color == REDS[8]
        assert style.stroke_color == REDS[8]
        assert style.weight == 2
        assert style.fill_opacity == 0.5

    def test_neutral_style_for_missing(self):
        scale = build_color_scale((0, 90), REDS)
        assert get_boundary_style(scale, None).fill_color == MISSING_COLOR


# =============================================================================
# TestLegend
# =============================================================================


class TestLegend:
    def test_nine_thresholds_at_fixed_offsets(self):
        bounds = (80.0, 95.0)
        legend = build_legend(build_color_scale(bounds, REDS), bounds)
        assert len(legend) == len(LEGEND_MULTIPLIERS) == 9
        for entry, mult in zip(legend, LEGEND_MULTIPLIERS):
            assert entry.threshold == pytest.approx(80 + 15 * mult)

    def test_labels_two_decimals(self):
        bounds = (80.0, 95.0)
        legend = build_legend(build_color_scale(bounds, REDS), bounds)
        assert [e.label for e in legend] == [
            "81.50", "83.00", "84.50", "86.00", "87.50",
            "89.00", "90.50", "92.00", "93.50",
        ]

    def test_each_threshold_lands_in_its_own_bucket(self):
        bounds = (0.0, 90.0)
        legend = build_legend(build_color_scale(bounds, REDS), bounds)
        assert [e.color for e in legend] == list(REDS)

    def test_legend_html(self):
        bounds = (0.0, 90.0)
        legend = build_legend(build_color_scale(bounds, REDS), bounds)
        html = format_legend_html(legend, title="Average inspection score")
        assert "Average inspection score" in html
        assert "9.00" in html and "81.00" in html
        assert REDS[0] in html

    def test_empty_legend_html(self):
        assert format_legend_html([]) == ""


# =============================================================================
# TestTooltip
# =============================================================================


class TestTooltip:
    def _row(self, name, score):
        return ScoredInspection(business_id=name, business_name=name, score=score, date=1)

    def test_header_and_rows(self):
        tooltip = TooltipModel(
            neighborhood="Mission",
            rows=(self._row("La Taqueria", 90), self._row("Tartine", 87.5)),
        )
        html = format_tooltip_html(tooltip)
        assert html.startswith("<h1 class='chloropleth-tooltip-header'>Mission</h1>")
        assert "<tr><td>La Taqueria</td><td>90</td></tr>" in html
        assert "<td>87.5</td>" in html
        assert html.endswith("</table>")

    def test_empty_listing(self):
        html = format_tooltip_html(TooltipModel(neighborhood="SoMa"))
        assert html.endswith("<table></table>")

    def test_names_escaped(self):
        html = format_tooltip_html(
            TooltipModel(neighborhood="Mission", rows=(self._row("Fish & <Chips>", 70),))
        )
        assert "Fish &amp; &lt;Chips&gt;" in html
