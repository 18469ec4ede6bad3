"""
Tests for chart normalization and the Chart.js config.
"""

import pytest

from ltgd_agent.app.charts import CHART_COLORS, normalize_chart, to_chartjs
from ltgd_agent.app.parser import ChartKind, RawChart


def _chart(**overrides):
    chart = {
        "chartType": "line",
        "data": [
            {"Year": "2023", "Yield": 4.5, "Inflation": 3.4},
            {"Year": "2024", "Yield": 4.2, "Inflation": 2.9},
        ],
        "dataKeys": ["Yield", "Inflation"],
        "xAxisKey": "Year",
    }
    chart.update(overrides)
    return chart


def test_none_is_absent():
    assert normalize_chart(None) is None
    assert normalize_chart(RawChart.absent()) is None


def test_string_encoded_data_is_decoded():
    raw = {
        "chartType": "line",
        "data": '[{"Year":"2023","Yield":4.5}]',
        "dataKeys": ["Yield"],
        "xAxisKey": "Year",
    }
    spec = normalize_chart(raw)
    assert spec is not None
    assert spec.chart_type == "line"
    assert spec.data == [{"Year": "2023", "Yield": 4.5}]
    assert spec.data_keys == ["Yield"]
    assert spec.x_axis_key == "Year"


def test_valid_chart_keeps_point_order():
    spec = normalize_chart(_chart())
    assert [point["Year"] for point in spec.data] == ["2023", "2024"]


def test_encoded_chart_variant_is_resolved():
    raw = RawChart(ChartKind.ENCODED, '{"chartType": "bar", "data": [{"Y": "1", "V": 1}], "dataKeys": ["V"], "xAxisKey": "Y"}')
    spec = normalize_chart(raw)
    assert spec.chart_type == "bar"


@pytest.mark.parametrize("chart_type", ["pie", "Line", "BAR", None, 3])
def test_unknown_chart_type_is_dropped(chart_type):
    assert normalize_chart(_chart(chartType=chart_type)) is None


def test_point_missing_value_key_drops_whole_chart():
    chart = _chart(data=[
        {"Year": "2023", "Yield": 4.5, "Inflation": 3.4},
        {"Year": "2024", "Yield": 4.2},
    ])
    assert normalize_chart(chart) is None


def test_point_missing_category_key_drops_whole_chart():
    chart = _chart(data=[{"Yield": 4.5, "Inflation": 3.4}])
    assert normalize_chart(chart) is None


@pytest.mark.parametrize("overrides", [
    {"data": []},
    {"dataKeys": []},
    {"xAxisKey": ""},
    {"data": "not json"},
    {"data": '{"Year": "2023"}'},
    {"data": [{"Year": "2023", "Yield": None, "Inflation": 1}]},
])
def test_incomplete_chart_is_dropped(overrides):
    assert normalize_chart(_chart(**overrides)) is None


def test_missing_fields_are_dropped():
    assert normalize_chart({"chartType": "bar"}) is None


def test_duplicate_data_keys_are_collapsed():
    spec = normalize_chart(_chart(dataKeys=["Yield", "Yield", "Inflation"]))
    assert spec.data_keys == ["Yield", "Inflation"]


def test_wire_form_uses_camel_case():
    spec = normalize_chart(_chart())
    dumped = spec.model_dump(by_alias=True)
    assert set(dumped) == {"chartType", "data", "dataKeys", "xAxisKey"}


def test_chartjs_has_one_dataset_per_key():
    config = to_chartjs(normalize_chart(_chart()))
    assert config["type"] == "line"
    assert config["data"]["labels"] == ["2023", "2024"]
    datasets = config["data"]["datasets"]
    assert [ds["label"] for ds in datasets] == ["Yield", "Inflation"]
    assert datasets[0]["data"] == [4.5, 4.2]
    assert datasets[0]["borderColor"] == CHART_COLORS[0]
    assert datasets[1]["borderColor"] == CHART_COLORS[1]


def test_chartjs_colours_cycle():
    keys = [f"k{i}" for i in range(len(CHART_COLORS) + 1)]
    point = {"x": "a", **{key: i for i, key in enumerate(keys)}}
    spec = normalize_chart({"chartType": "bar", "data": [point], "dataKeys": keys, "xAxisKey": "x"})
    datasets = to_chartjs(spec)["data"]["datasets"]
    assert datasets[-1]["backgroundColor"] == CHART_COLORS[0]
    assert "tension" not in datasets[0]
