"""
Chart normalization and render config.

Rationale:
- A chart is an enhancement, not essential content: anything invalid degrades
  to "no chart" instead of failing the report.
- Partial charts are never produced (a missing key would mislead the axes).
- The Chart.js config is built DETERMINISTICALLY from a validated ChartSpec.
"""

import json
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from .errors import ChartDecodeWarning
from .parser import ChartKind, RawChart, decode_chart
from .schemas import ChartSpec

logger = logging.getLogger(__name__)

# Series colour by value-key index (cycled)
CHART_COLORS = ["#22d3ee", "#a5f3fc", "#06b6d4", "#0891b2", "#0e7490"]


def normalize_chart(raw: Union[RawChart, Dict[str, Any], None]) -> Optional[ChartSpec]:
    """
    Turn a loosely-typed chart description into a validated ChartSpec, or None.

    Accepts the parser's RawChart variant, a plain dict, or None. Chart data may
    arrive as a list of points or as a JSON string encoding that list.
    Never raises.
    """
    if isinstance(raw, RawChart):
        try:
            raw = decode_chart(raw)
        except ChartDecodeWarning as e:
            logger.warning(f"Dropping chart: {e}")
            return None
        raw = raw.value if raw.kind is ChartKind.OBJECT else None

    if raw is None:
        return None
    if not isinstance(raw, dict):
        logger.warning(f"Dropping chart: expected an object, got {type(raw).__name__}")
        return None

    chart = dict(raw)
    data = chart.get("data")
    if isinstance(data, str):
        try:
            chart["data"] = json.loads(data)
        except json.JSONDecodeError as e:
            logger.warning(f"Dropping chart: failed to parse chart data string: {e}")
            return None

    try:
        return ChartSpec.model_validate(chart)
    except ValidationError as e:
        logger.warning(f"Dropping chart: {e.error_count()} validation error(s): {e.errors()[0]['msg']}")
        return None


def to_chartjs(spec: ChartSpec) -> Dict[str, Any]:
    """
    Convert a ChartSpec into a Chart.js configuration for the frontend.

    Labels come from the category key; one dataset per value key, coloured by
    the key's index so a key keeps its colour across re-renders.
    """
    labels = [point[spec.x_axis_key] for point in spec.data]

    datasets = []
    for index, key in enumerate(spec.data_keys):
        color = CHART_COLORS[index % len(CHART_COLORS)]
        dataset = {
            "label": key,
            "data": [point[key] for point in spec.data],
            "borderColor": color,
            "backgroundColor": color,
        }
        if spec.chart_type == "line":
            dataset["tension"] = 0.4
            dataset["pointRadius"] = 4
            dataset["pointHoverRadius"] = 6
        datasets.append(dataset)

    return {
        "type": spec.chart_type,
        "data": {
            "labels": labels,
            "datasets": datasets,
        },
        "options": {
            "scales": {
                "y": {
                    "beginAtZero": False
                }
            }
        },
    }
