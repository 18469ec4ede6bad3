"""
Parse a single model completion into analysis text plus a raw chart.

The completion is only probabilistically JSON-shaped: models wrap the object in
prose or code fences, and sometimes send the chart as a JSON-encoded string.
Everything between the first "{" and the last "}" is taken as the payload.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from .errors import ChartDecodeWarning, MalformedResponse

logger = logging.getLogger(__name__)

ANALYSIS_FIELD = "analysis"
CHART_FIELD = "chart"


class ChartKind(Enum):
    ABSENT = "absent"
    OBJECT = "object"
    ENCODED = "encoded"


@dataclass(frozen=True)
class RawChart:
    """
    The chart field as received, before validation.

    OBJECT carries a dict, ENCODED carries the JSON string it was sent as.
    """

    kind: ChartKind
    value: Any = None

    @classmethod
    def absent(cls) -> "RawChart":
        return cls(ChartKind.ABSENT)

    @classmethod
    def from_field(cls, value: Any) -> "RawChart":
        if value is None:
            return cls.absent()
        if isinstance(value, dict):
            return cls(ChartKind.OBJECT, value)
        if isinstance(value, str):
            return cls(ChartKind.ENCODED, value)
        raise TypeError(f"chart field has unsupported type {type(value).__name__}")


@dataclass(frozen=True)
class ParsedResponse:
    analysis: str
    chart: RawChart
    warnings: List[ChartDecodeWarning] = field(default_factory=list)


def _extract_json_object(raw: str) -> Dict[str, Any]:
    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise MalformedResponse("Could not find a valid JSON object in the AI's response.")

    try:
        payload = json.loads(raw[start:end + 1])
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"The AI's response contained invalid JSON: {e}")

    if not isinstance(payload, dict):
        raise MalformedResponse("The AI's response contained invalid JSON: expected an object")
    return payload


def decode_chart(chart: RawChart) -> RawChart:
    """
    Resolve an ENCODED chart into an OBJECT one.

    Raises ChartDecodeWarning when the string is not a JSON object.
    """
    if chart.kind is not ChartKind.ENCODED:
        return chart
    try:
        decoded = json.loads(chart.value)
    except json.JSONDecodeError as e:
        raise ChartDecodeWarning(f"Failed to parse chart string: {e}")
    if decoded is None:
        return RawChart.absent()
    if not isinstance(decoded, dict):
        raise ChartDecodeWarning(f"Chart string decoded to {type(decoded).__name__}, expected an object")
    return RawChart(ChartKind.OBJECT, decoded)


def parse_response(raw: str) -> ParsedResponse:
    """
    Extract {analysis, chart} from a raw completion.

    Raises MalformedResponse when no JSON object can be read or the analysis
    field is not a string. Chart problems never fail the response: the chart
    becomes absent and a ChartDecodeWarning is recorded instead.
    """
    payload = _extract_json_object(raw)

    analysis = payload.get(ANALYSIS_FIELD, "")
    if not isinstance(analysis, str):
        raise MalformedResponse(
            f"The AI's response has an analysis field of the wrong type ({type(analysis).__name__})"
        )

    warnings: List[ChartDecodeWarning] = []
    try:
        chart = decode_chart(RawChart.from_field(payload.get(CHART_FIELD)))
    except (ChartDecodeWarning, TypeError) as e:
        warning = e if isinstance(e, ChartDecodeWarning) else ChartDecodeWarning(str(e))
        logger.warning(f"Dropping chart: {warning}")
        warnings.append(warning)
        chart = RawChart.absent()

    return ParsedResponse(analysis=analysis, chart=chart, warnings=warnings)
