"""
Pydantic request/response models.

Rationale:
- Define simple, explicit contracts between the completion, the core and the frontend.
- Python attributes are snake_case; the wire form uses the camelCase names the
  chart renderer expects (chartType, data, dataKeys, xAxisKey).
- Results and conversation entries are frozen once built.
"""

from typing import Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# A chart cell: category labels are usually strings (e.g. a year), values are numbers.
DataValue = Union[StrictStr, StrictInt, StrictFloat]
DataPoint = Dict[str, DataValue]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ChartSpec(WireModel):
    chart_type: Literal["line", "bar"]
    data: List[DataPoint] = Field(min_length=1)
    data_keys: List[str] = Field(min_length=1)
    x_axis_key: str = Field(min_length=1)

    @field_validator("data_keys")
    @classmethod
    def _unique_keys(cls, keys: List[str]) -> List[str]:
        # dataKeys is a set; keep the first occurrence of each key
        if any(not key for key in keys):
            raise ValueError("dataKeys must not contain empty keys")
        return list(dict.fromkeys(keys))

    @model_validator(mode="after")
    def _check_points(self) -> "ChartSpec":
        required = [self.x_axis_key] + self.data_keys
        for index, point in enumerate(self.data):
            missing = [key for key in required if key not in point]
            if missing:
                raise ValueError(f"data point {index} is missing keys {missing}")
        return self


class Source(WireModel):
    uri: str = Field(min_length=1)
    title: str = Field(min_length=1)


class ReportResult(WireModel):
    analysis: str
    chart: Optional[ChartSpec] = None
    sources: List[Source] = Field(default_factory=list)


class CompletionRequest(WireModel):
    prompt: str
    system_instruction: str
    web_search: bool = True
    temperature: float = 0.2


class Completion(WireModel):
    text: Optional[str] = None
    # Raw citation candidates, each possibly missing uri/title
    citations: List[Dict[str, Optional[str]]] = Field(default_factory=list)


class ConversationEntry(WireModel):
    id: str
    role: Literal["user", "model"]
    text: Optional[str] = None
    chart: Optional[ChartSpec] = None
    sources: Optional[List[Source]] = None
    pending: bool = False


class PromptRequest(BaseModel):
    prompt: str


class ReportResponse(ReportResult):
    chartjs: Optional[Dict] = None
