"""
Dashboard schemas - Pydantic models for dashboard requests/responses
Includes: display elements, visibility reports, charts, map and surveys
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ElementResponse(BaseModel):
    """One display element as the browser mirrors it"""
    id: str = Field(description="Element identifier")
    text: str = Field(description="Current text content")
    group: str = Field(description="Logical group: kpi, counter, reveal, status, ...")
    style: Dict[str, str] = Field(default_factory=dict, description="Inline style properties")


class ElementListResponse(BaseModel):
    elements: List[ElementResponse]
    count: int


class VisibilityReportRequest(BaseModel):
    """Viewport report from the browser"""
    ratio: float = Field(
        ge=0.0,
        le=1.0,
        description="Visible fraction of the element, 0-1"
    )


class VisibilityReportResponse(BaseModel):
    element_id: str
    ratio: float
    fired: int = Field(description="Number of one-shot triggers fired by this report")
    armed: bool = Field(description="Whether triggers remain armed for the element")


class ChartDatasetResponse(BaseModel):
    label: str
    data: List[float]


class ChartResponse(BaseModel):
    id: str
    type: str = Field(description="Chart.js chart type")
    labels: List[str]
    datasets: List[ChartDatasetResponse]
    config: Optional[Dict[str, Any]] = Field(None, description="Full Chart.js configuration")


class TemperaturePeriodRequest(BaseModel):
    """Temperature chart period selection"""
    days: int = Field(description="Number of days to show: 7, 30, 90 or 365")


class NDVIRegionRequest(BaseModel):
    """NDVI chart region selection (unknown regions show all)"""
    region: str = Field(description="all, north, south or center")


class MapLayerRequest(BaseModel):
    layer: str = Field(description="satellite, ndvi, temperature or drone")


class MapLayerResponse(BaseModel):
    layer: str
    name: str = Field(description="Display name of the layer")


class MapResponse(BaseModel):
    center: List[float]
    zoom: int
    tiles: Dict[str, str]
    layer: str
    layer_name: str
    overlays: List[Dict[str, Any]]


class SurveyResponse(BaseModel):
    id: int
    name: str
    area_ha: int
    resolution_cm: int
    date: str
    ndvi: float
    coverage: str


class SurveyListResponse(BaseModel):
    surveys: List[SurveyResponse]
    count: int
    total_area_ha: int
