"""
Dashboard Endpoints - HTTP routes for the environmental dashboard

Read endpoints expose the page state (display elements, charts, map,
drone surveys). Write endpoints are the browser's interactions: viewport
visibility reports and the chart/map selectors.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_dashboard_controller, get_service_container
from api.middleware.error_handler import (
    ChartNotFoundError,
    ElementNotFoundError,
    InvalidLayerError,
    InvalidPeriodError,
    InvalidVisibilityError,
)
from api.schemas.dashboard import (
    ChartResponse,
    ChartDatasetResponse,
    ElementListResponse,
    ElementResponse,
    MapLayerRequest,
    MapLayerResponse,
    MapResponse,
    NDVIRegionRequest,
    SurveyListResponse,
    SurveyResponse,
    TemperaturePeriodRequest,
    VisibilityReportRequest,
    VisibilityReportResponse,
)
from controllers.dashboard_controller import DashboardController
from dashboard.charts import ChartModel
from dashboard.map_overlays import layer_name
from dashboard.surveys import list_surveys, total_surveyed_area
from models.enums import ChartID, LogCategory
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


def _chart_response(chart: ChartModel, include_config: bool = False) -> ChartResponse:
    return ChartResponse(
        id=chart.chart_id.value,
        type=chart.config["type"],
        labels=list(chart.labels),
        datasets=[ChartDatasetResponse(label=d["label"], data=list(d["data"])) for d in chart.datasets],
        config=chart.to_dict()["config"] if include_config else None,
    )


# ============================================================================
# Display elements
# ============================================================================

@router.get(
    "/elements",
    response_model=ElementListResponse,
    summary="List display elements"
)
async def list_elements(
    group: str | None = None,
    services: ServiceContainer = Depends(get_service_container)
) -> ElementListResponse:
    """
    All display elements with their current text and style.

    **Query:** `group` narrows the list to one group (kpi, counter, reveal, ...).
    """
    elements = services.view.by_group(group) if group else services.view.all()
    return ElementListResponse(
        elements=[ElementResponse(**e.to_dict()) for e in elements],
        count=len(elements)
    )


@router.get(
    "/elements/{element_id}",
    response_model=ElementResponse,
    summary="Get display element"
)
async def get_element(
    element_id: str,
    services: ServiceContainer = Depends(get_service_container)
) -> ElementResponse:
    """
    **Errors:**
    - 404: Element not found
    """
    element = services.view.get(element_id)
    if element is None:
        raise ElementNotFoundError(element_id)
    return ElementResponse(**element.to_dict())


@router.post(
    "/elements/{element_id}/visibility",
    response_model=VisibilityReportResponse,
    summary="Report element visibility"
)
async def report_visibility(
    element_id: str,
    request: VisibilityReportRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> VisibilityReportResponse:
    """
    Viewport report from the browser. Fires the element's one-shot
    triggers (counter count-up, scroll reveal) whose threshold is reached.

    **Errors:**
    - 404: Element not found
    - 422: Ratio outside 0-1
    """
    if element_id not in services.view:
        raise ElementNotFoundError(element_id)

    try:
        fired = await services.visibility.report(element_id, request.ratio)
    except ValueError as e:
        raise InvalidVisibilityError(element_id, str(e))

    return VisibilityReportResponse(
        element_id=element_id,
        ratio=request.ratio,
        fired=fired,
        armed=services.visibility.is_armed(element_id)
    )


# ============================================================================
# Charts
# ============================================================================

@router.get(
    "/charts/{chart_id}",
    response_model=ChartResponse,
    summary="Get chart"
)
async def get_chart(
    chart_id: str,
    services: ServiceContainer = Depends(get_service_container)
) -> ChartResponse:
    """
    Labels, series and full Chart.js configuration of one chart.

    **Errors:**
    - 404: Chart not found
    """
    try:
        chart = services.charts[ChartID(chart_id)]
    except (ValueError, KeyError):
        raise ChartNotFoundError(chart_id, [c.value for c in services.charts])
    return _chart_response(chart, include_config=True)


@router.post(
    "/charts/temperature/period",
    response_model=ChartResponse,
    summary="Select temperature period"
)
async def select_temperature_period(
    request: TemperaturePeriodRequest,
    controller: DashboardController = Depends(get_dashboard_controller)
) -> ChartResponse:
    """
    Regenerate the temperature chart for the last `days` days.

    **Errors:**
    - 422: Period outside 1-365 days
    """
    try:
        chart = await controller.select_temperature_period(request.days)
    except ValueError as e:
        raise InvalidPeriodError(request.days, str(e))
    return _chart_response(chart)


@router.post(
    "/charts/ndvi/region",
    response_model=ChartResponse,
    summary="Select NDVI region"
)
async def select_ndvi_region(
    request: NDVIRegionRequest,
    controller: DashboardController = Depends(get_dashboard_controller)
) -> ChartResponse:
    """Show one region's NDVI series. Unknown regions show all regions."""
    chart = await controller.select_ndvi_region(request.region)
    return _chart_response(chart)


# ============================================================================
# Map
# ============================================================================

@router.get(
    "/map",
    response_model=MapResponse,
    summary="Get map"
)
async def get_map(
    services: ServiceContainer = Depends(get_service_container)
) -> MapResponse:
    """Map view, tile layer, overlays with popups and the selected layer."""
    return MapResponse(**services.map_model.to_dict())


@router.post(
    "/map/layer",
    response_model=MapLayerResponse,
    summary="Select map layer"
)
async def select_map_layer(
    request: MapLayerRequest,
    controller: DashboardController = Depends(get_dashboard_controller)
) -> MapLayerResponse:
    """
    Switch the map layer. A notification naming the new layer follows
    after the fade.

    **Errors:**
    - 422: Unknown layer
    """
    try:
        await controller.select_map_layer(request.layer)
    except ValueError:
        raise InvalidLayerError(request.layer)

    layer = controller.context.map.layer
    return MapLayerResponse(layer=layer.value, name=layer_name(layer))


# ============================================================================
# Drone surveys
# ============================================================================

@router.get(
    "/surveys",
    response_model=SurveyListResponse,
    summary="List drone surveys"
)
async def get_surveys() -> SurveyListResponse:
    surveys = list_surveys()
    return SurveyListResponse(
        surveys=[SurveyResponse(**s.to_dict()) for s in surveys],
        count=len(surveys),
        total_area_ha=total_surveyed_area()
    )
