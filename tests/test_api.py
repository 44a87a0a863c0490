"""
Tests for the REST API

Requests go through httpx's ASGI transport so route handlers run on the
test's event loop, next to the tasks they schedule.
"""

import contextlib

import httpx
import pytest
import pytest_asyncio

from api.dependencies import set_dashboard_controller, set_service_container
from api.main import create_app
from lifecycle.task_registry import TaskCategory, create_tracked_task

BASE = "/api/v1/dashboard"


@pytest_asyncio.fixture
async def client(services, controller):
    set_service_container(services)
    set_dashboard_controller(controller)
    await controller.start()

    transport = httpx.ASGITransport(app=create_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    set_service_container(None)
    set_dashboard_controller(None)


@pytest_asyncio.fixture
async def bare_client():
    set_service_container(None)
    set_dashboard_controller(None)
    transport = httpx.ASGITransport(app=create_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_health(bare_client):
    response = await bare_client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "painel-ambiental-api"


@pytest.mark.asyncio
async def test_services_unavailable_before_startup(bare_client):
    response = await bare_client.get(f"{BASE}/elements")
    assert response.status_code == 503

    response = await bare_client.post(f"{BASE}/map/layer", json={"layer": "ndvi"})
    assert response.status_code == 503
    assert response.json()["error"]["code"] == "SERVICE_UNAVAILABLE"


@pytest.mark.asyncio
async def test_list_elements(client):
    response = await client.get(f"{BASE}/elements")
    assert response.status_code == 200
    assert response.json()["count"] == 18

    response = await client.get(f"{BASE}/elements", params={"group": "kpi"})
    ids = [e["id"] for e in response.json()["elements"]]
    assert ids == ["avgTemp", "avgNDVI", "totalPrecipitation", "surveyedArea"]


@pytest.mark.asyncio
async def test_get_element(client):
    response = await client.get(f"{BASE}/elements/lastUpdate")

    assert response.status_code == 200
    assert response.json()["text"] == "28/09/2025 14:30"


@pytest.mark.asyncio
async def test_get_unknown_element(client):
    response = await client.get(f"{BASE}/elements/avgTmp")

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "ELEMENT_NOT_FOUND"
    assert error["details"] == {"element_id": "avgTmp"}


@pytest.mark.asyncio
async def test_report_visibility(client):
    response = await client.post(f"{BASE}/elements/statArea/visibility", json={"ratio": 0.7})

    assert response.status_code == 200
    assert response.json() == {"element_id": "statArea", "ratio": 0.7, "fired": 1, "armed": False}

    response = await client.post(f"{BASE}/elements/statArea/visibility", json={"ratio": 1.0})
    assert response.json()["fired"] == 0


@pytest.mark.asyncio
async def test_report_visibility_invalid(client):
    response = await client.post(f"{BASE}/elements/statArea/visibility", json={"ratio": 1.5})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert response.json()["validation_errors"][0]["field"] == "ratio"

    response = await client.post(f"{BASE}/elements/nowhere/visibility", json={"ratio": 0.5})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_chart(client):
    response = await client.get(f"{BASE}/charts/temperature")

    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "line"
    assert len(body["labels"]) == 30
    assert [d["label"] for d in body["datasets"]] == ["Temperatura Satélite", "Temperatura Drone"]
    assert body["config"]["options"]["responsive"] is True


@pytest.mark.asyncio
async def test_get_unknown_chart(client):
    response = await client.get(f"{BASE}/charts/wind")

    assert response.status_code == 404
    assert response.json()["error"]["details"]["valid_charts"] == ["temperature", "ndvi", "precipitation"]


@pytest.mark.asyncio
async def test_select_temperature_period(client):
    response = await client.post(f"{BASE}/charts/temperature/period", json={"days": 7})
    assert response.status_code == 200
    assert len(response.json()["labels"]) == 7
    assert response.json()["config"] is None

    response = await client.post(f"{BASE}/charts/temperature/period", json={"days": 400})
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_PERIOD"


@pytest.mark.asyncio
async def test_select_ndvi_region(client):
    response = await client.post(f"{BASE}/charts/ndvi/region", json={"region": "south"})
    assert response.json()["datasets"][0]["data"][0] == 0.60

    response = await client.post(f"{BASE}/charts/ndvi/region", json={"region": "atlantis"})
    assert response.status_code == 200
    assert response.json()["datasets"][0]["data"][0] == 0.65


@pytest.mark.asyncio
async def test_map(client):
    response = await client.get(f"{BASE}/map")

    assert response.status_code == 200
    assert len(response.json()["overlays"]) == 8
    assert response.json()["layer"] == "satellite"


@pytest.mark.asyncio
async def test_select_map_layer(client, services):
    response = await client.post(f"{BASE}/map/layer", json={"layer": "drone"})

    assert response.status_code == 200
    assert response.json() == {"layer": "drone", "name": "Levantamento com Drone"}
    assert services.map_model.layer.value == "drone"


@pytest.mark.asyncio
async def test_select_unknown_map_layer(client):
    response = await client.post(f"{BASE}/map/layer", json={"layer": "infrared"})

    assert response.status_code == 422
    assert "satellite" in response.json()["error"]["details"]["valid_layers"]


@pytest.mark.asyncio
async def test_surveys(client):
    response = await client.get(f"{BASE}/surveys")

    body = response.json()
    assert body["count"] == 3
    assert body["total_area_ha"] == 745
    assert body["surveys"][1]["name"] == "Monitoramento Erosão"


@pytest.mark.asyncio
async def test_task_introspection(client):
    response = await client.get("/api/v1/system/tasks/active")
    descriptions = [t["description"] for t in response.json()["tasks"]]
    assert any(d.startswith("Jitter refresh") for d in descriptions)

    response = await client.get("/api/v1/system/health")
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_failed_animation_degrades_health(client):
    async def broken():
        raise RuntimeError("formatter crashed")

    task = create_tracked_task(broken(), category=TaskCategory.ANIMATION, description="Count-up statArea")
    with contextlib.suppress(RuntimeError):
        await task

    body = (await client.get("/api/v1/system/health")).json()
    assert body["status"] == "degraded"
    assert body["tasks"]["failed"] == 1

    failed = (await client.get("/api/v1/system/tasks", params={"status": "failed"})).json()
    assert [t["description"] for t in failed["tasks"]] == ["Count-up statArea"]
    assert failed["tasks"][0]["error"] == "RuntimeError: formatter crashed"


@pytest.mark.asyncio
async def test_effective_config(client):
    body = (await client.get("/api/v1/system/config")).json()

    assert body["animation"]["steps"] == 5
    assert [m["element_id"] for m in body["jitter"]["metrics"]] == ["avgTemp", "avgNDVI"]
