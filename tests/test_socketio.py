"""
Tests for the Socket.IO bridge, using an in-memory stand-in for the server
"""

import asyncio

import pytest

from api.socketio.registry import register_socketio


class RecordingSocketIO:
    """Collects handlers and emitted messages like socketio.AsyncServer would."""

    def __init__(self):
        self.handlers = {}
        self.emitted = []

    def on(self, event):
        def decorator(fn):
            self.handlers[event] = fn
            return fn
        return decorator

    def event(self, fn):
        self.handlers[fn.__name__] = fn
        return fn

    async def emit(self, event, data=None, room=None):
        self.emitted.append((event, data, room))

    def messages(self, event):
        return [data for name, data, _room in self.emitted if name == event]


@pytest.fixture
def sio(services, controller):
    server = RecordingSocketIO()
    register_socketio(server, services, controller)
    return server


@pytest.mark.asyncio
async def test_connect_sends_snapshot(sio):
    await sio.handlers["connect"]("sid-1", {"REMOTE_ADDR": "127.0.0.1"})

    snapshot = sio.messages("dashboard:snapshot")[0]
    assert len(snapshot["elements"]) == 18
    assert [c["id"] for c in snapshot["charts"]] == ["temperature", "ndvi", "precipitation"]
    assert snapshot["map"]["layer"] == "satellite"
    assert ("tasks:all", {"tasks": []}, "sid-1") in sio.emitted


@pytest.mark.asyncio
async def test_view_changes_are_mirrored(sio, services):
    await services.view.set_text("avgTemp", "24.6")
    await services.view.set_style("mapContainer", opacity="0.7")

    assert sio.messages("display:update") == [{"id": "avgTemp", "text": "24.6"}]
    assert sio.messages("display:style") == [{"id": "mapContainer", "style": {"opacity": "0.7"}}]


@pytest.mark.asyncio
async def test_visibility_report_triggers_counter(sio, controller):
    await controller.start()

    reply = await sio.handlers["visibility:report"]("sid-1", {"id": "statFamilies", "ratio": 0.8})
    await asyncio.sleep(0.1)

    assert reply == {"id": "statFamilies", "fired": 1}
    texts = [m["text"] for m in sio.messages("display:update") if m["id"] == "statFamilies"]
    assert texts[-1] == "12"


@pytest.mark.asyncio
async def test_invalid_visibility_report(sio):
    await sio.handlers["visibility:report"]("sid-2", {"id": "statArea", "ratio": 3})

    event, data, room = sio.emitted[-1]
    assert event == "error"
    assert data["event"] == "visibility:report"
    assert room == "sid-2"


@pytest.mark.asyncio
async def test_map_select(sio):
    await sio.handlers["map:select"]("sid-1", {"layer": "temperature"})
    await asyncio.sleep(0.05)

    assert sio.messages("map:layer") == [{"layer": "temperature", "name": "Temperatura de Superfície"}]
    assert sio.messages("notification:show")[0]["message"] == "Camada alterada para: Temperatura de Superfície"


@pytest.mark.asyncio
async def test_map_select_unknown(sio):
    await sio.handlers["map:select"]("sid-1", {"layer": "infrared"})

    assert sio.messages("map:layer") == []
    assert sio.messages("error")[0]["event"] == "map:select"


@pytest.mark.asyncio
async def test_button_click_ripple(sio):
    await sio.handlers["button:click"](
        "sid-1", {"left": 0, "top": 0, "width": 80, "height": 40, "x": 40, "y": 20}
    )
    await asyncio.sleep(0.05)

    added = sio.messages("display:added")[0]
    assert added["id"] == "ripple-1"
    assert added["style"]["width"] == "80px"
    assert sio.messages("display:removed") == [{"id": "ripple-1"}]


@pytest.mark.asyncio
async def test_page_scroll_moves_hero(sio):
    await sio.handlers["page:scroll"]("sid-1", {"y": 300})

    assert sio.messages("display:style") == [{"id": "heroVisual", "style": {"transform": "translateY(-150px)"}}]


@pytest.mark.asyncio
async def test_card_hover(sio, services):
    await sio.handlers["card:hover"]("sid-1", {"id": "projectQuilombola", "hovered": True})

    style = sio.messages("display:style")[0]
    assert style["id"] == "projectQuilombolaOverlay"
    assert style["style"]["background"] == services.view.get("projectQuilombolaOverlay").style["background"]

    await sio.handlers["card:hover"]("sid-2", {"id": "projectQuilombola", "hovered": "yes"})
    await sio.handlers["card:hover"]("sid-2", {"id": "techSentinel", "hovered": False})
    assert [e["event"] for e in sio.messages("error")] == ["card:hover", "card:hover"]


@pytest.mark.asyncio
async def test_task_stats(sio, controller):
    await controller.start()
    await sio.handlers["tasks_get_stats"]("sid-3")

    stats = sio.messages("tasks.stats")[0]
    assert stats["active"] >= 1
    assert stats["failed"] == 0
