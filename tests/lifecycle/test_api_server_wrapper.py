import asyncio
import socket

import pytest
import pytest_asyncio

from api.main import create_app
from api.socketio.server import create_socketio_server, wrap_app_with_socketio
from lifecycle.api_server_wrapper import APIServerWrapper
from lifecycle.handlers import APIServerShutdownHandler


def free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest_asyncio.fixture
async def api_wrapper():
    sio = create_socketio_server(["*"])
    app = wrap_app_with_socketio(create_app(), sio)
    return APIServerWrapper(app, host="127.0.0.1", port=free_port())


@pytest.mark.asyncio
async def test_start_and_stop(api_wrapper):
    task = asyncio.create_task(api_wrapper.start())
    await asyncio.sleep(0.2)

    assert api_wrapper.server is not None
    assert api_wrapper.is_running

    await api_wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)

    assert not api_wrapper.is_running


@pytest.mark.asyncio
async def test_stop_without_start(api_wrapper):
    # Should not crash
    await api_wrapper.stop()


@pytest.mark.asyncio
async def test_port_released_on_stop(api_wrapper):
    task = asyncio.create_task(api_wrapper.start())
    await asyncio.sleep(0.2)

    await api_wrapper.stop()
    await asyncio.wait_for(task, timeout=2.0)

    s = socket.socket()
    s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    s.bind(("127.0.0.1", api_wrapper.port))
    s.close()


@pytest.mark.asyncio
async def test_start_cancelled_externally(api_wrapper):
    task = asyncio.create_task(api_wrapper.start())
    await asyncio.sleep(0.1)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert not api_wrapper.is_running


@pytest.mark.asyncio
async def test_shutdown_handler_stops_server(api_wrapper):
    task = asyncio.create_task(api_wrapper.start())
    await asyncio.sleep(0.2)

    handler = APIServerShutdownHandler(api_wrapper)
    assert handler.shutdown_priority == 60
    await handler.shutdown()
    await asyncio.wait_for(task, timeout=2.0)

    assert api_wrapper.server is None
