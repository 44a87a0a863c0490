"""What the ShutdownCoordinator expects from a component it shuts down."""

from typing import Protocol


class IShutdownHandler(Protocol):
    """
    ``shutdown()`` is awaited once, highest ``shutdown_priority`` first:
    the dashboard (80) stops its timers before the API server (60) goes
    down, and leftover tasks are cancelled last (30).
    """

    @property
    def shutdown_priority(self) -> int: ...

    async def shutdown(self) -> None: ...
