"""Lifespan management with event-based architecture for filedrop."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from filedrop.core.logger import LogIcon, logger
from filedrop.core.settings import settings as st


class State:
    """Resources created at startup, keyed by event name."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        object.__setattr__(self, "_data", {})

    def __getattr__(self, name: str) -> Any:
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"State has no attribute '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        self._data[name] = value

    def __contains__(self, name: str) -> bool:
        return name in self._data

    def __repr__(self) -> str:
        return f"State({sorted(self._data)})"

    def as_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def clear(self) -> None:
        self._data.clear()


class BaseEvent[T](ABC):
    """A resource created at startup and optionally released at shutdown."""

    name: str

    @abstractmethod
    async def startup(self) -> T: ...

    async def shutdown(self, instance: T) -> None:  # noqa: B027
        """Release ``instance``. No-op unless overridden."""


class Lifespan:
    """Runs registered events around the server lifetime.

    An instance is a Starlette ``lifespan``: the state it yields is copied into
    every ``request.state``.
    """

    def __init__(self) -> None:
        self._registered: list[tuple[type[BaseEvent[Any]], dict[str, Any]]] = []
        self._events: list[BaseEvent[Any]] = []
        self.state = State()

    def register(self, event_cls: type[BaseEvent[Any]], **kwargs: Any) -> "Lifespan":
        """Register an event class with its constructor kwargs. Returns self for chaining."""
        self._registered.append((event_cls, kwargs))
        return self

    async def startup(self) -> None:
        logger.info("Starting application lifespan", icon=LogIcon.START, version=st.API_VERSION)

        for event_cls, kwargs in self._registered:
            event = event_cls(**kwargs)
            setattr(self.state, event.name, await event.startup())
            self._events.append(event)
            logger.info(f"Event ready: {event.name}", icon=LogIcon.SUCCESS)

    async def shutdown(self) -> None:
        for event in reversed(self._events):
            if event.name in self.state:
                await event.shutdown(getattr(self.state, event.name))
        self._events.clear()
        self.state.clear()
        logger.info("Cleanup complete", icon=LogIcon.COMPLETE)

    @asynccontextmanager
    async def __call__(self, app: Any) -> AsyncIterator[dict[str, Any]]:
        await self.startup()
        try:
            yield self.state.as_dict()
        finally:
            await self.shutdown()
