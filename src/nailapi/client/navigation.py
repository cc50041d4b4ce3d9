import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    def navigate(self, route_name: str) -> None: ...


class NavigationTarget(Protocol):
    """A mounted navigation container."""

    def is_ready(self) -> bool: ...

    def navigate(self, route_name: str, params: Any = None) -> None: ...


class NavigationRef:
    """
    Navigator that forwards to a navigation container once one is mounted.

    Safe to call before the container exists: the call is dropped with a
    warning instead of raising.
    """

    def __init__(self, target: NavigationTarget | None = None):
        self._target = target

    def set_target(self, target: NavigationTarget | None) -> None:
        self._target = target

    def is_ready(self) -> bool:
        return self._target is not None and self._target.is_ready()

    def navigate(self, route_name: str, params: Any = None) -> None:
        if self._target is not None and self._target.is_ready():
            self._target.navigate(route_name, params)
        else:
            logger.warning(f"Navigation is not ready; dropping navigation to {route_name!r}")
