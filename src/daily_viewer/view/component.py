"""Lifecycle owner for resources acquired while rendering."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Component:
    """Collects cleanup callbacks and child components.

    ``unload()`` runs every registered cleanup in reverse order and unloads
    children first. A component can be loaded again after unloading.
    """

    def __init__(self):
        self.loaded = False
        self._cleanups: list[Callable[[], None]] = []
        self._children: list["Component"] = []

    def load(self) -> None:
        self.loaded = True

    def register(self, cleanup: Callable[[], None]) -> None:
        self._cleanups.append(cleanup)

    def add_child(self, child: "Component") -> "Component":
        self._children.append(child)
        if self.loaded and not child.loaded:
            child.load()
        return child

    def remove_child(self, child: "Component") -> None:
        if child in self._children:
            self._children.remove(child)
        child.unload()

    def unload(self) -> None:
        for child in self._children:
            child.unload()
        self._children = []
        while self._cleanups:
            cleanup = self._cleanups.pop()
            try:
                cleanup()
            except Exception as e:
                logger.error(f"Cleanup failed during unload: {e}")
        self.loaded = False
