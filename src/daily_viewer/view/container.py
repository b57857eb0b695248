"""An ordered tree of regions that stands in for a rendered document."""

import inspect
import itertools
from collections.abc import Callable, Iterator
from typing import Any

ClickHandler = Callable[[], Any]

_region_ids = itertools.count(1)


class Region:
    """A node in the view tree.

    Element regions have a ``tag``; text regions have ``tag=None`` and only
    carry ``text``. Every region gets a process-wide unique ``id`` so that a
    web page can refer back to it.
    """

    def __init__(
        self,
        tag: str | None = "div",
        cls: str | list[str] | None = None,
        text: str | None = None,
        attrs: dict[str, str] | None = None,
    ):
        self.id = next(_region_ids)
        self.tag = tag
        self.classes: list[str] = []
        if cls:
            self.classes = cls.split() if isinstance(cls, str) else list(cls)
        self.text = text
        self.attrs: dict[str, str] = dict(attrs or {})
        self.children: list["Region"] = []
        self.parent: "Region | None" = None
        self._handlers: list[ClickHandler] = []

    def __repr__(self) -> str:
        if self.tag is None:
            return f"Region(text={self.text!r})"
        return f"Region({self.tag!r}, cls={self.classes!r}, children={len(self.children)})"

    # Tree manipulation

    def create_region(
        self,
        cls: str | list[str] | None = None,
        tag: str = "div",
        text: str | None = None,
        attrs: dict[str, str] | None = None,
    ) -> "Region":
        """Append a new child region and return it."""
        child = Region(tag=tag, cls=cls, text=text, attrs=attrs)
        self.append(child)
        return child

    def create_text(self, text: str) -> "Region":
        child = Region(tag=None, text=text)
        self.append(child)
        return child

    def append(self, child: "Region") -> None:
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)

    def empty(self) -> None:
        """Detach every child."""
        for child in self.children:
            child.parent = None
        self.children = []

    def remove(self) -> None:
        """Detach this region from its parent."""
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def replace_children(self, children: list["Region"]) -> None:
        """Swap in a new set of children in a single step."""
        self.empty()
        for child in list(children):
            self.append(child)

    def add_class(self, cls: str) -> None:
        if cls not in self.classes:
            self.classes.append(cls)

    def has_class(self, cls: str) -> bool:
        return cls in self.classes

    # Queries

    def walk(self) -> Iterator["Region"]:
        """Yield this region and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, region_id: int) -> "Region | None":
        for region in self.walk():
            if region.id == region_id:
                return region
        return None

    def find_all(self, cls: str) -> list["Region"]:
        return [r for r in self.walk() if r.has_class(cls)]

    def get_text(self) -> str:
        if self.tag is None:
            return self.text or ""
        return (self.text or "") + "".join(c.get_text() for c in self.children)

    # Events

    @property
    def clickable(self) -> bool:
        return bool(self._handlers)

    def on_click(self, handler: ClickHandler) -> Callable[[], None]:
        """Register a click handler and return a function that removes it."""
        self._handlers.append(handler)

        def off() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return off

    async def click(self) -> None:
        """Run the click handlers, awaiting any that are coroutines."""
        for handler in list(self._handlers):
            result = handler()
            if inspect.isawaitable(result):
                await result
