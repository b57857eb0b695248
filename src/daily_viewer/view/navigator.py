"""Link navigation requested by clicks in the view."""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

TAG_PREFIX = "tag:"


class LinkNavigator(Protocol):
    def open_reference(self, identifier: str, source_context: str, new_pane: bool) -> None:
        """Open a note, attachment or ``tag:<name>`` search."""
        ...


@dataclass(frozen=True)
class NavigationRequest:
    identifier: str
    source_context: str = ""
    new_pane: bool = False

    @property
    def tag(self) -> str | None:
        """Tag name for ``tag:`` searches, otherwise None."""
        if self.identifier.startswith(TAG_PREFIX):
            return self.identifier[len(TAG_PREFIX) :]
        return None


class NavigationQueue:
    """Navigator that queues requests for the hosting surface to act on."""

    def __init__(self, maxlen: int = 100):
        self._requests: deque[NavigationRequest] = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._requests)

    def open_reference(self, identifier: str, source_context: str = "", new_pane: bool = False) -> None:
        logger.info(f"Open {identifier!r} from {source_context or '<view>'}")
        self._requests.append(NavigationRequest(identifier, source_context, new_pane))

    def pop(self) -> NavigationRequest | None:
        """Return the most recent request and discard older ones."""
        if not self._requests:
            return None
        latest = self._requests.pop()
        self._requests.clear()
        return latest

    @property
    def history(self) -> list[NavigationRequest]:
        return list(self._requests)
