"""Abstract base class for renderers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from ..view.component import Component
from ..view.container import Region


class MarkerKind(Enum):
    EMBED = "embed"
    TAG = "tag"
    LINK = "link"


@dataclass(frozen=True)
class Marker:
    """A rendered element the view can make interactive."""

    kind: MarkerKind
    region: Region
    target: str


class BaseRenderer(ABC):
    """Abstract base class for note renderers."""

    @abstractmethod
    async def render_to_region(
        self,
        text: str,
        region: Region,
        source_path: str,
        component: Component,
    ) -> list[Marker]:
        """Render text into region and return the markers it produced."""
        pass
