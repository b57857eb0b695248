"""The daily notes view: aggregation, ordering and refresh lifecycle."""

import logging
from enum import Enum
from pathlib import PurePosixPath

from ..config import Config, ConfigProvider
from ..matching.matcher import aggregate
from ..matching.pattern import DatePattern
from ..rendering.base import BaseRenderer, Marker, MarkerKind
from ..storage.models import DatedDocument, Document
from ..storage.vault import DocumentStore
from .component import Component
from .container import Region
from .navigator import TAG_PREFIX, LinkNavigator

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "bmp", "svg", "webp", "avif"}


class ViewState(Enum):
    CLOSED = "closed"
    OPENING = "opening"
    READY = "ready"


class DailyView:
    """Keeps a region tree in sync with the vault's dated notes."""

    VIEW_TYPE = "daily-viewer-view"
    DISPLAY_TEXT = "Daily Viewer"

    def __init__(
        self,
        store: DocumentStore,
        renderer: BaseRenderer,
        navigator: LinkNavigator,
        config_provider: ConfigProvider,
    ):
        self.store = store
        self.renderer = renderer
        self.navigator = navigator
        self.config_provider = config_provider

        self.state = ViewState.CLOSED
        self.component = Component()
        self.root: Region | None = None
        self.content: Region | None = None
        self.entries: list[DatedDocument] = []

        self._generation = 0
        self._render_component: Component | None = None
        self._unsubscribe = None

    def get_view_type(self) -> str:
        return self.VIEW_TYPE

    def get_display_text(self) -> str:
        return self.DISPLAY_TEXT

    @property
    def generation(self) -> int:
        return self._generation

    async def open(self) -> None:
        """Build the header and content region, then render the notes."""
        if self.state is not ViewState.CLOSED:
            return
        self.state = ViewState.OPENING
        self.component.load()

        self.root = Region(cls="daily-viewer")
        header = self.root.create_region("daily-viewer-header")
        header.create_region(tag="h4", text="Daily Notes")
        refresh_button = header.create_region(
            ["daily-refresh-button", "clickable-icon"],
            tag="button",
            attrs={"aria-label": "Refresh", "data-icon": "refresh-cw"},
        )
        self.component.register(refresh_button.on_click(self.reload))
        self.content = self.root.create_region("daily-viewer-content")

        self._unsubscribe = self.config_provider.subscribe(self._on_config_change)
        try:
            await self.refresh()
        finally:
            # close() may have run while the first refresh was suspended
            if self.state is ViewState.OPENING:
                self.state = ViewState.READY
        logger.info(f"Opened daily view with {len(self.entries)} notes")

    async def close(self) -> None:
        """Release subscriptions and detach the rendered tree."""
        if self.state is ViewState.CLOSED:
            return
        # Any refresh still in flight must not touch the view afterwards.
        self._generation += 1
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        self.component.unload()
        self._render_component = None
        if self.content:
            self.content.empty()
        if self.root:
            self.root.empty()
        self.root = None
        self.content = None
        self.entries = []
        self.state = ViewState.CLOSED
        logger.info("Closed daily view")

    async def reload(self) -> list[DatedDocument]:
        """Explicit user reload from the refresh button."""
        return await self.refresh()

    async def _on_config_change(self, config: Config) -> None:
        await self.refresh()

    async def refresh(self) -> list[DatedDocument]:
        """Re-list, filter, sort and render the dated notes.

        Rendering goes into a detached staging region; the content region is
        only touched once every entry is ready, and only if no newer refresh
        has started in the meantime.
        """
        if self.state is ViewState.CLOSED or self.content is None:
            logger.warning("Refresh requested on a closed view")
            return []

        self._generation += 1
        generation = self._generation

        config = self.config_provider.config
        pattern = config.pattern
        try:
            documents = await self.store.list_documents(config.extension)
            # One listing of every file per refresh, for resolving embeds
            files = await self.store.list_files()
        except Exception as e:
            logger.warning(f"Failed to list vault documents: {e}")
            return []
        dated = aggregate(documents, pattern, config.sort_order)
        if generation != self._generation:
            logger.debug(f"Refresh {generation} superseded while listing")
            return dated

        if not pattern.has_date_tokens:
            logger.warning(f"Date format {config.date_format!r} has no date tokens")

        staging = Region(cls="daily-viewer-content")
        render_component = Component()
        render_component.load()

        for entry in dated:
            await self._render_entry(entry, pattern, staging, render_component, files)
            if generation != self._generation:
                logger.debug(f"Refresh {generation} superseded while rendering")
                render_component.unload()
                return dated

        self.content.replace_children(staging.children)
        previous = self._render_component
        self._render_component = self.component.add_child(render_component)
        if previous is not None:
            self.component.remove_child(previous)
        self.entries = dated

        logger.debug(f"Refresh {generation} rendered {len(dated)} notes")
        return dated

    async def _render_entry(
        self,
        entry: DatedDocument,
        pattern: DatePattern,
        parent: Region,
        component: Component,
        files: list[Document],
    ) -> None:
        document = entry.document
        file_container = parent.create_region(
            "daily-file-container", attrs={"data-path": document.path}
        )

        header = file_container.create_region(["daily-header-container", "daily-header-flex"])
        header.create_region(tag="h2", text=pattern.format(entry.key))
        link_button = header.create_region(
            ["daily-link-button", "clickable-icon"],
            tag="button",
            attrs={"aria-label": "Open note", "data-icon": "link"},
        )
        component.register(
            link_button.on_click(
                lambda: self.navigator.open_reference(document.basename, "", True)
            )
        )

        content = file_container.create_region("daily-content")
        markdown_region = content.create_region("daily-markdown")
        try:
            text = await self.store.read_content(document)
            markers = await self.renderer.render_to_region(
                text, markdown_region, document.path, component
            )
        except Exception as e:
            logger.warning(f"Failed to render {document.path}: {e}")
            markdown_region.empty()
            markdown_region.create_region("daily-error", text="Unable to load this note.")
            return

        for marker in markers:
            self._augment(marker, document.path, component, files)

    def _augment(
        self, marker: Marker, source_path: str, component: Component, files: list[Document]
    ) -> None:
        """Wire click-through onto a rendered marker."""
        if marker.kind is MarkerKind.TAG:
            identifier = f"{TAG_PREFIX}{marker.target}"
            component.register(
                marker.region.on_click(
                    lambda: self.navigator.open_reference(identifier, "", True)
                )
            )
            return

        if marker.kind is MarkerKind.LINK:
            target = marker.target
            component.register(
                marker.region.on_click(
                    lambda: self.navigator.open_reference(target, source_path, False)
                )
            )
            return

        linked = self.store.resolve_link(
            marker.target, source_path, self.config_provider.config.extension, files=files
        )
        if linked is None:
            return

        clickable = marker.region
        if linked.extension.lower() in IMAGE_EXTENSIONS:
            clickable = marker.region.create_region(
                tag="img",
                attrs={
                    "src": self.store.resource_path(linked),
                    "data-path": linked.path,
                    "alt": marker.region.attrs.get("alt", PurePosixPath(linked.path).name),
                },
            )
        elif not marker.region.children:
            marker.region.create_text(linked.basename)

        component.register(
            clickable.on_click(
                lambda: self.navigator.open_reference(linked.path, source_path, True)
            )
        )
