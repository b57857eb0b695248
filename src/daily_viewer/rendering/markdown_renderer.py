"""Render Obsidian-flavoured markdown into view regions."""

import re
from urllib.parse import urlparse

import markdown
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from ..view.component import Component
from ..view.container import Region
from .base import BaseRenderer, Marker, MarkerKind

SKIP_PARENTS = {"code", "pre", "a", "script", "style"}

# Raw HTML in a note is copied into the view, minus anything that runs code
DROPPED_TAGS = {
    "script", "style", "iframe", "frame", "frameset", "object", "embed",
    "applet", "base", "link", "meta", "form",
}
URL_ATTRS = {"href", "src", "action", "formaction", "xlink:href", "poster", "cite", "background"}
SAFE_SCHEMES = {"", "http", "https", "mailto"}
ATTR_NAME = re.compile(r"^[A-Za-z][\w:.-]*$")
URL_NOISE = re.compile(r"[\x00-\x20]")


class MarkdownRenderer(BaseRenderer):
    """Render markdown with Python-Markdown, then mark wiki syntax.

    ``![[file]]`` becomes ``span.internal-embed``, ``[[note|alias]]`` becomes
    ``a.internal-link`` and ``#tag`` becomes ``a.tag``. Text inside code
    and existing links is left alone.
    """

    WIKI_SYNTAX = re.compile(
        r"(?P<embed>!)?\[\[(?P<target>[^\[\]|]+)(?:\|(?P<alias>[^\[\]]+))?\]\]"
        r"|(?<![\w#/])#(?P<tag>[A-Za-z_][\w/-]*)"
    )
    # "#tag" at the start of a line is a tag, not a heading
    LINE_START_TAG = re.compile(r"^#(?=[^\s#])", re.MULTILINE)
    FENCE = re.compile(r"^(`{3,}|~{3,})")

    def __init__(self, extensions: list[str] | None = None):
        self.extensions = extensions or ["fenced_code", "tables", "sane_lists"]

    async def render_to_region(
        self,
        text: str,
        region: Region,
        source_path: str,
        component: Component,
    ) -> list[Marker]:
        html = markdown.markdown(self._protect_line_tags(text), extensions=self.extensions)
        soup = BeautifulSoup(html, "html.parser")
        self._mark_wiki_syntax(soup)

        markers: list[Marker] = []
        for node in list(soup.contents):
            self._convert(node, region, markers)

        component.register(region.empty)
        return markers

    def _protect_line_tags(self, text: str) -> str:
        """Escape line-initial tags outside fenced code blocks."""
        lines = []
        fence = None
        for line in text.split("\n"):
            found = self.FENCE.match(line)
            if fence is None and found:
                fence = found.group(1)
            elif fence is not None:
                # fenced_code closes a block only on the exact opening fence
                if line.rstrip(" ") == fence:
                    fence = None
            else:
                line = self.LINE_START_TAG.sub(r"\\#", line)
            lines.append(line)
        return "\n".join(lines)

    def _mark_wiki_syntax(self, soup: BeautifulSoup) -> None:
        for node in list(soup.find_all(string=True)):
            if isinstance(node, Comment):
                continue
            if any(parent.name in SKIP_PARENTS for parent in node.parents):
                continue

            text = str(node)
            pieces: list[NavigableString | Tag] = []
            pos = 0
            for found in self.WIKI_SYNTAX.finditer(text):
                if found.start() > pos:
                    pieces.append(NavigableString(text[pos : found.start()]))
                pieces.append(self._wiki_element(soup, found))
                pos = found.end()
            if not pieces:
                continue
            if pos < len(text):
                pieces.append(NavigableString(text[pos:]))
            node.replace_with(*pieces)

    def _wiki_element(self, soup: BeautifulSoup, found: re.Match) -> Tag:
        if found.group("tag"):
            name = found.group("tag")
            element = soup.new_tag("a", attrs={"class": "tag", "href": f"#{name}"})
            element.string = f"#{name}"
            return element

        target = found.group("target").strip()
        alias = (found.group("alias") or "").strip()
        if found.group("embed"):
            return soup.new_tag(
                "span",
                attrs={"class": "internal-embed", "src": target, "alt": alias or target},
            )
        element = soup.new_tag(
            "a", attrs={"class": "internal-link", "data-href": target, "href": target}
        )
        element.string = alias or target
        return element

    def _convert(self, node, parent: Region, markers: list[Marker]) -> None:
        """Copy a soup node and its descendants into the region tree."""
        if isinstance(node, Comment):
            return
        if isinstance(node, NavigableString):
            parent.create_text(str(node))
            return

        if node.name.lower() in DROPPED_TAGS:
            return

        attrs = {
            key: " ".join(value) if isinstance(value, list) else value
            for key, value in node.attrs.items()
            if key != "class"
        }
        region = parent.create_region(
            cls=node.get("class"), tag=node.name, attrs=self._safe_attrs(attrs)
        )

        if region.has_class("internal-embed"):
            markers.append(Marker(MarkerKind.EMBED, region, attrs.get("src", "")))
        elif region.has_class("tag"):
            markers.append(Marker(MarkerKind.TAG, region, node.get_text().lstrip("#")))
        elif region.has_class("internal-link"):
            markers.append(Marker(MarkerKind.LINK, region, attrs.get("data-href", "")))

        for child in list(node.children):
            self._convert(child, region, markers)

    def _safe_attrs(self, attrs: dict[str, str]) -> dict[str, str]:
        """Drop event handlers, inline styles and script URLs."""
        safe = {}
        for key, value in attrs.items():
            name = key.lower()
            if not ATTR_NAME.match(key) or name.startswith("on") or name == "style":
                continue
            if name in URL_ATTRS and not self._safe_url(value):
                continue
            safe[key] = value
        return safe

    @staticmethod
    def _safe_url(value: str) -> bool:
        try:
            scheme = urlparse(URL_NOISE.sub("", value)).scheme
        except ValueError:
            return False
        return scheme in SAFE_SCHEMES
