"""RSS 2.0 / Atom document parser.

Built on ElementTree rather than a normalizing feed library because field
resolution follows a fixed, candidate-list driven lookup:

- ``prefix:tag`` finds a namespaced element (``dc:creator``, ``media:thumbnail``),
- ``parent.child`` finds a direct child of the first ``parent`` element,
- ``tag#attr`` reads an attribute (``enclosure#url``),
- for every field the candidates are tried in order and the last non-empty
  match wins, so later, more specific candidates override generic ones.
"""

import hashlib
import re
from itertools import islice
from xml.etree import ElementTree as ET

from feedkeep.exceptions import ParseError
from feedkeep.models.feed import FeedSource
from feedkeep.models.item import FeedItem, FeedSnapshot

ITEM_FIELDS: dict[str, tuple[str, ...]] = {
    "title": ("title",),
    "description": (
        "content",
        "content:encoded",
        "itunes:summary",
        "description",
        "summary",
        "media:description",
    ),
    "content": (
        "itunes:summary",
        "description",
        "summary",
        "media:description",
        "content",
        "content:encoded",
        "ns0:encoded",
    ),
    "category": ("category", "category#term"),
    "link": ("link", "link#href"),
    "creator": ("creator", "dc:creator", "author", "author.name"),
    "pub_date": ("pubDate", "published", "updated", "dc:date"),
    "enclosure": ("enclosure#url", "yt:videoId"),
    "enclosure_type": ("enclosure#type",),
    "image": (
        "enclosure#url",
        "media:content#url",
        "itunes:image#href",
        "media:thumbnail#url",
    ),
    "item_id": ("guid", "id"),
}

ITEM_TAGS = ("item", "entry")

VIDEO_FEED_MARKER = "youtube.com/feeds"
VIDEO_THUMBNAIL_URL = "https://i3.ytimg.com/vi/{video_id}/hqdefault.jpg"

_EDGE_SLASHES = re.compile(r"^/|/$")


def item_hash(title: str, folder: str, link: str) -> str:
    """Content hash used as the secondary identity of an item."""
    return hashlib.md5(f"{title}{folder}{link}".encode("utf-8")).hexdigest()


class _Document:
    """Parsed XML tree plus the namespace prefixes it declared."""

    def __init__(self, root: ET.Element, declarations: list[tuple[str, str]]):
        self.root = root
        self._prefix_by_uri: dict[str, str] = {}
        self._uris_by_prefix: dict[str, set[str]] = {}
        self._default_uris: set[str] = set()

        for prefix, uri in declarations:
            if not prefix:
                self._default_uris.add(uri)
                continue
            self._prefix_by_uri.setdefault(uri, prefix)
            self._uris_by_prefix.setdefault(prefix, set()).add(uri)

    @classmethod
    def from_string(cls, raw_content: str) -> "_Document":
        """Parse a document, collecting namespace declarations on the way.

        Raises:
            ET.ParseError: On malformed XML.
        """
        parser = ET.XMLPullParser(events=("start", "start-ns"))
        root: ET.Element | None = None
        declarations: list[tuple[str, str]] = []

        parser.feed(raw_content.lstrip("\ufeff \t\r\n"))
        parser.close()
        for event, payload in parser.read_events():
            if event == "start-ns":
                declarations.append(payload)
            elif root is None:
                root = payload

        if root is None:
            raise ET.ParseError("no element found")
        return cls(root, declarations)

    def qualified_name(self, element: ET.Element) -> str:
        """Tag name as written in the document, e.g. ``dc:creator``."""
        tag = element.tag
        if not isinstance(tag, str) or not tag.startswith("{"):
            return tag
        uri, local = tag[1:].split("}", 1)
        if uri in self._default_uris:
            return local
        prefix = self._prefix_by_uri.get(uri)
        return f"{prefix}:{local}" if prefix else local

    def _matches(self, element: ET.Element, name: str) -> bool:
        if ":" in name:
            prefix, local = name.split(":", 1)
            for uri in self._uris_by_prefix.get(prefix, ()):
                if element.tag == f"{{{uri}}}{local}":
                    return True
        return self.qualified_name(element) == name

    def find(self, scope: ET.Element, name: str, include_self: bool = False) -> ET.Element | None:
        """First element called ``name`` below ``scope`` in document order."""
        if "." in name and ":" not in name:
            parent_name, child_name = name.split(".", 1)
            parent = self.find(scope, parent_name, include_self)
            if parent is None:
                return None
            found = None
            for child in parent:
                if self._matches(child, child_name):
                    found = child
            return found

        candidates = scope.iter() if include_self else islice(scope.iter(), 1, None)
        for element in candidates:
            if self._matches(element, name):
                return element
        return None

    def elements(self, name: str) -> list[ET.Element]:
        return [el for el in self.root.iter() if self._matches(el, name)]

    def lookup(self, scope: ET.Element, name: str, include_self: bool = False) -> str:
        """Resolve one candidate name to a string ("" when absent)."""
        if "#" in name:
            element_name, attribute = name.split("#", 1)
            element = self.find(scope, element_name, include_self)
            if element is None:
                return ""
            return (element.get(attribute) or "").strip()

        element = self.find(scope, name, include_self)
        if element is None:
            return ""
        return _node_text(element)

    def content(self, scope: ET.Element, names: tuple[str, ...], include_self: bool = False) -> str:
        """Resolve a field from its candidates; the last non-empty one wins."""
        value = ""
        for name in names:
            candidate = self.lookup(scope, name, include_self)
            if candidate:
                value = candidate
        return value


def _node_text(element: ET.Element) -> str:
    """Text of an element, or the markup inside its first child element."""
    if element.text and element.text.strip():
        return element.text.strip()
    if len(element):
        first = element[0]
        inner = (first.text or "") + "".join(
            ET.tostring(child, encoding="unicode") for child in first
        )
        return inner.strip()
    return ""


class FeedDocumentParser:
    """Parser for RSS 2.0 and Atom documents.

    Pure: the result depends only on the raw document and the feed source.
    """

    def parse(self, raw_content: str, source: FeedSource) -> FeedSnapshot:
        """Parse a raw feed document into a snapshot.

        Args:
            raw_content: Raw XML string.
            source: The configured feed the document belongs to.

        Returns:
            FeedSnapshot with items in document order (may be empty).

        Raises:
            ParseError: On malformed XML, or when the document has neither a
                title nor any item/entry elements.
        """
        try:
            doc = _Document.from_string(raw_content)
        except ET.ParseError as e:
            raise ParseError(source.name, f"Malformed XML: {e}") from e

        raw_items = [el for tag in ITEM_TAGS for el in doc.elements(tag)]
        title = doc.content(doc.root, ("title",), include_self=True)
        if not title and not raw_items:
            raise ParseError(source.name, "invalid document")

        language = doc.content(doc.root, ("language",), include_self=True)[:2]

        items: list[FeedItem] = []
        for element in raw_items:
            item = self._parse_item(doc, element, source, language)
            if item:
                items.append(item)

        image = doc.content(doc.root, ("image", "image.url", "icon"), include_self=True)

        return FeedSnapshot(
            name=source.name,
            folder=source.folder,
            title=title,
            subtitle=doc.content(doc.root, ("subtitle",), include_self=True),
            link=doc.content(doc.root, ("link", "link#href"), include_self=True),
            # Some feeds (reddit) wrap image URLs in slashes
            image=_EDGE_SLASHES.sub("", image),
            description=doc.content(doc.root, ("description",), include_self=True),
            language=language,
            items=items,
        )

    def _parse_item(
        self,
        doc: _Document,
        element: ET.Element,
        source: FeedSource,
        language: str,
    ) -> FeedItem | None:
        """Build one item; entries without a title are skipped."""
        fields = {name: doc.content(element, names) for name, names in ITEM_FIELDS.items()}
        if not fields["title"]:
            return None

        if not fields["image"] and VIDEO_FEED_MARKER in source.url:
            video_id = self._video_id(fields["item_id"], fields["enclosure"])
            if video_id:
                fields["image"] = VIDEO_THUMBNAIL_URL.format(video_id=video_id)

        return FeedItem(
            **fields,
            hash=item_hash(fields["title"], source.folder, fields["link"]),
            language=language,
            folder=source.folder,
            feed=source.name,
            read=False,
            favorite=False,
            created=False,
            visited=False,
        )

    def _video_id(self, item_id: str, enclosure: str) -> str:
        """Video id from ``yt:video:<id>`` or the ``yt:videoId`` element."""
        parts = item_id.split(":")
        if len(parts) > 2 and parts[2]:
            return parts[2]
        return enclosure
