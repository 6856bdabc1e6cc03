"""Test configuration and fixtures."""

import asyncio
import tempfile
from pathlib import Path

import pytest

from feedkeep.exceptions import FetchError, StorageError
from feedkeep.models.feed import FeedSource
from feedkeep.models.item import FeedItem, FeedSnapshot, PersistedStore


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def temp_db_path():
    """Create a temporary database path for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def source():
    return FeedSource(name="Example", url="https://example.com/feed.xml", folder="News")


@pytest.fixture
def sample_rss_content():
    """RSS 2.0 document using dc, content and media namespaces."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:dc="http://purl.org/dc/elements/1.1/"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:media="http://search.yahoo.com/mrss/"
     xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>Example News</title>
    <atom:link href="https://example.com/feed.xml" rel="self"/>
    <link>https://example.com/</link>
    <description>Latest stories</description>
    <language>en-us</language>
    <image>
      <url>/https://example.com/logo.png/</url>
      <title>Example</title>
    </image>
    <item>
      <title>First story</title>
      <link>https://example.com/first</link>
      <description>Short summary</description>
      <content:encoded><![CDATA[<p>Full body</p>]]></content:encoded>
      <dc:creator>Jane Doe</dc:creator>
      <category>World</category>
      <pubDate>Tue, 10 Jun 2025 04:00:00 GMT</pubDate>
      <guid>https://example.com/first</guid>
      <enclosure url="https://example.com/first.mp3" type="audio/mpeg" length="1"/>
      <media:thumbnail url="https://example.com/first-thumb.jpg"/>
    </item>
    <item>
      <title>Second story</title>
      <link>https://example.com/second</link>
      <description>Another summary</description>
      <pubDate>Mon, 09 Jun 2025 04:00:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""


@pytest.fixture
def sample_atom_content():
    return """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Blog</title>
  <subtitle>Notes</subtitle>
  <link href="https://blog.example.org/"/>
  <icon>https://blog.example.org/icon.png</icon>
  <entry>
    <title>Atom entry</title>
    <link rel="alternate" href="https://blog.example.org/entry-1"/>
    <id>urn:uuid:1</id>
    <published>2025-06-01T10:00:00Z</published>
    <updated>2025-06-02T10:00:00Z</updated>
    <author><name>Sam Writer</name></author>
    <summary>Entry summary</summary>
    <content type="html">&lt;p&gt;Entry body&lt;/p&gt;</content>
    <category term="python"/>
  </entry>
</feed>"""


@pytest.fixture
def sample_youtube_content():
    return """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015"
      xmlns:media="http://search.yahoo.com/mrss/"
      xmlns="http://www.w3.org/2005/Atom">
  <title>Some Channel</title>
  <entry>
    <id>yt:video:abc123</id>
    <yt:videoId>abc123</yt:videoId>
    <title>A video</title>
    <link rel="alternate" href="https://www.youtube.com/watch?v=abc123"/>
    <published>2025-06-01T10:00:00+00:00</published>
  </entry>
</feed>"""


def rss_document(title: str, items: list[tuple[str, str]]) -> str:
    """Minimal RSS document with (title, link) items."""
    body = "".join(
        f"<item><title>{t}</title><link>{link}</link>"
        f"<pubDate>Mon, 09 Jun 2025 04:00:00 GMT</pubDate></item>"
        for t, link in items
    )
    return f"<rss><channel><title>{title}</title>{body}</channel></rss>"


@pytest.fixture
def make_rss():
    return rss_document


@pytest.fixture
def make_item():
    def factory(link: str, **fields) -> FeedItem:
        defaults = {
            "title": f"Title {link}",
            "folder": "News",
            "feed": "Example",
            "read": False,
            "favorite": False,
            "created": False,
            "visited": False,
        }
        defaults.update(fields)
        return FeedItem(link=link, **defaults)

    return factory


@pytest.fixture
def make_snapshot():
    def factory(items: list[FeedItem], name: str = "Example", folder: str = "News", **fields):
        return FeedSnapshot(name=name, folder=folder, items=items, **fields)

    return factory


class FakeTransport:
    """In-memory transport.

    ``documents`` maps URLs to raw XML; URLs in ``hanging`` never answer;
    URLs in ``blocked`` wait for ``release`` to be set.
    """

    def __init__(self, documents: dict[str, str] | None = None):
        self.documents = dict(documents or {})
        self.hanging: set[str] = set()
        self.blocked: set[str] = set()
        self.release = asyncio.Event()
        self.calls: list[str] = []

    async def read_feed_document(self, url: str) -> str:
        self.calls.append(url)
        if url in self.hanging:
            await asyncio.Event().wait()
        if url in self.blocked:
            await self.release.wait()
        if url not in self.documents:
            raise FetchError(url, "HTTP 404")
        return self.documents[url]


class MemoryStorage:
    """Snapshot storage kept in memory; can be told to fail on save."""

    def __init__(self, store: PersistedStore | None = None):
        self.stored = store
        self.saves = 0
        self.fail_on_save = False

    async def initialize(self) -> None:
        pass

    async def load(self) -> PersistedStore | None:
        return self.stored.model_copy(deep=True) if self.stored else None

    async def save(self, store: PersistedStore) -> None:
        if self.fail_on_save:
            raise StorageError("disk full")
        self.saves += 1
        self.stored = store.model_copy(deep=True)

    async def close(self) -> None:
        pass


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def memory_storage():
    return MemoryStorage()
