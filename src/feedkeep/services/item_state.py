"""User-driven changes to item state (read, favorite, tags, highlights)."""

import structlog

from feedkeep.events import FeedEvent
from feedkeep.models.item import FeedItem, Scope
from feedkeep.services.orchestrator import UpdateOrchestrator

logger = structlog.get_logger()


class ItemStateService:
    """Applies user actions to the orchestrator's store.

    Every change is committed (index rebuilt, filters re-evaluated, store
    saved) before the matching event is emitted.
    """

    def __init__(self, orchestrator: UpdateOrchestrator):
        self._orchestrator = orchestrator

    def _item(self, link: str) -> FeedItem:
        item = self._orchestrator.store.find_item(link)
        if item is None:
            raise KeyError(link)
        return item

    async def set_read(self, link: str, read: bool) -> bool:
        self._orchestrator.store.update_item(link, read=read)
        await self._orchestrator.commit()
        self._orchestrator.events.emit(FeedEvent.ITEM_READ_CHANGED, link=link, read=read)
        return read

    async def toggle_read(self, link: str) -> bool:
        """Flip the read flag; an item never marked counts as unread."""
        return await self.set_read(link, not self._item(link).read)

    async def toggle_favorite(self, link: str) -> bool:
        favorite = not self._item(link).favorite
        self._orchestrator.store.update_item(link, favorite=favorite)
        await self._orchestrator.commit()

        await self._orchestrator.notifier.send_message(
            "Added to favorites" if favorite else "Removed from favorites"
        )
        self._orchestrator.events.emit(
            FeedEvent.ITEM_FAVORITE_CHANGED, link=link, favorite=favorite
        )
        return favorite

    async def mark_all_read(self, scope: Scope, name: str | None = None) -> list[str]:
        """Mark every item of a scope as read.

        Args:
            scope: "global", "folder" or "feed".
            name: Folder or feed name (ignored for "global").

        Returns:
            Links of the items that changed.
        """
        items = self._orchestrator.store.select_items(scope, name)
        changed = [item for item in items if item.read is not True]
        for item in changed:
            item.read = True

        links = [item.link for item in changed]
        if changed:
            await self._orchestrator.commit()

        logger.info("Marked items read", scope=scope, name=name, count=len(links))
        self._orchestrator.events.emit(
            FeedEvent.BULK_MARK_COMPLETED, scope=scope, name=name, links=links
        )
        return links

    async def add_tag(self, link: str, tag: str) -> list[str]:
        tag = tag.strip().lstrip("#")
        if not tag:
            raise ValueError("Tag must not be empty")
        item = self._orchestrator.store.update_item(link, tags=[*self._item(link).tags, tag])
        await self._orchestrator.commit()
        return list(item.tags)

    async def remove_tag(self, link: str, tag: str) -> list[str]:
        """Remove every occurrence of a tag."""
        remaining = [t for t in self._item(link).tags if t != tag]
        item = self._orchestrator.store.update_item(link, tags=remaining)
        await self._orchestrator.commit()
        return list(item.tags)

    async def add_highlight(self, link: str, text: str) -> list[str]:
        if not text:
            raise ValueError("Highlight must not be empty")
        item = self._orchestrator.store.update_item(
            link, highlights=[*self._item(link).highlights, text]
        )
        await self._orchestrator.commit()
        return list(item.highlights)

    async def remove_highlight(self, link: str, text: str) -> list[str]:
        remaining = [h for h in self._item(link).highlights if h != text]
        item = self._orchestrator.store.update_item(link, highlights=remaining)
        await self._orchestrator.commit()
        return list(item.highlights)
