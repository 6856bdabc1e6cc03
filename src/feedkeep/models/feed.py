"""Feed configuration models."""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from feedkeep.exceptions import ConfigurationError
from feedkeep.models.filter import FilterSpec


class FeedSource(BaseModel):
    """One configured feed subscription."""

    name: str = Field(..., min_length=1, description="Unique within its folder")
    url: str = Field(..., min_length=1, description="Feed URL or local file path")
    folder: str = Field(default="", description="Folder name, empty means uncategorized")

    model_config = {"frozen": True}

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.folder)


class FeedCollection(BaseModel):
    """Feed list and filter definitions, as stored in the feeds file."""

    feeds: list[FeedSource] = Field(default_factory=list)
    filters: list[FilterSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_feed_keys(self) -> "FeedCollection":
        seen: set[tuple[str, str]] = set()
        for feed in self.feeds:
            if feed.key in seen:
                raise ValueError(
                    f"Duplicate feed {feed.name!r} in folder {feed.folder!r}"
                )
            seen.add(feed.key)
        return self

    def get_feeds_in_folder(self, folder: str) -> list[FeedSource]:
        """Return the feeds of one folder (case-insensitive)."""
        target = folder.strip().lower()
        return [f for f in self.feeds if f.folder.strip().lower() == target]


def load_feed_collection(path: Path) -> FeedCollection:
    """Load the feeds file.

    A missing file yields an empty collection.

    Raises:
        ConfigurationError: When the file is not valid JSON or fails validation.
    """
    if not path.exists():
        return FeedCollection()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return FeedCollection.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid feeds file {path}: {e}") from e
