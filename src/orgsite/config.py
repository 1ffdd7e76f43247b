"""Site configuration: YAML file values, overridden by command-line flags."""

from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
import yaml

DEFAULT_FEED_ENTRIES = 10


class SiteConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str | None = None  # always ends with "/" once validated
    feed: bool = False
    include_draft: bool = False
    output: Path | None = None  # None = write to stdout
    feed_entries: int = DEFAULT_FEED_ENTRIES

    @field_validator("url")
    @classmethod
    def _normalise_url(cls, url: str | None) -> str | None:
        if url is None:
            return None
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"site url must be an absolute http(s) URL: {url!r}")
        return url if url.endswith("/") else url + "/"

    @field_validator("feed_entries")
    @classmethod
    def _positive(cls, n: int) -> int:
        if n < 1:
            raise ValueError("feed_entries must be at least 1")
        return n

    @model_validator(mode="after")
    def _feed_needs_url(self) -> "SiteConfig":
        if self.feed and self.url is None:
            raise ValueError("atom feed needs a site url")
        return self


def load_config(path: Path) -> dict[str, Any]:
    """Read a YAML mapping of SiteConfig fields (``draft`` is accepted too)."""
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level")
    if "draft" in data:
        data["include_draft"] = data.pop("draft")
    return data
