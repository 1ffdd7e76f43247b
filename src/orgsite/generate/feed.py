"""Atom feed serialisation."""

from collections.abc import Callable
from datetime import datetime, timezone
from urllib.parse import urljoin
import xml.etree.ElementTree as ET

from orgsite.blog.article import Article

ATOM_NS = "http://www.w3.org/2005/Atom"


def to_rfc3339(value: datetime) -> str:
    """Naive timestamps are local time; Atom wants UTC."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _sub(parent: ET.Element, tag: str, text: str | None = None, **attrib: str):
    element = ET.SubElement(parent, f"{{{ATOM_NS}}}{tag}", attrib)
    if text is not None:
        element.text = text
    return element


def build_feed(
    name: str,
    site_url: str,
    articles: list[Article],
    last_update: datetime | None,
    render: Callable[[Article], str],
) -> str:
    ET.register_namespace("", ATOM_NS)
    feed = ET.Element(f"{{{ATOM_NS}}}feed")
    _sub(feed, "title", name)
    _sub(feed, "id", site_url)
    if last_update is not None:
        _sub(feed, "updated", to_rfc3339(last_update))

    for article in articles:
        entry_url = urljoin(site_url, article.path)
        entry = _sub(feed, "entry")
        _sub(entry, "title", article.title)
        _sub(entry, "id", entry_url)
        _sub(entry, "link", href=entry_url)
        _sub(entry, "published", to_rfc3339(article.published))
        _sub(entry, "updated", to_rfc3339(article.effective_timestamp))
        _sub(entry, "content", render(article), type="html")

    return ET.tostring(feed, encoding="utf-8", xml_declaration=True).decode("utf-8")
