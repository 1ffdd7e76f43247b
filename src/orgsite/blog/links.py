"""Render article bodies, resolving internal links against the site index.

LinkResolver wraps a base HtmlHandler. It takes over titles (level remapping
and id anchors), links (id:, file:, relative paths, images) and footnotes;
every other element goes to the base handler untouched.
"""

import dataclasses
import re
from typing import TextIO

from orgsite.blog.article import Article, Id, id_to_path
from orgsite.blog.diagnostics import Diagnostics
from orgsite.blog.index import SiteIndex
from orgsite.outline.elements import Element, FnDef, FnRef, Link, Title
from orgsite.outline.html import HtmlHandler, escape, render

IMAGE_EXTENSIONS = ("jpeg", "jpg", "png", "svg")
MAX_HEADING_LEVEL = 6

# RFC 3986 scheme; anything without one is a relative reference
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def is_relative(path: str) -> bool:
    return _SCHEME_RE.match(path) is None


def is_image(path: str) -> bool:
    filename = path.rsplit("/", 1)[-1]
    _, dot, ext = filename.rpartition(".")
    return bool(dot) and ext in IMAGE_EXTENSIONS


class LinkResolver:
    def __init__(
        self,
        index: SiteIndex,
        base: str,
        inner: HtmlHandler,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.index = index
        self.base = base
        self.inner = inner
        self.diagnostics = diagnostics if diagnostics is not None else index.diagnostics
        self._root_level = 1

    def set_base(self, base: str) -> None:
        self.base = base

    def render_article(self, article: Article) -> str:
        self._root_level = article.document.title_of(article.node).level
        return render(article.document, article.node, self)

    def heading_level(self, level: int) -> int:
        """Article root renders as <h2>; deeper headlines keep their offset."""
        return min(2 + level - self._root_level, MAX_HEADING_LEVEL)

    def start(self, w: TextIO, element: Element) -> None:
        if isinstance(element, Title):
            level = self.heading_level(element.level)
            if element.id:
                w.write(f'<h{level} id="{escape(element.id)}">')
            else:
                w.write(f"<h{level}>")
        elif isinstance(element, Link):
            self._start_link(w, element)
        elif isinstance(element, (FnDef, FnRef)):
            w.write(f"<small>[{escape(element.label)}]</small>")
        else:
            self.inner.start(w, element)

    def end(self, w: TextIO, element: Element) -> None:
        if isinstance(element, Title):
            w.write(f"</h{self.heading_level(element.level)}>")
        elif isinstance(element, (Link, FnDef, FnRef)):
            pass
        else:
            self.inner.end(w, element)

    def _start_link(self, w: TextIO, link: Link) -> None:
        text = escape(link.desc or link.path)

        if link.path.startswith("id:"):
            id = Id(link.path[3:])
            owner = self.index.lookup_by_subid(id)
            if self.index.lookup_by_id(id) is not None:
                href = self.base + id_to_path(id)
                w.write(f'<a href="{escape(href)}">{text}</a>')
            elif owner is not None:
                href = f"{self.base}{id_to_path(owner)}#{id}"
                w.write(f'<a href="{escape(href)}">{text}</a>')
            else:
                self.diagnostics.notice(f"id:{id} not found")
                w.write(text)
            return

        if link.path.startswith("file:"):
            self._start_link(w, dataclasses.replace(link, path=link.path[5:]))
            return

        if is_relative(link.path):
            link = dataclasses.replace(link, path=self.base + link.path)
        if is_image(link.path):
            path = escape(link.path)
            w.write(f'<a href="{path}"><img src="{path}"></a>')
        else:
            self.inner.start(w, link)
