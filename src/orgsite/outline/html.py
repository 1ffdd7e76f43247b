"""Default HTML rendering for OrgDocument subtrees.

A handler is any object with ``start(w, element)`` and ``end(w, element)``;
``render`` walks a subtree and feeds every element to the handler.
"""

import html
import io
from typing import Protocol, TextIO

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from orgsite.outline.document import Edge, OrgDocument, UnfrozenDocumentError
from orgsite.outline.elements import (
    Bold,
    Code,
    Element,
    ExampleBlock,
    FnDef,
    FnRef,
    Italic,
    Link,
    List,
    ListItem,
    Paragraph,
    QuoteBlock,
    Root,
    Rule,
    Section,
    SpecialBlock,
    SrcBlock,
    Strike,
    Table,
    TableCell,
    TableRow,
    Text,
    Title,
    Underline,
    Verbatim,
)
from orgsite.outline.timestamp import Timestamp


class HtmlHandler(Protocol):
    def start(self, w: TextIO, element: Element) -> None: ...

    def end(self, w: TextIO, element: Element) -> None: ...


def escape(text: str) -> str:
    return html.escape(text, quote=True)


HIGHLIGHT_CLASS = "highlight"


def highlight_src(language: str, contents: str) -> str:
    """Pygments markup for a source block; unknown languages stay plain."""
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        cls = f' class="language-{escape(language)}"' if language else ""
        return f"<pre><code{cls}>{escape(contents)}</code></pre>"
    return highlight(contents, lexer, HtmlFormatter(cssclass=HIGHLIGHT_CLASS))


def highlight_css(style: str = "default") -> str:
    """Stylesheet for the classes ``highlight_src`` emits."""
    return HtmlFormatter(style=style).get_style_defs(f".{HIGHLIGHT_CLASS}")


# element type -> (opening tag, closing tag)
_SIMPLE_TAGS: dict[type, tuple[str, str]] = {
    Root: ("<main>", "</main>"),
    Section: ("<section>", "</section>"),
    Paragraph: ("<p>", "</p>"),
    Bold: ("<b>", "</b>"),
    Italic: ("<i>", "</i>"),
    Underline: ("<u>", "</u>"),
    Strike: ("<s>", "</s>"),
    ListItem: ("<li>", "</li>"),
    QuoteBlock: ("<blockquote>", "</blockquote>"),
    Table: ("<table>", "</table>"),
    TableRow: ("<tr>", "</tr>"),
    TableCell: ("<td>", "</td>"),
}


class HtmlRenderer:
    """Renders every element kind; elements it does not know produce no markup."""

    def start(self, w: TextIO, element: Element) -> None:
        tags = _SIMPLE_TAGS.get(type(element))
        if tags is not None:
            w.write(tags[0])
        elif isinstance(element, Title):
            w.write(f"<h{min(element.level, 6)}>")
        elif isinstance(element, Text):
            w.write(escape(element.value))
        elif isinstance(element, (Verbatim, Code)):
            w.write(f"<code>{escape(element.value)}</code>")
        elif isinstance(element, Link):
            w.write(
                f'<a href="{escape(element.path)}">'
                f"{escape(element.desc or element.path)}</a>"
            )
        elif isinstance(element, Timestamp):
            w.write(
                '<span class="timestamp-wrapper"><span class="timestamp">'
                f"{escape(element.raw)}</span></span>"
            )
        elif isinstance(element, List):
            w.write("<ol>" if element.ordered else "<ul>")
        elif isinstance(element, SrcBlock):
            w.write(highlight_src(element.language, element.contents))
        elif isinstance(element, ExampleBlock):
            w.write(f'<pre class="example">{escape(element.contents)}</pre>')
        elif isinstance(element, SpecialBlock):
            w.write(f'<div class="{escape(element.name)}">')
        elif isinstance(element, Rule):
            w.write("<hr>")
        elif isinstance(element, FnRef):
            label = escape(element.label)
            w.write(
                f'<sup><a id="fnr.{label}" class="footref" href="#fn.{label}">'
                f"{label}</a></sup>"
            )
        elif isinstance(element, FnDef):
            label = escape(element.label)
            w.write(
                '<div class="footdef"><sup>'
                f'<a id="fn.{label}" class="footnum" href="#fnr.{label}">{label}</a>'
                '</sup><div class="footpara">'
            )

    def end(self, w: TextIO, element: Element) -> None:
        tags = _SIMPLE_TAGS.get(type(element))
        if tags is not None:
            w.write(tags[1])
        elif isinstance(element, Title):
            w.write(f"</h{min(element.level, 6)}>")
        elif isinstance(element, List):
            w.write("</ol>" if element.ordered else "</ul>")
        elif isinstance(element, SpecialBlock):
            w.write("</div>")
        elif isinstance(element, FnDef):
            w.write("</div></div>")


def render(document: OrgDocument, node: int, handler: HtmlHandler) -> str:
    if not document.frozen:
        raise UnfrozenDocumentError(
            "document must be frozen (extraction finished) before rendering"
        )
    w = io.StringIO()
    for edge, current in document.traverse(node):
        if edge is Edge.start:
            handler.start(w, document[current])
        else:
            handler.end(w, document[current])
    return w.getvalue()
