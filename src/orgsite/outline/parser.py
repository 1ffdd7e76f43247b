"""Parse org-mode text into an OrgDocument.

Covers the subset of org syntax a blog needs: headlines (keyword, priority,
tags), planning lines, property drawers, drawers, blocks, lists, tables,
footnote definitions, paragraphs and inline markup.
"""

import re
import textwrap

from orgsite.outline.document import OrgDocument
from orgsite.outline.elements import (
    Bold,
    Clock,
    Code,
    Drawer,
    ExampleBlock,
    FnDef,
    FnRef,
    Headline,
    Italic,
    Keyword,
    Link,
    List,
    ListItem,
    Paragraph,
    QuoteBlock,
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
from orgsite.outline.timestamp import Timestamp, TimestampKind, parse_timestamp

KEYWORDS = ("TODO", "DONE")

_HEADLINE_RE = re.compile(r"^(\*+)(?:[ \t]+(.*?))?\s*$")
_TAGS_RE = re.compile(r"^(.*?)(?:\s+|^)(:(?:[\w@#%]+:)+)$")
_PRIORITY_RE = re.compile(r"^\[#([A-Z0-9])\]\s*")
_PLANNING_RE = re.compile(r"^\s*(?:SCHEDULED|DEADLINE|CLOSED):")
_PLANNING_KEYWORD_RE = re.compile(r"(SCHEDULED|DEADLINE|CLOSED):")
_DRAWER_BEGIN_RE = re.compile(r"^\s*:([\w-]+):\s*$")
_DRAWER_END_RE = re.compile(r"^\s*:END:\s*$", re.IGNORECASE)
_PROPERTY_RE = re.compile(r"^\s*:([^:\s]+):(?:[ \t]+(.*?))?\s*$")
_BLOCK_BEGIN_RE = re.compile(r"^\s*#\+BEGIN_(\S+)(?:[ \t]+(.*?))?\s*$", re.IGNORECASE)
_KEYWORD_RE = re.compile(r"^\s*#\+(\w+):[ \t]*(.*?)\s*$")
_COMMENT_RE = re.compile(r"^\s*#(?:[ \t].*)?$")
_LIST_ITEM_RE = re.compile(r"^(\s*)([-+]|\d+[.)])(?:[ \t]+(.*))?$")
_FN_DEF_RE = re.compile(r"^\[fn:([^\]\s:]+)\][ \t]*(.*)$")
_RULE_RE = re.compile(r"^\s*-{5,}\s*$")
_CLOCK_RE = re.compile(r"^\s*CLOCK:[ \t]*(.*?)\s*$")
_TABLE_RE = re.compile(r"^\s*\|")
_FIXED_WIDTH_RE = re.compile(r"^\s*:(?:[ \t](.*))?$")

_TS = r"\d{4}-\d{2}-\d{2}"
_INLINE_RE = re.compile(
    r"(?P<link>\[\[(?P<path>[^\]\n]+)\](?:\[(?P<desc>[^\]\n]+)\])?\])"
    r"|(?P<fnref>\[fn:(?P<label>[^\]\s:]+)\])"
    r"|(?P<timestamp><" + _TS + r"[^>\n]*>(?:--<" + _TS + r"[^>\n]*>)?"
    r"|\[" + _TS + r"[^\]\n]*\](?:--\[" + _TS + r"[^\]\n]*\])?)"
    r"|(?P<emphasis>(?<![^\s(\"'{-])(?P<marker>[*/_+=~])"
    r"(?P<body>\S(?:.*?\S)?)(?P=marker)(?=[\s.,;:!?'\")\]}-]|$))"
)
_CONTAINER_MARKERS = {"*": Bold, "/": Italic, "_": Underline, "+": Strike}


def parse(text: str) -> OrgDocument:
    doc = OrgDocument()
    lines = text.splitlines()

    preamble, i = _take_body(lines, 0)
    if any(line.strip() for line in preamble):
        section = doc.add(Section(), OrgDocument.ROOT)
        _parse_elements(doc, section, preamble)

    stack: list[tuple[int, int]] = []  # (level, headline node)
    while i < len(lines):
        m = _HEADLINE_RE.match(lines[i])
        assert m is not None
        level = len(m.group(1))
        i += 1
        while stack and stack[-1][0] >= level:
            stack.pop()
        parent = stack[-1][1] if stack else OrgDocument.ROOT

        planning: dict[str, Timestamp] = {}
        if i < len(lines) and _PLANNING_RE.match(lines[i]):
            planning = _parse_planning(lines[i])
            i += 1

        properties: tuple[tuple[str, str], ...] = ()
        if i < len(lines) and lines[i].strip().upper() == ":PROPERTIES:":
            parsed, end = _parse_properties(lines, i + 1)
            if end is not None:
                properties = parsed
                i = end + 1

        raw, keyword, priority, tags = _split_title(m.group(2) or "")
        headline = doc.add(Headline(level=level), parent)
        title = doc.add(
            Title(
                level=level,
                raw=raw,
                keyword=keyword,
                priority=priority,
                tags=tags,
                properties=properties,
                scheduled=planning.get("SCHEDULED"),
                deadline=planning.get("DEADLINE"),
                closed=planning.get("CLOSED"),
            ),
            headline,
        )
        _parse_inline(doc, title, raw)

        body, i = _take_body(lines, i)
        if any(line.strip() for line in body):
            section = doc.add(Section(), headline)
            _parse_elements(doc, section, body)
        stack.append((level, headline))

    return doc


def _take_body(lines: list[str], start: int) -> tuple[list[str], int]:
    end = start
    while end < len(lines) and not _HEADLINE_RE.match(lines[end]):
        end += 1
    return lines[start:end], end


def _split_title(
    text: str,
) -> tuple[str, str | None, str | None, tuple[str, ...]]:
    keyword = priority = None
    tags: tuple[str, ...] = ()

    m = _TAGS_RE.match(text)
    if m:
        text = m.group(1)
        tags = tuple(t for t in m.group(2).split(":") if t)

    first, _, rest = text.partition(" ")
    if first in KEYWORDS:
        keyword = first
        text = rest.lstrip()

    m = _PRIORITY_RE.match(text)
    if m:
        priority = m.group(1)
        text = text[m.end() :]

    return text.strip(), keyword, priority, tags


def _parse_planning(line: str) -> dict[str, Timestamp]:
    parts = _PLANNING_KEYWORD_RE.split(line.strip())
    # parts = ["", KEY, value, KEY, value, ...]
    planning = {}
    for key, value in zip(parts[1::2], parts[2::2], strict=False):
        value = value.strip()
        if value:
            planning[key] = parse_timestamp(value)
        else:
            planning[key] = Timestamp(kind=TimestampKind.invalid, raw="")
    return planning


def _parse_properties(
    lines: list[str], start: int
) -> tuple[tuple[tuple[str, str], ...], int | None]:
    properties = []
    for i in range(start, len(lines)):
        if _DRAWER_END_RE.match(lines[i]):
            return tuple(properties), i
        m = _PROPERTY_RE.match(lines[i])
        if m:
            properties.append((m.group(1), m.group(2) or ""))
    return (), None


def _find_end(lines: list[str], start: int, pattern: re.Pattern[str]) -> int | None:
    for i in range(start, len(lines)):
        if pattern.match(lines[i]):
            return i
    return None


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def _starts_element(lines: list[str], i: int) -> bool:
    """Whether lines[i] begins a non-paragraph element."""
    line = lines[i]
    return bool(
        _BLOCK_BEGIN_RE.match(line)
        or _LIST_ITEM_RE.match(line)
        or _KEYWORD_RE.match(line)
        or _COMMENT_RE.match(line)
        or _RULE_RE.match(line)
        or _CLOCK_RE.match(line)
        or _TABLE_RE.match(line)
        or _FN_DEF_RE.match(line)
        or _FIXED_WIDTH_RE.match(line)
        or (
            _DRAWER_BEGIN_RE.match(line)
            and _find_end(lines, i + 1, _DRAWER_END_RE) is not None
        )
    )


def _parse_elements(doc: OrgDocument, parent: int, lines: list[str]) -> None:
    i = 0
    n = len(lines)
    while i < n:
        line = lines[i]
        if not line.strip():
            i += 1
            continue

        m = _BLOCK_BEGIN_RE.match(line)
        if m:
            name = m.group(1)
            end = _find_end(
                lines, i + 1, re.compile(rf"^\s*#\+END_{re.escape(name)}\s*$", re.I)
            )
            if end is not None:
                _add_block(doc, parent, name.lower(), m.group(2) or "", lines[i + 1 : end])
                i = end + 1
                continue

        m = _DRAWER_BEGIN_RE.match(line)
        if m:
            end = _find_end(lines, i + 1, _DRAWER_END_RE)
            if end is not None:
                drawer = doc.add(Drawer(name=m.group(1)), parent)
                _parse_elements(doc, drawer, lines[i + 1 : end])
                i = end + 1
                continue

        m = _CLOCK_RE.match(line)
        if m:
            doc.add(Clock(raw=m.group(1)), parent)
            i += 1
            continue

        m = _KEYWORD_RE.match(line)
        if m:
            doc.add(Keyword(key=m.group(1).upper(), value=m.group(2)), parent)
            i += 1
            continue

        if _COMMENT_RE.match(line):
            i += 1
            continue

        if _RULE_RE.match(line):
            doc.add(Rule(), parent)
            i += 1
            continue

        if _FIXED_WIDTH_RE.match(line):
            contents = []
            while i < n and _FIXED_WIDTH_RE.match(lines[i]):
                contents.append(_FIXED_WIDTH_RE.match(lines[i]).group(1) or "")
                i += 1
            doc.add(ExampleBlock(contents="\n".join(contents) + "\n"), parent)
            continue

        if _TABLE_RE.match(line):
            rows = []
            while i < n and _TABLE_RE.match(lines[i]):
                rows.append(lines[i].strip())
                i += 1
            _add_table(doc, parent, rows)
            continue

        m = _FN_DEF_RE.match(line)
        if m:
            content = [m.group(2)]
            i += 1
            while i < n and lines[i].strip() and not _FN_DEF_RE.match(lines[i]):
                content.append(lines[i].strip())
                i += 1
            fn_def = doc.add(FnDef(label=m.group(1)), parent)
            paragraph = doc.add(Paragraph(), fn_def)
            _parse_inline(doc, paragraph, "\n".join(content).strip())
            continue

        if _LIST_ITEM_RE.match(line):
            i = _add_list(doc, parent, lines, i)
            continue

        content = [line.strip()]
        i += 1
        while i < n and lines[i].strip() and not _starts_element(lines, i):
            content.append(lines[i].strip())
            i += 1
        paragraph = doc.add(Paragraph(), parent)
        _parse_inline(doc, paragraph, "\n".join(content))


def _add_block(
    doc: OrgDocument, parent: int, name: str, args: str, body: list[str]
) -> None:
    contents = textwrap.dedent("\n".join(body))
    if contents:
        contents += "\n"
    if name == "src":
        language = args.split()[0] if args.split() else ""
        doc.add(SrcBlock(language=language, contents=contents), parent)
    elif name == "example":
        doc.add(ExampleBlock(contents=contents), parent)
    elif name == "quote":
        quote = doc.add(QuoteBlock(), parent)
        _parse_elements(doc, quote, body)
    else:
        special = doc.add(SpecialBlock(name=name), parent)
        _parse_elements(doc, special, body)


def _add_table(doc: OrgDocument, parent: int, rows: list[str]) -> None:
    table = doc.add(Table(), parent)
    for row in rows:
        if row.startswith("|-"):
            continue
        cells = row.strip("|").split("|")
        tr = doc.add(TableRow(), table)
        for cell in cells:
            td = doc.add(TableCell(), tr)
            _parse_inline(doc, td, cell.strip())


def _add_list(doc: OrgDocument, parent: int, lines: list[str], i: int) -> int:
    n = len(lines)
    first = _LIST_ITEM_RE.match(lines[i])
    indent = len(first.group(1))
    plain_list = doc.add(List(ordered=first.group(2)[0].isdigit()), parent)

    while i < n:
        m = _LIST_ITEM_RE.match(lines[i])
        if m is None or len(m.group(1)) != indent:
            break
        head = m.group(3) or ""
        rest = []
        i += 1
        while i < n:
            if not lines[i].strip():
                j = i
                while j < n and not lines[j].strip():
                    j += 1
                if j < n and _indent(lines[j]) > indent:
                    rest.extend(lines[i:j])
                    i = j
                    continue
                break
            if _indent(lines[i]) <= indent:
                break
            rest.append(lines[i])
            i += 1

        item = doc.add(ListItem(bullet=m.group(2)), plain_list)
        _parse_elements(doc, item, [head] + textwrap.dedent("\n".join(rest)).split("\n"))

        # a single run of blank lines may separate sibling items
        j = i
        while j < n and not lines[j].strip():
            j += 1
        next_item = _LIST_ITEM_RE.match(lines[j]) if j < n else None
        if next_item is None or len(next_item.group(1)) != indent:
            break
        i = j
    return i


def _parse_inline(doc: OrgDocument, parent: int, text: str) -> None:
    pos = 0
    for m in _INLINE_RE.finditer(text):
        if m.start() > pos:
            doc.add(Text(value=text[pos : m.start()]), parent)
        pos = m.end()

        if m.group("link"):
            doc.add(Link(path=m.group("path"), desc=m.group("desc")), parent)
        elif m.group("fnref"):
            doc.add(FnRef(label=m.group("label")), parent)
        elif m.group("timestamp"):
            timestamp = parse_timestamp(m.group("timestamp"))
            if timestamp.kind is TimestampKind.invalid:
                doc.add(Text(value=m.group("timestamp")), parent)
            else:
                doc.add(timestamp, parent)
        else:
            marker, body = m.group("marker"), m.group("body")
            if marker == "=":
                doc.add(Verbatim(value=body), parent)
            elif marker == "~":
                doc.add(Code(value=body), parent)
            else:
                node = doc.add(_CONTAINER_MARKERS[marker](), parent)
                _parse_inline(doc, node, body)
    if pos < len(text):
        doc.add(Text(value=text[pos:]), parent)
