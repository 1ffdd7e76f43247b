"""Element kinds stored in an OrgDocument arena.

Container elements own their children through the arena; leaf elements
(Text, Link, Timestamp, FnRef, ...) carry all their data inline.
"""

from dataclasses import dataclass

from orgsite.outline.timestamp import Timestamp


@dataclass(frozen=True)
class Root:
    pass


@dataclass(frozen=True)
class Headline:
    level: int


@dataclass(frozen=True)
class Title:
    level: int
    raw: str
    keyword: str | None = None
    priority: str | None = None
    tags: tuple[str, ...] = ()
    properties: tuple[tuple[str, str], ...] = ()
    scheduled: Timestamp | None = None
    deadline: Timestamp | None = None
    closed: Timestamp | None = None

    def get_property(self, key: str) -> str | None:
        for k, v in self.properties:
            if k == key:
                return v
        return None

    @property
    def id(self) -> str | None:
        return self.get_property("ID")


@dataclass(frozen=True)
class Section:
    pass


@dataclass(frozen=True)
class Paragraph:
    pass


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Bold:
    pass


@dataclass(frozen=True)
class Italic:
    pass


@dataclass(frozen=True)
class Underline:
    pass


@dataclass(frozen=True)
class Strike:
    pass


@dataclass(frozen=True)
class Verbatim:
    value: str


@dataclass(frozen=True)
class Code:
    value: str


@dataclass(frozen=True)
class Link:
    path: str
    desc: str | None = None


@dataclass(frozen=True)
class FnRef:
    label: str


@dataclass(frozen=True)
class FnDef:
    label: str


@dataclass(frozen=True)
class Drawer:
    name: str


@dataclass(frozen=True)
class Clock:
    raw: str


@dataclass(frozen=True)
class List:
    ordered: bool


@dataclass(frozen=True)
class ListItem:
    bullet: str


@dataclass(frozen=True)
class SrcBlock:
    language: str
    contents: str


@dataclass(frozen=True)
class ExampleBlock:
    contents: str


@dataclass(frozen=True)
class QuoteBlock:
    pass


@dataclass(frozen=True)
class SpecialBlock:
    name: str


@dataclass(frozen=True)
class Table:
    pass


@dataclass(frozen=True)
class TableRow:
    pass


@dataclass(frozen=True)
class TableCell:
    pass


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class Keyword:
    key: str
    value: str


Element = (
    Root
    | Headline
    | Title
    | Section
    | Paragraph
    | Text
    | Bold
    | Italic
    | Underline
    | Strike
    | Verbatim
    | Code
    | Link
    | Timestamp
    | FnRef
    | FnDef
    | Drawer
    | Clock
    | List
    | ListItem
    | SrcBlock
    | ExampleBlock
    | QuoteBlock
    | SpecialBlock
    | Table
    | TableRow
    | TableCell
    | Rule
    | Keyword
)
