from dataclasses import dataclass
from datetime import datetime
from typing import NewType

from pydantic import BaseModel, ConfigDict

from orgsite.outline.document import OrgDocument

Id = NewType("Id", str)


@dataclass(frozen=True, order=True)
class Year:
    value: int


class Article(BaseModel):
    """A published headline; ``node`` is its headline handle inside ``document``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: Id
    published: datetime
    updated: datetime | None = None
    title: str
    subids: tuple[Id, ...] = ()
    document: OrgDocument
    node: int
    draft: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Article):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def effective_timestamp(self) -> datetime:
        return self.updated if self.updated is not None else self.published

    @property
    def year(self) -> Year:
        return Year(self.published.year)

    @property
    def path(self) -> str:
        return id_to_path(self.id)

    def sort_key(self) -> tuple[datetime, str]:
        """Order inside a year bucket: published, then id."""
        return self.published, self.id


def id_to_path(id: Id) -> str:
    """articles/<last char of id>/<id>.html

    id_to_path("hello") -> "articles/o/hello.html"
    """
    return f"articles/{id[-1]}/{id}.html"
