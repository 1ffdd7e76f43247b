"""In-memory index of every article on the site."""

from datetime import datetime

from orgsite.blog.article import Article, Id, Year
from orgsite.blog.diagnostics import Diagnostics
from orgsite.blog.extract import extract_articles
from orgsite.outline.document import OrgDocument
from orgsite.outline.parser import parse


class SiteIndex:
    def __init__(self, diagnostics: Diagnostics | None = None) -> None:
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.by_id: dict[Id, Article] = {}
        self.subid_to_article: dict[Id, Id] = {}
        self.drafts: dict[Id, Article] = {}
        self.last_update: datetime | None = None
        self._by_year: dict[Year, dict[Id, Article]] = {}

    def load_text(self, text: str) -> list[Article]:
        return self.ingest(parse(text))

    def ingest(self, document: OrgDocument) -> list[Article]:
        articles = extract_articles(document, self.diagnostics)
        for article in articles:
            self.insert(article)
        return articles

    def insert(self, article: Article) -> None:
        if article.draft:
            self.drafts[article.id] = article
            return

        previous = self.by_id.get(article.id)
        if previous is not None:
            self.diagnostics.notice(
                f'duplicate id "{article.id}": "{article.title}" '
                f'replaces "{previous.title}"'
            )
            bucket = self._by_year[previous.year]
            del bucket[previous.id]
            if not bucket:
                del self._by_year[previous.year]

        self.by_id[article.id] = article
        self._by_year.setdefault(article.year, {})[article.id] = article
        for subid in article.subids:
            self.subid_to_article[subid] = article.id

        updated = article.effective_timestamp
        if self.last_update is None or updated > self.last_update:
            self.last_update = updated

    @property
    def by_year(self) -> dict[Year, list[Article]]:
        return {year: self.articles_in(year) for year in sorted(self._by_year)}

    def articles_in(self, year: Year) -> list[Article]:
        """Articles published in ``year``, ordered by (published, id)."""
        return sorted(self._by_year.get(year, {}).values(), key=Article.sort_key)

    def lookup_by_id(self, id: Id) -> Article | None:
        return self.by_id.get(id)

    def lookup_by_subid(self, id: Id) -> Id | None:
        return self.subid_to_article.get(id)

    def years_descending(self) -> list[Year]:
        return sorted(self._by_year, reverse=True)

    def most_recent(self, n: int) -> list[Article]:
        """Newest ``n`` articles by effective timestamp, then (published, id)."""
        return sorted(
            self.by_id.values(),
            key=lambda a: (a.effective_timestamp, a.sort_key()),
            reverse=True,
        )[:n]

    def __len__(self) -> int:
        return len(self.by_id)
