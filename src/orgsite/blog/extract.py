"""Find blog articles in a parsed org document.

A headline becomes an article when it is tagged ``blog``, is SCHEDULED with a
plain timestamp and has a non-empty ID property. Extraction also strips
LOGBOOK drawers (after reading update times from them) and PRIVATE
sub-headlines out of the shared document, then freezes it.
"""

from datetime import datetime

from orgsite.blog.article import Article, Id
from orgsite.blog.diagnostics import Diagnostics
from orgsite.outline.document import OrgDocument
from orgsite.outline.elements import Drawer
from orgsite.outline.timestamp import Timestamp

ARTICLE_TAG = "blog"
DRAFT_TAG = "draft"
PRIVATE_TAG = "PRIVATE"
LOGBOOK = "LOGBOOK"


def extract_articles(document: OrgDocument, diagnostics: Diagnostics) -> list[Article]:
    articles = []
    for headline in document.headlines():
        if not document.is_attached(headline):
            continue  # removed by an earlier article's redaction
        article = _load_article(document, headline, diagnostics)
        if article is not None:
            articles.append(article)
    document.freeze()
    return articles


def _load_article(
    document: OrgDocument, headline: int, diagnostics: Diagnostics
) -> Article | None:
    title = document.title_of(headline)
    if ARTICLE_TAG not in title.tags:
        return None

    if title.scheduled is None:
        return None
    if not title.scheduled.is_plain:
        diagnostics.notice(f'headline "{title.raw}" has blog tag, but not SCHEDULED')
        return None
    published = title.scheduled.start
    assert published is not None

    id = title.id
    if id is None:
        diagnostics.notice(f'headline "{title.raw}" has blog tag, but does not have ID')
        return None
    if not id:
        diagnostics.notice(f'headline "{title.raw}" has blog tag, but ID is empty')
        return None

    subids = collect_ids(document, headline)
    updated = _take_logbook_updates(document, headline, published)

    for sub in document.sub_headlines(headline):
        if PRIVATE_TAG in document.title_of(sub).tags and document.is_attached(sub):
            document.detach(sub)

    return Article(
        id=Id(id),
        published=published,
        updated=updated,
        title=title.raw,
        subids=subids,
        document=document,
        node=headline,
        draft=DRAFT_TAG in title.tags,
    )


def collect_ids(document: OrgDocument, headline: int) -> tuple[Id, ...]:
    """IDs of every headline below ``headline``, in document order."""
    ids = []
    for sub in document.sub_headlines(headline):
        id = document.title_of(sub).id
        if id is not None:
            ids.append(Id(id))
    return tuple(ids)


def _take_logbook_updates(
    document: OrgDocument, headline: int, published: datetime
) -> datetime | None:
    """Latest plain LOGBOOK timestamp after ``published``; detaches the drawers."""
    section = document.section_of(headline)
    if section is None:
        return None

    updated = None
    for child in document.children(section):
        element = document[child]
        if not isinstance(element, Drawer) or element.name != LOGBOOK:
            continue
        for node in document.descendants(child):
            timestamp = document[node]
            if not isinstance(timestamp, Timestamp) or not timestamp.is_plain:
                continue
            start = timestamp.start
            if start > published and (updated is None or start > updated):
                updated = start
        document.detach(child)
    return updated
