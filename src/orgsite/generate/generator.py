"""Render the whole site: index, yearly archives, articles, drafts, feed, static.

Every page is rendered in memory first; nothing reaches the output until the
whole site rendered without error.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from orgsite.blog.article import Article
from orgsite.blog.index import SiteIndex
from orgsite.blog.links import LinkResolver
from orgsite.config import SiteConfig
from orgsite.generate.feed import build_feed
from orgsite.generate.output import Output
from orgsite.outline.html import HtmlRenderer, highlight_css

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"
ARTICLE_BASE = "../../"
HIGHLIGHT_CSS_PATH = "static/highlight.css"


@dataclass
class GenerateStats:
    articles: int = 0
    drafts: int = 0
    indices: int = 0
    feeds: int = 0
    statics: int = 0

    @property
    def files(self) -> int:
        return self.articles + self.drafts + self.indices + self.feeds + self.statics


def template_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["date"] = lambda value, fmt="%Y-%m-%d": value.strftime(fmt)
    return env


def static_files(static_dir: Path = STATIC_DIR) -> list[tuple[str, bytes, datetime]]:
    files = []
    for path in sorted(p for p in static_dir.rglob("*") if p.is_file()):
        if path.name.startswith("."):
            continue
        name = "static/" + path.relative_to(static_dir).as_posix()
        mtime = datetime.fromtimestamp(path.stat().st_mtime)
        files.append((name, path.read_bytes(), mtime))
    return files


def generate(index: SiteIndex, config: SiteConfig, output: Output) -> GenerateStats:
    env = template_env()
    stats = GenerateStats()
    pages: list[tuple[str, str | bytes, datetime | None]] = []
    years = index.years_descending()

    html = env.get_template("index.html").render(
        site=config,
        base="",
        articles=list(reversed(index.articles_in(years[0]))) if years else [],
        archives=years[1:],
    )
    pages.append(("index.html", html, index.last_update))
    stats.indices += 1

    for year in years[1:]:
        articles = index.articles_in(year)
        html = env.get_template("archive.html").render(
            site=config,
            base="",
            year=year,
            articles=list(reversed(articles)),
            archives=years[1:],
        )
        last_update = max(a.effective_timestamp for a in articles)
        pages.append((f"{year.value}.html", html, last_update))
        stats.indices += 1

    resolver = LinkResolver(index, ARTICLE_BASE, HtmlRenderer())
    article_template = env.get_template("article.html")

    def render_page(article: Article) -> tuple[str, str, datetime]:
        html = article_template.render(
            site=config,
            base=ARTICLE_BASE,
            article=article,
            content=resolver.render_article(article),
        )
        return article.path, html, article.effective_timestamp

    for article in index.by_id.values():
        pages.append(render_page(article))
        stats.articles += 1

    if config.include_draft:
        for draft in index.drafts.values():
            pages.append(render_page(draft))
            stats.drafts += 1

    if config.feed:
        assert config.url is not None
        resolver.set_base(config.url)
        feed = build_feed(
            config.name,
            config.url,
            index.most_recent(config.feed_entries),
            index.last_update,
            resolver.render_article,
        )
        pages.append(("atom.xml", feed, index.last_update))
        stats.feeds += 1

    for name, data, mtime in static_files():
        pages.append((name, data, mtime))
        stats.statics += 1
    pages.append((HIGHLIGHT_CSS_PATH, highlight_css(), None))
    stats.statics += 1

    for path, data, mtime in pages:
        output.write(path, data, mtime)
    return stats
