from datetime import datetime

from orgsite.blog.diagnostics import Diagnostics
from orgsite.blog.extract import extract_articles
from orgsite.blog.index import SiteIndex
from orgsite.blog.links import LinkResolver
from orgsite.outline.html import HtmlRenderer
from orgsite.outline.parser import parse


def _extract(text: str):
    diagnostics = Diagnostics()
    articles = extract_articles(parse(text), diagnostics)
    return articles, diagnostics.notices


def _headline(
    title: str,
    tags: str = ":blog:",
    scheduled: str | None = "<2020-01-01 Wed>",
    id: str | None = "x",
    level: int = 1,
    body: str = "",
) -> str:
    lines = [f"{'*' * level} {title} {tags}".rstrip()]
    if scheduled is not None:
        lines.append(f"SCHEDULED: {scheduled}")
    if id is not None:
        lines += [":PROPERTIES:", f":ID: {id}".rstrip(), ":END:"]
    if body:
        lines.append(body)
    return "\n".join(lines) + "\n"


def test_tagged_scheduled_headline_with_id_is_article():
    [article], notices = _extract(_headline("Hello", id="hello"))
    assert article.id == "hello"
    assert article.title == "Hello"
    assert article.published == datetime(2020, 1, 1)
    assert article.updated is None
    assert notices == []


def test_inactive_schedule_accepted():
    [article], _ = _extract(_headline("Hello", scheduled="[2020-03-04 Wed 08:15]"))
    assert article.published == datetime(2020, 3, 4, 8, 15)


def test_untagged_headline_never_an_article():
    articles, notices = _extract(_headline("Hello", tags=":emacs:"))
    assert articles == []
    assert notices == []


def test_tagged_without_schedule_is_silent():
    articles, notices = _extract(_headline("Hello", scheduled=None))
    assert articles == []
    assert notices == []


def test_malformed_schedule_reports_once():
    for scheduled in ["<2020-01-01 Wed +1w>", "<2020-01-01 Wed -1d>", "someday"]:
        articles, notices = _extract(_headline("Hello", scheduled=scheduled))
        assert articles == []
        assert notices == ['headline "Hello" has blog tag, but not SCHEDULED']


def test_missing_and_empty_id_have_distinct_notices():
    articles, notices = _extract(_headline("NoId", id=None))
    assert articles == []
    assert notices == ['headline "NoId" has blog tag, but does not have ID']

    articles, notices = _extract(_headline("EmptyId", id=""))
    assert articles == []
    assert notices == ['headline "EmptyId" has blog tag, but ID is empty']


def test_title_is_raw_text_without_keyword_or_tags():
    [article], _ = _extract(_headline("DONE [#B] Some *bold* title"))
    assert article.title == "Some *bold* title"


def test_subids_collected_from_all_descendants_in_order():
    text = (
        _headline("Parent", id="p")
        + _headline("Child", tags="", scheduled=None, id="c1", level=2)
        + _headline("Grandchild", tags=":other:", scheduled=None, id="g", level=3)
        + _headline("NoId", tags="", scheduled=None, id=None, level=2)
        + _headline("Child2", tags="", scheduled=None, id="c2", level=2)
    )
    [article], _ = _extract(text)
    assert article.subids == ("c1", "g", "c2")


def test_nested_candidate_is_independent_article():
    text = _headline("Parent", id="p") + _headline(
        "Child", scheduled="<2021-01-01 Fri>", id="c", level=2
    )
    articles, _ = _extract(text)
    assert [a.id for a in articles] == ["p", "c"]
    assert articles[0].subids == ("c",)


def test_updated_is_latest_logbook_timestamp_after_published():
    body = (
        ":LOGBOOK:\n"
        '- State "DONE"       from "TODO"       [2019-12-01 Sun 10:00]\n'
        "- Note taken on [2020-02-01 Sat 09:00] \\\\\n"
        "  fixed typo\n"
        "- Note taken on [2020-03-01 Sun 09:00] \\\\\n"
        "  rewrote intro\n"
        "CLOCK: [2020-05-01 Fri 10:00]--[2020-05-01 Fri 11:00] =>  1:00\n"
        ":END:\n"
        "Body text."
    )
    [article], _ = _extract(_headline("Hello", body=body))
    assert article.updated == datetime(2020, 3, 1, 9, 0)
    assert article.updated > article.published


def test_logbook_with_only_older_timestamps_leaves_updated_empty():
    body = ":LOGBOOK:\n- Note taken on [2019-01-01 Tue]\n:END:"
    [article], _ = _extract(_headline("Hello", body=body))
    assert article.updated is None


def _render(text: str) -> list[str]:
    index = SiteIndex()
    articles = index.load_text(text)
    resolver = LinkResolver(index, "", HtmlRenderer())
    return [resolver.render_article(a) for a in articles]


def test_logbook_and_private_content_removed_from_output():
    text = _headline(
        "Hello",
        body=":LOGBOOK:\n- Note taken on [2020-02-01 Sat]\n:END:\nPublic text.",
    ) + (
        "** Secret :PRIVATE:\n"
        "hidden words\n"
        "*** Deeper\n"
        "also hidden\n"
        "** Visible\n"
        "shown words\n"
    )
    [html] = _render(text)
    assert "Note taken" not in html
    assert "2020-02-01" not in html
    assert "Secret" not in html
    assert "hidden" not in html
    assert "Public text." in html
    assert "shown words" in html


def test_every_logbook_drawer_is_read_and_removed():
    body = (
        ":LOGBOOK:\n"
        "- Note taken on [2020-05-01 Fri] \\\\\n"
        "  first drawer\n"
        ":END:\n"
        "Between drawers.\n"
        ":LOGBOOK:\n"
        "- Note taken on [2020-03-01 Sun] \\\\\n"
        "  second drawer\n"
        ":END:"
    )
    text = _headline("Hello", body=body)
    [article], _ = _extract(text)
    assert article.updated == datetime(2020, 5, 1)

    [html] = _render(text)
    assert "Between drawers." in html
    assert "2020-05-01" not in html
    assert "2020-03-01" not in html
    assert "drawer" not in html.replace("Between drawers.", "")


def test_other_drawers_are_kept():
    body = ":NOTES:\nkept in drawer\n:END:"
    [html] = _render(_headline("Hello", body=body))
    assert "kept in drawer" in html


def test_private_candidate_below_article_is_not_published():
    text = _headline("Parent", id="p") + _headline(
        "Hidden", tags=":blog:PRIVATE:", id="h", level=2
    )
    articles, _ = _extract(text)
    assert [a.id for a in articles] == ["p"]


def test_draft_tag_marks_article():
    [article], _ = _extract(_headline("Hello", tags=":blog:draft:"))
    assert article.draft


def test_extraction_is_deterministic():
    text = (
        _headline("A", id="a")
        + _headline("Bad", id=None)
        + _headline("B", scheduled="<2021-01-01 Fri>", id="b")
        + _headline("Worse", scheduled="<2020-01-01 Wed +1d>")
    )
    first = _extract(text)
    second = _extract(text)
    assert [a.id for a in first[0]] == [a.id for a in second[0]] == ["a", "b"]
    assert first[1] == second[1]
    assert len(first[1]) == 2


def test_document_frozen_after_extraction():
    doc = parse(_headline("Hello"))
    extract_articles(doc, Diagnostics())
    assert doc.frozen
