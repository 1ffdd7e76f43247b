from datetime import datetime
import xml.etree.ElementTree as ET

from orgsite.blog.index import SiteIndex
from orgsite.config import SiteConfig
from orgsite.generate.feed import ATOM_NS
from orgsite.generate.generator import generate
from orgsite.generate.output import MemoryOutput

ORG = """\
* First post :blog:
SCHEDULED: <2020-01-01 Wed>
:PROPERTIES:
:ID: first
:END:
:LOGBOOK:
- Note taken on [2020-02-01 Sat 12:00] \\\\
  typo
:END:
Read [[id:second][the second]] and see [[file:img/cat.png]].
** Secret :PRIVATE:
do not publish
* Second post :blog:
SCHEDULED: <2021-06-01 Tue>
:PROPERTIES:
:ID: second
:END:
Hello & welcome.
* Unfinished :blog:draft:
SCHEDULED: <2021-07-01 Thu>
:PROPERTIES:
:ID: wip
:END:
Not yet.
"""


def _site(**overrides) -> tuple[SiteIndex, SiteConfig, MemoryOutput]:
    index = SiteIndex()
    index.load_text(ORG)
    config = SiteConfig(name="Test Site", url="http://test.site/", **overrides)
    return index, config, MemoryOutput()


def test_generates_index_archives_articles_and_static():
    index, config, output = _site()
    stats = generate(index, config, output)

    assert "index.html" in output.files
    assert "2020.html" in output.files
    assert "2021.html" not in output.files  # newest year lives on the index page
    assert "articles/t/first.html" in output.files
    assert "articles/d/second.html" in output.files
    assert "articles/p/wip.html" not in output.files
    assert "atom.xml" not in output.files
    assert "static/style.css" in output.files
    assert ".highlight" in output.text("static/highlight.css")
    assert stats.articles == 2
    assert stats.indices == 2
    assert stats.drafts == 0
    assert stats.files == len(output.files)


def test_mtimes_follow_article_timestamps():
    index, config, output = _site()
    generate(index, config, output)
    assert output.files["index.html"][1] == datetime(2021, 6, 1)
    assert output.files["2020.html"][1] == datetime(2020, 2, 1, 12, 0)
    assert output.files["articles/t/first.html"][1] == datetime(2020, 2, 1, 12, 0)


def test_article_page_content():
    index, config, output = _site()
    generate(index, config, output)
    html = output.text("articles/t/first.html")
    assert "<title>First post - Test Site</title>" in html
    assert '<a href="../../articles/d/second.html">the second</a>' in html
    assert '<img src="../../img/cat.png">' in html
    assert 'href="../../static/style.css"' in html
    assert 'href="../../static/highlight.css"' in html
    assert "Note taken" not in html
    assert "do not publish" not in html
    assert "updated" in html

    html = output.text("articles/d/second.html")
    assert "Hello &amp; welcome." in html


def test_index_lists_newest_year():
    index, config, output = _site()
    generate(index, config, output)
    html = output.text("index.html")
    assert 'href="articles/d/second.html"' in html
    assert 'href="articles/t/first.html"' not in html
    assert 'href="2020.html"' in html


def test_drafts_only_when_requested():
    index, config, output = _site(include_draft=True)
    stats = generate(index, config, output)
    assert "articles/p/wip.html" in output.files
    assert stats.drafts == 1


def test_feed_uses_absolute_links():
    index, config, output = _site(feed=True)
    stats = generate(index, config, output)
    assert stats.feeds == 1

    feed = ET.fromstring(output.text("atom.xml"))
    entries = feed.findall(f"{{{ATOM_NS}}}entry")
    assert [e.find(f"{{{ATOM_NS}}}title").text for e in entries] == [
        "Second post",
        "First post",
    ]
    content = entries[1].find(f"{{{ATOM_NS}}}content").text
    assert 'href="http://test.site/articles/d/second.html"' in content
    assert output.files["atom.xml"][1] == index.last_update


def test_empty_site_still_has_index():
    index = SiteIndex()
    output = MemoryOutput()
    stats = generate(index, SiteConfig(name="Empty"), output)
    assert "index.html" in output.files
    assert output.files["index.html"][1] is None
    assert stats.articles == 0


def test_source_blocks_are_highlighted():
    index = SiteIndex()
    index.load_text(
        "* Code :blog:\n"
        "SCHEDULED: <2022-01-01 Sat>\n"
        ":PROPERTIES:\n"
        ":ID: code\n"
        ":END:\n"
        "#+BEGIN_SRC python\n"
        "import os\n"
        "#+END_SRC\n"
    )
    output = MemoryOutput()
    generate(index, SiteConfig(name="S"), output)
    html = output.text("articles/e/code.html")
    assert '<div class="highlight">' in html
    assert '<span class="kn">import</span>' in html
