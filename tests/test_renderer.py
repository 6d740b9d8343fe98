"""End-to-end tests for vaultview/markdown/renderer.py (run pandoc)"""
from concurrent.futures import ThreadPoolExecutor

import pypandoc
import pytest
from bs4 import BeautifulSoup

from vaultview.markdown import (
    MarkdownEngineError,
    MarkdownRenderer,
    PlaceholderKind,
    RenderOptions,
    TrackFileKind,
    fallback_html,
    render_document,
    render_markdown,
)
from vaultview.markdown.engine import markdown_to_html


def _soup(result):
    return BeautifulSoup(result.html, "html.parser")


def test_plain_markdown_matches_direct_conversion(pandoc):
    text = (
        "Some *emphasis*, **strong** and `code`.\n"
        "A second line.\n\n"
        "- one\n- two\n\n"
        "1. first\n2. second\n\n"
        "> quoted text\n\n"
        "```python\nprint(1)\n```\n"
    )
    assert render_document(text).html == markdown_to_html(text)


def test_wikilink_resolves_against_current_file(pandoc):
    result = render_document("See [[Plans/夏之北海道]].", "/Trips/Visited-Places.md")
    anchor = _soup(result).find("a", class_="internal-link")

    assert anchor["data-file-path"] == "/Trips/Plans/夏之北海道.md"
    assert anchor.get_text() == "夏之北海道"
    assert result.metadata.links[0].text == "夏之北海道"


def test_repeated_headings_have_unique_ids(pandoc):
    result = render_document("# Intro\n\ntext\n\n# Intro\n\n# Intro\n")
    ids = [h["id"] for h in _soup(result).find_all("h1")]

    assert ids == ["intro", "intro-1", "intro-2"]
    assert [h.id for h in result.metadata.headings] == ids


def test_placeholders_round_trip(pandoc):
    text = "```mermaid\ngraph TD\n  A-->B\n```\n\nRide: ![[route.gpx]]\n"
    result = render_document(text, "/Trips/a.md")

    mermaid, track = result.placeholders
    assert (mermaid.id, mermaid.kind, mermaid.is_file_reference) == ("mermaid_0", PlaceholderKind.MERMAID, False)
    assert mermaid.code == "graph TD\n  A-->B"
    assert track.kind is PlaceholderKind.TRACK
    assert track.is_file_reference is True
    assert track.file_kind is TrackFileKind.GPX
    assert track.code == "/Trips/route.gpx"

    for record in result.placeholders:
        assert result.html.count(record.token) == 1
    assert "track-embed" not in result.html


def test_extracted_and_embedded_tracks_share_id_space(pandoc):
    text = "```gpx:Attachments/a.gpx```\n\n![[b.kml]]\n"
    result = render_document(text, "/Trips/a.md")
    assert [r.id for r in result.placeholders] == ["track_0", "track_1"]
    assert [r.file_kind for r in result.placeholders] == [TrackFileKind.GPX, TrackFileKind.KML]


@pytest.mark.parametrize("text,tags", [
    ("see #react and more", ["react"]),
    ("price is $5#notATag", []),
    ("`#code` is not a tag", []),
])
def test_tag_boundaries(pandoc, text, tags):
    result = render_document(text)
    assert result.metadata.tags == tags
    assert len(_soup(result).find_all("a", class_="tag")) == len(tags)


def test_multi_paragraph_callout(pandoc):
    text = "> [!tip] Title\n> line1\n>\n> - item1\n> - item2\n"
    soup = _soup(render_document(text))

    callout = soup.find("div", class_="callout")
    assert callout["class"] == ["callout", "callout-tip"]
    assert callout["data-callout"] == "tip"
    assert callout.find("div", class_="callout-title").get_text(strip=True) == "Title"

    content = callout.find("div", class_="callout-content")
    assert content.find("p").get_text() == "line1"
    assert [li.get_text() for li in content.find_all("li")] == ["item1", "item2"]
    assert soup.find("blockquote") is None


def test_unresolved_link_is_inert(pandoc):
    result = render_document("[[Missing]]", "/Welcome.md", {"/Other.md": "/Other.md"})
    span = _soup(result).find("span", class_="is-unresolved")

    assert span["data-target"] == "Missing"
    assert span.get_text() == "Missing"
    assert result.metadata.links == []


def test_highlight_and_math(pandoc):
    soup = _soup(render_document("==hot== and $x^2$"))
    assert soup.find("mark", class_="cm-highlight").get_text() == "hot"
    assert soup.find("span", class_="math") is not None


def test_tables_and_external_links(pandoc):
    text = "| a | b |\n|---|---|\n| 1 | 2 |\n\n[site](https://example.com)\n"
    soup = _soup(render_document(text))

    assert soup.find("div", class_="table-container").find("table") is not None
    anchor = soup.find("a", href="https://example.com")
    assert anchor["target"] == "_blank"
    assert "external-link" in anchor["class"]


def test_front_matter(pandoc):
    result = render_document("---\ntitle: Plan\ntags: [travel, food]\n---\nBody text\n")

    assert result.front_matter == {"title": "Plan", "tags": ["travel", "food"]}
    soup = _soup(result)
    assert "title:" not in result.html
    assert [a["data-tag"] for a in soup.find("div", class_="frontmatter-tags").find_all("a")] == ["travel", "food"]


def test_disabled_passes_leave_syntax_alone(pandoc):
    options = RenderOptions(
        enable_obsidian_links=False,
        enable_tags=False,
        enable_highlights=False,
        enable_mermaid=False,
    )
    result = render_document("[[Note]] #tag ==hi==\n\n```mermaid\npie\n```\n", options=options)

    assert "[[Note]]" in result.html
    assert "#tag" in result.html
    assert "==hi==" in result.html
    assert result.placeholders == []


def test_soft_breaks_as_line_breaks(pandoc):
    result = render_document("one\ntwo", options=RenderOptions(soft_breaks_as_line_breaks=True))
    assert _soup(result).find("br") is not None


def test_index_provider_called_once_per_document(pandoc):
    calls = []

    def provider():
        calls.append(1)
        return ["/Notes/Alpha.md", "/Notes/Beta.md"]

    renderer = MarkdownRenderer(index_provider=provider)
    result = renderer.render("[[Alpha]] and [[Beta]] and [[Gamma]]", "/Inbox/Today.md")

    assert len(calls) == 1
    assert [a["data-file-path"] for a in _soup(result).find_all("a", class_="internal-link")] == [
        "/Notes/Alpha.md",
        "/Notes/Beta.md",
    ]
    assert _soup(result).find("span", class_="is-unresolved")["data-target"] == "Gamma"


def test_failing_index_provider_falls_back_to_paths(pandoc, caplog):
    def provider():
        raise OSError("metadata.json unreachable")

    result = MarkdownRenderer(index_provider=provider).render("[[Alpha]]", "/Inbox/Today.md")

    assert _soup(result).find("a", class_="internal-link")["data-file-path"] == "/Inbox/Alpha.md"
    assert "File index unavailable" in caplog.text


def test_concurrent_renders_do_not_share_counters(pandoc):
    renderer = MarkdownRenderer()
    text = "```mermaid\npie\n```\n\n# Same\n"
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(renderer.render, [text] * 4))

    for result in results:
        assert [r.id for r in result.placeholders] == ["mermaid_0"]
        assert [h.id for h in result.metadata.headings] == ["same"]


def test_render_markdown_fills_context(pandoc):
    context = {}
    html = render_markdown("# Title\n\n#tag", context)

    assert '<h1 id="title">' in html
    assert context["metadata"].tags == ["tag"]
    assert context["placeholders"] == []


def test_as_dict_shape(pandoc):
    data = render_document("# T\n\n```mermaid\npie\n```\n").as_dict()

    assert set(data) == {"html", "metadata", "placeholders", "frontMatter"}
    assert data["metadata"]["headings"] == [{"level": 1, "text": "T", "id": "t"}]
    assert data["placeholders"][0] == {
        "id": "mermaid_0",
        "kind": "mermaid",
        "code": "pie",
        "isFileReference": False,
        "fileKind": None,
        "config": None,
        "placeholder": "MERMAID_PLACEHOLDER_mermaid_0",
    }


def test_engine_failure_raises(monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("Pandoc died with exitcode 64")

    monkeypatch.setattr(pypandoc, "convert_text", broken)
    with pytest.raises(MarkdownEngineError) as excinfo:
        render_document("anything")
    assert excinfo.value.stage == "parse"


def test_fallback_html_escapes_text():
    assert fallback_html("<b>raw</b>") == '<pre class="markdown-fallback">&lt;b&gt;raw&lt;/b&gt;</pre>'


def test_absolute_url_image_embed(pandoc):
    soup = _soup(render_document("![[https://example.com/a.png]]"))
    image = soup.find("img")

    assert image["src"] == "https://example.com/a.png"
    assert "obsidian-image" in image["class"]
    assert soup.find("a") is None
    assert "[[" not in str(soup)


def test_wikilink_targets_are_not_read_as_markdown(pandoc):
    result = render_document("[[_draft_ notes]] and [[a*b*]]", "/Inbox/Today.md")
    soup = _soup(result)

    assert soup.find("em") is None
    assert [a.get_text() for a in soup.find_all("a", class_="internal-link")] == ["_draft_ notes", "a*b*"]
    assert [link.text for link in result.metadata.links] == ["_draft_ notes", "a*b*"]


def test_wikilinks_in_code_stay_literal(pandoc):
    soup = _soup(render_document("`[[Note]]`\n\n```\n![[map.png]]\n```\n"))

    assert [c.get_text() for c in soup.find_all("code")] == ["[[Note]]", "![[map.png]]"]
    assert soup.find("a") is None
    assert soup.find("img") is None


def test_heading_right_after_a_fence_is_kept(pandoc):
    result = render_document("# A\n```mermaid\ngraph\n```\n# A\n")
    soup = _soup(result)

    assert [h["id"] for h in soup.find_all("h1")] == ["a", "a-1"]
    assert [h.id for h in result.metadata.headings] == ["a", "a-1"]
    assert soup.find("p").get_text() == "MERMAID_PLACEHOLDER_mermaid_0"


def test_mermaid_example_inside_tilde_block_is_code(pandoc):
    result = render_document("~~~\n```mermaid\npie\n```\n~~~\n")
    assert result.placeholders == []
    assert "```mermaid" in _soup(result).find("code").get_text()


def test_map_config_block(pandoc):
    result = render_document("Trip:\n```leaflet\ngpx: [day1.gpx]\n```\nDone.")
    (record,) = result.placeholders

    assert record.file_kind is TrackFileKind.LEAFLET
    assert record.config == {"gpx": ["day1.gpx"]}
    assert [p.get_text() for p in _soup(result).find_all("p")] == ["Trip:", record.token, "Done."]


def test_tags_inside_unresolved_links_are_not_collected(pandoc):
    result = render_document("[[Missing|see #foo]]", "/Welcome.md", {"/Other.md": "/Other.md"})
    assert result.metadata.tags == []
    assert _soup(result).find("a", class_="tag") is None
