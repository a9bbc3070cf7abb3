"""
Integration tests: markup in, display instructions out.
"""

from pathlib import Path

from richcontent import ContentRenderer, render_content
from richcontent.instructions import (
    AdSlot,
    Blockquote,
    Image,
    List,
    Paragraph,
    VideoEmbed,
    iter_instructions,
    to_dict,
)

FIXTURES = Path(__file__).parent.parent / "fixtures"


def article():
    return (FIXTURES / "article.html").read_text(encoding="utf-8")


def kinds(instructions):
    return [type(ins).__name__ for ins in instructions]


class TestArticle:
    def test_full_article(self):
        out = render_content(article(), viewport_width=400, is_network=False)
        assert kinds(out) == [
            "Image",
            "Paragraph", "Paragraph", "Paragraph",
            "AdSlot",
            "Paragraph",
            "VideoEmbed",
            "Paragraph",
            "List",
            "Paragraph", "Paragraph",
            "Blockquote",
            "Paragraph",
            "Image",
            "Paragraph",
        ]

    def test_details(self):
        out = render_content(article(), viewport_width=400)
        lead = out[0]
        assert isinstance(lead, Image)
        assert lead.source == "https://media.example.test/lead-600.jpg"
        assert lead.priority
        assert (lead.width, lead.height) == (360, 240)
        assert lead.alt == "Lead photo"

        assert out[1].text == "KUALA LUMPUR: The first paragraph of the story, with a glued comma."
        assert out[4] == AdSlot("article1")
        assert out[6] == VideoEmbed("dQw4w9WgXcQ", 364, 204)
        assert [item.text for item in out[8].items] == ["First point", "Second point"]
        assert out[11].card.href == "https://example.test/related"
        assert not out[13].priority
        assert out[14].text == "Ninth paragraph inside an unknown wrapper."

    def test_network_context(self):
        out = render_content(article(), viewport_width=400, is_network=True)
        assert [ins.unit for ins in out if isinstance(ins, AdSlot)] == ["ros"]

    def test_idempotent(self):
        markup = article()
        assert render_content(markup, 400, True) == render_content(markup, 400, True)

    def test_viewport_changes_output(self):
        narrow = render_content(article(), viewport_width=300)
        wide = render_content(article(), viewport_width=1000)
        assert narrow[0].source == "https://media.example.test/lead-300.jpg"
        assert wide[0].source == "https://media.example.test/lead.jpg"

    def test_empty_input(self):
        assert render_content("", 400) == []
        assert render_content(None, 400) == []
        assert render_content("   \n  ", 400) == []

    def test_indented_markup_reads_as_one_line(self):
        markup = "<p>Hello,\n    <strong>world</strong>\n</p>"
        (paragraph,) = render_content(markup, 400)
        assert paragraph.text == "Hello, world"

    def test_short_article_has_no_ads(self):
        out = render_content("<p>Watch the full interview.</p>", 400, is_network=True)
        assert len(out) == 1
        assert isinstance(out[0], Paragraph)

    def test_to_dict_is_json_ready(self):
        out = render_content(article(), viewport_width=400)
        data = [to_dict(ins) for ins in out]
        assert data[0]["type"] == "Image"
        assert data[6]["watch_url"] == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        assert data[8]["kind"] == "unordered"
        assert data[1]["runs"][0]["type"] == "TextRun"

    def test_iter_instructions_reaches_nested(self):
        out = render_content("<blockquote><figure><img src='a.jpg'></figure></blockquote>", 400)
        assert isinstance(out[0], Blockquote)
        assert any(isinstance(ins, Image) for ins in iter_instructions(out))


class TestManyParagraphs:
    def test_two_slots(self):
        markup = "".join(f"<p>Paragraph {i}</p>" for i in range(20))
        out = render_content(markup, 400)
        ads = [i for i, ins in enumerate(out) if isinstance(ins, AdSlot)]
        assert ads == [3, 12]
        assert out[11].text == "Paragraph 10"
        assert not any(isinstance(ins, (List, VideoEmbed)) for ins in out)


class TestContentRenderer:
    def test_memoizes_on_inputs(self):
        renderer = ContentRenderer()
        first = renderer.render(article(), 400, False)
        second = renderer.render(article(), 400, False)
        assert first == second
        assert len(renderer._cache) == 1
        renderer.render(article(), 320, False)
        renderer.render(article(), 320, True)
        assert len(renderer._cache) == 3

    def test_cache_is_bounded(self):
        renderer = ContentRenderer(max_entries=2)
        for width in (300, 320, 340):
            renderer.render("<p>x</p>", width)
        assert len(renderer._cache) == 2
        assert ("<p>x</p>", 300, False) not in renderer._cache

    def test_clear(self):
        renderer = ContentRenderer()
        renderer.render("<p>x</p>", 300)
        renderer.clear()
        assert renderer._cache == {}
