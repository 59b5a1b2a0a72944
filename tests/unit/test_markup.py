# tests/unit/test_markup.py

from datetime import datetime, timezone

import pytest
from bs4 import BeautifulSoup

from veritas.ingest.markup import MarkupExtractor, find_byline_author
from veritas.normalize.schema import SiteType


def make_soup(html):
    return BeautifulSoup(html, "html.parser")


@pytest.fixture
def extractor():
    return MarkupExtractor()


class TestBylineDetection:
    """Test free-text "by <Name>" detection."""

    def test_simple_byline(self):
        assert find_byline_author("By Jane Smith reports from the capital") == "Jane Smith"

    def test_case_insensitive_prefix(self):
        assert find_byline_author("Written BY John Carter") == "John Carter"

    def test_trailing_punctuation_stripped(self):
        assert find_byline_author("by Alice Walker, correspondent") == "Alice Walker"

    def test_lowercase_name_rejected(self):
        assert find_byline_author("by the way, nothing here") is None

    def test_too_many_tokens_rejected(self):
        assert find_byline_author("By Aa Bb Cc Dd Ee Ff") is None

    def test_too_long_rejected(self):
        assert find_byline_author("By " + "Averyveryverylongname " * 3, max_length=50) is None

    def test_empty_text(self):
        assert find_byline_author("") is None

    def test_byline_stops_at_sentence_end(self):
        text = "By Jane Smith. The mayor said the plan works."
        assert find_byline_author(text) == "Jane Smith"

    @pytest.mark.parametrize("text,author", [
        ("By Dr. Jane Smith reports", "Dr. Jane Smith"),
        ("by J.R.R. Tolkien", "J.R.R. Tolkien"),
        ("By Mary O'Neil-Park.", "Mary O'Neil-Park"),
    ])
    def test_honorifics_and_initials_keep_their_dots(self, text, author):
        assert find_byline_author(text) == author


class TestAuthorResolution:
    """Test the ordered author strategies."""

    def test_meta_tag_beats_structured_data(self, extractor):
        html = """
        <html><head>
          <meta name="author" content="Jane Smith">
          <script type="application/ld+json">
            {"@type": "NewsArticle", "author": {"@type": "Person", "name": "Other Author"}}
          </script>
        </head><body><p>Body</p></body></html>
        """
        assert extractor.resolve_author(make_soup(html), "") == "Jane Smith"

    def test_json_ld_graph(self, extractor):
        html = """
        <script type="application/ld+json">
          {"@context": "https://schema.org", "@graph": [
            {"@type": "WebPage", "name": "Page"},
            {"@type": "NewsArticle", "author": [{"@type": "Person", "name": "Ana Lima"}]}
          ]}
        </script>
        """
        assert extractor.resolve_author(make_soup(html), "") == "Ana Lima"

    def test_json_ld_publisher_fallback(self, extractor):
        html = """
        <script type="application/ld+json">
          {"@type": "Article", "publisher": {"@type": "Organization", "name": "Daily Planet"}}
        </script>
        """
        assert extractor.resolve_author(make_soup(html), "") == "Daily Planet"

    def test_malformed_json_ld_falls_through_to_dom(self, extractor):
        html = """
        <script type="application/ld+json">{not valid json</script>
        <span class="byline">By Mark Twain</span>
        """
        assert extractor.resolve_author(make_soup(html), "") == "Mark Twain"

    def test_oversized_dom_match_skipped(self, extractor):
        long_bio = "Writes about many things " * 10
        html = f'<div class="author-box">{long_bio}</div>'
        assert extractor.resolve_author(make_soup(html), "") is None

    def test_content_byline_fallback(self, extractor):
        content = "By Alice Walker, staff correspondent. The storm hit overnight."
        assert extractor.resolve_author(make_soup("<p></p>"), content) == "Alice Walker"

    def test_no_author(self, extractor):
        assert extractor.resolve_author(make_soup("<p>Nothing</p>"), "Nothing") is None


class TestPublicationDate:
    """Test the ordered publication date strategies."""

    def test_meta_published_time(self, extractor):
        html = '<meta property="article:published_time" content="2024-03-01T10:00:00Z">'
        assert extractor.resolve_publication_date(make_soup(html)) == "2024-03-01T10:00:00Z"

    def test_time_element(self, extractor):
        html = '<time datetime="2024-05-01">May 1</time>'
        assert extractor.resolve_publication_date(make_soup(html)) == "2024-05-01"

    def test_meta_wins_over_time_element(self, extractor):
        html = """
        <meta property="article:published_time" content="2024-03-01">
        <time datetime="2020-01-01">Old</time>
        """
        assert extractor.resolve_publication_date(make_soup(html)) == "2024-03-01"

    def test_embedded_timestamp(self, extractor):
        html = '<script>var meta = {"publish_time": 1700000000};</script>'
        expected = datetime.fromtimestamp(1700000000, tz=timezone.utc).isoformat()
        assert extractor.resolve_publication_date(make_soup(html)) == expected

    def test_no_date(self, extractor):
        assert extractor.resolve_publication_date(make_soup("<p>Undated</p>")) is None


class TestTitleAndContent:
    """Test title fallbacks and main content selection."""

    def test_title_tag(self, extractor):
        assert extractor.extract_title(make_soup("<title> Budget  news </title>")) == "Budget news"

    def test_og_title_fallback(self, extractor):
        html = '<meta property="og:title" content="From Open Graph"><h1>Heading</h1>'
        assert extractor.extract_title(make_soup(html)) == "From Open Graph"

    def test_heading_fallback(self, extractor):
        assert extractor.extract_title(make_soup("<h1>Heading</h1>")) == "Heading"

    def test_missing_title(self, extractor):
        assert extractor.extract_title(make_soup("<p>Body</p>")) == ""

    def test_article_preferred_and_chrome_removed(self, extractor):
        html = """
        <body>
          <nav>Home Sections Subscribe Today For Unlimited Access To Everything</nav>
          <article><p>The council voted on the budget.</p></article>
          <div class="ad-slot">Buy now</div>
          <footer>Copyright</footer>
        </body>
        """
        assert extractor.extract_main_content(html) == "The council voted on the budget."

    def test_paragraph_fallback(self, extractor):
        html = "<body><div><p>First part.</p><p>Second part.</p></div></body>"
        assert extractor.extract_main_content(html) == "First part. Second part."

    def test_body_fallback(self, extractor):
        assert extractor.extract_main_content("<body><div>Loose text</div></body>") == "Loose text"

    def test_content_truncated(self):
        extractor = MarkupExtractor(max_content_chars=10)
        html = "<article>" + "word " * 100 + "</article>"
        assert len(extractor.extract_main_content(html)) == 10


class TestLinksAndAds:
    """Test link classification and advertising measurement."""

    def test_link_classification(self, extractor):
        html = """
        <a href="https://example.com/x">internal</a>
        <a href="https://other.com/y">external</a>
        <a href="#top">top</a>
        """
        total, external = extractor.classify_links(make_soup(html), "example.com")
        assert external == 1
        assert total - external == 1

    def test_relative_and_skipped_links(self, extractor):
        html = """
        <a href="/local/schools">relative</a>
        <a href="mailto:desk@example.com">mail</a>
        <a href="javascript:void(0)">js</a>
        <a href="https://www.example.com/about">www internal</a>
        """
        assert extractor.classify_links(make_soup(html), "example.com") == (2, 0)

    def test_ad_detection(self, extractor):
        html = """
        <div class="ad-slot">one</div>
        <div id="sidebar-ads">two</div>
        <div class="header">not an ad</div>
        <div class="shadow">not an ad</div>
        <p>a</p><p>b</p><p>c</p><p>d</p>
        """
        ad_count, density = extractor.measure_advertising(make_soup(html))
        assert ad_count == 2
        assert density == pytest.approx(0.5)

    def test_ad_markers(self, extractor):
        html = """
        <ins class="adsbygoogle"></ins>
        <div data-ad-slot="1234"></div>
        <iframe src="https://securepubads.doubleclick.net/frame"></iframe>
        """
        ad_count, density = extractor.measure_advertising(make_soup(html))
        assert ad_count == 3
        assert density == 1.0

    def test_no_ads(self, extractor):
        assert extractor.measure_advertising(make_soup("<p>Clean</p>")) == (0, 0.0)

    def test_data_attributes_that_only_start_with_ad(self, extractor):
        html = """
        <div data-address="1 Main St">office</div>
        <div data-adaptive="true">layout</div>
        <div data-admin="x">tools</div>
        """
        assert extractor.measure_advertising(make_soup(html))[0] == 0

    def test_data_ad_attribute_variants(self, extractor):
        html = '<div data-ad="1"></div><div data-ad_unit="x"></div><div data-ad-slot="2"></div>'
        assert extractor.measure_advertising(make_soup(html))[0] == 3

    def test_address_block_kept_in_content(self, extractor):
        html = '<div data-address="1 Main St"><p>Visit the office on Main Street.</p></div>'
        assert "Main Street" in extractor.extract_main_content(html)


class TestPolicyAndOpinion:
    """Test policy links, author bio links and opinion labeling."""

    def test_policy_links(self, extractor):
        soup = make_soup('<a href="/corrections-policy">Corrections</a><a href="/who">About Us</a>')
        lexicons = extractor.lexicons
        assert extractor.has_policy_link(soup, lexicons.corrections_policy)
        assert extractor.has_policy_link(soup, lexicons.ownership_disclosure)

    def test_policy_keyword_in_href(self, extractor):
        soup = make_soup('<a href="/editorial-independence">Standards</a>')
        assert extractor.has_policy_link(soup, extractor.lexicons.ownership_disclosure)

    def test_no_policy_links(self, extractor):
        soup = make_soup('<a href="/sports">Sports</a>')
        assert not extractor.has_policy_link(soup, extractor.lexicons.corrections_policy)

    def test_author_bio_link(self, extractor):
        soup = make_soup('<a href="/author/jane-smith">Jane Smith bio</a>')
        assert extractor.has_author_bio_link(soup, "Jane Smith")

    def test_bio_link_under_author_path(self, extractor):
        soup = make_soup('<a href="/staff/bio">Read more</a>')
        assert extractor.has_author_bio_link(soup, None)

    def test_no_bio_link(self, extractor):
        soup = make_soup('<a href="/about">About</a><a href="/biology">Biology</a>')
        assert not extractor.has_author_bio_link(soup, "Jane Smith")

    def test_opinion_content(self, extractor):
        assert extractor.is_opinion_content("This analysis argues the plan will fail.")
        assert not extractor.is_opinion_content("The council met on Tuesday.")

    def test_opinion_label_in_title(self, extractor):
        assert extractor.has_opinion_label("Opinion: Taxes are too high")
        assert extractor.has_opinion_label("Taxes | Editorial: a modest proposal")
        assert not extractor.has_opinion_label("Taxes rise again")

    def test_opinion_label_in_meta(self, extractor):
        soup = make_soup('<meta property="article:section" content="Opinion">')
        assert extractor.has_opinion_label("Taxes rise again", soup)


class TestExtract:
    """Test the full signal map."""

    def test_wire_service_author_implies_news(self, extractor):
        html = '<head><meta name="author" content="Reuters Staff"></head><p>Story.</p>'
        signals = extractor.extract(html, "https://www.example.org/story")
        assert signals["author"] == "Reuters Staff"
        assert signals["author_is_generic"] is False
        assert signals["site_type"] == SiteType.NEWS

    def test_headline_punctuation(self, extractor):
        html = "<title>Wow!!</title><h2>Really??</h2><p>Body.</p>"
        signals = extractor.extract(html, "https://example.com/a")
        assert signals["excessive_punctuation_count"] == 2

    def test_title_repeated_as_heading_counted_once(self, extractor):
        html = "<title>Wow!!</title><h1>Wow!!</h1><p>Body.</p>"
        signals = extractor.extract(html, "https://example.com/a")
        assert signals["excessive_punctuation_count"] == 1

    def test_collect_headlines(self, extractor):
        soup = make_soup("<h1> Big  News </h1><h2>big news</h2><h3>Details</h3><h4>Skip</h4>")
        assert extractor.collect_headlines("Big News", soup) == ["Big News", "Details"]

    def test_empty_markup(self, extractor):
        signals = extractor.extract("", "https://example.com/")
        assert signals["title"] == ""
        assert signals["author"] is None
        assert signals["publication_date"] is None
        assert signals["link_count"] == 0
        assert signals["main_content"] == ""
        assert signals["readability_score"] == 100.0
