# src/veritas/ingest/markup.py

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

from veritas.credibility.lexicons import (
    DEFAULT_LEXICONS,
    Lexicons,
    classify_site_type_from_host,
    compile_terms,
    is_generic_author,
    mentions_wire_service,
)
from veritas.normalize.schema import SiteType
from veritas.normalize.text_metrics import (
    calculate_flesch_reading_ease,
    compute_all_caps_ratio,
    count_excessive_punctuation,
    count_loaded_language,
    extract_largest_text_block,
    has_citation_markers,
    normalize_whitespace,
    truncate,
)

logger = logging.getLogger(__name__)

AUTHOR_META_SELECTORS: Tuple[Dict[str, str], ...] = (
    {"name": "author"},
    {"property": "author"},
    {"name": "twitter:creator"},
    {"property": "article:author"},
)

AUTHOR_DOM_SELECTOR = (
    '[rel~="author"], [class*="author"], a[href*="/author/"], '
    ".byline, .author-name, .writer-name"
)
# Longer matches are author boxes or whole containers, not names
MAX_DOM_AUTHOR_CHARS = 100

JSON_LD_ARTICLE_TYPES = ("NewsArticle", "Article")

NON_CONTENT_SELECTOR = (
    "script, style, nav, header, footer, aside, form, noscript, iframe, "
    '[role="navigation"], [role="search"]'
)

CONTENT_CANDIDATE_SELECTORS: Tuple[str, ...] = (
    "article",
    "main",
    '[role="main"]',
    "#content",
    "#main",
    ".article-body",
    ".post-content",
    ".entry-content",
    ".story-content",
)

CONTENT_BLOCK_TAGS = ["p", "article", "section", "blockquote"]

OPINION_META_KEYS = ("article:section", "article:type", "article:opinion", "section")

AD_TOKEN_PATTERN = re.compile(
    r"(?:^|[\s_-])(?:ad|ads|advert|adverts|advertisement|advertising|sponsored|"
    r"adsbygoogle|adslot|adunit|dfp|banner-ad)(?:$|[\s_-])",
    re.IGNORECASE,
)
AD_IFRAME_SOURCES = ("ads", "doubleclick", "googlesyndication", "adservice")
# data-ad, data-ad-slot, data-ad_unit; not data-address or data-admin
AD_ATTRIBUTE_PATTERN = re.compile(r"data-ad(?:$|[-_])", re.IGNORECASE)

TIMESTAMP_PATTERN = re.compile(
    r"\b(?:publish_time|create_time|ct)\b[\"']?\s*[:=]\s*[\"']?(\d{10})(?!\d)"
)

AUTHOR_PATH_PATTERN = re.compile(r"/(?:author|authors|contributors|staff|people)/")

# A name token is an honorific, a run of initials, or a capitalized word.
# Only the first two may end in "." so a byline stops at the end of its sentence.
BYLINE_NAME_TOKEN = r"(?:(?:Dr|Mr|Mrs|Ms|Mx|Prof|Rev|Sir)\.|(?:[A-Z]\.)+|[A-Z][\w'’\-]*)"
# "by" is matched case-insensitively; the name must start capitalized
BYLINE_PATTERN = re.compile(
    rf"\b(?i:by)\s+({BYLINE_NAME_TOKEN}(?:[ \t]+{BYLINE_NAME_TOKEN})*)"
)

SKIPPED_HREF_PREFIXES = ("#", "mailto:", "tel:", "javascript:")


def find_byline_author(
    text: str, max_length: int = 50, max_tokens: int = 5
) -> Optional[str]:
    """
    Find a "by <Name>" byline in free text.

    The captured name is rejected when it is too long or has too many
    tokens, which usually means the match swallowed unrelated prose.
    """
    if not text:
        return None
    match = BYLINE_PATTERN.search(text)
    if not match:
        return None
    name = normalize_whitespace(match.group(1)).rstrip(" ,;:")
    if not name or len(name) >= max_length or len(name.split(" ")) >= max_tokens:
        logger.debug(f"Rejected byline candidate: {name!r}")
        return None
    return name


def strip_by_prefix(value: str) -> str:
    return re.sub(r"^by\s+", "", value, flags=re.IGNORECASE).strip()


def _first_result(strategies: Iterable[Callable[..., Optional[str]]], *args) -> Optional[str]:
    """Run strategies in priority order and return the first non-empty value."""
    for strategy in strategies:
        value = strategy(*args)
        if value:
            logger.debug(f"{strategy.__name__} matched: {value!r}")
            return value
    return None


def _iter_json_ld_items(node: Any):
    if isinstance(node, list):
        for item in node:
            yield from _iter_json_ld_items(item)
    elif isinstance(node, dict):
        yield node
        graph = node.get("@graph")
        if isinstance(graph, list):
            yield from _iter_json_ld_items(graph)


def _json_ld_name(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        name = value.get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()
        return None
    if isinstance(value, list):
        for entry in value:
            name = _json_ld_name(entry)
            if name:
                return name
    return None


def _is_article_item(item: Dict[str, Any]) -> bool:
    item_type = item.get("@type")
    types = item_type if isinstance(item_type, list) else [item_type]
    return any(t in JSON_LD_ARTICLE_TYPES for t in types)


def _normalize_host(hostname: Optional[str]) -> str:
    host = (hostname or "").lower()
    return host[4:] if host.startswith("www.") else host


class MarkupExtractor:
    """
    Derives credibility signals from a page's raw HTML.

    Every field is recovered heuristically. Missing or malformed markup
    produces null/False/zero values rather than errors.
    """

    def __init__(
        self,
        lexicons: Lexicons = DEFAULT_LEXICONS,
        max_content_chars: int = 8000,
        author_scan_chars: int = 250,
        max_author_length: int = 50,
        max_author_tokens: int = 5,
        parser: str = "html.parser",
    ):
        """
        Initialize extractor.

        Args:
            lexicons: Keyword tables for policy, opinion and site-type detection
            max_content_chars: Maximum length of extracted main content
            author_scan_chars: Leading content window searched for a byline
            max_author_length: Byline names must be shorter than this
            max_author_tokens: Byline names must have fewer tokens than this
            parser: BeautifulSoup tree builder
        """
        self.lexicons = lexicons
        self.max_content_chars = max_content_chars
        self.author_scan_chars = author_scan_chars
        self.max_author_length = max_author_length
        self.max_author_tokens = max_author_tokens
        self.parser = parser

        self.author_strategies: List[Callable[[BeautifulSoup, str], Optional[str]]] = [
            self._author_from_meta,
            self._author_from_json_ld,
            self._author_from_dom,
            self._author_from_content,
        ]
        self.date_strategies: List[Callable[[BeautifulSoup], Optional[str]]] = [
            self._date_from_meta,
            self._date_from_time_element,
            self._date_from_script_timestamp,
        ]

    def extract(self, html: str, url: str) -> Dict[str, Any]:
        """
        Extract markup-derived signals.

        Args:
            html: Raw page markup
            url: Source URL (used for hostname-based classification)

        Returns:
            Dict keyed by AnalysisData field names, plus "main_content"
            holding the (up to max_content_chars) extracted body text.
        """
        soup = BeautifulSoup(html or "", self.parser)
        hostname = _normalize_host(urlparse(url).hostname)

        title = self.extract_title(soup)
        main_content = self.extract_main_content(html or "")
        author = self.resolve_author(soup, main_content)
        publication_date = self.resolve_publication_date(soup)
        link_count, external_count = self.classify_links(soup, hostname)
        ad_count, ad_density = self.measure_advertising(soup)

        site_type = classify_site_type_from_host(hostname, self.lexicons)
        if site_type == SiteType.UNKNOWN and mentions_wire_service(author, self.lexicons):
            site_type = SiteType.NEWS

        headlines = self.collect_headlines(title, soup)

        signals = {
            "url": url,
            "title": title,
            "author": author,
            "publication_date": publication_date,
            "site_type": site_type,
            "link_count": link_count,
            "external_link_count": external_count,
            "internal_link_count": link_count - external_count,
            "ad_count": ad_count,
            "advertisement_density": ad_density,
            "has_citations": has_citation_markers(main_content, self.lexicons),
            "corrections_policy_found": self.has_policy_link(
                soup, self.lexicons.corrections_policy
            ),
            "ownership_disclosure_found": self.has_policy_link(
                soup, self.lexicons.ownership_disclosure
            ),
            "has_author_bio_link": self.has_author_bio_link(soup, author),
            "author_is_generic": is_generic_author(author, self.lexicons),
            "is_opinion_or_editorial": self.is_opinion_content(main_content),
            "opinion_label_detected": self.has_opinion_label(title, soup),
            "loaded_language_count": count_loaded_language(
                f"{title} {main_content}", self.lexicons
            ),
            "excessive_punctuation_count": count_excessive_punctuation(
                " ".join(headlines)
            ),
            "headline_all_caps_ratio": compute_all_caps_ratio(title),
            "readability_score": calculate_flesch_reading_ease(main_content),
            "main_content": main_content,
        }
        logger.debug(
            f"Extracted signals for {url}: author={author!r}, date={publication_date!r}, "
            f"site_type={site_type.value}, links={link_count}/{external_count}"
        )
        return signals

    # --- Title ---

    def extract_title(self, soup: BeautifulSoup) -> str:
        if soup.title:
            title = normalize_whitespace(soup.title.get_text(" "))
            if title:
                return title
        og_title = soup.find("meta", attrs={"property": "og:title"})
        if og_title and og_title.get("content"):
            return normalize_whitespace(og_title["content"])
        heading = soup.find("h1")
        if heading:
            return normalize_whitespace(heading.get_text(" "))
        return ""

    def collect_headlines(self, title: str, soup: BeautifulSoup) -> List[str]:
        """Title plus h1-h3 texts, each distinct text once (title and h1 often repeat)."""
        headlines: List[str] = []
        seen = set()
        candidates = [title] + [h.get_text(" ") for h in soup.find_all(["h1", "h2", "h3"])]
        for text in candidates:
            text = normalize_whitespace(text)
            if text and text.lower() not in seen:
                seen.add(text.lower())
                headlines.append(text)
        return headlines

    # --- Author ---

    def resolve_author(self, soup: BeautifulSoup, main_content: str) -> Optional[str]:
        author = _first_result(self.author_strategies, soup, main_content)
        return normalize_whitespace(author) if author else None

    def _author_from_meta(self, soup: BeautifulSoup, main_content: str) -> Optional[str]:
        for attrs in AUTHOR_META_SELECTORS:
            tag = soup.find("meta", attrs=attrs)
            if tag and tag.get("content", "").strip():
                return tag["content"].strip()
        return None

    def _author_from_json_ld(self, soup: BeautifulSoup, main_content: str) -> Optional[str]:
        for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue
            try:
                payload = json.loads(raw)
            except ValueError as e:
                logger.debug(f"Skipping malformed JSON-LD block: {e}")
                continue

            for item in _iter_json_ld_items(payload):
                if not _is_article_item(item):
                    continue
                name = _json_ld_name(item.get("author")) or _json_ld_name(
                    item.get("publisher")
                )
                if name:
                    return name
        return None

    def _author_from_dom(self, soup: BeautifulSoup, main_content: str) -> Optional[str]:
        for element in soup.select(AUTHOR_DOM_SELECTOR):
            if element.name == "meta":
                continue
            text = normalize_whitespace(element.get_text(" "))
            if text and len(text) <= MAX_DOM_AUTHOR_CHARS:
                return strip_by_prefix(text) or None
        return None

    def _author_from_content(self, soup: BeautifulSoup, main_content: str) -> Optional[str]:
        return find_byline_author(
            truncate(main_content, self.author_scan_chars),
            max_length=self.max_author_length,
            max_tokens=self.max_author_tokens,
        )

    # --- Publication date ---

    def resolve_publication_date(self, soup: BeautifulSoup) -> Optional[str]:
        return _first_result(self.date_strategies, soup)

    def _date_from_meta(self, soup: BeautifulSoup) -> Optional[str]:
        tag = soup.find("meta", attrs={"property": "article:published_time"})
        if tag and tag.get("content", "").strip():
            return tag["content"].strip()
        return None

    def _date_from_time_element(self, soup: BeautifulSoup) -> Optional[str]:
        tag = soup.find("time", attrs={"datetime": True})
        if tag and tag["datetime"].strip():
            return tag["datetime"].strip()
        return None

    def _date_from_script_timestamp(self, soup: BeautifulSoup) -> Optional[str]:
        for script in soup.find_all("script"):
            text = script.string or script.get_text()
            if not text:
                continue
            match = TIMESTAMP_PATTERN.search(text)
            if not match:
                continue
            try:
                return datetime.fromtimestamp(int(match.group(1)), tz=timezone.utc).isoformat()
            except (OverflowError, OSError, ValueError) as e:
                logger.debug(f"Ignoring invalid embedded timestamp {match.group(1)}: {e}")
        return None

    # --- Main content ---

    def extract_main_content(self, html: str) -> str:
        """
        Pick the most likely article body from a cleaned copy of the page.
        """
        soup = BeautifulSoup(html, self.parser)
        ad_elements = [el for el in soup.find_all(True) if self._is_ad_element(el)]
        for element in soup.select(NON_CONTENT_SELECTOR) + ad_elements:
            if not element.decomposed:
                element.decompose()

        blocks = []
        for selector in CONTENT_CANDIDATE_SELECTORS:
            for element in soup.select(selector):
                text = normalize_whitespace(element.get_text(" "))
                if text:
                    blocks.append(text)

        if not blocks:
            paragraphs = " ".join(p.get_text(" ") for p in soup.find_all("p"))
            if normalize_whitespace(paragraphs):
                blocks.append(paragraphs)

        if not blocks:
            root = soup.body or soup
            blocks.append(root.get_text(" "))

        return truncate(extract_largest_text_block(blocks), self.max_content_chars)

    # --- Links ---

    def classify_links(self, soup: BeautifulSoup, hostname: str) -> Tuple[int, int]:
        """
        Count resolvable anchors and those pointing off-site.

        Returns:
            (link_count, external_link_count)
        """
        total = 0
        external = 0
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href or href.lower().startswith(SKIPPED_HREF_PREFIXES):
                continue
            total += 1
            if href.lower().startswith("http"):
                link_host = _normalize_host(urlparse(href).hostname)
                if not hostname or hostname not in link_host:
                    external += 1
        return total, external

    # --- Advertising ---

    def _is_ad_element(self, element: Tag) -> bool:
        classes = element.get("class") or []
        if isinstance(classes, str):
            classes = [classes]
        identity = " ".join(classes + [element.get("id") or ""])
        if identity.strip() and AD_TOKEN_PATTERN.search(identity):
            return True
        if any(AD_ATTRIBUTE_PATTERN.match(attr) for attr in element.attrs):
            return True
        if element.name == "iframe":
            src = (element.get("src") or "").lower()
            return any(marker in src for marker in AD_IFRAME_SOURCES)
        return False

    def measure_advertising(self, soup: BeautifulSoup) -> Tuple[int, float]:
        ad_count = sum(1 for el in soup.find_all(True) if self._is_ad_element(el))
        blocks = len(soup.find_all(CONTENT_BLOCK_TAGS))
        density = min(1.0, max(0.0, ad_count / max(1, blocks)))
        return ad_count, density

    # --- Policy and disclosure links ---

    def has_policy_link(self, soup: BeautifulSoup, keywords: Sequence[str]) -> bool:
        terms = [kw.lower() for kw in keywords]
        for anchor in soup.find_all("a"):
            text = normalize_whitespace(anchor.get_text(" ")).lower()
            href = (anchor.get("href") or "").lower()
            for term in terms:
                if term in text or term in href or term.replace(" ", "-") in href:
                    return True
        return False

    def has_author_bio_link(self, soup: BeautifulSoup, author: Optional[str]) -> bool:
        text_pattern = compile_terms(self.lexicons.author_bio)
        if text_pattern is None:
            return False
        href_terms = [
            re.compile(rf"(?<![a-z]){re.escape(term.lower().replace(' ', '-'))}(?![a-z])")
            for term in self.lexicons.author_bio
        ]
        author_lower = author.lower() if author else None
        author_slug = re.sub(r"[^a-z0-9]+", "-", author_lower).strip("-") if author_lower else None

        for anchor in soup.find_all("a"):
            text = normalize_whitespace(anchor.get_text(" ")).lower()
            href = (anchor.get("href") or "").lower()
            references_bio = bool(text_pattern.search(text)) or any(
                p.search(href) for p in href_terms
            )
            if not references_bio:
                continue
            names_author = bool(author_lower) and (
                author_lower in text or (bool(author_slug) and author_slug in href)
            )
            if names_author or AUTHOR_PATH_PATTERN.search(href):
                return True
        return False

    # --- Opinion ---

    def is_opinion_content(self, main_content: str) -> bool:
        pattern = compile_terms(self.lexicons.opinion_indicators)
        return bool(pattern and pattern.search(main_content or ""))

    def has_opinion_label(self, title: str, soup: Optional[BeautifulSoup] = None) -> bool:
        if title_has_opinion_label(title, self.lexicons):
            return True
        if soup is None:
            return False
        pattern = compile_terms(self.lexicons.opinion_indicators)
        if pattern is None:
            return False
        for key in OPINION_META_KEYS:
            for attr in ("property", "name"):
                tag = soup.find("meta", attrs={attr: key})
                if tag and pattern.search(tag.get("content", "")):
                    return True
        return False


def title_has_opinion_label(title: str, lexicons: Lexicons = DEFAULT_LEXICONS) -> bool:
    """A title starting with, or containing "<indicator>:", is explicitly labeled."""
    if not title:
        return False
    stripped = title.strip()
    for indicator in lexicons.opinion_indicators:
        escaped = re.escape(indicator)
        if re.match(rf"{escaped}\b", stripped, re.IGNORECASE):
            return True
        if re.search(rf"\b{escaped}\s*:", stripped, re.IGNORECASE):
            return True
    return False
