# src/veritas/normalize/transformer.py

import logging
import re
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

from veritas.credibility.lexicons import (
    DEFAULT_LEXICONS,
    Lexicons,
    classify_site_type_from_text,
    compile_terms,
    is_generic_author,
)
from veritas.ingest.markup import (
    MarkupExtractor,
    find_byline_author,
    title_has_opinion_label,
)
from veritas.normalize.schema import AnalysisData
from veritas.normalize.text_metrics import (
    calculate_flesch_reading_ease,
    compute_all_caps_ratio,
    count_excessive_punctuation,
    count_loaded_language,
    has_citation_markers,
    normalize_whitespace,
    truncate,
)

logger = logging.getLogger(__name__)

MANUAL_INPUT_URL = "manual-input"
PASTED_TITLE_MARKER = "(Pasted Text)"
URL_OCCURRENCE_PATTERN = re.compile(r"https?://", re.IGNORECASE)


def validate_url(url: str) -> str:
    """
    Ensure the URL is absolute http(s) with a host.

    Raises:
        ValueError: If the URL is unusable for hostname classification
    """
    if not isinstance(url, str) or not url.strip():
        raise ValueError("Please enter a valid URL, including https://")
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValueError(f"Please enter a valid URL, including https:// (got {url!r})")
    return url.strip()


class SignalAssembler:
    """
    Builds the canonical AnalysisData record from either a fetched page or
    pasted text. Downstream scoring cannot tell which path produced it.
    """

    def __init__(
        self,
        lexicons: Lexicons = DEFAULT_LEXICONS,
        max_content_chars: int = 8000,
        summary_content_chars: int = 5000,
        author_scan_chars: int = 250,
        text_author_scan_chars: int = 500,
        pasted_title_chars: int = 120,
        max_author_length: int = 50,
        max_author_tokens: int = 5,
        html_parser: str = "html.parser",
    ):
        self.lexicons = lexicons
        self.summary_content_chars = summary_content_chars
        self.text_author_scan_chars = text_author_scan_chars
        self.pasted_title_chars = pasted_title_chars
        self.max_author_length = max_author_length
        self.max_author_tokens = max_author_tokens
        self.extractor = MarkupExtractor(
            lexicons=lexicons,
            max_content_chars=max_content_chars,
            author_scan_chars=author_scan_chars,
            max_author_length=max_author_length,
            max_author_tokens=max_author_tokens,
            parser=html_parser,
        )

    def from_page(self, html: str, url: str) -> AnalysisData:
        """
        Assemble signals from fetched markup.

        Args:
            html: Raw HTML as returned by the fetch layer
            url: Originating URL

        Returns:
            AnalysisData with content truncated for downstream consumers.
        """
        url = validate_url(url)
        signals = self.extractor.extract(html, url)
        main_content = signals.pop("main_content")

        if not main_content:
            logger.warning(f"No readable content extracted from {url}")

        return AnalysisData(
            **signals,
            content=truncate(main_content, self.summary_content_chars),
        )

    def from_text(self, text: str, now: Optional[datetime] = None) -> AnalysisData:
        """
        Assemble signals from pasted text when no DOM is available.

        Args:
            text: Raw pasted article text
            now: Processing time used as the publication date (default: UTC now)

        Raises:
            ValueError: If the text is empty
        """
        if not isinstance(text, str) or not text.strip():
            raise ValueError("Pasted text must not be empty")

        content = normalize_whitespace(text)
        now = now or datetime.now(timezone.utc)

        author = find_byline_author(
            truncate(text, self.text_author_scan_chars),
            max_length=self.max_author_length,
            max_tokens=self.max_author_tokens,
        )
        title = (
            f"{truncate(content, self.pasted_title_chars).strip()} {PASTED_TITLE_MARKER}"
        )
        url_count = len(URL_OCCURRENCE_PATTERN.findall(text))
        opinion_pattern = compile_terms(self.lexicons.opinion_indicators)

        logger.debug(f"Assembled pasted text: {len(content)} chars, author={author!r}")

        return AnalysisData(
            url=MANUAL_INPUT_URL,
            title=title,
            author=author,
            publication_date=now.isoformat(),
            site_type=classify_site_type_from_text(content, self.lexicons),
            link_count=url_count,
            external_link_count=url_count,
            internal_link_count=0,
            ad_count=0,
            advertisement_density=0.0,
            has_citations=has_citation_markers(content, self.lexicons),
            corrections_policy_found=False,
            ownership_disclosure_found=False,
            has_author_bio_link=False,
            author_is_generic=is_generic_author(author, self.lexicons),
            is_opinion_or_editorial=bool(opinion_pattern and opinion_pattern.search(content)),
            opinion_label_detected=title_has_opinion_label(title, self.lexicons),
            loaded_language_count=count_loaded_language(content, self.lexicons),
            excessive_punctuation_count=count_excessive_punctuation(
                truncate(content, self.pasted_title_chars)
            ),
            headline_all_caps_ratio=compute_all_caps_ratio(
                truncate(content, self.pasted_title_chars)
            ),
            readability_score=calculate_flesch_reading_ease(content),
            content=truncate(content, self.summary_content_chars),
        )
