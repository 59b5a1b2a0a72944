# src/veritas/core/pipeline.py

import logging
import time
from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

from veritas.core.config import VeritasConfig
from veritas.credibility.scorer import CredibilityScorer
from veritas.normalize.schema import AnalysisData, AnalysisResult
from veritas.normalize.transformer import SignalAssembler
from veritas.report.summary import build_summary_payload

logger = logging.getLogger(__name__)


class CredibilityPipeline:
    """
    End-to-end credibility analysis: signal assembly followed by scoring.

    Holds configuration only; every call is independent, so one instance
    can serve concurrent requests.
    """

    def __init__(self, config: Optional[VeritasConfig] = None):
        """
        Initialize pipeline.

        Args:
            config: Validated configuration (defaults when omitted)
        """
        self.config = config or VeritasConfig()
        extraction = self.config.extraction
        self.assembler = SignalAssembler(
            lexicons=self.config.lexicons,
            max_content_chars=extraction.max_content_chars,
            summary_content_chars=extraction.summary_content_chars,
            author_scan_chars=extraction.author_scan_chars,
            text_author_scan_chars=extraction.text_author_scan_chars,
            pasted_title_chars=extraction.pasted_title_chars,
            max_author_length=extraction.max_author_length,
            max_author_tokens=extraction.max_author_tokens,
            html_parser=extraction.html_parser,
        )
        self.scorer = CredibilityScorer(self.config.scoring)

    def analyze_html(self, html: str, url: str) -> AnalysisResult:
        """
        Analyze already-fetched page markup.

        Args:
            html: Raw HTML supplied by the fetch layer
            url: Originating URL

        Returns:
            Scored AnalysisResult.
        """
        start_time = time.time()
        logger.info(f"Analyzing page: {url}")

        data = self.assembler.from_page(html, url)
        result = self.scorer.score(data)

        elapsed = time.time() - start_time
        logger.info(
            f"Scored {url}: {result.score}/100 from {len(result.modifiers)} modifiers "
            f"in {elapsed:.2f} seconds"
        )
        return result

    def analyze_text(self, text: str) -> AnalysisResult:
        """
        Analyze pasted text for pages that could not be fetched.
        """
        logger.info(f"Analyzing pasted text ({len(text or '')} chars)")
        data = self.assembler.from_text(text)
        result = self.scorer.score(data)
        logger.info(f"Scored pasted text: {result.score}/100")
        return result

    def score(self, data: Union[AnalysisData, Mapping]) -> AnalysisResult:
        return self.scorer.score(data)

    def summary_payload(self, result: AnalysisResult) -> Dict[str, Any]:
        return build_summary_payload(
            result, snippet_chars=self.config.extraction.ai_snippet_chars
        )
