# src/veritas/credibility/scorer.py

import logging
import math
from collections.abc import Mapping
from typing import Any, List, Optional, Union

from dateutil import parser as date_parser
from pydantic import BaseModel, Field

from veritas.normalize.schema import (
    AnalysisData,
    AnalysisResult,
    Dimension,
    ScoreModifier,
    Severity,
)

logger = logging.getLogger(__name__)

BASELINE_SCORE = 100


class ScoringConfig(BaseModel):
    """
    Tunable rule constants. Penalties are stored as positive magnitudes.
    """

    corrections_policy_bonus: float = Field(10, ge=0)
    corrections_policy_penalty: float = Field(10, ge=0)
    ownership_disclosure_bonus: float = Field(5, ge=0)
    ownership_disclosure_penalty: float = Field(5, ge=0)

    author_bonus: float = Field(10, ge=0)
    author_penalty: float = Field(15, ge=0)
    author_bio_bonus: float = Field(5, ge=0)

    no_external_links_penalty: float = Field(10, ge=0)
    external_link_weight: float = Field(1.5, ge=0)
    max_external_link_bonus: float = Field(15, ge=0)
    internal_link_weight: float = Field(0.5, ge=0)
    max_internal_link_bonus: float = Field(5, ge=0)
    unlabeled_opinion_penalty: float = Field(8, ge=0)

    loaded_language_weight: float = Field(1.5, ge=0)
    max_loaded_language_penalty: float = Field(20, ge=0)
    excessive_punctuation_weight: float = Field(3, ge=0)
    all_caps_threshold: float = Field(0.3, ge=0, le=1)
    all_caps_penalty: float = Field(5, ge=0)

    publication_date_bonus: float = Field(5, ge=0)
    publication_date_penalty: float = Field(10, ge=0)
    ad_density_threshold: float = Field(0.4, ge=0, le=1)
    ad_density_penalty: float = Field(5, ge=0)
    readability_threshold: float = Field(30, ge=0, le=100)
    readability_penalty: float = Field(5, ge=0)


def is_parseable_date(value: Optional[str]) -> bool:
    if not value or not value.strip():
        return False
    try:
        date_parser.parse(value)
        return True
    except (ValueError, OverflowError) as e:
        logger.debug(f"Unparseable publication date {value!r}: {e}")
        return False


class CredibilityScorer:
    """
    Scores an AnalysisData record across five credibility dimensions.

    Starts from a baseline of 100 and appends one ScoreModifier per rule that
    fires. Rules are evaluated in a fixed order so the modifier list is
    reproducible; the numeric result does not depend on that order.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def score(self, data: Union[AnalysisData, Mapping]) -> AnalysisResult:
        """
        Score a record.

        Args:
            data: AnalysisData, or a mapping validated into one

        Returns:
            AnalysisResult with the clamped integer score and ordered modifiers.

        Raises:
            TypeError: If data is neither AnalysisData nor a mapping
            pydantic.ValidationError: If a mapping is structurally malformed
        """
        record = self._validate(data)

        modifiers: List[ScoreModifier] = []
        modifiers.extend(self._transparency(record))
        modifiers.extend(self._authority(record))
        modifiers.extend(self._accuracy(record))
        modifiers.extend(self._objectivity(record))
        modifiers.extend(self._presentation(record))

        total = BASELINE_SCORE + sum(m.change for m in modifiers)
        # Half-up rounding; .5 totals are common with 1.5 and 0.5 link weights
        score = int(math.floor(max(0.0, min(100.0, total)) + 0.5))
        logger.debug(f"Scored {record.url}: raw={total:.2f}, final={score}, rules={len(modifiers)}")

        return AnalysisResult(score=score, modifiers=tuple(modifiers), data=record)

    def _validate(self, data: Any) -> AnalysisData:
        if isinstance(data, AnalysisData):
            return data
        if isinstance(data, Mapping):
            return AnalysisData.model_validate(dict(data))
        raise TypeError(
            f"Expected AnalysisData or mapping, got {type(data).__name__}"
        )

    @staticmethod
    def _modifier(
        dimension: Dimension,
        criterion: str,
        factor: str,
        change: float,
        reason: str,
        severity: Severity,
        tag: str,
    ) -> ScoreModifier:
        return ScoreModifier(
            dimension=dimension,
            criterion=criterion,
            factor=factor,
            change=round(change, 2) + 0.0,  # no -0.0
            reason=reason,
            severity=severity,
            tag=tag,
        )

    # --- 1. Transparency & Accountability ---

    def _transparency(self, data: AnalysisData) -> List[ScoreModifier]:
        cfg = self.config
        dim = Dimension.TRANSPARENCY
        modifiers = []

        if data.corrections_policy_found:
            modifiers.append(self._modifier(
                dim, "1.1 Corrections Policy", "Corrections Policy",
                cfg.corrections_policy_bonus,
                "A corrections or errata policy is linked, showing the publisher owns its mistakes.",
                Severity.MAJOR, "corrections-policy",
            ))
        else:
            modifiers.append(self._modifier(
                dim, "1.1 Corrections Policy", "Corrections Policy",
                -cfg.corrections_policy_penalty,
                "No corrections policy was found, so errors may go unacknowledged.",
                Severity.MAJOR, "corrections-policy",
            ))

        if data.ownership_disclosure_found:
            modifiers.append(self._modifier(
                dim, "1.2 Ownership Disclosure", "Ownership & Funding",
                cfg.ownership_disclosure_bonus,
                "Ownership, funding or about-us information is disclosed.",
                Severity.MINOR, "ownership-disclosure",
            ))
        else:
            modifiers.append(self._modifier(
                dim, "1.2 Ownership Disclosure", "Ownership & Funding",
                -cfg.ownership_disclosure_penalty,
                "No ownership or funding disclosure was found.",
                Severity.MINOR, "ownership-disclosure",
            ))
        return modifiers

    # --- 2. Authority & Sourcing ---

    def _authority(self, data: AnalysisData) -> List[ScoreModifier]:
        cfg = self.config
        dim = Dimension.AUTHORITY
        modifiers = []

        if data.author and not data.author_is_generic:
            modifiers.append(self._modifier(
                dim, "2.1 Identifiable Authorship", "Author",
                cfg.author_bonus,
                f'Author "{data.author}" is identified, indicating accountability.',
                Severity.CRITICAL, "author",
            ))
        elif data.author:
            modifiers.append(self._modifier(
                dim, "2.1 Identifiable Authorship", "Author",
                -cfg.author_penalty,
                f'Author "{data.author}" is a generic label rather than an identifiable person or organization.',
                Severity.CRITICAL, "author-generic",
            ))
        else:
            modifiers.append(self._modifier(
                dim, "2.1 Identifiable Authorship", "Author",
                -cfg.author_penalty,
                "No clear author or publisher was found, reducing accountability.",
                Severity.CRITICAL, "author-missing",
            ))

        # Bio bonus stacks on an identified author only
        if data.has_author_bio_link and data.author and not data.author_is_generic:
            modifiers.append(self._modifier(
                dim, "2.2 Author Biography", "Author Bio",
                cfg.author_bio_bonus,
                "The author links to a biography describing their background.",
                Severity.MINOR, "author-bio",
            ))
        return modifiers

    # --- 3. Accuracy & Verifiability ---

    def _accuracy(self, data: AnalysisData) -> List[ScoreModifier]:
        cfg = self.config
        dim = Dimension.ACCURACY
        modifiers = []

        external = data.external_link_count
        if external == 0:
            modifiers.append(self._modifier(
                dim, "3.1 External Sourcing", "External Links",
                -cfg.no_external_links_penalty,
                "No external links were found, so claims cannot be traced to outside sources.",
                Severity.MAJOR, "external-links",
            ))
        else:
            modifiers.append(self._modifier(
                dim, "3.1 External Sourcing", "External Links",
                min(cfg.external_link_weight * external, cfg.max_external_link_bonus),
                f"{external} external link(s) point readers to outside sources.",
                Severity.VARIABLE, "external-links",
            ))

        internal = data.internal_link_count
        if internal > 0:
            modifiers.append(self._modifier(
                dim, "3.2 Internal Linking", "Internal Links",
                min(cfg.internal_link_weight * internal, cfg.max_internal_link_bonus),
                f"{internal} internal link(s) connect to related coverage on the same site.",
                Severity.VARIABLE, "internal-links",
            ))

        if data.is_opinion_or_editorial:
            if data.opinion_label_detected:
                modifiers.append(self._modifier(
                    dim, "3.3 Opinion Labeling", "Opinion Content",
                    0.0,
                    "Opinion content is explicitly labeled as such.",
                    Severity.VARIABLE, "opinion-labeled",
                ))
            else:
                modifiers.append(self._modifier(
                    dim, "3.3 Opinion Labeling", "Opinion Content",
                    -cfg.unlabeled_opinion_penalty,
                    "The content reads as opinion or commentary but is not labeled as such.",
                    Severity.MAJOR, "opinion-unlabeled",
                ))
        return modifiers

    # --- 4. Objectivity & Tone ---

    def _objectivity(self, data: AnalysisData) -> List[ScoreModifier]:
        cfg = self.config
        dim = Dimension.OBJECTIVITY
        modifiers = []

        loaded = data.loaded_language_count
        if loaded > 0:
            modifiers.append(self._modifier(
                dim, "4.1 Loaded Language", "Loaded Language",
                -min(cfg.loaded_language_weight * loaded, cfg.max_loaded_language_penalty),
                f"{loaded} emotionally charged term(s) suggest a sensational tone.",
                Severity.VARIABLE, "loaded-language",
            ))

        punctuation = data.excessive_punctuation_count
        if punctuation > 0:
            modifiers.append(self._modifier(
                dim, "4.2 Excessive Punctuation", "Punctuation",
                -cfg.excessive_punctuation_weight * punctuation,
                f"{punctuation} run(s) of repeated '!' or '?' in headlines.",
                Severity.VARIABLE, "punctuation",
            ))

        if data.headline_all_caps_ratio > cfg.all_caps_threshold:
            modifiers.append(self._modifier(
                dim, "4.3 Headline Capitalization", "All-Caps Headline",
                -cfg.all_caps_penalty,
                f"{data.headline_all_caps_ratio:.0%} of headline letters are capitalized.",
                Severity.MINOR, "all-caps",
            ))
        return modifiers

    # --- 5. Presentation & Currency ---

    def _presentation(self, data: AnalysisData) -> List[ScoreModifier]:
        cfg = self.config
        dim = Dimension.PRESENTATION
        modifiers = []

        if is_parseable_date(data.publication_date):
            modifiers.append(self._modifier(
                dim, "5.1 Publication Date", "Publication Date",
                cfg.publication_date_bonus,
                f"Publication date {data.publication_date} is stated.",
                Severity.MAJOR, "date",
            ))
        elif data.publication_date:
            modifiers.append(self._modifier(
                dim, "5.1 Publication Date", "Publication Date",
                -cfg.publication_date_penalty,
                "A publication date was found but could not be parsed.",
                Severity.MAJOR, "date-invalid",
            ))
        else:
            modifiers.append(self._modifier(
                dim, "5.1 Publication Date", "Publication Date",
                -cfg.publication_date_penalty,
                "No publication date was found.",
                Severity.MAJOR, "date-missing",
            ))

        if data.advertisement_density > cfg.ad_density_threshold:
            modifiers.append(self._modifier(
                dim, "5.2 Advertising Density", "Ad Density",
                -cfg.ad_density_penalty,
                f"Advertising makes up {data.advertisement_density:.0%} of content blocks ({data.ad_count} ad elements).",
                Severity.MINOR, "ads",
            ))

        if data.readability_score < cfg.readability_threshold:
            modifiers.append(self._modifier(
                dim, "5.3 Readability", "Readability",
                -cfg.readability_penalty,
                f"Flesch reading ease of {data.readability_score:.1f} indicates very hard-to-read text.",
                Severity.MINOR, "readability",
            ))
        return modifiers


def calculate_score(
    data: Union[AnalysisData, Mapping], config: Optional[ScoringConfig] = None
) -> AnalysisResult:
    """Score a record with a fresh scorer."""
    return CredibilityScorer(config).score(data)
