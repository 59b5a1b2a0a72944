# src/veritas/normalize/schema.py
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SiteType(str, Enum):
    NEWS = "News"
    ENCYCLOPEDIA = "Encyclopedia"
    BLOG = "Blog"
    FORUM = "Forum"
    SCIENCE = "Science"
    UNKNOWN = "Unknown"


class Dimension(str, Enum):
    TRANSPARENCY = "Transparency & Accountability"
    AUTHORITY = "Authority & Sourcing"
    ACCURACY = "Accuracy & Verifiability"
    OBJECTIVITY = "Objectivity & Tone"
    PRESENTATION = "Presentation & Currency"


class Severity(str, Enum):
    CRITICAL = "Critical"
    MAJOR = "Major"
    MINOR = "Minor"
    VARIABLE = "Variable"


class VeritasModel(BaseModel):
    """Immutable record serialized with camelCase field names."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class AnalysisData(VeritasModel):
    url: str = Field(..., strict=True, description="Analyzed URL or input marker")
    title: str = Field(..., strict=True, description="Page or synthesized title")
    author: Optional[str] = Field(None, strict=True)
    publication_date: Optional[str] = Field(
        None, strict=True, description="ISO-8601 string when known"
    )
    site_type: SiteType = SiteType.UNKNOWN

    link_count: int = Field(0, ge=0, strict=True)
    external_link_count: int = Field(0, ge=0, strict=True)
    internal_link_count: int = Field(0, ge=0, strict=True)

    ad_count: int = Field(0, ge=0, strict=True)
    advertisement_density: float = Field(0.0, ge=0.0, le=1.0, strict=True)

    has_citations: bool = Field(False, strict=True)
    corrections_policy_found: bool = Field(False, strict=True)
    ownership_disclosure_found: bool = Field(False, strict=True)
    has_author_bio_link: bool = Field(False, strict=True)
    author_is_generic: bool = Field(False, strict=True)
    is_opinion_or_editorial: bool = Field(False, strict=True)
    opinion_label_detected: bool = Field(False, strict=True)

    loaded_language_count: int = Field(0, ge=0, strict=True)
    excessive_punctuation_count: int = Field(0, ge=0, strict=True)
    headline_all_caps_ratio: float = Field(0.0, ge=0.0, le=1.0, strict=True)
    readability_score: float = Field(100.0, ge=0.0, le=100.0, strict=True)

    content: str = Field("", max_length=5000, strict=True)


class ScoreModifier(VeritasModel):
    dimension: Dimension
    criterion: str = Field(..., description="Stable sub-identifier, e.g. '2.1 Identifiable Authorship'")
    factor: str
    change: float
    reason: str
    severity: Severity
    tag: str = Field(..., description="Symbolic tag resolved to an icon by the UI")


class AnalysisResult(VeritasModel):
    score: int = Field(ge=0, le=100)
    modifiers: Tuple[ScoreModifier, ...] = ()
    data: AnalysisData
