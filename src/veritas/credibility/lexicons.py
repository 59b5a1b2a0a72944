# src/veritas/credibility/lexicons.py

import re
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from veritas.normalize.schema import SiteType

LEXICON_VERSION = "2024.1"

# Emotionally charged vocabulary used as a bias proxy
LOADED_LANGUAGE_WORDS: Tuple[str, ...] = (
    "shocking",
    "outrageous",
    "disaster",
    "catastrophic",
    "devastating",
    "unbelievable",
    "unprecedented",
    "scandal",
    "corrupt",
    "corruption",
    "miracle",
    "nightmare",
    "terrifying",
    "horrifying",
    "furious",
    "furor",
    "slam",
    "slams",
    "blast",
    "blasts",
    "panic",
    "chaos",
    "explosive",
    "outrage",
    "absolutely",
    "disgrace",
    "disgraceful",
    "sweeping",
    "game-changing",
    "massive",
    "alarming",
    "crisis",
)

OPINION_INDICATORS: Tuple[str, ...] = (
    "opinion",
    "editorial",
    "commentary",
    "analysis",
    "perspective",
)

CORRECTIONS_POLICY_KEYWORDS: Tuple[str, ...] = (
    "correction",
    "corrections policy",
    "errata",
    "erratum",
    "retraction",
    "clarifications",
)

OWNERSHIP_DISCLOSURE_KEYWORDS: Tuple[str, ...] = (
    "about us",
    "ownership",
    "owned by",
    "funding",
    "funded by",
    "who we are",
    "our funders",
    "financial supporters",
    "editorial independence",
    "transparency",
)

AUTHOR_BIO_KEYWORDS: Tuple[str, ...] = (
    "bio",
    "biography",
    "about the author",
)

# Role or desk labels that do not identify a person or organization
GENERIC_AUTHOR_LABELS: Tuple[str, ...] = (
    "staff",
    "staff writer",
    "staff reporter",
    "newsroom",
    "news desk",
    "desk",
    "admin",
    "administrator",
    "editor",
    "editors",
    "editorial team",
    "web team",
    "team",
    "contributor",
    "guest",
    "anonymous",
    "unknown",
)

WIRE_SERVICES: Tuple[str, ...] = (
    "associated press",
    "reuters",
    "afp",
    "agence france-presse",
    "bloomberg",
    "bbc",
    "cnn",
    "npr",
    "the new york times",
    "the washington post",
    "the guardian",
)

CITATION_MARKERS: Tuple[str, ...] = (
    "references",
    "sources",
    "citations",
)

# Ordered: the first matching group wins
SITE_TYPE_KEYWORDS: Mapping[SiteType, Tuple[str, ...]] = MappingProxyType({
    SiteType.ENCYCLOPEDIA: ("wikipedia", "britannica", "encyclopedia"),
    SiteType.NEWS: (
        "news",
        "bbc",
        "cnn",
        "reuters",
        "apnews",
        "nytimes",
        "washingtonpost",
        "theguardian",
        "npr",
        "aljazeera",
    ),
    SiteType.BLOG: ("blog", "medium", "substack", "wordpress", "tumblr"),
    SiteType.SCIENCE: ("science", "nature", "cell", "plos", "arxiv", "pubmed"),
    SiteType.FORUM: ("forum", "reddit", "quora", "stackexchange", "stackoverflow"),
})


class Lexicons(BaseModel):
    """
    Versioned keyword tables consulted by extraction and text metrics.

    Passed explicitly to every function that needs a table so callers can
    substitute alternative vocabularies.
    """

    model_config = ConfigDict(frozen=True)

    version: str = LEXICON_VERSION
    loaded_language: Tuple[str, ...] = LOADED_LANGUAGE_WORDS
    opinion_indicators: Tuple[str, ...] = OPINION_INDICATORS
    corrections_policy: Tuple[str, ...] = CORRECTIONS_POLICY_KEYWORDS
    ownership_disclosure: Tuple[str, ...] = OWNERSHIP_DISCLOSURE_KEYWORDS
    author_bio: Tuple[str, ...] = AUTHOR_BIO_KEYWORDS
    generic_authors: Tuple[str, ...] = GENERIC_AUTHOR_LABELS
    wire_services: Tuple[str, ...] = WIRE_SERVICES
    citation_markers: Tuple[str, ...] = CITATION_MARKERS
    site_types: Mapping[SiteType, Tuple[str, ...]] = SITE_TYPE_KEYWORDS

    @field_validator("site_types", mode="after")
    @classmethod
    def freeze_site_types(cls, v: Mapping[SiteType, Tuple[str, ...]]) -> Mapping[SiteType, Tuple[str, ...]]:
        """Read-only view; the default tables are shared by every extractor."""
        return MappingProxyType(dict(v))

    @field_serializer("site_types")
    def dump_site_types(self, v: Mapping[SiteType, Tuple[str, ...]]):
        return dict(v)


DEFAULT_LEXICONS = Lexicons()

_FILLER_WORDS = re.compile(r"\b(?:the|a|an|by|of|and|our)\b", re.IGNORECASE)


def compile_terms(terms: Tuple[str, ...], whole_word: bool = True) -> Optional[re.Pattern]:
    """
    Build a case-insensitive alternation over escaped terms.

    Returns None for an empty table so callers can short-circuit.
    """
    if not terms:
        return None
    # Longest first so multi-word phrases beat their own prefixes
    ordered = sorted(terms, key=len, reverse=True)
    body = "|".join(re.escape(term) for term in ordered)
    if whole_word:
        return re.compile(rf"\b(?:{body})\b", re.IGNORECASE)
    return re.compile(rf"(?:{body})", re.IGNORECASE)


def is_generic_author(
    author: Optional[str], lexicons: Lexicons = DEFAULT_LEXICONS
) -> bool:
    """
    Check whether an author string is a role/desk label.

    "Staff" or "The Newsroom" are generic; "Reuters Staff" and
    "Jane Smith, Staff Writer" still name someone and are not.
    """
    if not author:
        return False
    value = re.sub(r"^by\s+", "", author.strip(), flags=re.IGNORECASE)
    pattern = compile_terms(lexicons.generic_authors)
    if not pattern or not pattern.search(value):
        return False
    remainder = pattern.sub(" ", value)
    remainder = _FILLER_WORDS.sub(" ", remainder)
    return not re.search(r"[^\W\d_]", remainder)


def mentions_wire_service(
    author: Optional[str], lexicons: Lexicons = DEFAULT_LEXICONS
) -> bool:
    if not author:
        return False
    pattern = compile_terms(lexicons.wire_services)
    return bool(pattern and pattern.search(author))


def classify_site_type_from_host(
    hostname: str, lexicons: Lexicons = DEFAULT_LEXICONS
) -> SiteType:
    """Match the hostname against the ordered keyword groups."""
    host = (hostname or "").lower()
    for site_type, keywords in lexicons.site_types.items():
        if any(keyword in host for keyword in keywords):
            return site_type
    return SiteType.UNKNOWN


def classify_site_type_from_text(
    text: str, lexicons: Lexicons = DEFAULT_LEXICONS
) -> SiteType:
    """Keyword containment over free text; no hostname is available."""
    for site_type, keywords in lexicons.site_types.items():
        pattern = compile_terms(keywords)
        if pattern and pattern.search(text or ""):
            return site_type
    return SiteType.UNKNOWN
