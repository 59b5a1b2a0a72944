# src/veritas/report/summary.py

import json
from typing import Any, Dict, Union

from veritas.normalize.schema import AnalysisData, AnalysisResult
from veritas.normalize.text_metrics import truncate

MAX_SNIPPET_CHARS = 2000
NOT_AVAILABLE = "Not available"


def build_summary_payload(
    result: Union[AnalysisResult, AnalysisData], snippet_chars: int = MAX_SNIPPET_CHARS
) -> Dict[str, Any]:
    """
    Build the label -> value map handed to an external summarizer.

    Args:
        result: Scored result, or bare data when no score is available yet
        snippet_chars: Content snippet length, capped at 2000

    Returns:
        JSON-serializable dict keyed by human-readable signal labels.
    """
    if isinstance(result, AnalysisResult):
        data, score = result.data, result.score
    else:
        data, score = result, None

    snippet_chars = min(snippet_chars, MAX_SNIPPET_CHARS)
    payload: Dict[str, Any] = {
        "URL": data.url,
        "Title": data.title,
        "Author": data.author or NOT_AVAILABLE,
        "Publication Date": data.publication_date or NOT_AVAILABLE,
        "Site Type": data.site_type.value,
    }
    if score is not None:
        payload["Credibility Score"] = score

    payload.update({
        "Corrections Policy Found": data.corrections_policy_found,
        "Ownership Disclosure Found": data.ownership_disclosure_found,
        "Author Bio Link": data.has_author_bio_link,
        "Generic Author": data.author_is_generic,
        "External Links": data.external_link_count,
        "Internal Links": data.internal_link_count,
        "Has Citations": data.has_citations,
        "Ad Count": data.ad_count,
        "Advertisement Density": round(data.advertisement_density, 2),
        "Loaded Language Count": data.loaded_language_count,
        "Excessive Punctuation": data.excessive_punctuation_count,
        "Headline All-Caps Ratio": round(data.headline_all_caps_ratio, 2),
        "Readability (Flesch)": data.readability_score,
        "Opinion/Editorial": data.is_opinion_or_editorial,
        "Opinion Label Detected": data.opinion_label_detected,
        "Content Snippet": truncate(data.content, snippet_chars),
    })
    return payload


def summary_payload_json(
    result: Union[AnalysisResult, AnalysisData], snippet_chars: int = MAX_SNIPPET_CHARS
) -> str:
    return json.dumps(build_summary_payload(result, snippet_chars), indent=2)
