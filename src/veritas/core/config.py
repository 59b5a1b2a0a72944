# src/veritas/core/config.py

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from veritas.credibility.lexicons import DEFAULT_LEXICONS, Lexicons
from veritas.credibility.scorer import ScoringConfig

logger = logging.getLogger(__name__)


class ExtractionConfig(BaseModel):
    max_content_chars: int = Field(8000, gt=0)
    summary_content_chars: int = Field(5000, gt=0, le=5000)
    ai_snippet_chars: int = Field(2000, gt=0, le=2000)
    author_scan_chars: int = Field(250, gt=0)
    text_author_scan_chars: int = Field(500, gt=0)
    pasted_title_chars: int = Field(120, gt=0)
    max_author_length: int = Field(50, gt=0)
    max_author_tokens: int = Field(5, gt=0)
    html_parser: str = "html.parser"


class FetchConfig(BaseModel):
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )
    timeout: float = Field(10.0, gt=0)
    retries: int = Field(2, ge=0)


# environment variable -> (section, key)
ENV_OVERRIDES = {
    "VERITAS_HTML_PARSER": ("extraction", "html_parser"),
    "VERITAS_MAX_CONTENT_CHARS": ("extraction", "max_content_chars"),
    "VERITAS_FETCH_TIMEOUT": ("fetch", "timeout"),
    "VERITAS_USER_AGENT": ("fetch", "user_agent"),
}


class VeritasConfig(BaseModel):
    """
    Main configuration model for Veritas.
    """

    model_config = ConfigDict(populate_by_name=True)

    extraction: ExtractionConfig = Field(
        default_factory=ExtractionConfig, validate_default=True
    )
    fetch: FetchConfig = Field(default_factory=FetchConfig, validate_default=True)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    lexicons: Lexicons = DEFAULT_LEXICONS

    @field_validator("extraction", "fetch", mode="before")
    @classmethod
    def load_overrides_from_env(cls, v: Any, info: ValidationInfo) -> Dict[str, Any]:
        """Override config values with environment variables if present."""
        if isinstance(v, BaseModel):
            v = v.model_dump()
        if not isinstance(v, dict):
            v = {}
        v = dict(v)

        for env_var, (section, key) in ENV_OVERRIDES.items():
            if section == info.field_name and env_var in os.environ:
                v[key] = os.environ[env_var]
        return v


def load_config(config_path: Optional[Union[str, Path]] = None) -> VeritasConfig:
    """
    Load Veritas configuration from YAML file.

    Args:
        config_path: Path to config.yaml (default: ./config/config.yaml)

    Returns:
        Validated VeritasConfig instance.
    """
    if config_path is None:
        config_path = Path("config") / "config.yaml"
    else:
        config_path = Path(config_path)

    config_data = {}
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
            logger.info(f"Loaded configuration from {config_path}")
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config file {config_path}: {e}")
    else:
        logger.info(f"Config file not found at {config_path}, using defaults")

    # Env vars override file values
    config = VeritasConfig(**config_data)

    logger.debug("Veritas configuration loaded with settings:")
    logger.debug(f"  HTML parser: {config.extraction.html_parser}")
    logger.debug(f"  Max content chars: {config.extraction.max_content_chars}")
    logger.debug(f"  Lexicon version: {config.lexicons.version}")
    logger.debug(f"  Fetch timeout: {config.fetch.timeout}s")

    return config
