# tests/unit/test_config.py

import pytest
from pydantic import ValidationError

from veritas.core.config import ExtractionConfig, VeritasConfig, load_config
from veritas.credibility.lexicons import DEFAULT_LEXICONS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "VERITAS_HTML_PARSER",
        "VERITAS_MAX_CONTENT_CHARS",
        "VERITAS_FETCH_TIMEOUT",
        "VERITAS_USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Test YAML loading and fallbacks."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.yaml")
        assert config.extraction.max_content_chars == 8000
        assert config.extraction.summary_content_chars == 5000
        assert config.extraction.ai_snippet_chars == 2000
        assert config.scoring.all_caps_threshold == 0.3
        assert config.fetch.timeout == 10.0
        assert config.lexicons == DEFAULT_LEXICONS

    def test_yaml_values_applied(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "extraction:\n"
            "  max_content_chars: 4000\n"
            "scoring:\n"
            "  all_caps_threshold: 0.5\n"
            "  loaded_language_weight: 2\n"
            "lexicons:\n"
            "  version: custom-1\n"
            "  loaded_language: [foo, bar]\n",
            encoding="utf-8",
        )
        config = load_config(config_file)
        assert config.extraction.max_content_chars == 4000
        assert config.scoring.all_caps_threshold == 0.5
        assert config.scoring.loaded_language_weight == 2
        assert config.lexicons.version == "custom-1"
        assert config.lexicons.loaded_language == ("foo", "bar")
        # Untouched tables keep their defaults
        assert config.lexicons.opinion_indicators == DEFAULT_LEXICONS.opinion_indicators

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("", encoding="utf-8")
        assert load_config(config_file).extraction.max_content_chars == 8000

    def test_unreadable_yaml_falls_back(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("extraction: [unclosed\n", encoding="utf-8")
        config = load_config(config_file)
        assert config.extraction.max_content_chars == 8000

    def test_invalid_values_rejected(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("extraction:\n  ai_snippet_chars: 3000\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(config_file)


class TestEnvironmentOverrides:
    """Test VERITAS_* environment overrides."""

    def test_env_overrides_defaults(self, monkeypatch):
        monkeypatch.setenv("VERITAS_MAX_CONTENT_CHARS", "1234")
        monkeypatch.setenv("VERITAS_FETCH_TIMEOUT", "3.5")
        monkeypatch.setenv("VERITAS_USER_AGENT", "veritas-test/1.0")
        config = VeritasConfig()
        assert config.extraction.max_content_chars == 1234
        assert config.fetch.timeout == 3.5
        assert config.fetch.user_agent == "veritas-test/1.0"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("extraction:\n  html_parser: lxml\n", encoding="utf-8")
        monkeypatch.setenv("VERITAS_HTML_PARSER", "html.parser")
        assert load_config(config_file).extraction.html_parser == "html.parser"

    def test_env_applies_to_model_instance(self, monkeypatch):
        monkeypatch.setenv("VERITAS_MAX_CONTENT_CHARS", "777")
        config = VeritasConfig(extraction=ExtractionConfig(max_content_chars=100))
        assert config.extraction.max_content_chars == 777
