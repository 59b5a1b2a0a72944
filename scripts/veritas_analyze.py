#!/usr/bin/env python3
# scripts/veritas_analyze.py

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from veritas.core.config import FetchConfig, load_config
from veritas.core.pipeline import CredibilityPipeline
from veritas.normalize.schema import AnalysisResult

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("veritas_analyze")


def create_session(fetch_config: FetchConfig) -> requests.Session:
    session = requests.Session()
    retry_strategy = Retry(
        total=fetch_config.retries,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": fetch_config.user_agent})
    return session


def fetch_page(url: str, fetch_config: FetchConfig) -> str:
    """Fetch raw page markup. Raises requests.RequestException on failure."""
    with create_session(fetch_config) as session:
        response = session.get(url, timeout=fetch_config.timeout)
        response.raise_for_status()
        return response.text


def result_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Convert AnalysisResult to a JSON-serializable dict with contract field names."""
    return result.model_dump(mode="json", by_alias=True)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Veritas Content Credibility Analyzer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch and score a page
  veritas_analyze.py --url https://example.com/story

  # Score markup saved earlier (URL still needed for site classification)
  veritas_analyze.py --html-file story.html --url https://example.com/story

  # Score pasted text when the page blocks automated fetches
  veritas_analyze.py --text-file pasted.txt --output result.json
        """,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--html-file", help="Path to saved page markup")
    source.add_argument("--text", help="Raw pasted article text")
    source.add_argument("--text-file", help="Path to a file of pasted article text")
    parser.add_argument("--url", help="Page URL (fetched unless --html-file is given)")

    parser.add_argument("--output", help="Output JSON file path (default: stdout)")
    parser.add_argument(
        "--summary-payload",
        action="store_true",
        help="Also emit the signal map handed to AI summarizers",
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="Configuration file path (default: config/config.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if not any([args.url, args.html_file, args.text is not None, args.text_file]):
        parser.error("One input source (--url, --html-file, --text, --text-file) is required")
    if args.html_file and not args.url:
        parser.error("--html-file requires --url for hostname classification")

    try:
        config = load_config(args.config)
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        sys.exit(1)

    pipeline = CredibilityPipeline(config)

    try:
        if args.text is not None or args.text_file:
            text = (
                args.text
                if args.text is not None
                else Path(args.text_file).read_text(encoding="utf-8")
            )
            result = pipeline.analyze_text(text)
        else:
            if args.html_file:
                html = Path(args.html_file).read_text(encoding="utf-8", errors="replace")
            else:
                logger.info(f"Fetching {args.url}")
                html = fetch_page(args.url, config.fetch)
            result = pipeline.analyze_html(html, args.url)
    except requests.RequestException as e:
        logger.error(f"Failed to fetch URL: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to analyze input: {e}")
        sys.exit(1)

    output: Dict[str, Any] = {"result": result_to_dict(result)}
    if args.summary_payload:
        output["summaryPayload"] = pipeline.summary_payload(result)

    rendered = json.dumps(output, indent=2)
    if args.output:
        output_path = Path(args.output).resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered, encoding="utf-8")
        logger.info(f"Analysis complete. Score {result.score}/100 written to {output_path}")
    else:
        print(rendered)


if __name__ == "__main__":
    main()
