#!/usr/bin/env python3
"""
AppGuard web application security scanner - CLI entry point.

Usage:
  python main.py https://example.com
  python main.py https://example.com --level quick
  python main.py https://example.com --limit 25 -o report.json
  python main.py https://example.com --rules rules.yaml --config myconfig.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.logging import RichHandler

# Allow running from project root
sys.path.insert(0, str(Path(__file__).resolve().parent))

from appguard.config import load_config
from appguard.custom_rules import load_rules
from appguard.engine import run_scan
from appguard.errors import InvalidTarget
from appguard.models import CrawlRequest, ScanLevel
from appguard.report import print_console, write_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="AppGuard - Crawl a web application and check it for common security weaknesses.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("url", help="Target URL (e.g. https://example.com)")
    parser.add_argument(
        "--level",
        choices=[level.value for level in ScanLevel],
        default=ScanLevel.STANDARD.value,
        help="quick scans only the given URL; standard/detailed follow same-origin links",
    )
    parser.add_argument(
        "--limit",
        type=int,
        metavar="N",
        help="Maximum number of pages to scan (default: crawl.max_pages from config)",
    )
    parser.add_argument(
        "--rules",
        metavar="FILE",
        help="YAML file with custom regex rules to apply to every page",
    )
    parser.add_argument(
        "-o", "--output",
        metavar="FILE",
        help="Write JSON report to FILE",
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        metavar="FILE",
        help="Path to config YAML (default: config.yaml)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only print summary and findings table; no finding details",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every fetched URL",
    )
    return parser


def setup_logging(config: dict, verbose: bool) -> None:
    level = "DEBUG" if verbose else str(config.get("logging", {}).get("level", "WARNING")).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    url = args.url.strip()
    if "://" not in url:
        url = "https://" + url

    config_path = Path(args.config)
    if not config_path.is_file():
        config_path = Path(__file__).parent / "config.yaml"
    config = load_config(config_path)
    setup_logging(config, args.verbose)

    rules = load_rules(args.rules) if args.rules else []
    limit = args.limit if args.limit is not None else config["crawl"].get("max_pages", 10)
    request = CrawlRequest(
        url=url,
        scan_level=ScanLevel(args.level),
        crawl_limit=limit,
        include_custom_rules=bool(rules),
        custom_rules=tuple(rules),
    )

    print(f"Scanning: {url} (level={request.scan_level.value}, limit={request.page_budget})")
    try:
        result = run_scan(request, config=config)
    except InvalidTarget as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print_console(result, quiet=args.quiet)
    if args.output:
        write_json(result, args.output)
        print(f"\nJSON report written to {args.output}")

    return 0 if result.high_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
