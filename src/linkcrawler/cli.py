"""
Command-line interface for the link crawler.
"""
from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

from linkcrawler.core import CrawlConfig, CrawlInterrupted, Crawler
from linkcrawler.fetcher import DEFAULT_USER_AGENT
from linkcrawler.report import print_summary, render_html, render_json


def generate_output_path(start_url: str, extension: str) -> Path:
    """Generate output path: crawls/{hostname}_{datetime}.{extension}"""
    parsed = urlparse(start_url)
    hostname = parsed.hostname or "unknown"
    # Sanitize hostname for filename (replace dots with underscores)
    hostname_safe = hostname.replace(".", "_")
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    crawls_dir = Path("crawls")
    crawls_dir.mkdir(exist_ok=True)

    return crawls_dir / f"{hostname_safe}_{timestamp}.{extension}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Crawl a website from a start URL and report broken internal and external links."
    )
    parser.add_argument("start_url", help="Start URL (e.g. https://example.com)")
    parser.add_argument("--workers", type=int, default=10, help="Parallel workers (default: 10)")
    parser.add_argument("--connect-timeout", type=float, default=5.0, help="Connect timeout in seconds (default: 5)")
    parser.add_argument("--read-timeout", type=float, default=5.0, help="Read timeout in seconds (default: 5)")
    parser.add_argument(
        "--delay", type=float, default=0.2,
        help="Pause before fetching each internal page's content, in seconds (default: 0.2)",
    )
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--format", choices=("html", "json"), default="html", help="Report format (default: html)")
    parser.add_argument("--out", help="Output file path, or '-' for stdout (default: auto-generated in crawls/)")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument("--verbose", action="store_true", help="Show progress and summary")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the crawler CLI."""
    args = build_parser().parse_args(argv)

    try:
        config = CrawlConfig(
            workers=args.workers,
            connect_timeout=args.connect_timeout,
            read_timeout=args.read_timeout,
            politeness_delay=args.delay,
            user_agent=args.user_agent,
            verbose=args.verbose,
        )
        crawler = Crawler(args.start_url, config=config)
    except ValueError as e:
        sys.stderr.write(f"error: {e}\n")
        return 2

    if args.verbose:
        sys.stderr.write(f"Starting crawl from: {args.start_url}\n")
        sys.stderr.write(f"Workers: {config.workers}\n\n")

    try:
        summary = crawler.start()
    except CrawlInterrupted as e:
        sys.stderr.write(f"❌ {e}\n")
        if args.verbose:
            print_summary(e.summary)
        return 130

    if args.verbose:
        print_summary(summary)

    broken = crawler.broken_links()
    if args.format == "json":
        text = render_json(summary, broken, pretty=args.pretty)
    else:
        text = render_html(summary, broken)

    if args.out == "-":
        print(text)
    else:
        output_path = Path(args.out) if args.out else generate_output_path(args.start_url, args.format)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        sys.stderr.write(f"✅ Crawl finished. Results written to: {output_path}\n")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
