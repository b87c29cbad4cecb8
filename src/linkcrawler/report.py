"""
Rendering of crawl results: HTML report, JSON payload and stderr summary.
"""
from __future__ import annotations

import json
import sys
from dataclasses import asdict
from html import escape
from typing import Dict, List

from linkcrawler.core import CrawlSummary
from linkcrawler.registry import BrokenLink


def format_duration(seconds: float) -> str:
    """Format a duration as 'Xm Ys'."""
    total = int(seconds)
    return f"{total // 60}m {total % 60}s"


def print_summary(summary: CrawlSummary) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Start URL:              {summary.start_url}\n")
    sys.stderr.write(f"Internal links crawled: {summary.internal_links}\n")
    sys.stderr.write(f"External links checked: {summary.external_links}\n")
    sys.stderr.write(f"Broken pages:           {summary.broken_pages}\n")
    sys.stderr.write(f"Broken links:           {summary.broken_links}\n")
    sys.stderr.write(f"Total crawl time:       {format_duration(summary.elapsed_s)}\n")
    if summary.failed_tasks:
        sys.stderr.write(f"Failed tasks:           {summary.failed_tasks}\n")

    sys.stderr.write("\n")


def render_html(summary: CrawlSummary, broken: Dict[str, List[BrokenLink]]) -> str:
    """Render the broken links report as a standalone HTML page."""
    parts = [
        "<!DOCTYPE html><html><head><meta charset='UTF-8'>",
        "<title>Broken Links Report</title>",
        "<style>body { font-family: sans-serif; } li { margin: 4px 0; }</style>",
        "</head><body>",
        "<h2>Broken Links Report</h2>",
        "<table>",
        f"<tr><td>Start-url</td><td>{escape(summary.start_url)}</td></tr>",
        f"<tr><td>Internal links crawled</td><td>{summary.internal_links}</td></tr>",
        f"<tr><td>External links crawled</td><td>{summary.external_links}</td></tr>",
        f"<tr><td>Number of Broken pages</td><td>{summary.broken_pages}</td></tr>",
        f"<tr><td>Number of broken links</td><td>{summary.broken_links}</td></tr>",
        f"<tr><td>Total crawl time</td><td>{format_duration(summary.elapsed_s)}</td></tr>",
        "</table>\n",
    ]

    for source, links in broken.items():
        # The seed has no referrer
        label = escape(source) if source else "(start URL)"
        parts.append(f"<h3>Source: <a href='{escape(source)}'>{label}</a></h3>\n")
        parts.append("<ul>\n")
        for link in links:
            href = escape(link.url)
            parts.append(
                f"<li>\U0001F517 <a href='{href}'>{href}</a> "
                f"(Status: {link.status}, Type: {link.kind.value})</li>\n"
            )
        parts.append("</ul>\n")

    parts.append("</body></html>")
    return "".join(parts)


def render_json(
    summary: CrawlSummary,
    broken: Dict[str, List[BrokenLink]],
    pretty: bool = False,
) -> str:
    """Render summary and broken links as a JSON document."""
    payload = {
        "summary": asdict(summary),
        "broken": {
            source: [{**asdict(link), "kind": link.kind.value} for link in links]
            for source, links in broken.items()
        },
    }
    return json.dumps(payload, ensure_ascii=False, indent=2 if pretty else None)
