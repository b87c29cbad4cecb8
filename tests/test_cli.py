"""
Tests for the command-line entry point.
"""
import json
from unittest.mock import patch

import responses

from linkcrawler import cli
from linkcrawler.core import CrawlInterrupted, CrawlSummary

START = "http://site.test/"


def register_site():
    responses.add(responses.HEAD, START, status=200)
    responses.add(responses.GET, START, status=200, content_type="text/html", body='<a href="/missing">m</a>')
    responses.add(responses.HEAD, "http://site.test/missing", status=404)


@responses.activate
def test_json_to_stdout(capsys):
    register_site()

    code = cli.main([START, "--format", "json", "--out", "-", "--delay", "0", "--workers", "2"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["summary"]["broken_links"] == 1
    assert payload["broken"][START][0]["url"] == "http://site.test/missing"


@responses.activate
def test_html_report_written_to_file(tmp_path, capsys):
    register_site()
    out = tmp_path / "reports" / "broken-links.html"

    code = cli.main([START, "--out", str(out), "--delay", "0", "--verbose"])

    assert code == 0
    assert "http://site.test/missing" in out.read_text(encoding="utf-8")
    err = capsys.readouterr().err
    assert "CRAWL SUMMARY" in err
    assert "Crawl finished" in err
    assert "✗ 404 http://site.test/missing" in err


def test_generate_output_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    path = cli.generate_output_path("https://www.example.com/start", "json")

    assert path.parent == cli.Path("crawls")
    assert path.name.startswith("www_example_com_")
    assert path.suffix == ".json"
    assert (tmp_path / "crawls").is_dir()


def test_invalid_start_url(capsys):
    assert cli.main(["not a url"]) == 2
    assert "Invalid start URL" in capsys.readouterr().err


def test_invalid_worker_count(capsys):
    assert cli.main([START, "--workers", "0"]) == 2


def test_interrupted_crawl_exit_code(capsys):
    summary = CrawlSummary(start_url=START)
    with patch.object(cli.Crawler, "start", side_effect=CrawlInterrupted(summary)):
        code = cli.main([START, "--out", "-"])

    assert code == 130
    assert "interrupted" in capsys.readouterr().err
