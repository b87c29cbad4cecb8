"""
Tests for anchor and image extraction.
"""
from linkcrawler.extract import PageLinks, extract_links

BASE = "http://site.test/docs/index.html"


def test_resolves_relative_links_against_page_url():
    html = b"""
    <html><body>
        <a href="guide.html">Guide</a>
        <a href="/about">About</a>
        <a href="https://other.test/x">Other</a>
        <a href="../up">Up</a>
    </body></html>
    """
    links = extract_links(html, BASE)

    assert links.anchors == [
        "http://site.test/docs/guide.html",
        "http://site.test/about",
        "https://other.test/x",
        "http://site.test/up",
    ]
    assert links.images == []


def test_collects_image_sources():
    html = b'<p><img src="/logo.png"><img src="http://cdn.test/a.jpg"><img alt="no src"></p>'
    links = extract_links(html, BASE)

    assert links.images == ["http://site.test/logo.png", "http://cdn.test/a.jpg"]


def test_deduplicates_in_document_order_and_drops_fragments():
    html = b"""
    <a href="/b">B</a>
    <a href="/a#top">A</a>
    <a href="/b">B again</a>
    <a href="/a">A again</a>
    <a href="#section">Same page</a>
    """
    links = extract_links(html, BASE)

    assert links.anchors == ["http://site.test/b", "http://site.test/a", BASE]


def test_keeps_mailto_and_tel_for_the_caller_to_filter():
    html = b'<a href="mailto:me@site.test">Mail</a><a href="tel:+4712345678">Call</a>'
    links = extract_links(html, BASE)

    assert links.anchors == ["mailto:me@site.test", "tel:+4712345678"]


def test_honours_base_element():
    html = b'<html><head><base href="http://site.test/v2/"></head><body><a href="page">P</a></body></html>'
    links = extract_links(html, BASE)

    assert links.anchors == ["http://site.test/v2/page"]


def test_ignores_anchors_without_href_and_blank_values():
    html = b'<a name="x">Anchor</a><a href="   ">Blank</a><img src="">'
    assert extract_links(html, BASE) == PageLinks()


def test_uses_declared_encoding():
    html = '<a href="/café">Café</a>'.encode("latin-1")
    links = extract_links(html, BASE, encoding="latin-1")

    assert links.anchors == ["http://site.test/café"]
