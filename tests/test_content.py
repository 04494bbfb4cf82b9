from a11y_crawler.content import extract_links


def test_extract_links_resolves_in_document_order():
    html = """
    <html><body>
      <a href="/about">About</a>
      <a href="contact">Contact</a>
      <a>No href</a>
      <a href="   ">Blank</a>
      <a href="https://other.test/x">Elsewhere</a>
    </body></html>
    """
    assert extract_links(html, "https://example.test/team/") == [
        "https://example.test/about",
        "https://example.test/team/contact",
        "https://other.test/x",
    ]


def test_extract_links_honours_base_element():
    html = '<html><head><base href="/docs/"></head><body><a href="intro">Intro</a></body></html>'
    assert extract_links(html, "https://example.test/") == ["https://example.test/docs/intro"]
