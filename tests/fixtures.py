"""
Shared HTML fixtures and fakes for the test suite.
"""

from unittest.mock import MagicMock

from adaptive_crawler.models import Request

STATIC_HTML = """
<html><head><title>Static</title></head>
<body><main><p>Hello</p><a href="/a">A</a></main></body></html>
"""

RENDERED_HTML = """
<html><head><title>Rendered</title></head>
<body><main><p>Hello</p><a href="/a">A</a>
<ul><li>Item 1</li><li>Item 2</li></ul><a href="/b">B</a></main></body></html>
"""

URL = "https://example.com/products"


def fake_response(html=STATIC_HTML, status_code=200):
    response = MagicMock()
    response.text = html
    response.status_code = status_code
    return response


def fake_context(url=URL, html=STATIC_HTML):
    """Crawling context with just enough surface for a dry run."""
    context = MagicMock()
    context.request = Request(url=url)
    context.send_request.return_value = fake_response(html)
    return context


def title_handler(context):
    soup = context.parse_with_soup()
    context.push_data({"title": soup.title.get_text(strip=True) if soup.title else ""})
    context.enqueue_links()
