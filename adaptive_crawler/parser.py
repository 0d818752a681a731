"""
HTML parsing and link extraction for the crawler.
Documents are BeautifulSoup trees; links are resolved against a base URL.
"""

from bs4 import BeautifulSoup
from urllib.parse import urljoin, urlparse, urldefrag

DEFAULT_LINK_SELECTOR = "a[href]"

BLOCKED_EXTS = ['.css', '.js', '.jpg', '.jpeg', '.png', '.gif', '.svg', '.pdf', '.zip', '.rar', '.exe', '.tar', '.gz', '.mp3', '.mp4', '.avi', '.mov', '.doc', '.docx', '.xls', '.xlsx', '.ppt', '.pptx']

def parse_html(html):
    """Parse raw HTML (str or bytes) into a queryable document."""
    return BeautifulSoup(html or "", "lxml")

def extract_links(soup, selector=None, base_url=None):
    """
    Extract hyperlink targets matching `selector` (default: all anchors with href),
    resolved against `base_url`. Returns absolute http/https URLs in document order,
    fragments stripped, duplicates removed.
    """
    urls = []
    seen = set()

    for node in soup.select(selector or DEFAULT_LINK_SELECTOR):
        href = node.get("href")
        if not href:
            continue
        url = urljoin(base_url, href.strip()) if base_url else href.strip()
        url, _ = urldefrag(url)
        if urlparse(url).scheme not in ('http', 'https'):
            continue
        if url in seen:
            continue
        seen.add(url)
        urls.append(url)

    return urls

def is_allowed_url(url, base_domain=None):
    """
    Check if URL is allowed: http/https, same domain (when given), not blocked extension.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https'):
        return False
    if base_domain and parsed.netloc != base_domain:
        return False
    path = parsed.path.lower()
    for ext in BLOCKED_EXTS:
        if path.endswith(ext):
            return False
    return True
