"""
Plain HTTP fetching for the crawler.
Read-only GET used by the static dry run; no state is written anywhere.
"""

import time
import requests
from adaptive_crawler.core import USER_AGENT, REQUEST_TIMEOUT, logger

def send_request(url, timeout=REQUEST_TIMEOUT):
    """
    Fetch a URL with a plain GET and return the requests.Response.
    Network errors propagate to the caller; HTTP error statuses do not raise.
    """
    start_time = time.time()
    r = requests.get(
        url,
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
        allow_redirects=True,
    )
    fetch_time_ms = int((time.time() - start_time) * 1000)
    logger.debug(f"[FETCH] {url} -> {r.status_code} ({len(r.content)} bytes, {fetch_time_ms} ms)")
    return r
