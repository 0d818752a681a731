"""
Static dry run of a request handler.

FLOW: Plain HTTP fetch -> parse with BeautifulSoup -> run the user's handler
against the parsed document through a DIVERT recorder -> return the document
and every enqueue/push the handler attempted. Nothing is enqueued or stored.

The run happens on a daemon thread; the caller waits at most
`timeout` seconds and abandons the thread on expiry.
"""

import threading

from adaptive_crawler.models import DryRunResult
from adaptive_crawler.parser import parse_html, extract_links
from adaptive_crawler.recorder import RecorderMode, SideEffectRecorder


class DryRunTimeoutError(TimeoutError):
    pass


class DryRunContext:
    """
    Crawling context handed to the request handler during a dry run.
    There is no browser page and no crawler behind it.
    """

    def __init__(self, request, log, soup, response, send_request):
        self.request = request
        self.log = log
        self.soup = soup
        self.response = response
        self.body = response.text if response is not None else ""
        self.send_request = send_request
        self.page = None
        self.crawler = None

    def parse_with_soup(self):
        return self.soup


def _simulate(crawling_context, request_handler, result):
    response = crawling_context.send_request()
    soup = parse_html(response.text)
    result.soup = soup

    request = crawling_context.request.copy(loaded_url=crawling_context.request.url)
    context = DryRunContext(
        request=request,
        log=crawling_context.log,
        soup=soup,
        response=response,
        send_request=crawling_context.send_request,
    )
    recorder = SideEffectRecorder(
        context,
        result,
        lambda selector: extract_links(soup, selector, request.url),
        mode=RecorderMode.DIVERT,
    )
    request_handler(recorder)


def run_with_timeout(func, timeout, *args):
    """
    Run `func(*args)` on a daemon thread and wait up to `timeout` seconds.
    Re-raises the function's exception, or DryRunTimeoutError on expiry.
    """
    outcome = {"error": None}

    def target():
        try:
            func(*args)
        except BaseException as e:
            outcome["error"] = e

    worker = threading.Thread(target=target, daemon=True, name="DryRun")
    worker.start()
    worker.join(timeout)

    if worker.is_alive():
        raise DryRunTimeoutError(f"Request handler timed out after {timeout}s")
    if outcome["error"] is not None:
        raise outcome["error"]


def dry_run_request_handler(crawling_context, request_handler, timeout):
    """
    Returns a DryRunResult, or None if the fetch, parse or handler failed
    or the handler did not finish within `timeout` seconds.
    """
    result = DryRunResult()

    try:
        run_with_timeout(_simulate, timeout, crawling_context, request_handler, result)
        return result
    except Exception:
        crawling_context.log.exception(f"[DRY-RUN] Exception while probing {crawling_context.request.url}")
        return None
