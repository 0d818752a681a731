"""
FILE DESCRIPTION: Browser-backed crawler. Every request is loaded in a real Playwright page.
KEY FUNCTIONS/CLASSES: CrawlingContext, RenderCrawler

Each worker thread owns its own Playwright instance, browser and context
(sync Playwright objects must stay on the thread that created them). Workers
pull requests from a shared RequestQueue, navigate, run post-navigation hooks
and then hand a CrawlingContext to _run_request_handler.
"""

import threading
import time
from threading import Lock
from urllib.parse import urlparse

from playwright.sync_api import sync_playwright

from adaptive_crawler.core import (
    HEADLESS,
    JS_DEFAULT_TIMEOUT,
    JS_GOTO_TIMEOUT,
    MAX_DEPTH,
    MAX_REQUEST_RETRIES,
    MAX_WORKERS,
    REQUEST_HANDLER_TIMEOUT,
    USER_AGENT,
    context_logger,
    logger,
)
from adaptive_crawler.fetcher import send_request
from adaptive_crawler.models import BatchAddResult
from adaptive_crawler.parser import extract_links, parse_html
from adaptive_crawler.queue import RequestQueue
from adaptive_crawler.storage import Dataset


# === CRAWLING CONTEXT ===

class CrawlingContext:
    """
    Everything a request handler can touch for one request:
    the request, the live page, the worker's log and the crawl's side effects.
    """

    def __init__(self, crawler, request, page, log, response=None):
        self.crawler = crawler
        self.request = request
        self.page = page
        self.log = log
        self.response = response

    def enqueue_links(self, selector=None):
        base_url = self.request.loaded_url or self.request.url
        urls = extract_links(self.parse_with_soup(), selector, base_url)
        return self.crawler.add_requests(urls, depth=self.request.depth + 1)

    def push_data(self, data):
        self.crawler.push_data(data)

    def send_request(self):
        return send_request(self.request.url)

    def parse_with_soup(self):
        return parse_html(self.page.content())


# === RENDER CRAWLER ===

class RenderCrawler:
    """
    FLOW: Seeds the queue -> Spawns browser worker threads -> Each worker navigates a page,
    runs post-navigation hooks and the request handler -> Failed requests are retried
    up to max_request_retries -> Returns crawl statistics once the queue drains.
    """

    def __init__(
        self,
        request_handler,
        *,
        post_navigation_hooks=None,
        max_workers=MAX_WORKERS,
        max_depth=MAX_DEPTH,
        max_request_retries=MAX_REQUEST_RETRIES,
        request_handler_timeout=REQUEST_HANDLER_TIMEOUT,
        headless=HEADLESS,
        dataset=None,
    ):
        if request_handler is None:
            raise ValueError("request_handler is required")

        self.request_handler = request_handler
        self.post_navigation_hooks = list(post_navigation_hooks or [])
        self.max_workers = max_workers
        self.max_depth = max_depth
        self.max_request_retries = max_request_retries
        self.request_handler_timeout = request_handler_timeout
        self.headless = headless
        self.dataset = dataset if dataset is not None else Dataset()

        self.request_queue = RequestQueue(max_depth)
        self.failed_requests = []
        self.handled_count = 0
        self._stats_lock = Lock()

    # --------------------------------------------------
    # Side effects available to request handlers
    # --------------------------------------------------
    def add_requests(self, urls, depth=0):
        processed, unprocessed = [], []
        for url in urls:
            if self.request_queue.enqueue(url, depth):
                processed.append(url)
            else:
                unprocessed.append(url)
        return BatchAddResult(processed_requests=processed, unprocessed_requests=unprocessed)

    def push_data(self, data):
        self.dataset.push(data)

    # --------------------------------------------------
    # Main entry point
    # --------------------------------------------------
    def run(self, start_urls):
        domains = {urlparse(u).netloc for u in start_urls}
        self.request_queue = RequestQueue(self.max_depth, allowed_domains=domains)
        self.add_requests(start_urls, depth=0)

        start_time = time.time()
        workers = []
        for i in range(self.max_workers):
            t = threading.Thread(target=self._browser_loop, args=(i,), daemon=True, name=f"Worker-{i}")
            t.start()
            workers.append(t)

        for t in workers:
            t.join()

        stats = self.stats()
        stats["duration_seconds"] = round(time.time() - start_time, 2)
        logger.info(
            f"[JS-ENGINE] Crawl finished: {stats['handled']} handled, "
            f"{stats['failed']} failed, {stats['dataset_items']} record(s)"
        )
        return stats

    def stats(self):
        with self._stats_lock:
            handled = self.handled_count
            failed = len(self.failed_requests)
        return {
            "handled": handled,
            "failed": failed,
            "dataset_items": len(self.dataset),
            **self.request_queue.get_stats(),
        }

    # --------------------------------------------------
    # Worker internals
    # --------------------------------------------------
    def _browser_loop(self, worker_id):
        """
        Independent worker loop. Each thread gets its own Playwright/Browser instance for thread-safety.
        """
        log = context_logger(f"Worker-{worker_id}")
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(
                    headless=self.headless,
                    args=["--disable-gpu", "--no-sandbox", "--disable-dev-shm-usage"],
                )
                browser_context = browser.new_context(
                    user_agent=USER_AGENT,
                    viewport={"width": 1024, "height": 768},
                )
                browser_context.set_default_timeout(JS_DEFAULT_TIMEOUT * 1000)
                log.info("[JS-ENGINE] Render worker ready.")

                try:
                    while True:
                        request = self.request_queue.dequeue()
                        if request is None:
                            if self.request_queue.is_finished():
                                break
                            time.sleep(0.1)
                            continue
                        self._process_request(browser_context, request, log)
                finally:
                    browser.close()
        except Exception as e:
            log.critical(f"[JS-ENGINE] Worker fatal error: {e}")

    def _process_request(self, browser_context, request, log):
        page = browser_context.new_page()
        try:
            crawling_context = self._navigate(page, request, log)
            self._run_request_handler(crawling_context)
        except Exception as e:
            self._handle_request_error(request, e, log)
        else:
            with self._stats_lock:
                self.handled_count += 1
            self.request_queue.mark_done(request)
        finally:
            page.close()

    def _navigate(self, page, request, log):
        response = page.goto(request.url, wait_until="domcontentloaded", timeout=JS_GOTO_TIMEOUT * 1000)
        request.loaded_url = page.url

        crawling_context = CrawlingContext(self, request, page, log, response)
        for hook in self.post_navigation_hooks:
            hook(crawling_context)
        return crawling_context

    def _run_request_handler(self, crawling_context):
        self.request_handler(crawling_context)

    def _handle_request_error(self, request, error, log):
        if request.retry_count < self.max_request_retries:
            request.retry_count += 1
            log.warning(
                f"[JS-ENGINE] Request failed, retrying ({request.retry_count}/{self.max_request_retries}): "
                f"{request.url} ({error})"
            )
            self.request_queue.reclaim(request)
            return

        log.error(f"[JS-ENGINE] Request failed too many times: {request.url} ({error})")
        with self._stats_lock:
            self.failed_requests.append(request)
        self.request_queue.mark_done(request)
