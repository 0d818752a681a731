# Responsibilities:
# - maintain crawl order (BFS)
# - prevent duplicate crawling within a single run
# - enforce maximum crawl depth and same-domain scope
# - track in-flight requests so workers know when the crawl is finished
from collections import deque
from threading import Lock
from urllib.parse import urlparse

from adaptive_crawler.models import Request
from adaptive_crawler.parser import is_allowed_url


class RequestQueue:
    def __init__(self, max_depth, allowed_domains=None):
        self.queue = deque()      # FIFO queue for BFS crawling
        self.seen = set()         # URLs ever accepted in this run
        self.in_flight = 0
        self.max_depth = max_depth
        self.allowed_domains = set(allowed_domains or [])
        self.lock = Lock()

    def enqueue(self, url, depth=0):
        # Rules:
        # - depth must not exceed max_depth
        # - URL must be in scope and not seen already
        if depth > self.max_depth:
            return False

        domain = urlparse(url).netloc
        if self.allowed_domains and domain not in self.allowed_domains:
            return False
        if not is_allowed_url(url):
            return False

        with self.lock:
            if url in self.seen:
                return False
            self.seen.add(url)
            self.queue.append(Request(url=url, depth=depth))
        return True

    def reclaim(self, request):
        # Put a failed request back for another attempt
        with self.lock:
            self.queue.append(request)
            self.in_flight -= 1

    def dequeue(self):
        with self.lock:
            if not self.queue:
                return None
            self.in_flight += 1
            return self.queue.popleft()

    def mark_done(self, request):
        with self.lock:
            self.in_flight -= 1

    def is_finished(self):
        with self.lock:
            return not self.queue and self.in_flight == 0

    def get_stats(self):
        with self.lock:
            return {
                "queue_size": len(self.queue),
                "in_flight": self.in_flight,
                "seen_count": len(self.seen),
            }
