"""
Base browser crawler: navigation, hooks, retries, queue and dataset bookkeeping.
"""

import json
import os
import tempfile
import unittest
from unittest.mock import MagicMock

from adaptive_crawler.js_engine import RenderCrawler
from adaptive_crawler.queue import RequestQueue
from adaptive_crawler.storage import Dataset
from tests.fixtures import RENDERED_HTML, URL, title_handler


class TestRenderCrawler(unittest.TestCase):
    def setUp(self):
        self.hook = MagicMock()
        self.crawler = RenderCrawler(title_handler, post_navigation_hooks=[self.hook], max_request_retries=1)
        self.page = MagicMock()
        self.page.url = URL + "/"
        self.page.content.return_value = RENDERED_HTML
        self.browser_context = MagicMock()
        self.browser_context.new_page.return_value = self.page
        self.log = MagicMock()

    def next_request(self):
        self.crawler.request_queue.enqueue(URL)
        return self.crawler.request_queue.dequeue()

    def test_successful_request(self):
        request = self.next_request()

        self.crawler._process_request(self.browser_context, request, self.log)

        self.assertEqual(request.loaded_url, URL + "/")
        self.hook.assert_called_once()
        self.assertIs(self.hook.call_args[0][0].page, self.page)
        self.assertEqual(self.crawler.dataset.items(), [{"title": "Rendered"}])
        self.page.close.assert_called_once()
        self.assertEqual(
            self.crawler.request_queue.seen,
            {URL, "https://example.com/a", "https://example.com/b"},
        )
        stats = self.crawler.stats()
        self.assertEqual(stats["in_flight"], 0)
        self.assertEqual(stats["handled"], 1)

    def test_failed_request_is_retried_then_dropped(self):
        self.crawler.request_handler = MagicMock(side_effect=RuntimeError("boom"))
        request = self.next_request()

        self.crawler._process_request(self.browser_context, request, self.log)
        self.assertEqual(request.retry_count, 1)
        self.assertFalse(self.crawler.request_queue.is_finished())

        retried = self.crawler.request_queue.dequeue()
        self.assertIs(retried, request)
        self.crawler._process_request(self.browser_context, retried, self.log)

        self.assertEqual(self.crawler.failed_requests, [request])
        self.assertTrue(self.crawler.request_queue.is_finished())
        self.assertEqual(self.page.close.call_count, 2)
        self.log.error.assert_called_once()

    def test_requires_handler(self):
        with self.assertRaises(ValueError):
            RenderCrawler(None)


class TestRequestQueue(unittest.TestCase):
    def test_dedup_depth_and_scope(self):
        queue = RequestQueue(max_depth=1, allowed_domains=["example.com"])

        self.assertTrue(queue.enqueue("https://example.com/a"))
        self.assertFalse(queue.enqueue("https://example.com/a"))
        self.assertFalse(queue.enqueue("https://example.com/b", depth=2))
        self.assertFalse(queue.enqueue("https://other.com/a"))
        self.assertFalse(queue.enqueue("https://example.com/file.pdf"))
        self.assertEqual(queue.get_stats()["queue_size"], 1)

    def test_finished_tracks_in_flight(self):
        queue = RequestQueue(max_depth=1)
        queue.enqueue("https://example.com/")
        request = queue.dequeue()

        self.assertFalse(queue.is_finished())
        queue.mark_done(request)
        self.assertTrue(queue.is_finished())
        self.assertIsNone(queue.dequeue())


class TestDataset(unittest.TestCase):
    def test_push_and_export(self):
        dataset = Dataset()
        dataset.push({"a": 1})
        dataset.push([{"b": 2}, {"c": 3}])

        with tempfile.TemporaryDirectory() as tmp:
            path = dataset.export_json(os.path.join(tmp, "out", "dataset.json"))
            with open(path, encoding="utf-8") as f:
                self.assertEqual(json.load(f), [{"a": 1}, {"b": 2}, {"c": 3}])


if __name__ == "__main__":
    unittest.main()
