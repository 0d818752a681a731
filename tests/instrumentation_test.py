"""
Mutation counter hook and the tapped browser run.
"""

import unittest
from unittest.mock import ANY, MagicMock

from adaptive_crawler.instrumentation import (
    MUTATION_OBSERVER_JS,
    install_mutation_counter,
    read_mutation_count,
    run_request_handler_in_browser,
)
from adaptive_crawler.js_engine import CrawlingContext, RenderCrawler
from adaptive_crawler.models import Request
from tests.fixtures import RENDERED_HTML, URL, title_handler


class TestMutationCounter(unittest.TestCase):
    def setUp(self):
        self.context = MagicMock()
        self.context.request = Request(url=URL)

    def test_counts_reported_mutations(self):
        install_mutation_counter(self.context)

        page = self.context.page
        page.expose_function.assert_called_once_with("trackMutations", ANY)
        page.query_selector.return_value.evaluate.assert_called_once_with(MUTATION_OBSERVER_JS)

        track = page.expose_function.call_args[0][1]
        self.assertEqual(read_mutation_count(self.context.request), 0)
        track(3)
        track(4)
        self.assertEqual(read_mutation_count(self.context.request), 7)

    def test_page_without_body(self):
        self.context.page.query_selector.return_value = None

        install_mutation_counter(self.context)

        self.assertEqual(self.context.request.user_data["mutation_count"], 0)

    def test_missing_counter_reads_as_zero(self):
        self.assertEqual(read_mutation_count(Request(url=URL)), 0)


class TestBrowserRun(unittest.TestCase):
    def setUp(self):
        self.crawler = RenderCrawler(title_handler)
        page = MagicMock()
        page.content.return_value = RENDERED_HTML
        request = Request(url=URL, loaded_url=URL)
        self.context = CrawlingContext(self.crawler, request, page, MagicMock())

    def test_actions_are_recorded_and_committed(self):
        result = run_request_handler_in_browser(self.context, self.crawler._run_request_handler)

        self.assertEqual(result.dataset_entries, [{"title": "Rendered"}])
        self.assertEqual(result.enqueued_links, ["https://example.com/a", "https://example.com/b"])
        self.assertEqual(result.soup.title.get_text(), "Rendered")

        self.assertEqual(self.crawler.dataset.items(), [{"title": "Rendered"}])
        self.assertEqual(self.crawler.request_queue.seen, {"https://example.com/a", "https://example.com/b"})

    def test_handler_errors_propagate(self):
        def broken(context):
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            run_request_handler_in_browser(self.context, broken)


if __name__ == "__main__":
    unittest.main()
