"""
Instrumented browser execution.

- install_mutation_counter: post-navigation hook that counts DOM mutations under <body>
  into request.user_data["mutation_count"].
- run_request_handler_in_browser: runs the real request handler through a TAP recorder
  so enqueue/push still happen but are also captured for comparison.
"""

from adaptive_crawler.models import DryRunResult
from adaptive_crawler.parser import extract_links
from adaptive_crawler.recorder import RecorderMode, SideEffectRecorder

MUTATION_COUNT_KEY = "mutation_count"
TRACK_MUTATIONS_BINDING = "trackMutations"

MUTATION_OBSERVER_JS = """
(body) => {
    const observer = new MutationObserver((mutations) => window.trackMutations(mutations.length));
    observer.observe(body, { childList: true, subtree: true, characterData: true });
}
"""


def install_mutation_counter(crawling_context):
    user_data = crawling_context.request.user_data
    user_data[MUTATION_COUNT_KEY] = 0

    def track_mutations(count):
        user_data[MUTATION_COUNT_KEY] = user_data.get(MUTATION_COUNT_KEY, 0) + int(count)

    page = crawling_context.page
    page.expose_function(TRACK_MUTATIONS_BINDING, track_mutations)

    body = page.query_selector("body")
    if body is not None:
        body.evaluate(MUTATION_OBSERVER_JS)


def read_mutation_count(request):
    return int(request.user_data.get(MUTATION_COUNT_KEY) or 0)


def run_request_handler_in_browser(crawling_context, run_handler):
    """
    Returns a DryRunResult holding the re-parsed rendered document and the captured actions.
    Exceptions from run_handler are not caught.
    """
    result = DryRunResult()
    base_url = crawling_context.request.loaded_url or crawling_context.request.url

    recorder = SideEffectRecorder(
        crawling_context,
        result,
        lambda selector: extract_links(crawling_context.parse_with_soup(), selector, base_url),
        mode=RecorderMode.TAP,
    )
    run_handler(recorder)

    result.soup = crawling_context.parse_with_soup()
    return result
