"""
FILE DESCRIPTION: Crawler that learns, per URL, whether a page needs a browser at all.
KEY FUNCTIONS/CLASSES: AdaptiveCrawler

FLOW (per request):
  Predict -> maybe detect (random draw vs. recommended detection probability) ->
  RenderPath  : prediction says rendering OR probing -> real browser run (captured);
                when probing and both runs succeeded -> classify -> store_result
  StaticPath  : prediction says static and not probing -> dry run over plain HTTP;
                failed run or suspicious record -> real browser run instead,
                otherwise commit the dry run's records.
Exactly one of these paths commits side effects for a request.
"""

import random

from adaptive_crawler.core import DETECTION_RATIO
from adaptive_crawler.detection.change_ratio import calculate_change_ratio
from adaptive_crawler.detection.models import DetectionInput, RenderingType
from adaptive_crawler.detection.predictor import RenderingTypePredictor
from adaptive_crawler.dry_run import dry_run_request_handler
from adaptive_crawler.instrumentation import (
    install_mutation_counter,
    read_mutation_count,
    run_request_handler_in_browser,
)
from adaptive_crawler.js_engine import RenderCrawler


class AdaptiveCrawler(RenderCrawler):
    def __init__(
        self,
        request_handler,
        *,
        rendering_type_detection_handler,
        dataset_entry_checker,
        detection_ratio=DETECTION_RATIO,
        rendering_type_predictor=None,
        post_navigation_hooks=None,
        **options,
    ):
        if rendering_type_detection_handler is None:
            raise ValueError("rendering_type_detection_handler is required")
        if dataset_entry_checker is None:
            raise ValueError("dataset_entry_checker is required")

        hooks = [install_mutation_counter, *(post_navigation_hooks or [])]
        super().__init__(request_handler, post_navigation_hooks=hooks, **options)

        self.rendering_type_detection_handler = rendering_type_detection_handler
        self.dataset_entry_checker = dataset_entry_checker
        self.rendering_type_predictor = rendering_type_predictor or RenderingTypePredictor(detection_ratio)

    def _run_request_handler(self, crawling_context):
        request = crawling_context.request
        log = crawling_context.log
        url = request.loaded_url or request.url

        prediction = self.rendering_type_predictor.predict(url)
        should_detect = random.random() < prediction.detection_probability_recommendation

        http_only_run_result = self._dry_run(crawling_context) if should_detect else None

        log.info(
            f"[ADAPTIVE] Rendering type prediction {prediction.rendering_type.value} "
            f"(rec. detection probability {prediction.detection_probability_recommendation}): {request.url}"
        )

        if prediction.rendering_type is RenderingType.REQUIRES_RENDERING or should_detect:
            if should_detect:
                log.info(f"[ADAPTIVE] Trying to detect rendering type: {request.url}")
            else:
                log.info(f"[ADAPTIVE] Crawling with browser: {request.url}")

            browser_run_result = run_request_handler_in_browser(crawling_context, super()._run_request_handler)

            if should_detect and http_only_run_result is not None and browser_run_result is not None:
                self._detect_and_learn(crawling_context, url, http_only_run_result, browser_run_result)
            return

        log.info(f"[ADAPTIVE] Crawling with plain HTTP: {request.url}")

        dry_run_result = self._dry_run(crawling_context)

        if dry_run_result is None:
            log.warning(f"[ADAPTIVE] Plain HTTP run failed, restarting with browser: {request.url}")
            super()._run_request_handler(crawling_context)
            return

        if not all(self.dataset_entry_checker(e) for e in dry_run_result.dataset_entries):
            log.warning(f"[ADAPTIVE] Suspicious dataset entry detected, restarting with browser: {request.url}")
            super()._run_request_handler(crawling_context)
            return

        for entry in dry_run_result.dataset_entries:
            self.push_data(entry)

        # TODO commit dry_run_result.enqueued_links once the frontier semantics for them are settled
        if dry_run_result.enqueued_links:
            log.debug(
                f"[ADAPTIVE] {len(dry_run_result.enqueued_links)} link(s) from plain HTTP run not enqueued: {request.url}"
            )

    def _dry_run(self, crawling_context):
        return dry_run_request_handler(crawling_context, self.request_handler, self.request_handler_timeout)

    def _detect_and_learn(self, crawling_context, url, http_only_run_result, browser_run_result):
        detection_input = DetectionInput(
            static_soup=http_only_run_result.soup,
            rendered_soup=browser_run_result.soup,
            change_ratio=calculate_change_ratio(http_only_run_result.soup, browser_run_result.soup),
            mutation_count=read_mutation_count(crawling_context.request),
            url=url,
            browser_run_result=browser_run_result.run_result(),
            http_only_run_result=http_only_run_result.run_result(),
        )

        detected = RenderingType(self.rendering_type_detection_handler(detection_input))

        crawling_context.log.info(
            f"[ADAPTIVE] Rendering type '{detected.value}' detected for page {crawling_context.request.url} "
            f"(change ratio {detection_input.change_ratio}, {detection_input.mutation_count} mutation(s))"
        )
        self.rendering_type_predictor.store_result(url, detected)
