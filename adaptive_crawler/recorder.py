"""
Side-effect recording for request handlers.

A SideEffectRecorder stands in for a crawling context. Calls to enqueue_links
and push_data are appended to a RunResult in call order; everything else is
read from the wrapped context.

DIVERT: nothing reaches the wrapped context (dry runs).
TAP:    the call is recorded and then forwarded (real rendering).
"""

from enum import Enum
from typing import Callable, List, Optional

from adaptive_crawler.models import BatchAddResult, RunResult


class RecorderMode(Enum):
    DIVERT = "divert"
    TAP = "tap"


def flatten_records(data) -> list:
    if isinstance(data, (list, tuple)):
        return list(data)
    return [data]


class SideEffectRecorder:
    def __init__(
        self,
        target,
        result: RunResult,
        extract_links: Callable[[Optional[str]], List[str]],
        mode: RecorderMode = RecorderMode.TAP,
    ):
        self._target = target
        self._result = result
        self._extract_links = extract_links
        self._mode = mode

    @property
    def run_result(self) -> RunResult:
        return self._result

    def enqueue_links(self, selector=None):
        self._result.enqueued_links.extend(self._extract_links(selector))

        if self._mode is RecorderMode.DIVERT:
            return BatchAddResult(processed_requests=[], unprocessed_requests=[])
        return self._target.enqueue_links(selector)

    def push_data(self, data):
        self._result.dataset_entries.extend(flatten_records(data))

        if self._mode is RecorderMode.DIVERT:
            return None
        return self._target.push_data(data)

    def __getattr__(self, name):
        # Only reached for attributes the recorder itself does not define
        return getattr(self._target, name)
