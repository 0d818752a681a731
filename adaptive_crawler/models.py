from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup


@dataclass
class Request:
    """
    A single crawl request owned by the RequestQueue.
    user_data is request-scoped mutable state (e.g. the DOM mutation count).
    """
    url: str
    depth: int = 0
    loaded_url: Optional[str] = None
    retry_count: int = 0
    user_data: Dict[str, Any] = field(default_factory=dict)

    def copy(self, **changes) -> "Request":
        changes.setdefault("user_data", dict(self.user_data))
        return replace(self, **changes)


@dataclass(frozen=True)
class BatchAddResult:
    """Acknowledgement returned by enqueue_links."""
    processed_requests: List[str] = field(default_factory=list)
    unprocessed_requests: List[str] = field(default_factory=list)


@dataclass
class RunResult:
    """
    Actions a request handler attempted to perform during one execution attempt.
    Mutated only by the SideEffectRecorder that owns it.
    """
    enqueued_links: List[str] = field(default_factory=list)
    dataset_entries: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class DryRunResult(RunResult):
    """RunResult plus the parsed document the handler ran against."""
    soup: Optional[BeautifulSoup] = None

    def run_result(self) -> RunResult:
        return RunResult(
            enqueued_links=list(self.enqueued_links),
            dataset_entries=list(self.dataset_entries),
        )
