from dataclasses import dataclass
from enum import Enum
from typing import Optional

from bs4 import BeautifulSoup

from adaptive_crawler.models import RunResult


class RenderingType(Enum):
    STATIC_ONLY = "static-only"
    REQUIRES_RENDERING = "requires-rendering"


@dataclass(frozen=True)
class RenderingTypePrediction:
    rendering_type: RenderingType
    detection_probability_recommendation: float


@dataclass(frozen=True)
class DetectionInput:
    """
    Everything the rendering type detection handler gets to look at.
    Built once per detection attempt.
    """
    static_soup: BeautifulSoup
    rendered_soup: BeautifulSoup
    change_ratio: Optional[float]
    mutation_count: int
    url: str
    browser_run_result: RunResult
    http_only_run_result: RunResult
