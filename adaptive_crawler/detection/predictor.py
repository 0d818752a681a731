"""
FILE DESCRIPTION: Online rendering type predictor shared by all in-flight requests.
KEY FUNCTIONS/CLASSES: RenderingTypePredictor

FLOW: store_result() appends a labelled observation for the URL's host ->
predict() weighs every observation of the same host by how much of the URL path it
shares with the queried URL -> majority label wins -> the recommended detection
probability stays high while evidence is thin or contradictory and settles at
detection_ratio once the host is well understood.
"""

import threading
from collections import deque
from urllib.parse import urlparse

from adaptive_crawler.core import logger
from adaptive_crawler.detection.models import RenderingType, RenderingTypePrediction

MAX_OBSERVATIONS_PER_HOST = 500

# Observations from a different section of the same site still count a little
BASE_HOST_WEIGHT = 0.1


def _path_segments(url):
    parsed = urlparse(str(url))
    segments = tuple(s for s in parsed.path.split("/") if s)
    return parsed.netloc.lower(), segments


def _similarity(a, b):
    if a == b:
        return 1.0
    shared = 0
    for x, y in zip(a, b):
        if x != y:
            break
        shared += 1
    longest = max(len(a), len(b), 1)
    return BASE_HOST_WEIGHT + (1.0 - BASE_HOST_WEIGHT) * shared / longest


class RenderingTypePredictor:
    def __init__(self, detection_ratio):
        if not 0.0 <= detection_ratio <= 1.0:
            raise ValueError(f"detection_ratio must be within [0, 1], got {detection_ratio}")

        self.detection_ratio = detection_ratio
        self._observations = {}  # host -> deque[(segments, RenderingType)]
        self._lock = threading.Lock()

    def predict(self, url) -> RenderingTypePrediction:
        host, segments = _path_segments(url)
        with self._lock:
            observations = list(self._observations.get(host, ()))

        if not observations:
            return RenderingTypePrediction(RenderingType.REQUIRES_RENDERING, 1.0)

        votes = {rendering_type: 0.0 for rendering_type in RenderingType}
        for observed_segments, rendering_type in observations:
            votes[rendering_type] += _similarity(segments, observed_segments)

        total = sum(votes.values())
        static_votes = votes[RenderingType.STATIC_ONLY]
        rendering_votes = votes[RenderingType.REQUIRES_RENDERING]

        # Ties go to rendering: slower, but never misses content
        if static_votes > rendering_votes:
            prediction = RenderingType.STATIC_ONLY
        else:
            prediction = RenderingType.REQUIRES_RENDERING

        thin_evidence = 1.0 / (1.0 + total)
        disagreement = min(static_votes, rendering_votes) / total
        probability = max(self.detection_ratio, thin_evidence, disagreement)

        return RenderingTypePrediction(prediction, min(1.0, probability))

    def store_result(self, url, rendering_type):
        rendering_type = RenderingType(rendering_type)
        host, segments = _path_segments(url)
        with self._lock:
            if host not in self._observations:
                self._observations[host] = deque(maxlen=MAX_OBSERVATIONS_PER_HOST)
            self._observations[host].append((segments, rendering_type))
            count = len(self._observations[host])
        logger.debug(f"[PREDICTOR] Stored {rendering_type.value} for {url} ({count} observation(s) for {host})")
