from adaptive_crawler.adaptive import AdaptiveCrawler
from adaptive_crawler.js_engine import CrawlingContext, RenderCrawler
from adaptive_crawler.models import BatchAddResult, DryRunResult, Request, RunResult
from adaptive_crawler.recorder import RecorderMode, SideEffectRecorder
from adaptive_crawler.detection.models import (
    DetectionInput,
    RenderingType,
    RenderingTypePrediction,
)
from adaptive_crawler.detection.predictor import RenderingTypePredictor
