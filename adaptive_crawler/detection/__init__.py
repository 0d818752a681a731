from adaptive_crawler.detection.models import DetectionInput, RenderingType, RenderingTypePrediction
from adaptive_crawler.detection.predictor import RenderingTypePredictor
from adaptive_crawler.detection.change_ratio import calculate_change_ratio
from adaptive_crawler.detection.heuristics import check_dataset_entry, detect_rendering_type
