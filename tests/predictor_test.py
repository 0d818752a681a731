"""
Rendering type predictor: cold start, steady state, disagreement and thread safety.
"""

import threading
import unittest

from adaptive_crawler.detection.models import RenderingType, RenderingTypePrediction
from adaptive_crawler.detection.predictor import RenderingTypePredictor


class TestRenderingTypePredictor(unittest.TestCase):
    def setUp(self):
        self.predictor = RenderingTypePredictor(detection_ratio=0.1)

    def test_unknown_host_is_always_detected(self):
        prediction = self.predictor.predict("https://unknown.example/page")

        self.assertEqual(prediction, RenderingTypePrediction(RenderingType.REQUIRES_RENDERING, 1.0))

    def test_consistent_evidence_settles_at_detection_ratio(self):
        for i in range(30):
            self.predictor.store_result(f"https://shop.example/products/{i}", RenderingType.STATIC_ONLY)

        prediction = self.predictor.predict("https://shop.example/products/99")

        self.assertEqual(prediction.rendering_type, RenderingType.STATIC_ONLY)
        self.assertAlmostEqual(prediction.detection_probability_recommendation, 0.1)

    def test_thin_evidence_keeps_probing(self):
        self.predictor.store_result("https://shop.example/products/1", RenderingType.STATIC_ONLY)

        prediction = self.predictor.predict("https://shop.example/products/1")

        self.assertEqual(prediction.rendering_type, RenderingType.STATIC_ONLY)
        self.assertAlmostEqual(prediction.detection_probability_recommendation, 0.5)

    def test_similar_paths_outweigh_other_sections(self):
        for i in range(10):
            self.predictor.store_result(f"https://shop.example/app/view/{i}", RenderingType.REQUIRES_RENDERING)
        for i in range(3):
            self.predictor.store_result(f"https://shop.example/blog/post/{i}", RenderingType.STATIC_ONLY)

        blog = self.predictor.predict("https://shop.example/blog/post/42")
        app = self.predictor.predict("https://shop.example/app/view/42")

        self.assertEqual(blog.rendering_type, RenderingType.STATIC_ONLY)
        self.assertEqual(app.rendering_type, RenderingType.REQUIRES_RENDERING)

    def test_disagreement_raises_probability(self):
        for _ in range(20):
            self.predictor.store_result("https://shop.example/x", RenderingType.STATIC_ONLY)
            self.predictor.store_result("https://shop.example/x", RenderingType.REQUIRES_RENDERING)

        prediction = self.predictor.predict("https://shop.example/x")

        self.assertEqual(prediction.rendering_type, RenderingType.REQUIRES_RENDERING)
        self.assertAlmostEqual(prediction.detection_probability_recommendation, 0.5)

    def test_hosts_are_independent(self):
        for _ in range(10):
            self.predictor.store_result("https://a.example/", RenderingType.STATIC_ONLY)

        prediction = self.predictor.predict("https://b.example/")

        self.assertEqual(prediction.detection_probability_recommendation, 1.0)

    def test_accepts_label_values(self):
        self.predictor.store_result("https://a.example/", "static-only")

        self.assertEqual(self.predictor.predict("https://a.example/").rendering_type, RenderingType.STATIC_ONLY)

    def test_rejects_unknown_label(self):
        with self.assertRaises(ValueError):
            self.predictor.store_result("https://a.example/", "sometimes")

    def test_invalid_ratio(self):
        with self.assertRaises(ValueError):
            RenderingTypePredictor(detection_ratio=-0.1)
        with self.assertRaises(ValueError):
            RenderingTypePredictor(detection_ratio=1.1)

    def test_concurrent_access(self):
        errors = []
        labels = list(RenderingType)

        def writer(n):
            try:
                for i in range(200):
                    self.predictor.store_result(f"https://c.example/p/{n}/{i}", labels[i % 2])
            except Exception as e:
                errors.append(e)

        def reader():
            try:
                for i in range(200):
                    prediction = self.predictor.predict(f"https://c.example/p/0/{i}")
                    self.assertIn(prediction.rendering_type, labels)
                    self.assertGreaterEqual(prediction.detection_probability_recommendation, 0.0)
                    self.assertLessEqual(prediction.detection_probability_recommendation, 1.0)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])


if __name__ == "__main__":
    unittest.main()
