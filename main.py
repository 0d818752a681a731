"""
Entry point for the adaptive crawler.
Seeds the queue, runs browser workers with adaptive rendering detection,
prints crawl statistics and writes the extracted dataset to JSON.
"""

import argparse
import logging
import sys
from datetime import datetime

from adaptive_crawler.adaptive import AdaptiveCrawler
from adaptive_crawler.core import (
    DATA_DIR,
    DETECTION_RATIO,
    MAX_DEPTH,
    MAX_WORKERS,
    setup_logger,
)
from adaptive_crawler.detection.heuristics import check_dataset_entry, detect_rendering_type


def extract_page(context):
    """Default request handler: title and headings of every page, follow all links."""
    soup = context.parse_with_soup()
    title = soup.title.get_text(strip=True) if soup.title else ""
    headings = [h.get_text(" ", strip=True) for h in soup.select("h1, h2")]

    context.push_data({
        "url": context.request.url,
        "title": title,
        "headings": [h for h in headings if h],
    })
    context.enqueue_links()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Crawl sites, rendering pages in a browser only when needed.")
    parser.add_argument("--url", action="append", required=True, help="Seed URL (repeatable)")
    parser.add_argument("--max-depth", type=int, default=MAX_DEPTH)
    parser.add_argument("--workers", type=int, default=MAX_WORKERS)
    parser.add_argument("--detection-ratio", type=float, default=DETECTION_RATIO)
    parser.add_argument("--output", default=None, help="Dataset JSON path (default: DATA_DIR/dataset_<timestamp>.json)")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger = setup_logger(log_file=args.log_file, level=logging.DEBUG if args.debug else logging.INFO)

    if not 0.0 <= args.detection_ratio <= 1.0:
        logger.error(f"--detection-ratio must be within [0, 1], got {args.detection_ratio}")
        return 2

    crawler = AdaptiveCrawler(
        extract_page,
        rendering_type_detection_handler=detect_rendering_type,
        dataset_entry_checker=check_dataset_entry,
        detection_ratio=args.detection_ratio,
        max_workers=args.workers,
        max_depth=args.max_depth,
    )
    stats = crawler.run(args.url)

    print("\n" + "="*60)
    print("CRAWL COMPLETED")
    print("="*60)
    print(f"Total crawl time: {stats['duration_seconds']:.2f} seconds")
    print(f"Requests handled: {stats['handled']}")
    print(f"Requests failed: {stats['failed']}")
    print(f"URLs discovered: {stats['seen_count']}")
    print(f"Records extracted: {stats['dataset_items']}")
    print("="*60)

    output = args.output
    if output is None:
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        output = DATA_DIR / f"dataset_{timestamp}.json"
    crawler.dataset.export_json(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
