"""
In-memory dataset for extracted records, exportable to JSON.
"""

import json
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List

from adaptive_crawler.core import logger


class Dataset:
    """Thread-safe append-only record store."""

    def __init__(self):
        self._items: List[Dict[str, Any]] = []
        self._lock = Lock()

    def push(self, data):
        # Accept a single record or a sequence of records
        items = list(data) if isinstance(data, (list, tuple)) else [data]
        with self._lock:
            self._items.extend(items)

    def items(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._items)

    def __len__(self):
        with self._lock:
            return len(self._items)

    def export_json(self, path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.items(), f, indent=4, ensure_ascii=False)
        logger.info(f"[DATASET] Wrote {len(self)} record(s) to {path}")
        return path
