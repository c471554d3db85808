# amc_portal/client/storage.py
"""File-backed string key/value storage with a localStorage-style API.

All keys live in one JSON document. Values are strings; callers serialize
their own collections. Every ``set_item`` rewrites the whole file.
"""

import json
import logging
import os
from typing import Dict, Optional

logger = logging.getLogger(__name__)

STORAGE_FILENAME = "local_storage.json"


class LocalStorage:
    def __init__(self, storage_dir: str, filename: str = STORAGE_FILENAME):
        self.path = os.path.join(storage_dir, filename)
        self._items: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._items is not None:
            return self._items
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                items = json.load(fh)
            self._items = {str(k): v for k, v in items.items() if isinstance(v, str)}
        except FileNotFoundError:
            self._items = {}
        except (ValueError, AttributeError) as e:
            logger.warning(f"Storage file {self.path} is unreadable, starting empty: {e}")
            self._items = {}
        return self._items

    def _flush(self) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(self._items or {}, fh)
        os.replace(tmp_path, self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._load()[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            del items[key]
            self._flush()

    def clear(self) -> None:
        self._items = {}
        self._flush()

    def keys(self):
        return list(self._load().keys())
