"""
Durable key/value storage for the client, kept in one JSON file.

Reads and writes are synchronous and unguarded: two processes sharing the file
overwrite each other, last writer wins.
"""
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = os.path.join("~", ".f1marketplace", "storage.json")


class LocalStorage:
    def __init__(self, path: Optional[str] = None):
        self.path = os.path.expanduser(path or os.getenv("STOREFRONT_STORAGE", DEFAULT_STORAGE_PATH))

    def _read_all(self) -> Dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            logger.warning("Storage file %s is unreadable, starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(data, fh)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump(data, fh)

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))
