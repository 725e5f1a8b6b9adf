"""Per-user key/value file standing in for browser local storage.

Each key is read independently with a fallback default, so one corrupt
entry never hides the others. Writes are atomic (.tmp + os.replace()).
"""
import json
import logging
import os
from pathlib import Path

TRANSACTIONS_KEY = "et-transactions-v3"
THEME_KEY = "et-theme"
BUDGET_KEY = "et-budget"
BUDGET_ITEMS_KEY = "et-budget-items"

logger = logging.getLogger(__name__)


class LocalStore:
    def __init__(self, path):
        self.path = Path(path)

    def _load(self) -> dict:
        """Returns {} on missing or corrupt file."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("ignoring unreadable state file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default=None):
        value = self._load().get(key)
        return default if value is None else value

    def set(self, key: str, value) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
