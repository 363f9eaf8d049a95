"""Key-value preference persistence (stored API key and friends)."""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent.parent / "data"
PREFERENCES_PATH = Path(os.environ.get("PREFERENCES_PATH", DATA_DIR / "preferences.json"))

API_KEY_PREF = "GeminiApiKey"


class PreferenceStore:
    """String preferences persisted as a JSON object on disk.

    The file is read on first access and rewritten on every set().
    """

    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path else PREFERENCES_PATH
        self._values: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._values is not None:
            return self._values
        self._values = {}
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
                data = {}
            if isinstance(data, dict):
                self._values = {str(k): str(v) for k, v in data.items()}
        return self._values

    def get(self, key: str, default: str = "") -> str:
        return self._load().get(key, default)

    def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values, indent=2), encoding="utf-8")

    def delete(self, key: str) -> None:
        values = self._load()
        if values.pop(key, None) is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(values, indent=2), encoding="utf-8")


class InMemoryPreferenceStore:
    """Same capability as PreferenceStore, kept only for the process lifetime."""

    def __init__(self, values: dict[str, str] | None = None):
        self._values = dict(values or {})

    def get(self, key: str, default: str = "") -> str:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
