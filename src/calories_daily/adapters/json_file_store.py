"""JSON file implementation of the local store."""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from calories_daily.services.local_cache import LocalStore


@dataclass
class JsonFileLocalStore(LocalStore):
    """Keeps all cache slots in one JSON object on disk."""

    path: Path

    def get(self, key: str) -> str | None:
        """Return the stored string for a key."""
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Store a string, replacing the file atomically."""
        slots = self._load()
        slots[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(slots, handle, ensure_ascii=False)
            Path(tmp_name).replace(self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}
        return data if isinstance(data, dict) else {}
