from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


def default_state_path() -> Path:
    return Path.home() / ".chefquiz" / "state.json"


class GameStateRepository(Protocol):
    """Key-value store for everything the game keeps between runs."""

    def load(self) -> None: ...

    def save(self) -> None: ...

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class InMemoryRepository:
    """Repository that never touches disk. Values are deep-copied in and out."""

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = copy.deepcopy(data) if data else {}
        self.save_count = 0

    def load(self) -> None:
        pass

    def save(self) -> None:
        self.save_count += 1

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self.save()


class JsonFileRepository:
    """Stores game state as one JSON document. File: ~/.chefquiz/state.json by default.

    Read and write failures are logged and swallowed: the in-memory values
    stay authoritative for the rest of the session.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else default_state_path()
        self._data: Dict[str, Any] = {}
        self.load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> None:
        self._data = {}
        if not self._file_path.exists():
            return
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning("Could not load game state from %s: %s", self._file_path, e)
            return
        if not isinstance(payload, dict):
            logger.warning("Ignoring game state in %s: expected a JSON object", self._file_path)
            return
        self._data = payload

    def save(self) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save game state to %s: %s", self._file_path, e)

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self.save()
