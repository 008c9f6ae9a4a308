"""Small persisted key/value file for runtime state (current game, user registrations)."""

import json
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from ..core.constants import CURRENT_GAME_ID_KEY, USER_GAME_KEY_PREFIX
from ..utils.config import settings
from ..utils.error_handler import StoreError
from ..utils.log import get_logger


class RuntimeContext:
    """String key/value map saved to a JSON file after every write."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.logger = get_logger(__name__)
        self.path = Path(path or settings.RUNTIME_DATA_PATH)
        self._lock = threading.RLock()
        self._data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to read runtime data: {self.path}", details={"error": str(e)})
        if not isinstance(data, dict):
            raise StoreError("Runtime data must be a JSON object", details={"path": str(self.path)})
        return {str(key): str(value) for key, value in data.items()}

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, sort_keys=True)

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def write(self, key: str, value: str):
        with self._lock:
            self._data[key] = value
            self._save()
        self.logger.debug("Runtime data written", key=key)

    @property
    def current_game_id(self) -> Optional[str]:
        return self.read(CURRENT_GAME_ID_KEY)

    @current_game_id.setter
    def current_game_id(self, game_id: str):
        self.write(CURRENT_GAME_ID_KEY, game_id)

    def user_game(self, user_id: str) -> Optional[str]:
        """Game the user registered with `reg` or `own`."""
        return self.read(f"{USER_GAME_KEY_PREFIX}{user_id}")

    def register_user(self, user_id: str, game_id: str):
        self.write(f"{USER_GAME_KEY_PREFIX}{user_id}", game_id)
